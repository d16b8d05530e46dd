"""
Core module - settings, errors and authentication.
"""
