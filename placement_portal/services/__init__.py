"""
Services module - persistence wrappers and placement business logic.
"""
