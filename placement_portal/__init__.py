"""
Campus Placement Portal
Students register, check eligibility and apply; the placement cell posts
companies and notifies eligible students.

Architecture:
- FastAPI: REST API under /api
- MongoDB: students, admins, companies, applications
"""

__version__ = "1.0.0"
