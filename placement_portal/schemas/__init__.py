"""
Schemas module - Request/Response schemas for API endpoints.
"""
from placement_portal.schemas.schemas import (
    UserRole, Branch, Gender, Backlog, ApplicationStatus
)

__all__ = ["UserRole", "Branch", "Gender", "Backlog", "ApplicationStatus"]
