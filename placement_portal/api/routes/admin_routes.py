"""
Admin Routes

POST /admin/login - Login and get JWT token
POST /admin/send-notification - Notify a set of students
GET /admin/applications/all - Every application with student and company details
GET /admin/stats - Dashboard statistics
"""

from typing import List

from fastapi import APIRouter, Depends

from placement_portal.core.auth import Principal, get_current_admin
from placement_portal.schemas.schemas import (
    LoginRequest, TokenResponse, SendNotificationRequest, NotificationSentResponse,
    ApplicationResponse, PlacementStatsResponse, UserRole
)
from placement_portal.services import application_service, auth_service, notification_service
from placement_portal.services.stats_service import placement_stats

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest):
    """Admin login. Admin accounts are seeded from configuration, not registered."""
    result = auth_service.authenticate(request.email, request.password, UserRole.admin)
    return TokenResponse(message="Admin login successful", **result)


@router.post("/send-notification", response_model=NotificationSentResponse)
def send_notification(data: SendNotificationRequest, admin: Principal = Depends(get_current_admin)):
    """
    Send a notification to the given students.

    eligibleStudents is normally the id list from
    GET /companies/{id}/eligible-students.
    """
    modified = notification_service.send_notification(
        data.company_name, data.message, data.eligible_students
    )
    return NotificationSentResponse(
        message=f"Notification sent to {modified} eligible students successfully.",
        modified_count=modified
    )


@router.get("/applications/all", response_model=List[ApplicationResponse])
def get_all_applications(admin: Principal = Depends(get_current_admin)):
    """All applications, enriched with student and company details."""
    return application_service.list_all_applications()


@router.get("/stats", response_model=PlacementStatsResponse)
def get_stats(admin: Principal = Depends(get_current_admin)):
    """Registered-student counts by gender and branch, and applications per company."""
    return placement_stats()
