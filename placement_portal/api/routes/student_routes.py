"""
Student Routes

POST /students/register - Register a student account
POST /students/login - Login and get JWT token
GET /students/profile - Get own profile
POST|PUT /students/profile - Create or update own profile
GET /students/eligible-companies - Companies the student qualifies for
GET /students/notifications - Own notifications, newest first
POST /students/apply/{company_id} - Apply to a company
GET /students/applications - Own applications, newest first
GET /students - All students (admin)
DELETE /students/{student_id} - Remove a student (admin)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from placement_portal.core.auth import Principal, get_current_admin, get_current_student
from placement_portal.core.errors import NotFoundError
from placement_portal.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, StudentProfileUpdate, StudentResponse,
    ProfileUpdateResponse, CompanyResponse, Notification, ApplyResponse,
    ApplicationResponse, MessageResponse, UserRole
)
from placement_portal.services import application_service, auth_service, eligibility_service
from placement_portal.services import notification_service
from placement_portal.services.mongo_service import (
    StudentService, serialize_doc, serialize_docs, to_object_id
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["Students"])


def student_view(doc: dict) -> dict:
    """Serialize a student document and flag whether registration is complete."""
    student = serialize_doc(doc)
    student["fully_registered"] = eligibility_service.is_fully_registered(student)
    return student


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(request: RegisterRequest):
    """
    Register a new student account.

    The returned token can be used straight away to fill in the profile.
    """
    result = auth_service.register_student(request.email, request.password)
    return TokenResponse(message="Student account created successfully. Please login.", **result)


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    result = auth_service.authenticate(request.email, request.password, UserRole.student)
    return TokenResponse(message="Login successful", **result)


@router.get("/profile", response_model=StudentResponse)
def get_profile(student: Principal = Depends(get_current_student)):
    """Get current student's profile."""
    doc = StudentService().get_by_id(student.object_id)
    if not doc:
        raise NotFoundError("Student profile not found")
    return student_view(doc)


@router.post("/profile", response_model=ProfileUpdateResponse)
@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(data: StudentProfileUpdate, student: Principal = Depends(get_current_student)):
    """
    Create or update the profile.

    Only supplied, non-empty fields overwrite stored values; marks may be 0.
    """
    fields = {}
    for field, value in data.model_dump(exclude_none=True).items():
        if value == "":
            continue
        fields[field] = value.value if hasattr(value, "value") else value

    service = StudentService()
    if not service.get_by_id(student.object_id):
        raise NotFoundError("Student not found.")

    doc = service.update_profile(student.object_id, fields)
    return {"message": "Student profile updated successfully", "student": student_view(doc)}


@router.get("/eligible-companies", response_model=List[CompanyResponse])
def get_eligible_companies(student: Principal = Depends(get_current_student)):
    """Companies whose eligibility criteria the student meets. 404 until the profile is complete."""
    companies = eligibility_service.get_eligible_companies_for(student.object_id)
    return serialize_docs(companies)


@router.get("/notifications", response_model=List[Notification])
def get_notifications(student: Principal = Depends(get_current_student)):
    """Get notifications, most recent first."""
    return notification_service.get_notifications(student.object_id)


@router.post("/apply/{company_id}", response_model=ApplyResponse, status_code=201)
def apply_to_company(company_id: str, student: Principal = Depends(get_current_student)):
    """Apply to a company. A second application to the same company is rejected."""
    application = application_service.apply(student.object_id, to_object_id(company_id))
    return {"message": "Application submitted successfully!", "application": application}


@router.get("/applications", response_model=List[ApplicationResponse])
def get_my_applications(student: Principal = Depends(get_current_student)):
    """Get own applications, newest first."""
    return application_service.list_applications(student.object_id)


@router.get("", response_model=List[StudentResponse])
def list_students(admin: Principal = Depends(get_current_admin)):
    """All students (admin)."""
    return [student_view(doc) for doc in StudentService().list_all()]


@router.delete("/{student_id}", response_model=MessageResponse)
def delete_student(student_id: str, admin: Principal = Depends(get_current_admin)):
    """Remove a student. Their applications are kept."""
    if not StudentService().delete(to_object_id(student_id)):
        raise NotFoundError("Student not found")
    logger.info("Admin %s deleted student %s", admin.email, student_id)
    return MessageResponse(message="Student removed successfully")
