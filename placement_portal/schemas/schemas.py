"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
JSON on the wire is camelCase (tenthMarks, visitingDate, ...); field names
are snake_case and are accepted on input too.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    admin = "admin"


class Branch(str, Enum):
    entc = "ENTC"
    it = "IT"
    ece = "ECE"
    ce = "CE"
    aids = "AIDS"


class Gender(str, Enum):
    male = "Male"
    female = "Female"
    other = "Other"


class Backlog(str, Enum):
    yes = "yes"
    no = "no"


class ApplicationStatus(str, Enum):
    applied = "Applied"
    shortlisted = "Shortlisted"
    interview_scheduled = "Interview Scheduled"
    rejected = "Rejected"
    placed = "Placed"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(CamelModel):
    message: str
    id: str
    email: str
    role: UserRole
    token: str


# ============================================================
# STUDENT SCHEMAS
# ============================================================

class Notification(CamelModel):
    company_name: str
    message: str
    timestamp: datetime


class StudentProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    class_name: Optional[str] = None
    division: Optional[str] = None
    branch: Optional[Branch] = None
    gender: Optional[Gender] = None
    mobile_number: Optional[str] = None
    tenth_marks: Optional[float] = Field(None, ge=0, le=100)
    twelfth_marks: Optional[float] = Field(None, ge=0, le=100)
    cgpa_aggregate: Optional[float] = Field(None, ge=0, le=10)
    active_backlog: Optional[Backlog] = None
    resume_url: Optional[str] = None


class StudentResponse(CamelModel):
    id: str
    email: str
    name: str = ""
    class_name: str = ""
    division: str = ""
    branch: Optional[Branch] = None
    gender: Optional[Gender] = None
    mobile_number: str = ""
    tenth_marks: Optional[float] = None
    twelfth_marks: Optional[float] = None
    cgpa_aggregate: Optional[float] = None
    active_backlog: Backlog = Backlog.no
    resume_url: str = ""
    notifications: List[Notification] = []
    fully_registered: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdateResponse(CamelModel):
    message: str
    student: StudentResponse


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class Eligibility(CamelModel):
    tenth_marks: float = Field(..., ge=0, le=100)
    twelfth_marks: float = Field(..., ge=0, le=100)
    cgpa_aggregate: float = Field(..., ge=0, le=10)
    active_backlog: Backlog


class CompanyCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    visiting_date: datetime
    eligibility: Eligibility


class CompanyResponse(CamelModel):
    id: str
    name: str
    visiting_date: datetime
    eligibility: Eligibility
    created_at: Optional[datetime] = None


class CompanyCreatedResponse(CamelModel):
    message: str
    company: CompanyResponse


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class CompanySummary(CamelModel):
    id: str
    name: str
    visiting_date: Optional[datetime] = None


class StudentSummary(CamelModel):
    id: str
    name: str = ""
    email: str
    mobile_number: str = ""
    branch: Optional[Branch] = None


class ApplicationResponse(CamelModel):
    id: str
    student_id: str
    company_id: str
    date_applied: datetime
    status: ApplicationStatus = ApplicationStatus.applied
    interview_date: Optional[datetime] = None
    interview_link: Optional[str] = None
    # Null when the referenced record has since been deleted
    company: Optional[CompanySummary] = None
    student: Optional[StudentSummary] = None


class ApplyResponse(CamelModel):
    message: str
    application: ApplicationResponse


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class SendNotificationRequest(CamelModel):
    company_name: str = ""
    message: str = ""
    eligible_students: List[str] = []


class NotificationSentResponse(CamelModel):
    message: str
    modified_count: int


class PlacementStatsResponse(CamelModel):
    total_registered: int
    gender: Dict[str, int]
    branch: Dict[str, int]
    total_companies: int
    applications_by_company: Dict[str, int]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
