"""
Company Routes

POST /companies - Add a company (admin)
GET /companies - All companies (admin, student)
DELETE /companies/{company_id} - Remove a company (admin)
GET /companies/{company_id}/eligible-students - Students meeting its criteria (admin)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from placement_portal.core.auth import Principal, get_current_admin, require_roles
from placement_portal.core.errors import DuplicateError, NotFoundError
from placement_portal.schemas.schemas import (
    CompanyCreate, CompanyCreatedResponse, CompanyResponse, MessageResponse,
    StudentResponse, UserRole
)
from placement_portal.services import eligibility_service
from placement_portal.services.mongo_service import (
    CompanyService, serialize_doc, serialize_docs, to_object_id
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", response_model=CompanyCreatedResponse, status_code=201)
def add_company(data: CompanyCreate, admin: Principal = Depends(get_current_admin)):
    """Add a company with its eligibility criteria. Names are unique."""
    service = CompanyService()
    if service.exists_by_name(data.name):
        raise DuplicateError("Company with this name already exists")

    eligibility = data.eligibility.model_dump(mode="json")
    doc = service.insert(data.name, data.visiting_date, eligibility)
    logger.info("Admin %s added company %s", admin.email, data.name)
    return {"message": "Company added successfully", "company": serialize_doc(doc)}


@router.get("", response_model=List[CompanyResponse])
def get_companies(
    principal: Principal = Depends(require_roles(UserRole.admin, UserRole.student))
):
    """All companies. Students use /students/eligible-companies for their filtered list."""
    return serialize_docs(CompanyService().list_all())


@router.delete("/{company_id}", response_model=MessageResponse)
def delete_company(company_id: str, admin: Principal = Depends(get_current_admin)):
    """Remove a company. Existing applications keep their reference."""
    if not CompanyService().delete(to_object_id(company_id)):
        raise NotFoundError("Company not found")
    logger.info("Admin %s deleted company %s", admin.email, company_id)
    return MessageResponse(message="Company removed successfully")


@router.get("/{company_id}/eligible-students", response_model=List[StudentResponse])
def get_eligible_students(company_id: str, admin: Principal = Depends(get_current_admin)):
    """Fully registered students who meet the company's criteria."""
    students = eligibility_service.get_eligible_students_for(to_object_id(company_id))
    return [
        dict(serialize_doc(s), fully_registered=True) for s in students
    ]
