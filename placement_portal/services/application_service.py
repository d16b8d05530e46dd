"""
Application Service - students applying to companies.

Status lifecycle (only the first step is reachable through the API):

    Applied -> {Shortlisted, Rejected}
    Shortlisted -> {Interview Scheduled, Rejected}
    Interview Scheduled -> {Placed, Rejected}

Each student may apply to a company once. The existence check gives the
friendly error; the unique (student_id, company_id) index catches races.
"""

from typing import Dict, List, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from placement_portal.core.errors import AlreadyAppliedError, NotFoundError
from placement_portal.schemas.schemas import ApplicationStatus
from placement_portal.services.mongo_service import (
    ApplicationService, CompanyService, StudentService, serialize_doc
)


def company_summary(company: Optional[dict]) -> Optional[dict]:
    if not company:
        return None
    return {
        "id": str(company["_id"]),
        "name": company["name"],
        "visiting_date": company.get("visiting_date"),
    }


def student_summary(student: Optional[dict]) -> Optional[dict]:
    if not student:
        return None
    return {
        "id": str(student["_id"]),
        "name": student.get("name", ""),
        "email": student["email"],
        "mobile_number": student.get("mobile_number", ""),
        "branch": student.get("branch"),
    }


def _enrich(applications: List[dict], with_students: bool = False) -> List[dict]:
    """Attach company (and optionally student) summaries; missing records become None."""
    company_ids = list({app["company_id"] for app in applications})
    companies: Dict[ObjectId, dict] = {
        c["_id"]: c for c in CompanyService().get_many(company_ids)
    } if company_ids else {}

    students: Dict[ObjectId, dict] = {}
    if with_students and applications:
        student_ids = list({app["student_id"] for app in applications})
        students = {s["_id"]: s for s in StudentService().get_many(student_ids)}

    enriched = []
    for app in applications:
        item = serialize_doc(app)
        item["company"] = company_summary(companies.get(app["company_id"]))
        if with_students:
            item["student"] = student_summary(students.get(app["student_id"]))
        enriched.append(item)
    return enriched


def apply(student_id: ObjectId, company_id: ObjectId) -> dict:
    """
    Record a student's application to a company.

    Raises:
        NotFoundError: company does not exist
        AlreadyAppliedError: the student already applied to this company
    """
    company = CompanyService().get_by_id(company_id)
    if not company:
        raise NotFoundError("Company not found")

    applications = ApplicationService()
    if applications.find_one(student_id, company_id):
        raise AlreadyAppliedError()

    try:
        doc = applications.insert(student_id, company_id, ApplicationStatus.applied.value)
    except DuplicateKeyError:
        raise AlreadyAppliedError()

    item = serialize_doc(doc)
    item["company"] = company_summary(company)
    return item


def list_applications(student_id: ObjectId) -> List[dict]:
    """Student's applications, newest first, with company details."""
    return _enrich(ApplicationService().list_by_student(student_id))


def list_all_applications() -> List[dict]:
    """Every application with student and company details (admin view)."""
    return _enrich(ApplicationService().list_all(), with_students=True)
