"""
Eligibility Service

A student is eligible for a company when their marks meet every minimum
in the company's eligibility block:

    tenth_marks    >= eligibility.tenth_marks
    twelfth_marks  >= eligibility.twelfth_marks
    cgpa_aggregate >= eligibility.cgpa_aggregate
    eligibility.active_backlog == "no"  =>  student.active_backlog == "no"

The backlog rule is one-sided: a company that allows backlogs places no
constraint. A student missing any of the fields is never eligible.
"""

from typing import List, Optional

from bson import ObjectId

from placement_portal.core.errors import NotFoundError, ProfileIncompleteError
from placement_portal.services.mongo_service import CompanyService, StudentService

MARK_FIELDS = ("tenth_marks", "twelfth_marks", "cgpa_aggregate")
BACKLOG_VALUES = ("yes", "no")


def is_fully_registered(student: dict) -> bool:
    """A student is fully registered once they have a name."""
    return bool(student.get("name"))


def has_academic_profile(student: dict) -> bool:
    if any(student.get(field) is None for field in MARK_FIELDS):
        return False
    return student.get("active_backlog") in BACKLOG_VALUES


def is_eligible(student: dict, company: dict) -> bool:
    """Check one student against one company's criteria."""
    if not has_academic_profile(student):
        return False

    criteria = company.get("eligibility") or {}
    for field in MARK_FIELDS:
        minimum = criteria.get(field)
        if minimum is None:
            return False
        if float(student[field]) < float(minimum):
            return False

    if criteria.get("active_backlog") == "no":
        return student["active_backlog"] == "no"
    return True


def eligible_companies(student: dict, companies: List[dict]) -> List[dict]:
    """
    Companies the student qualifies for.

    Raises:
        ProfileIncompleteError: student not fully registered or missing marks
    """
    if not is_fully_registered(student) or not has_academic_profile(student):
        raise ProfileIncompleteError()
    return [company for company in companies if is_eligible(student, company)]


def eligible_students(company: dict, students: List[dict]) -> List[dict]:
    """Fully registered students that qualify for the company."""
    return [
        student for student in students
        if is_fully_registered(student) and is_eligible(student, company)
    ]


def get_eligible_companies_for(student_id: ObjectId) -> List[dict]:
    student: Optional[dict] = StudentService().get_by_id(student_id)
    if not student:
        raise ProfileIncompleteError()
    return eligible_companies(student, CompanyService().list_all())


def get_eligible_students_for(company_id: ObjectId) -> List[dict]:
    company = CompanyService().get_by_id(company_id)
    if not company:
        raise NotFoundError("Company not found")
    return eligible_students(company, StudentService().list_all())
