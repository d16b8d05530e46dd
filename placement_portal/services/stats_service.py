"""
Stats Service - numbers behind the admin dashboard.
"""

from typing import Dict

from placement_portal.services.mongo_service import (
    ApplicationService, CompanyService, StudentService
)


def placement_stats() -> dict:
    """
    Aggregate counts over fully registered students (name and branch set),
    plus application counts per company id.
    """
    registered = [s for s in StudentService().list_all() if s.get("name") and s.get("branch")]

    gender: Dict[str, int] = {}
    branch: Dict[str, int] = {}
    for student in registered:
        gender_key = student.get("gender") or "Other"
        gender[gender_key] = gender.get(gender_key, 0) + 1
        branch[student["branch"]] = branch.get(student["branch"], 0) + 1

    return {
        "total_registered": len(registered),
        "gender": gender,
        "branch": branch,
        "total_companies": CompanyService().count(),
        "applications_by_company": ApplicationService().count_by_company(),
    }
