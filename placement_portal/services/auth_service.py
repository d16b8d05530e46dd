"""
Auth Service - registration, login and the default admin seed.

Login looks the principal up in its role's collection and checks the
bcrypt hash. Unknown email and wrong password produce the same error.
"""

import logging

from email_validator import EmailNotValidError, validate_email

from placement_portal.core.auth import (
    PRINCIPAL_SERVICES, create_access_token, hash_password, verify_password
)
from placement_portal.core.config import get_settings
from placement_portal.core.errors import DuplicateError, InvalidCredentialsError
from placement_portal.schemas.schemas import UserRole
from placement_portal.services.mongo_service import AdminService, StudentService

logger = logging.getLogger(__name__)


def issue_token(principal_id: str, role: UserRole) -> str:
    return create_access_token(data={"sub": str(principal_id), "role": role.value})


def authenticate(email: str, password: str, role: UserRole) -> dict:
    """
    Validate credentials for a role.

    Returns:
        {"id", "email", "role", "token"}

    Raises:
        InvalidCredentialsError: email unknown or password mismatch
    """
    service = PRINCIPAL_SERVICES[role]()
    record = service.get_by_email(email)

    if not record or not verify_password(password, record.get("password_hash")):
        logger.info("Failed %s login for %s", role.value, email)
        raise InvalidCredentialsError()

    principal_id = str(record["_id"])
    return {
        "id": principal_id,
        "email": record["email"],
        "role": role,
        "token": issue_token(principal_id, role),
    }


def register_student(email: str, password: str) -> dict:
    """
    Create a student account with an empty profile.

    Raises:
        DuplicateError: the email is already registered
    """
    service = StudentService()
    if service.exists_by_email(email):
        raise DuplicateError("Student with this email already exists")

    doc = service.insert(email, hash_password(password))
    student_id = str(doc["_id"])
    logger.info("Registered student %s", email)

    return {
        "id": student_id,
        "email": doc["email"],
        "role": UserRole.student,
        "token": issue_token(student_id, UserRole.student),
    }


def normalize_email(email: str) -> str:
    """Normalize an address the same way EmailStr does on incoming requests."""
    return validate_email(email, check_deliverability=False).normalized


def seed_default_admin() -> bool:
    """
    Create the configured admin if it does not exist yet.

    Returns:
        True if an admin was created
    """
    settings = get_settings()
    if not settings.admin_email or not settings.admin_password:
        logger.warning("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping default admin")
        return False

    try:
        email = normalize_email(settings.admin_email)
    except EmailNotValidError as e:
        logger.warning("ADMIN_EMAIL %r is not a valid address, skipping default admin: %s", settings.admin_email, e)
        return False

    service = AdminService()
    if service.get_by_email(email):
        return False

    try:
        service.insert(email, hash_password(settings.admin_password))
    except DuplicateError:
        # Another worker seeded it first
        return False

    logger.info("Default admin created: %s", email)
    return True
