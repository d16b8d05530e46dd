"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- The authorization gate and FastAPI dependencies for protected routes
"""

from datetime import datetime, timedelta
from functools import lru_cache
from typing import Callable, Dict, Iterable, Optional
from bson import ObjectId
from bson.errors import InvalidId
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from placement_portal.core.config import get_settings
from placement_portal.core.errors import (
    ForbiddenError, InvalidTokenError, MissingTokenError, PrincipalNotFoundError
)
from placement_portal.schemas.schemas import UserRole
from placement_portal.services.mongo_service import AdminService, StudentService, serialize_doc

# Bearer token extractor; a missing header is reported by authorize()
bearer_scheme = HTTPBearer(auto_error=False)

# Each role is stored in exactly one collection
PRINCIPAL_SERVICES: Dict[UserRole, Callable] = {
    UserRole.student: StudentService,
    UserRole.admin: AdminService,
}


class Principal(BaseModel):
    """An authenticated actor, tagged by role."""
    id: str
    email: str
    role: UserRole
    record: dict

    @property
    def object_id(self) -> ObjectId:
        return ObjectId(self.id)


@lru_cache()
def get_pwd_context() -> CryptContext:
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=get_settings().bcrypt_rounds
    )


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return get_pwd_context().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    if not hashed_password:
        return False
    try:
        return get_pwd_context().verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def authorize(token: Optional[str], allowed_roles: Iterable[UserRole]) -> Principal:
    """
    Verify a bearer token and resolve it to a live principal.

    Raises:
        MissingTokenError: no token presented
        InvalidTokenError: bad signature, malformed, expired, or unknown role
        PrincipalNotFoundError: the subject was deleted after the token was issued
        ForbiddenError: the token's role is not in allowed_roles
    """
    if not token:
        raise MissingTokenError()

    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        raise InvalidTokenError()

    try:
        role = UserRole(payload.get("role"))
        subject_id = ObjectId(payload.get("sub"))
    except (ValueError, InvalidId, TypeError):
        raise InvalidTokenError()

    record = PRINCIPAL_SERVICES[role]().get_by_id(subject_id)
    if not record:
        raise PrincipalNotFoundError()

    if role not in set(allowed_roles):
        raise ForbiddenError()

    record = serialize_doc(record)
    return Principal(id=record["id"], email=record["email"], role=role, record=record)


def require_roles(*roles: UserRole) -> Callable:
    """
    FastAPI dependency factory - authorize the request for the given roles.

    Usage:
        @router.get("/protected")
        def route(principal: Principal = Depends(require_roles(UserRole.admin))):
            ...
    """
    def _dependency(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
    ) -> Principal:
        token = credentials.credentials if credentials else None
        return authorize(token, roles)

    return _dependency


get_current_student = require_roles(UserRole.student)
get_current_admin = require_roles(UserRole.admin)
