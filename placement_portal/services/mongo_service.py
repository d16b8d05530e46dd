"""
MongoDB Service - CRUD operations for the portal collections.

Collections in this database:
1. students      - Student credentials, profile and notification inbox
2. admins        - Admin credentials
3. companies     - Visiting companies with eligibility criteria
4. applications  - Student applications to companies

These classes are thin persistence wrappers. Business rules (eligibility,
duplicate applications, notification fan-out) live in the other services.
"""

from datetime import datetime
from typing import Optional, List, Dict, Any, Iterable
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from placement_portal.db.mongodb import get_collection, COLLECTIONS
from placement_portal.core.errors import DuplicateError, ValidationError


# Never returned to clients
PRIVATE_FIELDS = {"password_hash": 0}


# ============================================================
# HELPERS: ObjectId <-> string
# ============================================================

def to_object_id(id_str: str) -> ObjectId:
    """Parse a client-supplied id, raising ValidationError if malformed."""
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid id: {id_str}")


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert MongoDB document to a JSON-friendly dict with a string ``id``."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    for key, value in doc.items():
        if isinstance(value, ObjectId):
            doc[key] = str(value)
    return doc


def serialize_docs(docs: Iterable[dict]) -> List[dict]:
    """Convert MongoDB documents to JSON-friendly dicts."""
    return [serialize_doc(doc) for doc in docs]


# ============================================================
# STUDENTS COLLECTION
# ============================================================

class StudentService:
    """
    Handles student documents: credentials, profile fields and the
    embedded notifications list.
    """

    PROFILE_FIELDS = (
        "name", "class_name", "division", "branch", "gender", "mobile_number",
        "tenth_marks", "twelfth_marks", "cgpa_aggregate", "active_backlog",
        "resume_url",
    )

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["students"])

    def insert(self, email: str, password_hash: str) -> dict:
        """
        Insert a new student with an empty profile.

        Raises DuplicateError if the email is taken (unique index).
        """
        now = datetime.utcnow()
        doc = {
            "email": email,
            "password_hash": password_hash,
            "name": "",
            "class_name": "",
            "division": "",
            "branch": None,
            "gender": None,
            "mobile_number": "",
            "tenth_marks": None,
            "twelfth_marks": None,
            "cgpa_aggregate": None,
            "active_backlog": "no",
            "resume_url": "",
            "notifications": [],
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateError("Student with this email already exists")
        doc["_id"] = result.inserted_id
        return doc

    def get_by_email(self, email: str) -> Optional[dict]:
        """Raw document including password hash (for login)."""
        return self.collection.find_one({"email": email})

    def get_by_id(self, student_id: ObjectId, include_private: bool = False) -> Optional[dict]:
        projection = None if include_private else PRIVATE_FIELDS
        return self.collection.find_one({"_id": student_id}, projection)

    def exists_by_email(self, email: str) -> bool:
        return self.collection.find_one({"email": email}, {"_id": 1}) is not None

    def list_all(self) -> List[dict]:
        return list(self.collection.find({}, PRIVATE_FIELDS))

    def update_profile(self, student_id: ObjectId, fields: Dict[str, Any]) -> Optional[dict]:
        """Set the given profile fields and return the updated document."""
        updates = {k: v for k, v in fields.items() if k in self.PROFILE_FIELDS}
        updates["updated_at"] = datetime.utcnow()
        self.collection.update_one({"_id": student_id}, {"$set": updates})
        return self.get_by_id(student_id)

    def push_notification(self, student_ids: List[ObjectId], notification: dict) -> int:
        """
        Append a notification to every matching student in one bulk update.

        Returns:
            Number of student documents actually modified
        """
        result = self.collection.update_many(
            {"_id": {"$in": student_ids}},
            {"$push": {"notifications": notification}}
        )
        return result.modified_count

    def get_notifications(self, student_id: ObjectId) -> Optional[List[dict]]:
        doc = self.collection.find_one({"_id": student_id}, {"notifications": 1})
        if doc is None:
            return None
        return doc.get("notifications", [])

    def get_many(self, student_ids: List[ObjectId]) -> List[dict]:
        return list(self.collection.find({"_id": {"$in": student_ids}}, PRIVATE_FIELDS))

    def delete(self, student_id: ObjectId) -> bool:
        result = self.collection.delete_one({"_id": student_id})
        return result.deleted_count > 0


# ============================================================
# ADMINS COLLECTION
# ============================================================

class AdminService:
    """Handles admin credential documents."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["admins"])

    def insert(self, email: str, password_hash: str) -> dict:
        doc = {
            "email": email,
            "password_hash": password_hash,
            "created_at": datetime.utcnow(),
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateError("Admin with this email already exists")
        doc["_id"] = result.inserted_id
        return doc

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email})

    def get_by_id(self, admin_id: ObjectId, include_private: bool = False) -> Optional[dict]:
        projection = None if include_private else PRIVATE_FIELDS
        return self.collection.find_one({"_id": admin_id}, projection)


# ============================================================
# COMPANIES COLLECTION
# ============================================================

class CompanyService:
    """Handles company documents with their eligibility criteria."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["companies"])

    def insert(self, name: str, visiting_date: datetime, eligibility: dict) -> dict:
        """
        Insert a company. Callers check the name first for a friendly
        error; the unique index catches the race.
        """
        doc = {
            "name": name,
            "visiting_date": visiting_date,
            "eligibility": eligibility,
            "created_at": datetime.utcnow(),
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateError("Company with this name already exists")
        doc["_id"] = result.inserted_id
        return doc

    def exists_by_name(self, name: str) -> bool:
        return self.collection.find_one({"name": name}, {"_id": 1}) is not None

    def get_by_id(self, company_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"_id": company_id})

    def get_many(self, company_ids: List[ObjectId]) -> List[dict]:
        return list(self.collection.find({"_id": {"$in": company_ids}}))

    def list_all(self) -> List[dict]:
        return list(self.collection.find({}))

    def count(self) -> int:
        return self.collection.count_documents({})

    def delete(self, company_id: ObjectId) -> bool:
        result = self.collection.delete_one({"_id": company_id})
        return result.deleted_count > 0


# ============================================================
# APPLICATIONS COLLECTION
# ============================================================

class ApplicationService:
    """Handles application documents linking a student to a company."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["applications"])

    def insert(self, student_id: ObjectId, company_id: ObjectId, status: str) -> dict:
        """
        Insert an application.

        Raises DuplicateKeyError (from the unique compound index) when the
        pair already exists; the application service maps that.
        """
        doc = {
            "student_id": student_id,
            "company_id": company_id,
            "date_applied": datetime.utcnow(),
            "status": status,
            "interview_date": None,
            "interview_link": None,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def find_one(self, student_id: ObjectId, company_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"student_id": student_id, "company_id": company_id})

    def list_by_student(self, student_id: ObjectId) -> List[dict]:
        """Applications for a student, most recent first."""
        return list(self.collection.find(
            {"student_id": student_id},
            sort=[("date_applied", -1)]
        ))

    def list_all(self) -> List[dict]:
        return list(self.collection.find({}))

    def count_by_company(self) -> Dict[str, int]:
        """Application count keyed by company id string."""
        counts: Dict[str, int] = {}
        for doc in self.collection.find({}, {"company_id": 1}):
            key = str(doc["company_id"])
            counts[key] = counts.get(key, 0) + 1
        return counts
