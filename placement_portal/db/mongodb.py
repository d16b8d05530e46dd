"""
MongoDB Connection Utility

MongoDB stores everything for the portal:
- students: credentials, profile and notification inbox
- admins: admin credentials
- companies: visiting companies and their eligibility criteria
- applications: one document per (student, company) application
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from placement_portal.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def reset_mongo() -> None:
    """Drop the cached client and database handles."""
    global _client, _db
    _client = None
    _db = None


def get_collection(name: str) -> Collection:
    """Get a specific collection. Use the COLLECTIONS constants for names."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "students": "students",
    "admins": "admins",
    "companies": "companies",
    "applications": "applications",
}


def init_mongo_indexes():
    """
    Create indexes, including the unique ones that back the
    check-then-insert duplicate checks in the services.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["students"]].create_index("email", unique=True)
    db[COLLECTIONS["admins"]].create_index("email", unique=True)
    db[COLLECTIONS["companies"]].create_index("name", unique=True)

    # One application per student per company
    db[COLLECTIONS["applications"]].create_index([
        ("student_id", ASCENDING),
        ("company_id", ASCENDING)
    ], unique=True)
    db[COLLECTIONS["applications"]].create_index([("date_applied", DESCENDING)])

    logger.info("MongoDB indexes created successfully")
