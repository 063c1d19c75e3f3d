"""
MongoDB Connection Utility

MongoDB is the only store:
- users: accounts for students, CCPD staff and admins
- internships: postings with their eligibility tags
- applications: one document per (student, internship) pair
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

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
    """Get the application database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection by name (see COLLECTIONS)."""
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


# One application per (student, internship)
APPLICATION_PAIR_INDEX = [("student_id", ASCENDING), ("internship_id", ASCENDING)]

# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "internships": "internships",
    "applications": "applications",
}


def init_mongo_indexes():
    """
    Create indexes. Call this once during app startup.

    The unique (student_id, internship_id) index is what stops a student
    from applying twice to the same internship, even under concurrent
    requests.
    """
    db = get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)
    db[COLLECTIONS["users"]].create_index("created_at")

    db[COLLECTIONS["internships"]].create_index([("created_at", DESCENDING)])
    db[COLLECTIONS["internships"]].create_index("posted_by")

    db[COLLECTIONS["applications"]].create_index(APPLICATION_PAIR_INDEX, unique=True)
    db[COLLECTIONS["applications"]].create_index("internship_id")

    logger.info("MongoDB indexes created successfully")
