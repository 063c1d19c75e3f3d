"""
MongoDB Service - CRUD operations for the three collections.

Collections in this database:
1. users         - Student, CCPD and admin accounts
2. internships   - Internship postings
3. applications  - Student applications (unique per student+internship)

Each store wraps one collection. Stores know nothing about roles or
business rules; those live in the service modules that use them.
"""

from typing import Optional, List, Dict, Any, Iterable
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from app.core.errors import ConflictError
from app.db.mongodb import APPLICATION_PAIR_INDEX, COLLECTIONS, get_collection
from app.utils.dates import utcnow


# Newest first; _id breaks ties between documents created in the same millisecond
NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


# ============================================================
# HELPERS: ObjectId handling
# ============================================================

def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id from the API. Returns None if it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize_doc(doc: dict) -> dict:
    """
    Convert MongoDB document to a JSON-friendly dict: ``_id`` becomes
    ``id`` and every ObjectId value becomes a string.
    """
    if doc is None:
        return None
    out = {}
    for key, value in doc.items():
        if key == "_id":
            out["id"] = str(value)
        elif isinstance(value, ObjectId):
            out[key] = str(value)
        else:
            out[key] = value
    return out


def _index_by_id(docs: Iterable[dict]) -> Dict[ObjectId, dict]:
    return {doc["_id"]: doc for doc in docs}


# ============================================================
# USERS COLLECTION
# ============================================================

class UserStore:
    """
    Handles user account documents.
    Email uniqueness is enforced by a unique index.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["users"])

    def insert(self, name: str, email: str, password_hash: str, role: str, branch: str = None) -> dict:
        """Insert a user. Raises ConflictError if the email is taken."""
        now = utcnow()
        doc = {
            "name": name,
            "email": email,
            "password_hash": password_hash,
            "role": role,
            "profile_pic": "",
            "created_at": now,
            "updated_at": now,
        }
        if branch:
            doc["branch"] = branch
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Email already registered.")
        doc["_id"] = result.inserted_id
        return doc

    def get_by_id(self, user_id: Any) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email})

    def get_many(self, user_ids: Iterable[ObjectId]) -> Dict[ObjectId, dict]:
        """Fetch several users at once, keyed by _id (password hash excluded)."""
        cursor = self.collection.find(
            {"_id": {"$in": list(set(user_ids))}},
            {"password_hash": 0}
        )
        return _index_by_id(cursor)

    def update_fields(self, user_id: Any, fields: dict) -> Optional[dict]:
        """Set ``fields`` on a user and return the updated document."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {**fields, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER
        )

    def count(self) -> int:
        return self.collection.count_documents({})


# ============================================================
# INTERNSHIPS COLLECTION
# ============================================================

class InternshipStore:
    """
    Handles internship posting documents.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["internships"])

    def insert(self, data: dict, posted_by: ObjectId) -> dict:
        """
        Insert an internship posting.

        Args:
            data: Validated posting fields (snake_case)
            posted_by: _id of the CCPD/admin user posting it

        Returns:
            The stored document including its _id
        """
        now = utcnow()
        doc = {**data, "posted_by": posted_by, "created_at": now, "updated_at": now}
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def get_by_id(self, internship_id: Any) -> Optional[dict]:
        oid = to_object_id(internship_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def get_many(self, internship_ids: Iterable[ObjectId], projection: dict = None) -> Dict[ObjectId, dict]:
        cursor = self.collection.find({"_id": {"$in": list(set(internship_ids))}}, projection)
        return _index_by_id(cursor)

    def find_by_poster(self, user_id: ObjectId) -> List[dict]:
        """All postings made by one user, newest first."""
        return list(self.collection.find({"posted_by": user_id}).sort(NEWEST_FIRST))

    def update(self, internship_id: Any, fields: dict) -> Optional[dict]:
        """Apply a partial update. Returns None if the internship does not exist."""
        oid = to_object_id(internship_id)
        if oid is None:
            return None
        return self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {**fields, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER
        )

    def delete(self, internship_id: ObjectId) -> bool:
        result = self.collection.delete_one({"_id": internship_id})
        return result.deleted_count > 0

    def distinct(self, field: str) -> list:
        return self.collection.distinct(field)

    def count(self) -> int:
        return self.collection.count_documents({})


# ============================================================
# APPLICATIONS COLLECTION
# ============================================================

class ApplicationStore:
    """
    Handles application documents.
    A unique (student_id, internship_id) index rejects duplicates; it is
    (re)created before the first insert of the process in case startup
    could not build it.
    """

    _unique_index_ready = False

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["applications"])

    def ensure_unique_index(self) -> None:
        if ApplicationStore._unique_index_ready:
            return
        self.collection.create_index(APPLICATION_PAIR_INDEX, unique=True)
        ApplicationStore._unique_index_ready = True

    def exists(self, student_id: ObjectId, internship_id: ObjectId) -> bool:
        doc = self.collection.find_one({"student_id": student_id, "internship_id": internship_id}, {"_id": 1})
        return doc is not None

    def insert(self, student_id: ObjectId, internship_id: ObjectId, status: str, resume_url: str = None) -> dict:
        """Insert an application. Raises ConflictError on a duplicate pair."""
        self.ensure_unique_index()
        now = utcnow()
        doc = {
            "student_id": student_id,
            "internship_id": internship_id,
            "status": status,
            "applied_at": now,
            "updated_at": now,
        }
        if resume_url:
            doc["resume_url"] = resume_url
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("You have already applied to this internship.")
        doc["_id"] = result.inserted_id
        return doc

    def get_by_id(self, application_id: Any) -> Optional[dict]:
        oid = to_object_id(application_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def find_by_student(self, student_id: ObjectId) -> List[dict]:
        cursor = self.collection.find({"student_id": student_id})
        return list(cursor.sort([("applied_at", DESCENDING), ("_id", DESCENDING)]))

    def find_by_internship(self, internship_id: ObjectId) -> List[dict]:
        cursor = self.collection.find({"internship_id": internship_id})
        return list(cursor.sort([("applied_at", DESCENDING), ("_id", DESCENDING)]))

    def count_by_internship(self, internship_id: ObjectId) -> int:
        return self.collection.count_documents({"internship_id": internship_id})

    def update_status(self, application_id: Any, status: str) -> Optional[dict]:
        oid = to_object_id(application_id)
        if oid is None:
            return None
        return self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {"status": status, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER
        )

    def delete_by_internship(self, internship_id: ObjectId) -> int:
        """Delete every application for an internship. Returns how many went."""
        result = self.collection.delete_many({"internship_id": internship_id})
        return result.deleted_count

    def count(self) -> int:
        return self.collection.count_documents({})
