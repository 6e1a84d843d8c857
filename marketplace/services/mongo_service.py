"""
MongoDB Service - verification audit archive.

Collections:
1. verification_submissions - every payload a talent submitted, as sent
2. verification_reviews     - every admin decision, with free-form notes

The relational talent_verifications row only holds the latest state; these
documents keep the history.
"""

from datetime import datetime
from typing import Optional, List
from pymongo.collection import Collection

from marketplace.db.mongodb import get_collection, COLLECTIONS


def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def serialize_docs(docs: list) -> list:
    return [serialize_doc(doc) for doc in docs]


class VerificationSubmissionService:
    """
    Raw verification submissions.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["verification_submissions"])

    def insert(self, user_id: str, talent_profile_id: str, payload: dict) -> str:
        """
        Archive one submission.

        Args:
            user_id: submitting user
            talent_profile_id: relational talent profile id
            payload: request body exactly as received

        Returns:
            MongoDB ObjectId as string
        """
        doc = {
            "user_id": user_id,
            "talent_profile_id": talent_profile_id,
            "payload": payload,
            "submitted_at": datetime.utcnow(),
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def list_for_user(self, user_id: str, limit: int = 20) -> List[dict]:
        """Most recent submissions first."""
        cursor = self.collection.find({"user_id": user_id}).sort("submitted_at", -1).limit(limit)
        return serialize_docs(list(cursor))


class VerificationReviewService:
    """
    Admin review decisions.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["verification_reviews"])

    def insert(self, talent_profile_id: str, reviewer_id: str, review: dict) -> str:
        doc = {
            "talent_profile_id": talent_profile_id,
            "reviewer_id": reviewer_id,
            "review": review,
            "reviewed_at": datetime.utcnow(),
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def latest(self, talent_profile_id: str) -> Optional[dict]:
        doc = self.collection.find_one(
            {"talent_profile_id": talent_profile_id},
            sort=[("reviewed_at", -1)]
        )
        return serialize_doc(doc)
