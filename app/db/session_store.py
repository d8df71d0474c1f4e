"""
User Session Database Operations
MongoDB create/get/replace for user sessions with optimistic concurrency
FILE: app/db/session_store.py
"""
from typing import Any, Dict, Optional
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.core.exceptions import ConcurrentUpdateError, StoreError
from app.db.mongodb import to_object_id
from app.models.quiz_sessions import Answer, UserSession

logger = logging.getLogger(__name__)


def session_to_document(session: UserSession) -> Dict[str, Any]:
    return {
        "_id": to_object_id(session.id),
        "UserName": session.user_name,
        "TestId": session.test_id,
        "StartTime": session.start_time,
        "EndTime": session.end_time,
        "Score": session.score,
        "Answers": [
            {
                "QuestionId": answer.question_id,
                "SelectedOptionId": answer.selected_option_id,
                "IsCorrect": answer.is_correct
            }
            for answer in session.answers
        ],
        "Version": session.version
    }


def document_to_session(doc: Dict[str, Any]) -> UserSession:
    fields = {
        "id": str(doc["_id"]),
        "user_name": doc.get("UserName") or "",
        "test_id": str(doc.get("TestId") or ""),
        "end_time": doc.get("EndTime"),
        "score": doc.get("Score") or 0,
        "answers": [
            Answer(
                question_id=str(answer.get("QuestionId", "")),
                selected_option_id=str(answer.get("SelectedOptionId", "")),
                is_correct=bool(answer.get("IsCorrect", False))
            )
            for answer in doc.get("Answers") or []
        ],
        # Sessions written before versioning have no Version field
        "version": doc.get("Version") or 0
    }
    if doc.get("StartTime") is not None:
        fields["start_time"] = doc["StartTime"]
    return UserSession(**fields)


def version_filter(session_id: str, version: int) -> Dict[str, Any]:
    """Match the session only while it is still at the given version"""
    if version == 0:
        # None also matches a document without the field
        return {"_id": to_object_id(session_id), "Version": {"$in": [0, None]}}
    return {"_id": to_object_id(session_id), "Version": version}


class MongoSessionStore:
    """Session store backed by the UserSessions collection"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[settings.user_sessions_collection_name]

    async def create_session(self, session: UserSession) -> str:
        """
        Insert a new user session

        Returns:
            ID of the created session
        """
        try:
            result = await self.collection.insert_one(session_to_document(session))
            session_id = str(result.inserted_id)
            logger.info(f"✅ Created user session: {session_id} for test: {session.test_id}")
            return session_id
        except PyMongoError as e:
            logger.error(f"❌ Failed to create session for test {session.test_id}: {e}")
            raise StoreError("Failed to create quiz session", detail=str(e))

    async def get_session_by_id(self, session_id: str) -> Optional[UserSession]:
        """Retrieve a user session by ID"""
        object_id = to_object_id(session_id)
        if object_id is None:
            logger.warning(f"⚠️ Not a valid session ID: {session_id}")
            return None
        try:
            doc = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"❌ Failed to retrieve session {session_id}: {e}")
            raise StoreError("Failed to retrieve session", detail=str(e))

        if not doc:
            logger.warning(f"⚠️ Session not found: {session_id}")
            return None
        return document_to_session(doc)

    async def replace_session(self, session: UserSession) -> None:
        """
        Replace the whole session document

        Matches on the version that was read; the stored copy gets version + 1.

        Raises:
            ConcurrentUpdateError: If the session changed since it was read
            StoreError: If the database operation fails
        """
        expected_version = session.version
        updated = session.model_copy(update={"version": expected_version + 1})
        try:
            result = await self.collection.replace_one(
                version_filter(session.id, expected_version),
                session_to_document(updated)
            )
        except PyMongoError as e:
            logger.error(f"❌ Failed to replace session {session.id}: {e}")
            raise StoreError("Failed to update quiz session", detail=str(e))

        if result.matched_count == 0:
            logger.warning(
                f"⚠️ Version conflict on session {session.id} "
                f"(expected version {expected_version})"
            )
            raise ConcurrentUpdateError(
                f"Session '{session.id}' was modified by another request."
            )
        logger.debug(f"✓ Replaced session {session.id} -> version {expected_version + 1}")
