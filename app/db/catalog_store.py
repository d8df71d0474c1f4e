"""
Catalog Database Operations
MongoDB read operations for tests and questions (PascalCase documents)
FILE: app/db/catalog_store.py
"""
from typing import Any, Dict, List, Optional
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.core.exceptions import StoreError
from app.db.mongodb import to_object_id
from app.models.catalog import Option, Question, Test

logger = logging.getLogger(__name__)


def document_to_test(doc: Dict[str, Any]) -> Test:
    return Test(
        id=str(doc["_id"]),
        title=doc.get("Title") or "",
        description=doc.get("Description") or "",
        total_questions=doc.get("TotalQuestions") or 0
    )


def document_to_question(doc: Dict[str, Any]) -> Question:
    return Question(
        id=str(doc["_id"]),
        test_id=str(doc.get("TestId", "")),
        text=doc.get("Text") or "",
        options=[
            Option(
                id=str(opt.get("Id", "")),
                text=opt.get("Text") or "",
                is_correct=bool(opt.get("IsCorrect", False))
            )
            for opt in doc.get("Options") or []
        ]
    )


class MongoCatalogStore:
    """Catalog store backed by the Tests and Questions collections"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.tests = db[settings.tests_collection_name]
        self.questions = db[settings.questions_collection_name]

    async def get_all_tests(self) -> List[Test]:
        """Retrieve all available tests"""
        try:
            cursor = self.tests.find().sort("_id", 1)
            tests = [document_to_test(doc) async for doc in cursor]
            logger.debug(f"📊 Retrieved {len(tests)} tests")
            return tests
        except PyMongoError as e:
            logger.error(f"❌ Failed to retrieve tests: {e}")
            raise StoreError("Failed to retrieve tests", detail=str(e))

    async def get_test_by_id(self, test_id: str) -> Optional[Test]:
        """Retrieve a test by ID"""
        object_id = to_object_id(test_id)
        if object_id is None:
            logger.warning(f"⚠️ Not a valid test ID: {test_id}")
            return None
        try:
            doc = await self.tests.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"❌ Failed to retrieve test {test_id}: {e}")
            raise StoreError("Failed to retrieve test", detail=str(e))
        return document_to_test(doc) if doc else None

    async def get_questions_by_test_id(self, test_id: str) -> List[Question]:
        """
        Retrieve all questions of a test

        Sorted by _id, i.e. insertion order for ObjectId keys.
        """
        object_id = to_object_id(test_id)
        if object_id is None:
            logger.warning(f"⚠️ Not a valid test ID: {test_id}")
            return []
        try:
            cursor = self.questions.find({"TestId": object_id}).sort("_id", 1)
            questions = [document_to_question(doc) async for doc in cursor]
            logger.debug(f"📊 Test {test_id} has {len(questions)} questions")
            return questions
        except PyMongoError as e:
            logger.error(f"❌ Failed to retrieve questions for test {test_id}: {e}")
            raise StoreError("Failed to retrieve questions", detail=str(e))

    async def get_question_by_id(self, question_id: str) -> Optional[Question]:
        """Retrieve a single question by ID"""
        object_id = to_object_id(question_id)
        if object_id is None:
            logger.warning(f"⚠️ Not a valid question ID: {question_id}")
            return None
        try:
            doc = await self.questions.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"❌ Failed to retrieve question {question_id}: {e}")
            raise StoreError("Failed to retrieve question", detail=str(e))
        return document_to_question(doc) if doc else None
