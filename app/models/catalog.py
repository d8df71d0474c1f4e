"""
Catalog Models
Tests, questions and answer options as read from the catalog store
FILE: app/models/catalog.py
"""
from typing import List

from pydantic import BaseModel, Field


class Option(BaseModel):
    """
    Answer option of a question
    SECURITY: is_correct is PRIVATE and never leaves the service in a question view
    """
    id: str = Field(..., description="Option ID, unique within its question")
    text: str = Field(..., description="Option text")
    is_correct: bool = Field(default=False, description="Whether this option is correct - PRIVATE")


class Question(BaseModel):
    """Multiple-choice question belonging to a test"""
    id: str = Field(..., description="Question ID")
    test_id: str = Field(..., description="ID of the test the question belongs to")
    text: str = Field(..., description="Question text")
    options: List[Option] = Field(..., min_length=1, description="Ordered answer options")

    def find_option(self, option_id: str):
        """Return the option with the given id, or None"""
        for option in self.options:
            if option.id == option_id:
                return option
        return None


class Test(BaseModel):
    """Test/quiz entity (read-only reference data)"""
    id: str = Field(..., description="Test ID")
    title: str = Field(..., description="Test title")
    description: str = Field(default="", description="Test description")
    total_questions: int = Field(default=0, ge=0, description="Declared number of questions")


class TestSummary(BaseModel):
    """Public test listing entry"""
    testId: str = Field(..., description="Test ID")
    title: str = Field(..., description="Test title")
    description: str = Field(..., description="Test description")
    totalQuestions: int = Field(..., ge=0, description="Number of questions in the test")

    @classmethod
    def from_test(cls, test: Test) -> "TestSummary":
        return cls(
            testId=test.id,
            title=test.title,
            description=test.description,
            totalQuestions=test.total_questions
        )

    class Config:
        json_schema_extra = {
            "example": {
                "testId": "665f1c2e9b1e8a3d4c2b1a01",
                "title": "Python Basics",
                "description": "Core language features",
                "totalQuestions": 10
            }
        }
