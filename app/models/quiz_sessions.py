"""
Quiz Session Models
User sessions with their recorded answers and final result
"""
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Answer(BaseModel):
    """
    One submitted response
    Created once on submission and never mutated
    """
    question_id: str = Field(..., description="Question ID reference")
    selected_option_id: str = Field(..., description="Option chosen by the user")
    is_correct: bool = Field(..., description="Whether the chosen option is correct")


class UserSession(BaseModel):
    """
    One user's attempt at one test

    end_time and score are written together exactly once, when the
    session is finalized. version is bumped by the store on every replace.
    """
    id: str = Field(
        default_factory=lambda: str(ObjectId()),
        description="Unique session identifier"
    )
    user_name: str = Field(..., description="Name entered at the start of the quiz")
    test_id: str = Field(..., description="Selected test ID")
    start_time: datetime = Field(default_factory=utc_now, description="Session start timestamp")
    end_time: Optional[datetime] = Field(None, description="Set when the session is finalized")
    score: int = Field(default=0, ge=0, description="Number of correct answers (final once end_time is set)")
    answers: List[Answer] = Field(default_factory=list, description="Answers in submission order")
    version: int = Field(default=0, ge=0, description="Revision token for optimistic concurrency")

    @property
    def is_finalized(self) -> bool:
        return self.end_time is not None

    def answered_question_ids(self) -> set:
        return {answer.question_id for answer in self.answers}

    def has_answered(self, question_id: str) -> bool:
        return any(answer.question_id == question_id for answer in self.answers)

    def count_correct(self) -> int:
        return sum(1 for answer in self.answers if answer.is_correct)


class AnswerRecord(BaseModel):
    """Answer as shown in the session result"""
    questionId: str
    selectedOptionId: str
    isCorrect: bool


class SessionResultResponse(BaseModel):
    """Final result of a quiz session"""
    sessionId: str = Field(..., description="Session ID")
    userName: str = Field(..., description="User name")
    testId: str = Field(..., description="Test ID")
    startTime: datetime = Field(..., description="Session start timestamp")
    endTime: Optional[datetime] = Field(None, description="Session end timestamp")
    score: int = Field(..., ge=0, description="Final score (number of correct answers)")
    totalAnswers: int = Field(..., ge=0, description="Number of answers submitted")
    answers: List[AnswerRecord] = Field(default_factory=list)

    @classmethod
    def from_session(cls, session: UserSession) -> "SessionResultResponse":
        return cls(
            sessionId=session.id,
            userName=session.user_name,
            testId=session.test_id,
            startTime=session.start_time,
            endTime=session.end_time,
            score=session.score,
            totalAnswers=len(session.answers),
            answers=[
                AnswerRecord(
                    questionId=answer.question_id,
                    selectedOptionId=answer.selected_option_id,
                    isCorrect=answer.is_correct
                )
                for answer in session.answers
            ]
        )

    class Config:
        json_schema_extra = {
            "example": {
                "sessionId": "665f1c2e9b1e8a3d4c2b1a99",
                "userName": "Ada",
                "testId": "665f1c2e9b1e8a3d4c2b1a01",
                "startTime": "2024-01-15T10:00:00Z",
                "endTime": "2024-01-15T10:05:00Z",
                "score": 2,
                "totalAnswers": 2,
                "answers": [
                    {"questionId": "q_1", "selectedOptionId": "A", "isCorrect": True},
                    {"questionId": "q_2", "selectedOptionId": "D", "isCorrect": True}
                ]
            }
        }
