"""
Next Question Response Models
Sanitized question view plus the quiz completion signal
"""
from pydantic import BaseModel, Field
from typing import List, Optional


class OptionView(BaseModel):
    """Answer option without its correctness flag"""
    id: str = Field(..., description="Option ID")
    text: str = Field(..., description="Option text")


class QuestionView(BaseModel):
    """
    Question as shown to the quiz-taker

    SECURITY: Does NOT include which option is correct
    """
    id: str = Field(..., description="Question ID")
    text: str = Field(..., description="Question text")
    options: List[OptionView] = Field(..., description="Sanitized answer options")
    sequenceNumber: int = Field(..., ge=1, description="1-based position of this question in the quiz")
    totalQuestions: int = Field(..., ge=1, description="Total number of questions in the test")


class NextQuestionResponse(BaseModel):
    """
    Current question of a session, or the completion signal

    When isQuizComplete is true, question is None and the caller should
    fetch the session result.
    """
    sessionId: str = Field(..., description="Quiz session ID")
    isQuizComplete: bool = Field(
        ...,
        description="Whether the quiz has ended (True = fetch the result, False = answer the question)"
    )
    question: Optional[QuestionView] = Field(None, description="Question to answer (None if quiz complete)")

    class Config:
        json_schema_extra = {
            "example": {
                "sessionId": "665f1c2e9b1e8a3d4c2b1a99",
                "isQuizComplete": False,
                "question": {
                    "id": "665f1c2e9b1e8a3d4c2b1a10",
                    "text": "What is 2+2?",
                    "options": [
                        {"id": "A", "text": "4"},
                        {"id": "B", "text": "3"}
                    ],
                    "sequenceNumber": 1,
                    "totalQuestions": 2
                }
            }
        }
