from pydantic import BaseModel, Field, field_validator
from typing import Optional


class SubmitAnswerRequest(BaseModel):
    """Request model for answer submission"""
    questionId: str = Field(..., description="Question ID being answered")
    selectedOptionId: str = Field(..., description="ID of the option the user selected")

    @field_validator('questionId')
    @classmethod
    def validate_question_id(cls, v):
        if not v or not v.strip():
            raise ValueError("Question ID is required.")
        return v.strip()

    @field_validator('selectedOptionId')
    @classmethod
    def validate_selected_option_id(cls, v):
        if not v or not v.strip():
            raise ValueError("Selected Option ID is required.")
        return v.strip()


class SubmitAnswerResponse(BaseModel):
    """Response model for answer evaluation"""
    questionId: str = Field(..., description="Question that was answered")
    isCorrect: bool = Field(..., description="Whether the answer was correct")
    nextQuestionId: Optional[str] = Field(
        None,
        description="ID of the next question to answer (None once the quiz is complete)"
    )
    isQuizComplete: bool = Field(..., description="Whether this answer completed the quiz")
