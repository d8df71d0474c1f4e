"""
Quiz service exceptions
FILE: app/core/exceptions.py

Every error that leaves the service carries a stable ``code`` that clients
can branch on, a human-readable ``message`` and optional technical
``detail``.
"""
from typing import List, Optional


class QuizServiceError(Exception):
    """Base exception for quiz service errors"""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    @property
    def errors(self) -> List[str]:
        """Detail list for the response envelope"""
        return [self.detail] if self.detail else [self.message]


class QuizValidationError(QuizServiceError):
    """Malformed or missing request fields"""
    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(QuizServiceError):
    """Test, question, option or session not found"""
    code = "NOT_FOUND"
    status_code = 404


class AlreadyAnsweredError(QuizServiceError):
    """Question already has a recorded answer in this session"""
    code = "ALREADY_ANSWERED"
    status_code = 409


class InvalidStateError(QuizServiceError):
    """Mutation attempted on a finalized session"""
    code = "INVALID_STATE"
    status_code = 409


class StoreError(QuizServiceError):
    """Underlying document store failure"""
    code = "INTERNAL_ERROR"
    status_code = 500


class ConcurrentUpdateError(StoreError):
    """Session was modified by another request since it was read"""
    code = "CONCURRENT_UPDATE"
    status_code = 409
