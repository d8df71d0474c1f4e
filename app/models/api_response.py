"""
API Response Envelope
Every endpoint replies with the same structure: success, message, data, errors, code
"""
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Standard response envelope

    Use the ok() and fail() factories instead of building it by hand:
    a successful response never carries errors, a failed one never carries data.
    """
    success: bool = Field(..., description="Whether the call succeeded")
    message: str = Field(..., description="User-facing message")
    data: Optional[T] = Field(None, description="Payload (None on failure)")
    errors: Optional[List[str]] = Field(None, description="Detailed error messages (None on success)")
    code: Optional[str] = Field(None, description="Stable error code (None on success)")

    @classmethod
    def ok(cls, data: T, message: str = "Success") -> "ApiResponse[T]":
        return cls(success=True, message=message, data=data, errors=None)

    @classmethod
    def fail(
        cls,
        message: str,
        errors: Optional[List[str]] = None,
        code: str = "INTERNAL_ERROR"
    ) -> "ApiResponse[T]":
        # Without detail, the message itself is the single error entry
        error_list = errors if errors else [message]
        return cls(success=False, message=message, data=None, errors=error_list, code=code)
