"""
Start Session Request/Response Models
"""
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class StartSessionRequest(BaseModel):
    """Request model for starting a new quiz session"""
    userName: str = Field(..., description="User's name provided at the start of the quiz")
    testId: str = Field(..., description="ID of the test selected by the user")

    @field_validator('userName')
    @classmethod
    def validate_user_name(cls, v):
        """User name is required"""
        if not v or not v.strip():
            raise ValueError("User name is required.")
        return v.strip()

    @field_validator('testId')
    @classmethod
    def validate_test_id(cls, v):
        """Test ID is required"""
        if not v or not v.strip():
            raise ValueError("Test ID is required.")
        return v.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "userName": "Ada",
                "testId": "665f1c2e9b1e8a3d4c2b1a01"
            }
        }


class StartSessionResponse(BaseModel):
    """Response model for started quiz session"""
    sessionId: str = Field(..., description="Unique session identifier")
    testId: str = Field(..., description="ID of the selected test")
    userName: str = Field(..., description="User name")
    startTime: datetime = Field(..., description="Session start timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "sessionId": "665f1c2e9b1e8a3d4c2b1a99",
                "testId": "665f1c2e9b1e8a3d4c2b1a01",
                "userName": "Ada",
                "startTime": "2024-01-15T10:00:00Z"
            }
        }
