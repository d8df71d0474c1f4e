"""
Application configuration settings
FILE: app/core/config.py
"""
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # MongoDB Configuration
    mongodb_url: str = "mongodb://localhost:27017"
    database_name: str = "quiz_task"

    # Collection names (catalog + sessions)
    tests_collection_name: str = "Tests"
    questions_collection_name: str = "Questions"
    user_sessions_collection_name: str = "UserSessions"

    # Session engine
    max_update_retries: int = 3

    # Logging / HTTP
    log_level: str = "INFO"
    cors_origins: List[str] = [
        "http://localhost:4000",
        "http://localhost:3000",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = False  # This allows case-insensitive matching
        extra = "allow"  # This allows extra fields


settings = Settings()
