"""
Configuration management using Pydantic Settings
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Database
    DATABASE_URL: str

    # Question generation / feedback service
    LLM_SERVICE_URL: str = "http://localhost:5000"
    LLM_REQUEST_TIMEOUT: Optional[float] = None  # None = wait for the service

    # Redis
    REDIS_URL: str = "redis://redis:6379/0"
    CACHE_ENABLED: bool = True

    # Application
    APP_NAME: str = "Quiz Generation & Assessment Platform"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Rate Limiting (generation and grading routes)
    RATE_LIMIT_PER_MINUTE: int = 10
    RATE_LIMIT_PER_HOUR: int = 200

    # Quiz Settings
    TEMPLATE_CACHE_TTL: int = 3600  # 1 hour
    QUICK_QUIZ_MAX_FILES: int = 10
    MAX_UPLOAD_SIZE_BYTES: int = 50 * 1024 * 1024

    # Document storage
    DOCUMENT_STORAGE_DIR: str = "/tmp/quiz-documents"
    DOCUMENT_BASE_URL: str = "http://localhost:8000/documents"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
