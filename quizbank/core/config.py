"""
Application configuration management with environment-based settings.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, validator
from functools import lru_cache

class Settings(BaseSettings):
    """Main application settings."""

    # ============= Application Settings =============
    APP_NAME: str = "QuizBank API"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "Multi-language question bank and quiz result service"
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")
    API_PREFIX: str = "/api"

    # ============= Server Settings =============
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    RELOAD: bool = Field(default=False)

    # CORS Settings
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]

    # ============= Storage Settings =============
    STORAGE_BACKEND: str = Field(default="file")  # file or database

    # Flat JSON documents
    QUESTIONS_FILE: str = "data/questions.json"
    QUIZ_RESULTS_FILE: str = "data/quiz_results.json"

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./quizbank.db")
    DATABASE_ECHO: bool = False

    # Static front-end
    STATIC_DIR: Optional[str] = "public"

    # ============= Quiz Settings =============
    DEFAULT_LANG: str = "zh"
    DEFAULT_SAMPLE_SIZE: int = 10
    REQUIRED_LANGUAGES: List[str] = ["zh", "en"]

    # ============= Monitoring Settings =============
    SENTRY_DSN: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1
    PROMETHEUS_ENABLED: bool = True

    # ============= Logging Settings =============
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @validator("STORAGE_BACKEND")
    def check_storage_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("file", "database"):
            raise ValueError("STORAGE_BACKEND must be 'file' or 'database'")
        return v

    @validator("LOG_LEVEL")
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    def uses_database(self) -> bool:
        """Check if the database backend is selected."""
        return self.STORAGE_BACKEND == "database"

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT.lower() == "production"

@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
