"""
Configuration management using Pydantic settings.
"""
from typing import List, Union
import os
from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "QuizDesk"
    ENV: str = os.getenv("ENV", "development")
    DEBUG: bool = True

    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./quizdesk.db")

    # JWT Configuration
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me-in-production")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

    # Quiz taking
    TIMER_SWEEP_INTERVAL_SECONDS: float = 1.0
    # Unfinished quizzes untouched this long are discarded; timed ones only once expired
    TAKE_SESSION_IDLE_SECONDS: int = int(os.getenv("TAKE_SESSION_IDLE_SECONDS", 4 * 60 * 60))
    DASHBOARD_RECENT_LIMIT: int = 5

    # Seed admin account (init_db.py)
    FIRST_ADMIN_EMAIL: str = os.getenv("FIRST_ADMIN_EMAIL", "admin@example.com")
    FIRST_ADMIN_PASSWORD: str = os.getenv("FIRST_ADMIN_PASSWORD", "admin123")
    FIRST_ADMIN_NAME: str = os.getenv("FIRST_ADMIN_NAME", "Quiz Administrator")

    # CORS Configuration
    BACKEND_CORS_ORIGINS: Union[List[AnyHttpUrl], str] = "*"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if v == "*" or v == ["*"]:
            return "*"
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        return v


settings = Settings()
