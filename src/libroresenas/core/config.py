"""
Configuration module for LibroReseñas.

This module defines the Settings class, which loads environment variables
and provides application-wide configuration: database URL, environment,
logging level and pagination limits.

Usage:
    Import the `settings` object to access configuration throughout the project.
"""

import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL (str): Database connection string.
        ENVIRONMENT (str): Current environment (e.g., 'production', 'development').
        LOG_LEVEL (str): Logging level used by the entry-point scripts.
        SQL_ECHO (bool): Echo SQL statements emitted by the engine.
        DEFAULT_PAGE_SIZE (int): Page size used when a listing gets no limit.
        MAX_PAGE_SIZE (int): Upper bound for any requested page size.
    """
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./libroresenas.db")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    SQL_ECHO: bool = False
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    @property
    def is_development(self) -> bool:
        """
        Returns True when running in a development environment.

        Returns:
            bool: Whether ENVIRONMENT is 'development'.
        """
        return self.ENVIRONMENT.lower() == "development"

    def clamp_page_size(self, limit: int | None) -> int:
        """Keeps a requested page size between 1 and MAX_PAGE_SIZE."""
        if limit is None:
            return self.DEFAULT_PAGE_SIZE
        return max(1, min(limit, self.MAX_PAGE_SIZE))

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
