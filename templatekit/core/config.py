import os
from pathlib import Path
from typing import List, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def find_env_file() -> str:
    """Find .env file by checking multiple possible locations"""
    this_file_dir = Path(__file__).resolve().parent

    # Possible .env locations (in priority order)
    possible_paths = [
        Path.cwd() / ".env",  # Current working directory
        this_file_dir / ".env",  # Same dir as this file
        this_file_dir.parent / ".env",  # Package root
        this_file_dir.parent.parent / ".env",  # Project root
    ]

    for path in possible_paths:
        if path.exists():
            return str(path)

    return ".env"  # Fallback


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=find_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Server
    ENV: str = "development"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: List[str] = ["*"]

    # Dashboard REST API (template persistence lives there)
    DASHBOARD_API_URL: str = "http://localhost:5000/api"
    DASHBOARD_API_TOKEN: Optional[str] = None
    HTTP_TIMEOUT: float = 10.0

    @model_validator(mode="after")
    def strip_api_url(self) -> "Settings":
        """Drop trailing slash so endpoints can be joined with '/'"""
        self.DASHBOARD_API_URL = self.DASHBOARD_API_URL.rstrip("/")
        return self

    # Template builder
    TEMPLATE_DEFAULT_LANGUAGE: str = "en"

    # Monitoring
    LOG_DIR: Optional[str] = None


# Singleton instance
settings = Settings()


# Debug helper - run this file directly to check config loading
if __name__ == "__main__":
    print("=" * 50)
    print("CONFIG DEBUG INFO")
    print("=" * 50)
    print(f"Working directory: {os.getcwd()}")
    print(f"Config file location: {Path(__file__).resolve()}")
    print(f"Resolved .env path: {find_env_file()}")
    print("-" * 50)
    print(f"ENV: {settings.ENV}")
    print(f"DASHBOARD_API_URL: {settings.DASHBOARD_API_URL}")
    print(f"DASHBOARD_API_TOKEN loaded: {settings.DASHBOARD_API_TOKEN is not None}")
    print(f"LOG_DIR: {settings.LOG_DIR}")
    print("=" * 50)
