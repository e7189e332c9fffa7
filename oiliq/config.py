"""
Application Configuration — Pydantic Settings

Centralized configuration management using environment variables.
Loads from .env file automatically with sensible defaults.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Priority: Environment variables > .env file > defaults
    """

    # === API Configuration ===
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "FoodOil IQ"

    # === CORS Configuration ===
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://localhost:8080",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8080",
    ]
    CORS_ORIGIN_REGEX: Optional[str] = None  # e.g. https://.*\.example\.app for preview deploys

    # === Regulatory Limits ===
    REGULATORY_STANDARD: str = "fssai"  # fssai, eu, china, codex
    FFA_LIMIT: Optional[float] = None   # Overrides the standard's preset when set
    TPC_LIMIT: Optional[float] = None
    PV_LIMIT: Optional[float] = None

    # === Prediction Service ===
    PREDICTION_API_URL: str = ""        # Empty = local simulation only
    PREDICTION_TIMEOUT_S: float = 30.0

    # === Report Branding ===
    COMPANY_NAME: str = ""
    COMPANY_ADDRESS: str = ""

    # === Environment ===
    ENVIRONMENT: str = "local"  # local, development, staging, production
    LOG_LEVEL: str = "INFO"
    SEED_DEMO_DATA: bool = True

    # === Settings Configuration ===
    model_config = SettingsConfigDict(
        env_file=("oiliq/.env", ".env"),  # Check both paths
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Singleton instance
settings = Settings()
