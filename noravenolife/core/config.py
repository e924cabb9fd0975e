"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Storage: "sql", "firestore" or "memory"
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "sql").lower()
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./noravenolife.db")
    FIREBASE_CREDENTIALS_JSON: str | None = os.getenv("FIREBASE_CREDENTIALS_JSON")
    FIREBASE_CREDENTIALS_FILE: str | None = os.getenv("FIREBASE_CREDENTIALS_FILE")
    FIREBASE_CREDENTIALS_B64: str | None = os.getenv("FIREBASE_CREDENTIALS_B64")
    SEED_ON_STARTUP: bool = os.getenv("SEED_ON_STARTUP", "true").lower() in ("1", "true", "yes")

    # Security
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-change-me")
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")
    MIN_PASSWORD_LENGTH: int = 6

    # Application
    APP_NAME: str = "NoRaveNoLife"
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    MAP_TILE_URL: str = os.getenv("MAP_TILE_URL", "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png")

    # Giveaways
    GIVEAWAY_WIN_CHANCE: float = float(os.getenv("GIVEAWAY_WIN_CHANCE", "0.3"))

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # File limits
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    class Config:
        env_file = ".env"

settings = Settings()
