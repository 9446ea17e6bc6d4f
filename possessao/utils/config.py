"""
Configuration management with environment variable support
"""
from pathlib import Path
from typing import Optional, List
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings with validation"""

    # Application
    APP_NAME: str = "Possessao API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # API
    API_V1_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    WORKERS: int = 1
    RELOAD: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    CORS_CREDENTIALS: bool = True

    # Assessment
    TOP_N_RESULTS: int = 3
    QUESTIONS_PER_SESSION: int = 7
    DEFAULT_AGE_GROUP: str = "Adulto"
    DEFAULT_CAMERA_ORIENTATION: str = "traseira"

    # Compositing
    OVERLAY_DIR: str = "overlays"
    OUTPUT_DIR: str = "processed"
    TEMP_DIR: Optional[str] = None  # None = system temp dir
    JPEG_QUALITY: int = 92
    REMOTE_JPEG_QUALITY: int = 95

    # Background removal (remove.bg)
    REMOVE_BG_ENABLED: bool = True
    REMOVE_BG_API_KEY: Optional[str] = None
    REMOVE_BG_URL: str = "https://api.remove.bg/v1.0/removebg"
    REMOVE_BG_SIZE: str = "auto"  # preview, full, medium, hd, 4k, auto
    REMOVE_BG_CONNECT_TIMEOUT: float = 30.0  # seconds
    REMOVE_BG_TIMEOUT: float = 60.0  # seconds (read/write)

    # File Upload
    MAX_UPLOAD_SIZE: int = 20 * 1024 * 1024  # 20MB
    ALLOWED_IMAGE_EXTENSIONS: List[str] = [".jpg", ".jpeg", ".png", ".bmp", ".webp"]

    # Catalog database
    DATABASE_URL: str = "sqlite:///possessao.db"
    CATALOG_MIN_COUNT: int = 11

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json, text
    LOG_FILE: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def overlay_path(self) -> Path:
        return Path(self.OVERLAY_DIR)

    @property
    def remove_bg_available(self) -> bool:
        """Remote background removal is only attempted with a key configured"""
        return self.REMOVE_BG_ENABLED and bool(self.REMOVE_BG_API_KEY)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Convenience accessors
settings = get_settings()
