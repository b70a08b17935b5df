"""
Configuration module - loads all settings from environment variables.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
try:
    load_dotenv()
except Exception as e:
    print(f"Warning: Failed to load .env file: {e}")
    print("Continuing with environment variables or defaults...")


class Config:
    """Application configuration loaded from environment variables."""

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Safely parse integer environment variable."""
        try:
            return int(os.getenv(key, str(default)))
        except (ValueError, TypeError) as e:
            print(f"Warning: Invalid integer for {key}, using default {default}: {e}")
            return default

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        """Safely parse float environment variable."""
        try:
            return float(os.getenv(key, str(default)))
        except (ValueError, TypeError) as e:
            print(f"Warning: Invalid float for {key}, using default {default}: {e}")
            return default

    # JWT issued by the identity provider
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_DAYS: int = _get_int.__func__("ACCESS_TOKEN_EXPIRE_DAYS", 30)

    # Gemini API
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash-preview-image-generation")

    # Storage
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "local").lower()
    STORAGE_DIR: str = os.getenv("STORAGE_DIR", "assets/storage")
    STORAGE_PUBLIC_BASE: str = os.getenv("STORAGE_PUBLIC_BASE", "/assets/storage")
    GCS_BUCKET_PREFIX: str = os.getenv("GCS_BUCKET_PREFIX", "")
    GENERATED_BUCKET: str = os.getenv("GENERATED_BUCKET", "generated-files")
    UPLOADS_BUCKET: str = os.getenv("UPLOADS_BUCKET", "chat-attachments")
    LIST_LIMIT: int = _get_int.__func__("LIST_LIMIT", 100)

    # Request limits
    MAX_VARIATIONS: int = _get_int.__func__("MAX_VARIATIONS", 4)
    MAX_UPLOAD_BYTES: int = _get_int.__func__("MAX_UPLOAD_BYTES", 10 * 1024 * 1024)
    FETCH_TIMEOUT_SECONDS: float = _get_float.__func__("FETCH_TIMEOUT_SECONDS", 30.0)
    MAX_MASK_DIMENSION: int = _get_int.__func__("MAX_MASK_DIMENSION", 8192)

    # Logging
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = _get_int.__func__("PORT", 8000)

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        if not cls.SECRET_KEY:
            raise ValueError("SECRET_KEY environment variable is required")
        if not cls.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if cls.STORAGE_BACKEND not in ("local", "gcs"):
            raise ValueError(f"STORAGE_BACKEND must be 'local' or 'gcs', got '{cls.STORAGE_BACKEND}'")

    @classmethod
    def get_secret_key(cls) -> str:
        """Get SECRET_KEY, raise error if not set."""
        if not cls.SECRET_KEY:
            raise ValueError("SECRET_KEY must be set in environment variables")
        return cls.SECRET_KEY

    @classmethod
    def get_gemini_api_key(cls) -> str:
        """Get GEMINI_API_KEY, raise error if not set."""
        if not cls.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY must be set in environment variables")
        return cls.GEMINI_API_KEY
