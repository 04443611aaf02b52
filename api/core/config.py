"""
Application configuration using environment variables.
Settings are read once at import from the process environment.
"""
import os
from pathlib import Path

# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent
LOGS_DIR = ROOT_DIR / "logs"


def _get_env(key: str, default: str = "") -> str:
    """Get environment variable with default."""
    return os.getenv(key, default)


def _get_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    return os.getenv(key, str(default)).lower() in ("true", "1", "yes")


def _get_int(key: str, default: int = 0) -> int:
    """Get integer environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


# =============================================================================
# API Configuration
# =============================================================================
APP_NAME = _get_env("APP_NAME", "Vision OCR to PAGE XML API")
APP_VERSION = _get_env("APP_VERSION", "1.0.0")
DEBUG = _get_bool("DEBUG", False)
HOST = _get_env("HOST", "0.0.0.0")
PORT = _get_int("PORT", 8000)

# =============================================================================
# Cloud Vision Configuration
# =============================================================================
CREDENTIALS_PATH = _get_env("GOOGLE_APPLICATION_CREDENTIALS", "")
DEFAULT_LANGUAGE = _get_env("DEFAULT_LANGUAGE", "en")
DEFAULT_MODE = _get_env("DEFAULT_MODE", "ocr")  # ocr or object; form default of /v1/process/image

# =============================================================================
# Processing Configuration
# =============================================================================
MAX_WORKERS = _get_int("MAX_WORKERS", 4)
ALLOWED_EXTENSIONS = _get_env("ALLOWED_EXTENSIONS", "jpg,jpeg,png,gif,bmp,tif,tiff,webp").split(",")
OUTPUT_TTL_SECONDS = _get_int("OUTPUT_TTL_SECONDS", 3600)  # how long generated files stay downloadable

# =============================================================================
# Logging Configuration
# =============================================================================
LOG_LEVEL = _get_env("LOG_LEVEL", "INFO")
LOG_FORMAT = _get_env("LOG_FORMAT", "json")  # json or text
LOG_FILE_ENABLED = _get_bool("LOG_FILE_ENABLED", True)
LOG_FILE_PATH = _get_env("LOG_FILE_PATH", str(LOGS_DIR / "app.log"))
LOG_MAX_BYTES = _get_int("LOG_MAX_BYTES", 10 * 1024 * 1024)  # 10MB
LOG_BACKUP_COUNT = _get_int("LOG_BACKUP_COUNT", 5)

# =============================================================================
# Build/Deploy Information
# =============================================================================
GIT_COMMIT = _get_env("GIT_COMMIT", "development")
BUILD_DATE = _get_env("BUILD_DATE", "unknown")
ENVIRONMENT = _get_env("ENVIRONMENT", "development")


def get_config_dict() -> dict:
    """Get all configuration as dictionary (for debugging)."""
    return {
        "app_name": APP_NAME,
        "app_version": APP_VERSION,
        "debug": DEBUG,
        "environment": ENVIRONMENT,
        "credentials_configured": bool(CREDENTIALS_PATH),
        "default_language": DEFAULT_LANGUAGE,
        "default_mode": DEFAULT_MODE,
        "log_level": LOG_LEVEL,
        "max_workers": MAX_WORKERS,
        "output_ttl_seconds": OUTPUT_TTL_SECONDS,
    }
