"""Configuration management for importpreview."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


class Settings(BaseModel):
    """Application settings."""

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    # Column model
    serial_no_label: str = os.getenv("SERIAL_NO_LABEL", "Sr. No")
    identifier_label: str = os.getenv("IDENTIFIER_LABEL", "ID")
    column_id_length: int = int(os.getenv("COLUMN_ID_LENGTH", "10"))  # hex chars, 16**10 > 26**6

    # Grid presentation
    grid_cell_height: int = int(os.getenv("GRID_CELL_HEIGHT", "35"))

    # Preview sessions kept by the API
    preview_ttl_seconds: int = int(os.getenv("PREVIEW_TTL_SECONDS", "1800"))  # 30 minutes


settings = Settings()
