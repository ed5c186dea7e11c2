import os
from pathlib import Path
from typing import List
from urllib.parse import urlparse

# Basic settings helper to read environment configuration.

BASE_DIR = Path(__file__).resolve().parent


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    return float(val)


def _is_valid_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class Settings:
    def __init__(self) -> None:
        self.PUBLIC_URL: str = os.getenv("LETTERCRAFT_PUBLIC_URL", "http://localhost:8000").rstrip("/")
        self.DATABASE_URL: str = os.getenv(
            "LETTERCRAFT_DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}"
        )
        self.MEDIA_ROOT: str = os.getenv("LETTERCRAFT_MEDIA_ROOT", "media")
        self.FONT_DIR: str | None = os.getenv("LETTERCRAFT_FONT_DIR")
        self.STRIPE_SECRET_KEY: str | None = os.getenv("STRIPE_SECRET_KEY")
        self.STRIPE_API_BASE: str = os.getenv("STRIPE_API_BASE", "https://api.stripe.com/v1").rstrip("/")
        self.STRIPE_TIMEOUT: float = _as_float(os.getenv("STRIPE_TIMEOUT"), 10.0)
        self.FRAME_AUTH_REQUIRED: bool = _as_bool(os.getenv("FRAME_AUTH_REQUIRED"), False)


def validate_environment(current: "Settings | None" = None) -> List[str]:
    """Return a list of configuration problems (empty when the environment is usable)."""
    current = current or settings
    errors: List[str] = []
    if not _is_valid_url(current.PUBLIC_URL):
        errors.append("LETTERCRAFT_PUBLIC_URL must be a valid URL")
    if not current.DATABASE_URL:
        errors.append("Missing required environment variable: LETTERCRAFT_DATABASE_URL")
    if current.FONT_DIR and not Path(current.FONT_DIR).is_dir():
        errors.append(f"LETTERCRAFT_FONT_DIR does not exist: {current.FONT_DIR}")
    return errors


settings = Settings()
