from __future__ import annotations
from pydantic import BaseModel
from dotenv import load_dotenv
import os

from utils.exceptions import ValidationError

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

class Settings(BaseModel):
    api_key: str = ""
    model: str = "gemini-1.0-pro"
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 30.0

    reports_dir: str = "reports"

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())

    @property
    def endpoint_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, str(default))
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number, got {raw!r}")

def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        # VITE_API_KEY is accepted so an existing frontend .env keeps working.
        api_key=os.getenv("GEMINI_API_KEY") or os.getenv("VITE_API_KEY", ""),
        model=os.getenv("GEMINI_MODEL", Settings().model),
        base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL),
        request_timeout=_float_env("REQUEST_TIMEOUT_SECONDS", Settings().request_timeout),

        reports_dir=os.getenv("REPORTS_DIR", Settings().reports_dir),
    )
