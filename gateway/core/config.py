# centralized configuration loader
# runs load_dotenv() to read .env
# decouples code from environment we can swap providers/models/hosts without code change

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _opt(name: str) -> Optional[str]:
    # blank values count as unset
    value = (os.getenv(name) or "").strip()
    return value or None


# Routing
DEFAULT_PROVIDER = (_opt("DEFAULT_PROVIDER") or "gemini").lower()

# Gemini (cloud)
GEMINI_API_KEY = _opt("GEMINI_API_KEY") or _opt("GOOGLE_API_KEY")
GEMINI_MODEL = _opt("GEMINI_MODEL") or "gemini-1.5-flash"

# LM Studio (local, OpenAI-compatible)
LMSTUDIO_BASE_URL = (_opt("LMSTUDIO_BASE_URL") or "http://localhost:1234").rstrip("/")
LMSTUDIO_API_KEY = _opt("LMSTUDIO_API_KEY")
LMSTUDIO_MODEL = _opt("LMSTUDIO_MODEL")
LMSTUDIO_TIMEOUT = float(os.getenv("LMSTUDIO_TIMEOUT", "60"))
LMSTUDIO_CONNECT_TIMEOUT = float(os.getenv("LMSTUDIO_CONNECT_TIMEOUT", "10"))

# Upload caps (megabytes)
MAX_IMAGE_MB = int(os.getenv("MAX_IMAGE_MB", "15"))
MAX_DOCUMENT_MB = int(os.getenv("MAX_DOCUMENT_MB", "20"))
MAX_AUDIO_MB = int(os.getenv("MAX_AUDIO_MB", "25"))

# Server
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))


@dataclass(frozen=True)
class Settings:
    """Snapshot of the environment handed to adapters at construction time."""

    default_provider: str = "gemini"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    lmstudio_base_url: str = "http://localhost:1234"
    lmstudio_api_key: Optional[str] = None
    lmstudio_model: Optional[str] = None
    lmstudio_timeout: float = 60.0
    lmstudio_connect_timeout: float = 10.0
    max_image_mb: int = 15
    max_document_mb: int = 20
    max_audio_mb: int = 25


def load_settings() -> Settings:
    return Settings(
        default_provider=DEFAULT_PROVIDER,
        gemini_api_key=GEMINI_API_KEY,
        gemini_model=GEMINI_MODEL,
        lmstudio_base_url=LMSTUDIO_BASE_URL,
        lmstudio_api_key=LMSTUDIO_API_KEY,
        lmstudio_model=LMSTUDIO_MODEL,
        lmstudio_timeout=LMSTUDIO_TIMEOUT,
        lmstudio_connect_timeout=LMSTUDIO_CONNECT_TIMEOUT,
        max_image_mb=MAX_IMAGE_MB,
        max_document_mb=MAX_DOCUMENT_MB,
        max_audio_mb=MAX_AUDIO_MB,
    )
