"""Environment & config helpers (load_dotenv wrapper)."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()  # Searches .env in CWD or parents

DEFAULT_EDIT_MODEL = "gemini-2.5-flash-image"
DEFAULT_VISION_MODEL = "gemini-2.5-flash"


def getenv(name: str, default: Optional[str] = None) -> str | None:
    """Read an environment variable, treating an empty value as unset."""
    return os.getenv(name) or default


class GeminiConfig(BaseModel):
    """Settings handed to the Gemini clients at construction time."""

    api_key: Optional[str] = Field(None, repr=False)
    edit_model: str = DEFAULT_EDIT_MODEL
    vision_model: str = DEFAULT_VISION_MODEL
    debug: bool = False


def load_config() -> GeminiConfig:
    """Build a GeminiConfig from the process environment (and .env)."""
    return GeminiConfig(
        api_key=getenv("GEMINI_API_KEY") or None,
        edit_model=getenv("GEMINI_EDIT_MODEL", DEFAULT_EDIT_MODEL),
        vision_model=getenv("GEMINI_VISION_MODEL", DEFAULT_VISION_MODEL),
        debug=bool(int(getenv("DEBUG_GEMINI", "0"))),
    )
