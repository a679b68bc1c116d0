from __future__ import annotations

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


DEFAULT_API_BASE = "https://www.speedrun.com/api/v1"


class BadRequestPolicy(str, Enum):
    """What a leaderboard 400 means when no fallback category is available."""

    EMPTY = "empty"  # show an empty leaderboard, no message
    ERROR = "error"  # surface it like any other HTTP failure


class Settings(BaseModel):
    api_base: str = DEFAULT_API_BASE
    timeout: Optional[float] = None  # seconds; None waits indefinitely
    page_size: int = Field(10, ge=1)
    bad_request_policy: BadRequestPolicy = BadRequestPolicy.EMPTY
    search_debounce: float = Field(0.4, ge=0)


def load_settings() -> Settings:
    """Build settings from SPEEDBOARD_* environment variables, falling back to defaults."""
    env = {
        "api_base": os.getenv("SPEEDBOARD_API_BASE"),
        "timeout": os.getenv("SPEEDBOARD_TIMEOUT"),
        "page_size": os.getenv("SPEEDBOARD_PAGE_SIZE"),
        "bad_request_policy": os.getenv("SPEEDBOARD_BAD_REQUEST_POLICY"),
        "search_debounce": os.getenv("SPEEDBOARD_SEARCH_DEBOUNCE"),
    }
    return Settings(**{k: v.strip() for k, v in env.items() if v and v.strip()})
