from __future__ import annotations

import re
from typing import Optional

from .models import GameRef


LEADERBOARD_RE = re.compile(r"leaderboards/([^/?#]+)/category/([^/?#]+)")
VIDEO_ID_RE = re.compile(r"(?:v=|youtu\.be/)([^&\s]+)")
EMBED_BASE = "https://www.youtube.com/embed"


def parse_leaderboard_url(url: str) -> Optional[GameRef]:
    """Extract (game id, category id) from a leaderboard locator, or None."""
    m = LEADERBOARD_RE.search(url or "")
    if not m:
        return None
    return GameRef(game_id=m.group(1), category_id=m.group(2))


def embed_url(uri: str) -> str:
    # Anything we can't pull a video id from (twitch, etc.) is passed through
    m = VIDEO_ID_RE.search(uri or "")
    if not m:
        return uri
    return f"{EMBED_BASE}/{m.group(1)}?autoplay=1"
