from __future__ import annotations

from typing import Optional

from .models import Run


ANONYMOUS = "Anonymous"
NO_TIME = "—"

TROPHIES = (
    "https://www.speedrun.com/images/1st.png",
    "https://www.speedrun.com/images/2nd.png",
    "https://www.speedrun.com/images/3rd.png",
)


def player_name(run: Run) -> str:
    return run.player_id or ANONYMOUS


def format_time(run: Run) -> str:
    """Primary time as HH:MM:SS, truncated to whole seconds.

    Hours keep counting past 24 (a 25h run reads 25:00:00).
    """
    t = run.primary_time_seconds
    if not t:
        return NO_TIME
    total = int(t)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def trophy_for(rank: int) -> Optional[str]:
    """Badge for a zero-based position in the full (unpaginated) leaderboard."""
    if 0 <= rank < len(TROPHIES):
        return TROPHIES[rank]
    return None
