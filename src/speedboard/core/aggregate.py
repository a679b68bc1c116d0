from typing import Any, Dict, Iterable, List
from .models import Game


def rank_games_by_activity(runs: Iterable[Dict[str, Any]], limit: int = 20) -> List[Game]:
    """
    Rank games by how many of the given runs belong to them.

    Runs must carry an embedded game (``embed=game``); runs without one are skipped.
    Each game keeps the payload of the first run it was seen in.
    Tie-breaks: first appearance in ``runs`` (Python's sort stability).
    """
    counts: Dict[str, int] = {}
    first_seen: Dict[str, Dict[str, Any]] = {}
    for run in runs:
        embed = (run or {}).get("game")
        game = embed.get("data") if isinstance(embed, dict) else None
        if not isinstance(game, dict) or not game.get("id"):
            continue
        game_id = game["id"]
        counts[game_id] = counts.get(game_id, 0) + 1
        first_seen.setdefault(game_id, game)

    ordered = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]
    ranked: List[Game] = []
    for game_id, count in ordered:
        game = Game.from_api(first_seen[game_id])
        game.run_count = count
        ranked.append(game)
    return ranked
