from __future__ import annotations

import logging
from typing import List, Optional

from .client import SpeedrunApiError, SpeedrunClient
from ..core.aggregate import rank_games_by_activity
from ..core.models import Game, with_ids


logger = logging.getLogger(__name__)

PAGE = 50  # games per request
MAX_GAMES = 200  # the catalog stops offering more after this many
SEARCH_MAX = 20
POPULAR_SAMPLE = 200
POPULAR_LIMIT = 20


class GameCatalog:
    """Newest-first game listing, fetched 50 at a time up to 200 games."""

    def __init__(self, client: SpeedrunClient):
        self.client = client
        self.games: List[Game] = []
        self.offset = 0
        self.has_more = False
        self.loading = False
        self.error: Optional[str] = None

    async def fetch_games(self) -> None:
        self.games = []
        self.offset = 0
        await self._fetch_batch()

    async def load_more(self) -> None:
        if not self.has_more:
            return
        await self._fetch_batch()

    async def _fetch_batch(self) -> None:
        self.loading = True
        self.error = None
        try:
            batch = await self.client.get_games(
                orderby="created", direction="desc", max=PAGE, offset=self.offset
            )
        except SpeedrunApiError as e:
            logger.error("Game catalog request failed: %s", e)
            self.error = str(e)
            return
        finally:
            self.loading = False
        self.games = self.games + [Game.from_api(g) for g in with_ids(batch)]
        self.offset += PAGE
        self.has_more = len(batch) == PAGE and self.offset < MAX_GAMES


async def search_games(client: SpeedrunClient, term: str) -> List[Game]:
    term = (term or "").strip()
    if not term:
        return []
    data = await client.get_games(name=term, max=SEARCH_MAX)
    return [Game.from_api(g) for g in with_ids(data)]


async def fetch_popular_games(client: SpeedrunClient, limit: int = POPULAR_LIMIT) -> List[Game]:
    """Most active games among the latest verified runs."""
    runs = await client.get_runs(
        status="verified",
        orderby="verify-date",
        direction="desc",
        max=POPULAR_SAMPLE,
        embed="game",
    )
    return rank_games_by_activity(runs, limit=limit)
