from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Tuple

from ..config import BadRequestPolicy, Settings
from ..fetch.client import SpeedrunApiError, SpeedrunClient
from .links import parse_leaderboard_url
from .models import Category, GameRef, Run


logger = logging.getLogger(__name__)

NO_CATEGORIES = "This game has no categories."


def _per_game(categories: List[Category]) -> List[Category]:
    return [c for c in categories if c.kind == "per-game"]


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


class LeaderboardView:
    """Client-side pagination over an already fetched run list."""

    def __init__(self, runs: Optional[List[Run]] = None, page_size: int = 10):
        self.page_size = page_size
        self.runs: List[Run] = []
        self.page_index = 0
        self.reset(runs or [])

    def reset(self, runs: List[Run]) -> None:
        self.runs = list(runs)
        self.page_index = 0

    @property
    def page(self) -> List[Run]:
        start = self.page_index * self.page_size
        return self.runs[start:start + self.page_size]

    @property
    def page_count(self) -> int:
        return -(-len(self.runs) // self.page_size)

    def has_next(self) -> bool:
        return (self.page_index + 1) * self.page_size < len(self.runs)

    def has_previous(self) -> bool:
        return self.page_index > 0

    def next_page(self) -> bool:
        if not self.has_next():
            return False
        self.page_index += 1
        return True

    def previous_page(self) -> bool:
        if not self.has_previous():
            return False
        self.page_index -= 1
        return True

    def rank_of(self, row_index: int) -> int:
        """Zero-based position in the full leaderboard of a row on the current page."""
        return self.page_index * self.page_size + row_index


class LeaderboardLoader:
    """Loads one game's leaderboard and keeps a paginated view of it.

    Categories and runs carry separate generation numbers. A new game load
    supersedes both; a category selection supersedes only earlier runs
    fetches, so categories still in flight for the current game are kept.
    """

    def __init__(self, client: SpeedrunClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or client.settings
        self.state = LoadState.IDLE
        self.error: Optional[str] = None
        self.game_ref: Optional[GameRef] = None
        self.active_category_id: Optional[str] = None
        self.categories: List[Category] = []
        self.view = LeaderboardView(page_size=self.settings.page_size)
        self._game_generation = 0
        self._runs_generation = 0

    @property
    def loading(self) -> bool:
        return self.state is LoadState.LOADING

    @property
    def page(self) -> List[Run]:
        return self.view.page

    def next_page(self) -> bool:
        return self.view.next_page()

    def previous_page(self) -> bool:
        return self.view.previous_page()

    async def load(self, resource_url: str) -> None:
        """Load ``.../leaderboards/{game}/category/{category}``.

        Categories are fetched first so that a 400 on the leaderboard can be
        retried once against the first per-game category.
        """
        ref = parse_leaderboard_url(resource_url)
        if ref is None:
            logger.debug("Ignoring unmatched leaderboard locator %r", resource_url)
            return
        game_gen, gen = self._begin(ref)

        categories = await self._fetch_categories(ref.game_id)
        if self._stale_game(game_gen):
            return
        self.categories = categories
        # A category was selected while categories were in flight; it owns the runs now
        if self._stale(gen):
            return

        try:
            runs = await self.client.get_leaderboard(ref.game_id, ref.category_id)
        except SpeedrunApiError as e:
            if self._stale(gen):
                return
            if e.status_code != 400:
                self._fail(e)
                return
            if not categories:
                self._bad_request(e)
                return
            fallback = categories[0]
            logger.info(
                "Leaderboard %s/%s rejected; falling back to category %s",
                ref.game_id, ref.category_id, fallback.id,
            )
            self.active_category_id = fallback.id
            try:
                runs = await self.client.get_leaderboard(ref.game_id, fallback.id)
            except SpeedrunApiError as retry_error:
                if not self._stale(gen):
                    self._fail(retry_error)
                return
        if not self._stale(gen):
            self._finish(runs)

    async def load_game(self, game_id: str) -> None:
        """Load the leaderboard of a game's first per-game category."""
        game_gen, gen = self._begin(None)
        try:
            categories = _per_game(await self.client.get_categories(game_id))
        except SpeedrunApiError as e:
            if not self._stale(gen):
                self._fail(e)
            return
        if self._stale_game(game_gen):
            return
        self.categories = categories
        if self._stale(gen):
            return
        if not categories:
            self.view.reset([])
            self.state = LoadState.ERRORED
            self.error = NO_CATEGORIES
            return
        self.game_ref = GameRef(game_id=game_id, category_id=categories[0].id)
        self.active_category_id = categories[0].id
        await self._fetch_runs(gen, self.game_ref)

    async def select_category(self, resource_url: str) -> None:
        """Switch to another category's leaderboard. Categories are not re-fetched."""
        ref = parse_leaderboard_url(resource_url)
        if ref is None:
            logger.debug("Ignoring unmatched category locator %r", resource_url)
            return
        _, gen = self._begin(ref, new_game=False)
        await self._fetch_runs(gen, ref)

    async def _fetch_runs(self, gen: int, ref: GameRef) -> None:
        try:
            runs = await self.client.get_leaderboard(ref.game_id, ref.category_id)
        except SpeedrunApiError as e:
            if self._stale(gen):
                return
            if e.status_code == 400:
                self._bad_request(e)
            else:
                self._fail(e)
            return
        if not self._stale(gen):
            self._finish(runs)

    async def _fetch_categories(self, game_id: str) -> List[Category]:
        try:
            return _per_game(await self.client.get_categories(game_id))
        except SpeedrunApiError as e:
            logger.warning("Could not fetch categories for %s: %s", game_id, e)
            return []

    def _begin(self, ref: Optional[GameRef], new_game: bool = True) -> Tuple[int, int]:
        if new_game:
            self._game_generation += 1
            self.categories = []
        self._runs_generation += 1
        self.state = LoadState.LOADING
        self.error = None
        if ref is not None:
            self.game_ref = ref
            self.active_category_id = ref.category_id
        return self._game_generation, self._runs_generation

    def _stale_game(self, gen: int) -> bool:
        if gen != self._game_generation:
            logger.debug("Discarding categories of superseded load %d (current %d)", gen, self._game_generation)
            return True
        return False

    def _stale(self, gen: int) -> bool:
        if gen != self._runs_generation:
            logger.debug("Discarding runs of superseded load %d (current %d)", gen, self._runs_generation)
            return True
        return False

    def _finish(self, runs: List[Run]) -> None:
        self.view.reset(runs)
        self.state = LoadState.LOADED

    def _fail(self, error: SpeedrunApiError) -> None:
        self.view.reset([])
        self.state = LoadState.ERRORED
        self.error = f"Error {error.status_code}: {error.message}"

    def _bad_request(self, error: SpeedrunApiError) -> None:
        if self.settings.bad_request_policy is BadRequestPolicy.ERROR:
            self._fail(error)
        else:
            logger.info("Leaderboard rejected with no fallback available; showing empty board")
            self._finish([])
