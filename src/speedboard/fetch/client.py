from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings
from ..core.models import Category, Run, with_ids


logger = logging.getLogger(__name__)

HEADERS = {"Accept": "application/json"}


class SpeedrunApiError(Exception):
    """A failed request against the speedrun.com API.

    ``status_code`` is 0 when no HTTP response was received at all.
    """

    def __init__(self, status_code: int, message: str):
        super().__init__(f"Error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class SpeedrunClient:
    """Thin async wrapper over the read-only speedrun.com REST API.

    Every endpoint answers with a ``{"data": ...}`` envelope. A missing
    ``data`` key is an empty result, never an error.
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or Settings()
        self.http_client = httpx.AsyncClient(
            base_url=self.settings.api_base,
            headers=HEADERS,
            timeout=self.settings.timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def __aenter__(self) -> "SpeedrunClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        logger.debug("GET %s params=%s", path, params)
        try:
            response = await self.http_client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("GET %s failed with HTTP %s", path, e.response.status_code)
            raise SpeedrunApiError(e.response.status_code, e.response.reason_phrase or str(e)) from e
        except httpx.HTTPError as e:
            logger.warning("GET %s failed: %s", path, e)
            raise SpeedrunApiError(0, str(e) or type(e).__name__) from e
        try:
            payload = response.json()
        except ValueError as e:
            raise SpeedrunApiError(response.status_code, f"invalid JSON: {e}") from e
        if not isinstance(payload, dict):
            return None
        return payload.get("data")

    async def get_categories(self, game_id: str) -> List[Category]:
        """All categories of a game, per-level ones included."""
        data = await self._get(f"/games/{game_id}/categories")
        return [Category.from_api(c) for c in with_ids(data)]

    async def get_leaderboard(self, game_id: str, category_id: str) -> List[Run]:
        """Ranked runs for one (game, category) leaderboard, in placement order."""
        data = await self._get(f"/leaderboards/{game_id}/category/{category_id}")
        entries = data.get("runs") or [] if isinstance(data, dict) else []
        return [Run.from_api(e.get("run") or {}) for e in entries]

    async def get_games(self, **params: Any) -> List[Dict[str, Any]]:
        data = await self._get("/games", params=params)
        return list(data or [])

    async def get_runs(self, **params: Any) -> List[Dict[str, Any]]:
        data = await self._get("/runs", params=params)
        return list(data or [])
