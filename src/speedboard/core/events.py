from __future__ import annotations

import asyncio
import logging
from typing import Callable, Generic, List, Optional, TypeVar

from .links import embed_url
from .models import Category


logger = logging.getLogger(__name__)

T = TypeVar("T")


class Signal(Generic[T]):
    """Synchronous fan-out of one kind of outbound event to its listeners."""

    def __init__(self, name: str):
        self.name = name
        self._listeners: List[Callable[[T], None]] = []

    def connect(self, listener: Callable[[T], None]) -> None:
        self._listeners.append(listener)

    def disconnect(self, listener: Callable[[T], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, value: T) -> None:
        logger.debug("%s -> %r", self.name, value)
        for listener in list(self._listeners):
            listener(value)


class VideoPopup:
    """Holds the video currently shown; emits ``video_requested`` on change."""

    def __init__(self):
        self.active_url: Optional[str] = None
        self.video_requested: Signal[Optional[str]] = Signal("video_requested")

    def open(self, uri: str) -> None:
        url = embed_url(uri)
        # Same video already showing
        if url == self.active_url:
            return
        self.active_url = url
        self.video_requested.emit(url)

    def close(self) -> None:
        self.active_url = None
        self.video_requested.emit(None)


class CategoryFilters:
    def __init__(self, categories: Optional[List[Category]] = None, active_category_id: str = ""):
        self.categories: List[Category] = list(categories or [])
        self.active_category_id = active_category_id
        self.category_selected: Signal[str] = Signal("category_selected")

    @property
    def visible(self) -> bool:
        return bool(self.categories)

    def labels(self) -> List[str]:
        """Category names, the active one in brackets."""
        return [
            f"[{c.name or c.id}]" if c.id == self.active_category_id else (c.name or c.id)
            for c in self.categories
        ]

    def find(self, category_id: str) -> Optional[Category]:
        return next((c for c in self.categories if c.id == category_id), None)

    def select(self, category: Category) -> None:
        # Categories without a leaderboard link can't be shown
        if category.leaderboard_url:
            self.active_category_id = category.id
            self.category_selected.emit(category.leaderboard_url)


class SearchDebouncer:
    """Emits ``search_changed`` once input has been idle for ``delay`` seconds.

    A settled value equal to the last emitted one is not re-emitted.
    Must be fed from within a running event loop.
    """

    def __init__(self, delay: float = 0.4):
        self.delay = delay
        self.search_changed: Signal[str] = Signal("search_changed")
        self._last_emitted: Optional[str] = None
        self._pending: Optional[asyncio.Task] = None

    def push(self, term: Optional[str]) -> None:
        if self._pending is not None:
            self._pending.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._settle(term or ""))

    async def _settle(self, term: str) -> None:
        await asyncio.sleep(self.delay)
        self._pending = None
        if term == self._last_emitted:
            return
        self._last_emitted = term
        self.search_changed.emit(term)

    async def flush(self) -> None:
        """Wait for a pending term, if any, to settle."""
        task = self._pending
        if task is None:
            return
        await asyncio.wait({task})

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
