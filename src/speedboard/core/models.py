from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel


NO_COVER = "assets/imgs/no-cover.png"


def _first(items: Any) -> Dict[str, Any]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def _https(uri: str) -> str:
    return uri.replace("http://", "https://", 1)


def _is_blank(uri: Optional[str]) -> bool:
    return not uri or "no-cover" in uri or "blankcover" in uri


def with_ids(records: Any) -> List[Dict[str, Any]]:
    """API records that carry an id; anything else is dropped."""
    return [r for r in records or [] if isinstance(r, dict) and r.get("id")]


class GameRef(BaseModel):
    game_id: str
    category_id: str


class Category(BaseModel):
    id: str
    name: str = ""
    kind: Literal["per-game", "per-level"] = "per-game"
    leaderboard_url: Optional[str] = None  # links[rel=leaderboard]

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Category":
        leaderboard = next(
            (link.get("uri") for link in raw.get("links") or [] if link.get("rel") == "leaderboard"),
            None,
        )
        return cls(
            id=raw["id"],
            name=raw.get("name") or "",
            kind="per-level" if raw.get("type") == "per-level" else "per-game",
            leaderboard_url=leaderboard,
        )


class Run(BaseModel):
    id: Optional[str] = None
    player_id: Optional[str] = None
    primary_time_seconds: Optional[float] = None
    video_uri: Optional[str] = None
    weblink: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Run":
        """Build a run from the API's run record (the object nested under ``run``)."""
        videos = raw.get("videos") or {}
        return cls(
            id=raw.get("id"),
            player_id=_first(raw.get("players")).get("id"),
            primary_time_seconds=(raw.get("times") or {}).get("primary_t"),
            video_uri=_first(videos.get("links")).get("uri"),
            weblink=raw.get("weblink"),
        )


class Game(BaseModel):
    id: str
    names: Dict[str, Optional[str]] = {}
    assets: Dict[str, Any] = {}
    released: Optional[Any] = None
    run_count: int = 0  # recent verified runs, set by popularity ranking

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Game":
        return cls(
            id=raw["id"],
            names=raw.get("names") or {},
            assets=raw.get("assets") or {},
            released=raw.get("released"),
        )

    @property
    def name(self) -> str:
        return self.names.get("international") or self.names.get("twitch") or "Unnamed"

    @property
    def release_year(self) -> str:
        return str(self.released)[:4] if self.released else ""

    def _asset(self, key: str) -> Optional[str]:
        return (self.assets.get(key) or {}).get("uri")

    @property
    def cover(self) -> str:
        for key in ("cover-medium", "cover-small", "cover-tiny"):
            uri = self._asset(key)
            if not _is_blank(uri):
                return _https(uri)
        return NO_COVER

    @property
    def background(self) -> str:
        """Theme background when present, else the large cover."""
        for key in ("background", "cover-large"):
            uri = self._asset(key)
            if not _is_blank(uri):
                return _https(uri)
        return NO_COVER
