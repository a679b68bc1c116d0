import httpx
import pytest

from speedboard.config import Settings
from speedboard.fetch.client import SpeedrunClient


API = "https://www.speedrun.com/api/v1"


def raw_run(run_id, player="p1", seconds=60.0, video=None):
    run = {
        "id": run_id,
        "weblink": f"https://www.speedrun.com/run/{run_id}",
        "players": [{"rel": "user", "id": player}],
        "times": {"primary_t": seconds},
    }
    if video:
        run["videos"] = {"links": [{"uri": video}]}
    return run


def leaderboard_payload(*run_ids):
    return {"data": {"runs": [{"place": i + 1, "run": raw_run(r)} for i, r in enumerate(run_ids)]}}


def category_payload(*ids, kind="per-game", game="game1"):
    return {
        "data": [
            {
                "id": c,
                "name": c.upper(),
                "type": kind,
                "links": [{"rel": "leaderboard", "uri": f"{API}/leaderboards/{game}/category/{c}"}],
            }
            for c in ids
        ]
    }


@pytest.fixture
def make_client():
    """Build a SpeedrunClient whose requests are answered by ``handler``."""

    def _make(handler, **settings):
        return SpeedrunClient(Settings(**settings), transport=httpx.MockTransport(handler))

    return _make
