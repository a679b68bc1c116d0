import pytest

from conftest import raw_run
from speedboard.core.display import ANONYMOUS, NO_TIME, TROPHIES, format_time, player_name, trophy_for
from speedboard.core.links import embed_url, parse_leaderboard_url
from speedboard.core.models import Category, Game, Run


def test_format_time_truncates_to_seconds():
    assert format_time(Run(primary_time_seconds=83)) == "00:01:23"
    assert format_time(Run(primary_time_seconds=3723.9)) == "01:02:03"


def test_format_time_does_not_wrap_past_a_day():
    assert format_time(Run(primary_time_seconds=25 * 3600 + 5)) == "25:00:05"


@pytest.mark.parametrize("seconds", [None, 0])
def test_format_time_placeholder(seconds):
    assert format_time(Run(primary_time_seconds=seconds)) == NO_TIME


def test_run_from_api_reads_primary_time():
    run = Run.from_api({"times": {"primary_t": 83}})
    assert format_time(run) == "00:01:23"
    assert run.player_id is None
    assert run.video_uri is None


def test_player_name():
    assert player_name(Run.from_api(raw_run("r", player="zfg"))) == "zfg"
    assert player_name(Run.from_api({"players": []})) == ANONYMOUS


def test_trophies():
    assert [trophy_for(i) for i in range(4)] == [TROPHIES[0], TROPHIES[1], TROPHIES[2], None]
    assert trophy_for(57) is None


def test_parse_leaderboard_url():
    ref = parse_leaderboard_url("https://www.speedrun.com/api/v1/leaderboards/ABCD/category/WXYZ")
    assert (ref.game_id, ref.category_id) == ("ABCD", "WXYZ")
    assert parse_leaderboard_url("leaderboards/ABCD/category/WXYZ?top=10").category_id == "WXYZ"
    assert parse_leaderboard_url("https://www.speedrun.com/api/v1/games/ABCD") is None
    assert parse_leaderboard_url("") is None


@pytest.mark.parametrize(
    "uri,expected",
    [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=10", "https://www.youtube.com/embed/dQw4w9WgXcQ?autoplay=1"),
        ("https://youtu.be/abc123", "https://www.youtube.com/embed/abc123?autoplay=1"),
        ("https://www.twitch.tv/videos/123", "https://www.twitch.tv/videos/123"),
    ],
)
def test_embed_url(uri, expected):
    assert embed_url(uri) == expected


def test_run_video_is_first_link():
    run = Run.from_api(raw_run("r", video="https://youtu.be/first"))
    assert run.video_uri == "https://youtu.be/first"


def test_category_from_api():
    cat = Category.from_api(
        {
            "id": "c1",
            "name": "Any%",
            "type": "per-level",
            "links": [{"rel": "game", "uri": "g"}, {"rel": "leaderboard", "uri": "lb"}],
        }
    )
    assert cat.kind == "per-level"
    assert cat.leaderboard_url == "lb"


def test_game_cover_and_name_fallbacks():
    game = Game.from_api(
        {
            "id": "g",
            "names": {"international": None, "twitch": "Twitch Name"},
            "assets": {
                "cover-medium": {"uri": "https://x/no-cover.png"},
                "cover-small": {"uri": "http://x/small.png"},
            },
            "released": 1998,
        }
    )
    assert game.name == "Twitch Name"
    assert game.cover == "https://x/small.png"
    assert game.background == "assets/imgs/no-cover.png"
    assert game.release_year == "1998"
    assert Game(id="h").name == "Unnamed"
