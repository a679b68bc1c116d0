import httpx
import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from conftest import category_payload, leaderboard_payload
from speedboard import cli
from speedboard.cli import app
from speedboard.fetch.client import SpeedrunClient
from speedboard.config import BadRequestPolicy, load_settings
from speedboard.core.forms import LoginForm, RegisterForm, form_errors


runner = CliRunner()


def test_video_command():
    result = runner.invoke(app, ["video", "https://www.youtube.com/watch?v=xyz"])
    assert result.exit_code == 0
    assert result.output.strip() == "https://www.youtube.com/embed/xyz?autoplay=1"


def test_login_command():
    ok = runner.invoke(app, ["login", "--email", "a@b.co", "--password", "hunter2"])
    assert ok.exit_code == 0
    assert "Welcome a@b.co!" in ok.output

    bad = runner.invoke(app, ["login", "--email", "nope", "--password", "abc"])
    assert bad.exit_code == 2


def test_register_command_rejects_mismatch():
    result = runner.invoke(
        app,
        ["register", "--username", "runner", "--email", "r@x.io", "--password", "secret1", "--repeat-password", "secret2"],
    )
    assert result.exit_code == 2


def test_register_form():
    form = RegisterForm(username="abc", email="a@b.c", password="123456", repeat_password="123456")
    assert form.username == "abc"
    with pytest.raises(ValidationError) as exc:
        RegisterForm(username="ab", email="a@b.c", password="123", repeat_password="123")
    fields = {line.split(":")[0] for line in form_errors(exc.value)}
    assert fields == {"username", "password"}


def test_register_form_password_mismatch():
    with pytest.raises(ValidationError) as exc:
        RegisterForm(username="abc", email="a@b.c", password="123456", repeat_password="654321")
    assert any("passwords do not match" in line for line in form_errors(exc.value))


def test_login_form_email():
    with pytest.raises(ValidationError):
        LoginForm(email="  ", password="abcd")
    assert LoginForm(email=" a@b.c ", password="abcd").email == "a@b.c"


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("SPEEDBOARD_PAGE_SIZE", "25")
    monkeypatch.setenv("SPEEDBOARD_BAD_REQUEST_POLICY", "error")
    monkeypatch.setenv("SPEEDBOARD_TIMEOUT", " ")
    settings = load_settings()
    assert settings.page_size == 25
    assert settings.bad_request_policy is BadRequestPolicy.ERROR
    assert settings.timeout is None


def test_unknown_log_level_is_rejected():
    result = runner.invoke(app, ["--log-level", "LOUD", "video", "https://youtu.be/x"])
    assert result.exit_code == 2
    assert "--log-level must be one of" in result.output


def test_bad_environment_setting_exits_cleanly(monkeypatch):
    monkeypatch.setenv("SPEEDBOARD_PAGE_SIZE", "abc")
    result = runner.invoke(app, ["leaderboard", "g"])
    assert result.exit_code == 2
    assert "SPEEDBOARD_PAGE_SIZE" in result.output
    assert not isinstance(result.exception, ValidationError)


def stub_api(monkeypatch, handler):
    monkeypatch.setattr(
        cli, "_client", lambda settings: SpeedrunClient(settings, transport=httpx.MockTransport(handler))
    )


def test_leaderboard_switches_category_through_filters(monkeypatch):
    calls = []

    def handler(request):
        calls.append(request.url.path)
        if request.url.path.endswith("/categories"):
            return httpx.Response(200, json=category_payload("any", "hundo", game="g"))
        if request.url.path.endswith("/category/hundo"):
            return httpx.Response(200, json=leaderboard_payload("h0", "h1"))
        return httpx.Response(200, json=leaderboard_payload("a0"))

    stub_api(monkeypatch, handler)
    result = runner.invoke(app, ["leaderboard", "g", "--category", "hundo"])

    assert result.exit_code == 0, result.output
    assert "Categories: ANY | [HUNDO]" in result.output
    assert "1st" in result.output and "2nd" in result.output
    assert calls[-1] == "/api/v1/leaderboards/g/category/hundo"


def test_leaderboard_unknown_category(monkeypatch):
    def handler(request):
        if request.url.path.endswith("/categories"):
            return httpx.Response(200, json=category_payload("any", game="g"))
        return httpx.Response(200, json=leaderboard_payload("a0"))

    stub_api(monkeypatch, handler)
    result = runner.invoke(app, ["leaderboard", "g", "--category", "nope"])
    assert result.exit_code == 2


def test_search_command_settles_term(monkeypatch):
    seen = []

    def handler(request):
        seen.append(request.url.params["name"])
        return httpx.Response(200, json={"data": [{"id": "sm64", "names": {"international": "Super Mario 64"}}]})

    monkeypatch.setenv("SPEEDBOARD_SEARCH_DEBOUNCE", "0")
    stub_api(monkeypatch, handler)
    result = runner.invoke(app, ["search", "mario"])

    assert result.exit_code == 0, result.output
    assert seen == ["mario"]
    assert "Super Mario 64" in result.output
