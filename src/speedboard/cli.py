from __future__ import annotations

import asyncio
import logging

import typer
from pydantic import ValidationError

from .config import Settings, load_settings
from .core.display import format_time, player_name, trophy_for
from .core.events import CategoryFilters, SearchDebouncer, VideoPopup
from .core.forms import LoginForm, RegisterForm, form_errors
from .core.leaderboard import LeaderboardLoader, LoadState
from .core.links import embed_url, parse_leaderboard_url
from .fetch.catalog import GameCatalog, fetch_popular_games, search_games
from .fetch.client import SpeedrunApiError, SpeedrunClient


app = typer.Typer(add_completion=False, help="Browse speedrun.com games and leaderboards")

MEDALS = {0: "1st", 1: "2nd", 2: "3rd"}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@app.callback()
def main(log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG|INFO|WARNING|ERROR")):
    log_level = log_level.upper().strip()
    if log_level not in LOG_LEVELS:
        typer.echo("--log-level must be one of " + "|".join(LOG_LEVELS), err=True)
        raise typer.Exit(2)
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _settings() -> Settings:
    try:
        return load_settings()
    except ValidationError as e:
        for err in e.errors():
            name = "_".join(str(p) for p in err.get("loc", ())).upper()
            typer.echo(f"SPEEDBOARD_{name}: {err.get('msg', 'invalid')}", err=True)
        raise typer.Exit(2)


def _client(settings: Settings) -> SpeedrunClient:
    return SpeedrunClient(settings)


@app.command("games")
def games(pages: int = typer.Option(1, "--pages", min=1, max=4, help="batches of 50 newest games")):
    """List the newest games in the catalog."""
    settings = _settings()

    async def run():
        async with _client(settings) as client:
            catalog = GameCatalog(client)
            await catalog.fetch_games()
            for _ in range(pages - 1):
                await catalog.load_more()
            return catalog

    catalog = asyncio.run(run())
    if catalog.error:
        typer.echo(catalog.error, err=True)
    for g in catalog.games:
        typer.echo(f"{g.id}\t{g.name}")
    if catalog.has_more:
        typer.echo(f"... more available (--pages {pages + 1})")


@app.command("search")
def search(term: str = typer.Argument(..., help="game name to look for")):
    """Find games by name."""
    settings = _settings()

    async def run():
        # Input settles through the same debounce as interactive search
        debouncer = SearchDebouncer(delay=settings.search_debounce)
        settled = []
        debouncer.search_changed.connect(settled.append)
        debouncer.push(term)
        await debouncer.flush()
        async with _client(settings) as client:
            found = []
            for t in settled:
                found = await search_games(client, t)
            return found

    try:
        found = asyncio.run(run())
    except SpeedrunApiError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    if not found:
        typer.echo("No games found.")
    for g in found:
        typer.echo(f"{g.id}\t{g.name}\t{g.release_year}")


@app.command("popular")
def popular(k: int = typer.Option(20, "--k", min=1, help="number of games to show")):
    """Games with the most recently verified runs."""
    settings = _settings()

    async def run():
        async with _client(settings) as client:
            return await fetch_popular_games(client, limit=k)

    try:
        ranked = asyncio.run(run())
    except SpeedrunApiError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    for i, g in enumerate(ranked, start=1):
        typer.echo(f"{i}. {g.name} ({g.run_count} runs)")


@app.command("leaderboard")
def leaderboard(
    target: str = typer.Argument(..., help="game id, or a .../leaderboards/{game}/category/{category} URL"),
    category: str = typer.Option("", "--category", help="category id to switch to after loading"),
    page: int = typer.Option(1, "--page", min=1, help="page to show (10 runs per page by default)"),
):
    """Show one page of a game's leaderboard."""
    settings = _settings()

    async def run():
        async with _client(settings) as client:
            loader = LeaderboardLoader(client, settings)
            if parse_leaderboard_url(target) is not None:
                await loader.load(target)
            else:
                await loader.load_game(target.strip())
            filters = CategoryFilters(loader.categories, loader.active_category_id or "")
            if category and loader.state is LoadState.LOADED:
                chosen = filters.find(category)
                if chosen is None or not chosen.leaderboard_url:
                    return loader, filters, False
                selected = []
                filters.category_selected.connect(selected.append)
                filters.select(chosen)
                for url in selected:
                    await loader.select_category(url)
            for _ in range(page - 1):
                if not loader.next_page():
                    break
            return loader, filters, True

    loader, filters, found = asyncio.run(run())
    if filters.visible:
        typer.echo("Categories: " + " | ".join(filters.labels()))
    if not found:
        typer.echo(f"Unknown category {category!r}", err=True)
        raise typer.Exit(2)
    if loader.state is LoadState.ERRORED:
        typer.echo(loader.error, err=True)
        raise typer.Exit(1)

    view = loader.view
    if not view.runs:
        typer.echo("No runs.")
        return
    for row, run in enumerate(view.page):
        rank = view.rank_of(row)
        medal = MEDALS[rank] if trophy_for(rank) else f"{rank + 1}."
        video = "  " + embed_url(run.video_uri) if run.video_uri else ""
        typer.echo(f"{medal:>4} {player_name(run):<24} {format_time(run)}{video}")
    typer.echo(f"Page {view.page_index + 1}/{view.page_count}")


@app.command("video")
def video(uri: str = typer.Argument(..., help="run video link")):
    """Print the embeddable player URL for a run video."""
    popup = VideoPopup()
    popup.video_requested.connect(typer.echo)
    popup.open(uri)


@app.command("login")
def login(
    email: str = typer.Option(..., "--email"),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
):
    """Validate login details (no account backend is contacted)."""
    try:
        form = LoginForm(email=email, password=password)
    except ValidationError as e:
        for line in form_errors(e):
            typer.echo(line, err=True)
        raise typer.Exit(2)
    typer.echo(f"Welcome {form.email}!")


@app.command("register")
def register(
    username: str = typer.Option(..., "--username"),
    email: str = typer.Option(..., "--email"),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
    repeat_password: str = typer.Option(..., "--repeat-password", prompt=True, hide_input=True),
):
    """Validate a registration form (no account is created)."""
    try:
        form = RegisterForm(
            username=username, email=email, password=password, repeat_password=repeat_password
        )
    except ValidationError as e:
        for line in form_errors(e):
            typer.echo(line, err=True)
        raise typer.Exit(2)
    typer.echo(f"Registered {form.username}, you can now log in.")


if __name__ == "__main__":
    app()
