"""Command-line interface for menubot."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer

from menubot.clock import WEEKDAY_NAMES
from menubot.config import get_settings, load_sites
from menubot.errors import ConfigurationError
from menubot.logging_utils import configure_logging
from menubot.menu.fetcher import HttpDocumentFetcher
from menubot.menu.query import MenuAnswerer

app = typer.Typer(help="Daily menu aggregation bot commands.")


def _load_sites_or_exit(path: Path):
    try:
        return load_sites(path)
    except ConfigurationError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def menu(
    tomorrow: bool = typer.Option(False, "--tomorrow", help="Show tomorrow's menus."),
    sites_path: Optional[Path] = typer.Option(None, "--sites", help="Override the sites file."),
) -> None:
    """
    Fetch every configured site and print the answer the bot would send.
    """

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format, settings.secrets())
    sites = _load_sites_or_exit(sites_path or settings.sites_path)
    answerer = MenuAnswerer(
        sites=sites,
        fetcher=HttpDocumentFetcher(timeout=settings.fetch_timeout),
    )
    typer.echo(asyncio.run(answerer.answer(tomorrow)))


@app.command("check-sites")
def check_sites(
    sites_path: Optional[Path] = typer.Argument(None, help="Sites file to validate."),
) -> None:
    """Validate the sites file and list the weekdays each site covers."""

    path = sites_path or get_settings().sites_path
    sites = _load_sites_or_exit(path)
    for site in sites:
        days = ", ".join(WEEKDAY_NAMES[index] for index, _ in site.active_weekdays()) or "none"
        typer.echo(f"{site.name}: {site.url} [{days}]")
    typer.echo(f"{len(sites)} site(s) OK.")


@app.command()
def serve(
    http: bool = typer.Option(False, "--http", help="Serve plain HTTP instead of HTTPS."),
    host: Optional[str] = typer.Option(None, "--host", help="Bind address."),
) -> None:
    """Run the chat webhook server."""

    from menubot.server.run import serve as run_server

    run_server(http=http, host=host)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the `menubot` console script."""
    app(prog_name="menubot", args=argv)


if __name__ == "__main__":
    main()
