"""`tracking-events` command line (Typer + Rich)."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.logging import RichHandler

from adapters.http_client import build_async_client
from adapters.json_exporter import dumps_body, export_body_json
from cli import doctor
from cli.ui_components import print_error, print_events_page
from core.config import AppSettings
from core.domain.models import EventsPage, RequestOptions, ResponseBody
from core.errors import HttpError, ValidationError
from core.services.events import EventsClient, build_events_client

app = typer.Typer(no_args_is_help=True, help="Read events from the tracking API.")
events_app = typer.Typer(no_args_is_help=True, help="List and inspect events.")
app.add_typer(events_app, name="events")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

log = logging.getLogger(__name__)

TokenOption = typer.Option(None, "--token", "-t", help="Access token (default: TRACKING_TOKEN).")
CountOption = typer.Option(None, "--count", "-c", min=1, help="Events per page.")
PageTokenOption = typer.Option(None, "--page-token", "-p", help="Token of the page to fetch.")
JsonOption = typer.Option(False, "--json", help="Print the raw response body as JSON.")
OutputOption = typer.Option(None, "--output", "-o", help="Also write the raw body to this JSON file.")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP traffic (DEBUG)."),
) -> None:
    try:
        settings = AppSettings()
    except PydanticValidationError as exc:
        _err_console.print("[red]Invalid configuration:[/red]")
        _err_console.print(str(exc), markup=False, highlight=False)
        raise typer.Exit(code=1) from exc
    configure_logging("DEBUG" if verbose else settings.log_level)


def _request_options(
    settings: AppSettings,
    token: Optional[str],
    count: Optional[int],
    page_token: Optional[str],
) -> RequestOptions:
    return RequestOptions(
        token=token or settings.token,
        count=count or settings.default_count,
        page_token=page_token,
    )


def _run(
    call: Callable[[EventsClient], Awaitable[ResponseBody]],
    *,
    settings: AppSettings,
    as_json: bool,
    output: Optional[Path],
    title: str,
) -> None:
    async def _go() -> ResponseBody:
        async with build_async_client(settings) as http:
            return await call(build_events_client(http, settings))

    try:
        body = asyncio.run(_go())
    except ValidationError as exc:
        print_error(_err_console, exc)
        raise typer.Exit(code=1) from exc
    except HttpError as exc:
        print_error(_err_console, exc)
        raise typer.Exit(code=2) from exc

    if output is not None:
        path = export_body_json(body=body, output_path=output)
        log.info("Wrote %s", path)

    if as_json:
        typer.echo(dumps_body(body), nl=False)
        return
    print_events_page(_console, EventsPage.from_body(body), title=title)


@events_app.command("list")
def list_events(
    token: Optional[str] = TokenOption,
    count: Optional[int] = CountOption,
    page_token: Optional[str] = PageTokenOption,
    as_json: bool = JsonOption,
    output: Optional[Path] = OutputOption,
) -> None:
    """List all events available to the user."""

    settings = AppSettings()
    options = _request_options(settings, token, count, page_token)
    _run(lambda c: c.list(options), settings=settings, as_json=as_json, output=output, title="Events")


@events_app.command("device")
def device_events(
    tracking_id: str = typer.Argument(..., help="ID of the tracker."),
    token: Optional[str] = TokenOption,
    count: Optional[int] = CountOption,
    page_token: Optional[str] = PageTokenOption,
    as_json: bool = JsonOption,
    output: Optional[Path] = OutputOption,
) -> None:
    """Events generated by one device."""

    settings = AppSettings()
    options = _request_options(settings, token, count, page_token)
    _run(
        lambda c: c.get_by_device(tracking_id, options),
        settings=settings,
        as_json=as_json,
        output=output,
        title=f"Events for device {tracking_id}",
    )


@events_app.command("rule")
def rule_events(
    rule_id: str = typer.Argument(..., help="ID of the rule."),
    token: Optional[str] = TokenOption,
    count: Optional[int] = CountOption,
    page_token: Optional[str] = PageTokenOption,
    as_json: bool = JsonOption,
    output: Optional[Path] = OutputOption,
) -> None:
    """Events generated by one rule."""

    settings = AppSettings()
    options = _request_options(settings, token, count, page_token)
    _run(
        lambda c: c.get_by_rule(rule_id, options),
        settings=settings,
        as_json=as_json,
        output=output,
        title=f"Events for rule {rule_id}",
    )


@events_app.command("details")
def event_details(
    tracking_id: str = typer.Argument(..., help="ID of the tracker."),
    rule_id: str = typer.Argument(..., help="ID of the rule."),
    timestamp: str = typer.Argument(..., help="Time the event happened."),
    token: Optional[str] = TokenOption,
    count: Optional[int] = CountOption,
    page_token: Optional[str] = PageTokenOption,
    as_json: bool = JsonOption,
    output: Optional[Path] = OutputOption,
) -> None:
    """Details of a single event."""

    settings = AppSettings()
    options = _request_options(settings, token, count, page_token)
    _run(
        lambda c: c.get_details(tracking_id, rule_id, timestamp, options),
        settings=settings,
        as_json=as_json,
        output=output,
        title="Event details",
    )


def run() -> None:
    app()


if __name__ == "__main__":
    run()
