"""Rich components for the CLI.

Kept apart from the commands so tables/panels can be reused.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.domain.models import EventsPage
from core.errors import HttpError, TrackingError, ValidationError


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    return str(value)


def build_events_table(page: EventsPage, *, title: str = "Events") -> Table:
    """Table with one row per event."""

    table = Table(title=title)
    table.add_column("Tracking ID", style="cyan", no_wrap=True)
    table.add_column("Rule ID", style="white")
    table.add_column("Type", style="green")
    table.add_column("Timestamp", style="magenta")
    for event in page.data:
        table.add_row(
            _cell(event.tracking_id),
            _cell(event.rule_id),
            _cell(event.event_type),
            _cell(event.timestamp),
        )
    return table


def print_events_page(console: Console, page: EventsPage, *, title: str = "Events") -> None:
    if not page.data:
        console.print("[dim]No events.[/dim]")
    else:
        console.print(build_events_table(page, title=title))
    if page.page_token:
        console.print(Text.assemble(("Next page token: ", "bold"), (page.page_token, "yellow")))


def print_error(console: Console, exc: TrackingError) -> None:
    """One red line, plus the upstream error body when there is one."""

    if isinstance(exc, ValidationError):
        console.print(Text.assemble(("Invalid input: ", "red"), str(exc)))
        return
    console.print(Text.assemble(("Request failed: ", "red"), str(exc)))
    if isinstance(exc, HttpError) and exc.body:
        if isinstance(exc.body, str):
            console.print(Text(exc.body, style="dim"))
        else:
            console.print(exc.body, style="dim", markup=False)
