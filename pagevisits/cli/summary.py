# ==============================================================================
# Summary Command
# ==============================================================================
"""
Analytics summary command for the page visits CLI.

Displays global counts, top pages, top traffic sources and the daily visit
histogram, followed by the most recent page visits.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from pagevisits.cli.shared import (
    BOX_WIDTH,
    DATETIME_FORMAT,
    C,
    _box_bottom,
    _box_header,
    _box_line,
    _empty_line,
    _section_header_plain,
    format_instant,
    load_snapshot,
    truncate,
)


# ==============================================================================
# Commands
# ==============================================================================


def show_summary(
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="Read visits from a JSON export instead of the API"),
    ] = None,
    today: Annotated[
        Optional[datetime],
        typer.Option("--today", help="Last day of the daily histogram", formats=["%Y-%m-%d"]),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output as JSON for scripting")
    ] = False,
) -> None:
    """Show the analytics summary.

    Displays total visits, unique users/pages/sessions, the top pages, the
    top traffic sources, visits per day for the last 30 days and the 10
    most recent page visits.

    Examples:
        pagevisits summary                     # Fetch from the API
        pagevisits summary -f visits.json      # Use a JSON export
        pagevisits summary --json              # JSON output for scripting
    """
    snapshot = load_snapshot(file, today.date() if today else None, json_output)
    summary = snapshot.summary
    recent = snapshot.recent_visits()

    if json_output:
        output = summary.model_dump(mode="json")
        output["recent_visits"] = [visit.model_dump(mode="json") for visit in recent]
        print(json.dumps(output, indent=2))
        return

    W = BOX_WIDTH

    print()
    print(_box_header("PAGE VISIT ANALYTICS", W))
    print(_empty_line(W))
    print(_box_line(f"  {'Total Visits':<26}{summary.total_visits:>12,}", W))
    print(_box_line(f"  {'Unique Users':<26}{summary.unique_users:>12,}", W))
    print(_box_line(f"  {'Unique Pages':<26}{summary.unique_pages:>12,}", W))
    print(_box_line(f"  {'Unique Sessions':<26}{summary.unique_sessions:>12,}", W))
    print(_empty_line(W))

    print(_section_header_plain("Top Pages", W))
    if not summary.top_pages:
        print(_box_line(f"  {C.DIM}No page visits{C.RESET}", W))
    for page in summary.top_pages:
        label = truncate(f"{page.url} ({page.title})" if page.title else page.url, 50)
        print(_box_line(f"  {label:<52}{page.visits:>10,}", W))
    print(_empty_line(W))

    print(_section_header_plain("Traffic Sources", W))
    if not summary.referrer_data:
        print(_box_line(f"  {C.DIM}No page visits{C.RESET}", W))
    for referrer in summary.referrer_data:
        print(_box_line(f"  {truncate(referrer.source, 50):<52}{referrer.visits:>10,}", W))
    print(_empty_line(W))
    print(_box_bottom(W))

    console = Console()
    table = Table(
        title=f"Visits by Day (last {len(summary.visits_by_day)} days)",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Date", justify="left")
    table.add_column("Visits", justify="right")
    for day in summary.visits_by_day:
        table.add_row(day.day.isoformat(), f"{day.visits:,}")

    print()
    console.print(table)
    print()

    recent_table = Table(title="Recent Page Visits", show_header=True, header_style="bold")
    recent_table.add_column("User", justify="left")
    recent_table.add_column("Page", justify="left")
    recent_table.add_column("Title", justify="left")
    recent_table.add_column("Visit Time", justify="left")
    recent_table.add_column("Referrer", justify="left")
    for visit in recent:
        recent_table.add_row(
            visit.email or "",
            visit.page_url,
            truncate(visit.page_title, 30),
            format_instant(visit.visited_at, DATETIME_FORMAT),
            snapshot.policy.referrer_label(visit.referrer),
        )

    if not recent:
        print(f"{C.DIM}No recent page visits{C.RESET}")
    else:
        console.print(recent_table)
    print()
