# ==============================================================================
# User Commands
# ==============================================================================
"""
User roster and user profile commands for the page visits CLI.
"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from pagevisits.cli.shared import (
    BOX_WIDTH,
    C,
    DATETIME_FORMAT,
    _box_bottom,
    _box_header,
    _box_line,
    _empty_line,
    _section_header_plain,
    fail,
    format_instant,
    load_snapshot,
    truncate,
)

FileOption = Annotated[
    Optional[Path],
    typer.Option("--file", "-f", help="Read visits from a JSON export instead of the API"),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON for scripting")]


# ==============================================================================
# Commands
# ==============================================================================


def users_list(
    file: FileOption = None,
    limit: Annotated[
        Optional[int], typer.Option("--limit", "-n", min=1, help="Show only the top N users")
    ] = None,
    json_output: JsonOption = False,
) -> None:
    """List users ordered by visit count.

    Examples:
        pagevisits users
        pagevisits users --limit 10
        pagevisits users -f visits.json --json
    """
    snapshot = load_snapshot(file, json_output=json_output)
    users = snapshot.users[:limit] if limit else snapshot.users

    if json_output:
        print(json.dumps([user.model_dump(mode="json") for user in users], indent=2))
        return

    if not users:
        print(f"\n  {C.DIM}No users found.{C.RESET}\n")
        return

    console = Console()
    table = Table(
        title=f"Users ({len(snapshot.users)} total)",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Email", justify="left")
    table.add_column("Visits", justify="right")
    table.add_column("Sessions", justify="right")
    table.add_column("First Visit", justify="left")
    table.add_column("Last Visit", justify="left")

    for user in users:
        table.add_row(
            user.email,
            f"{user.visit_count:,}",
            f"{user.session_count:,}",
            format_instant(user.first_visit),
            format_instant(user.last_visit),
        )

    print()
    console.print(table)
    print()


def user_show(
    email: Annotated[str, typer.Argument(help="Email of the user to show")],
    file: FileOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show one user's profile, pages, traffic sources and visit history.

    Examples:
        pagevisits user user1@example.com
        pagevisits user user1@example.com --json
    """
    snapshot = load_snapshot(file, json_output=json_output)
    user = snapshot.get_user(email)
    if user is None:
        fail(f"User not found: {email}", json_output)

    detail = snapshot.get_user_detail(email)

    if json_output:
        print(
            json.dumps(
                {"user": user.model_dump(mode="json"), "detail": detail.model_dump(mode="json")},
                indent=2,
            )
        )
        return

    W = BOX_WIDTH

    print()
    print(_box_header(f"USER PROFILE: {truncate(email, 40)}", W))
    print(_empty_line(W))
    print(_box_line(f"  {'Total Visits':<26}{user.visit_count:>12,}", W))
    print(_box_line(f"  {'First Visit':<26}{format_instant(user.first_visit):>12}", W))
    print(_box_line(f"  {'Last Visit':<26}{format_instant(user.last_visit):>12}", W))
    print(_box_line(f"  {'Unique Sessions':<26}{user.session_count:>12,}", W))
    print(_empty_line(W))

    print(_section_header_plain("Pages Visited", W))
    for page in detail.pages:
        print(_box_line(f"  {truncate(page.page, 50):<52}{page.count:>10,}", W))
    print(_empty_line(W))

    print(_section_header_plain("Traffic Sources", W))
    for referrer in detail.referrers:
        share = f"{referrer.count:,} ({referrer.percentage}%)"
        print(_box_line(f"  {truncate(referrer.source, 44):<46}{share:>16}", W))
    print(_empty_line(W))
    print(_box_bottom(W))

    console = Console()
    table = Table(title="Visit History", show_header=True, header_style="bold")
    table.add_column("Page", justify="left")
    table.add_column("Title", justify="left")
    table.add_column("Visit Time", justify="left")
    table.add_column("Referrer", justify="left")
    table.add_column("Session", justify="left")

    for visit in detail.visits:
        table.add_row(
            visit.page_url,
            visit.page_title,
            format_instant(visit.visited_at, DATETIME_FORMAT),
            visit.referrer or snapshot.policy.direct_label,
            f"{(visit.session_id or 'Unknown')[:10]}...",
        )

    print()
    console.print(table)
    print()
