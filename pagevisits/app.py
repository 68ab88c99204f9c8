# ==============================================================================
# Page Visits CLI
# ==============================================================================
"""
Command-line interface for the page visit analytics toolkit.

Usage:
    pagevisits --help
    pagevisits summary
    pagevisits summary --file visits.json --today 2024-06-30
    pagevisits users --limit 10
    pagevisits user user1@example.com
    pagevisits config show
"""

import logging
import sys

# ==============================================================================
# App Configuration
# ==============================================================================
# Set consistent terminal width for help output formatting
import os

import typer

if "COLUMNS" not in os.environ:
    os.environ["COLUMNS"] = "115"

app = typer.Typer(
    name="pagevisits",
    help="Page visit analytics CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Summary command is imported from pagevisits.cli.summary
from pagevisits.cli.summary import show_summary

app.command("summary")(show_summary)

# User commands are imported from pagevisits.cli.users
from pagevisits.cli.users import user_show, users_list

app.command("users")(users_list)
app.command("user")(user_show)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

from pagevisits.cli.config import config_show

config_app.command("show")(config_show)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    from pydantic import ValidationError

    from pagevisits.utils.config import describe_settings_error, get_settings

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {describe_settings_error(e)}", file=sys.stderr)
        raise SystemExit(1) from e

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Suppress noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    app()


if __name__ == "__main__":
    main()
