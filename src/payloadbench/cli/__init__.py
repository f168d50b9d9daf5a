"""Command-line interface for payloadbench.

Provides commands for:
- Running benchmark trials
- Aggregating stored reports
- Listing stored reports
"""

from __future__ import annotations

# Load .env file BEFORE any payloadbench imports (constants reads env vars at import time)
from dotenv import load_dotenv

load_dotenv()  # Loads from .env in current directory or parents

# ruff: noqa: E402 - imports must come after load_dotenv()
import os
from typing import Annotated

import typer

from payloadbench import __version__
from payloadbench.cli.display import console
from payloadbench.logging import VerbosityType, setup_logging

app = typer.Typer(
    name="payloadbench",
    help="Token and latency benchmark for JSON, TOON and Markdown payloads",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"payloadbench v{__version__}")
        raise typer.Exit()


@app.callback()  # type: ignore[misc]
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable full logs with timestamps")
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Minimal output (warnings only)")
    ] = False,
) -> None:
    """Token and latency benchmark for JSON, TOON and Markdown payloads."""
    verbosity: VerbosityType
    if quiet:
        verbosity = "quiet"
    elif verbose:
        verbosity = "verbose"
    else:
        verbosity = "normal"

    os.environ["PAYLOADBENCH_VERBOSITY"] = verbosity
    setup_logging(verbosity=verbosity)


def _register_commands() -> None:
    """Register all commands with the app."""
    from payloadbench.cli import reports, run

    app.command("run")(run.run_cmd)
    app.command("aggregate")(reports.aggregate_cmd)
    app.command("list")(reports.list_cmd)


_register_commands()


__all__ = ["app", "console", "main"]

if __name__ == "__main__":
    app()
