#!/usr/bin/env python3
"""
eventual CLI - promise engine tooling

Main entrypoint for the eventual command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import check

# Initialize Typer app
app = typer.Typer(
    name="eventual",
    help="Single-threaded promise engine tooling",
    add_completion=False,
)

# Console for rich output
console = Console()

# Add standalone commands
app.command("check")(check.check_command)


@app.command()
def version():
    """Show version information."""
    from cli import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]eventual[/bold]", f"v{__version__}")
    table.add_row("Scheduler", "cooperative, single-threaded")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
