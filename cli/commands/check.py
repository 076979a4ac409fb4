"""
Check command: run the self-check scenario and report each step
"""

import json
import typer
from rich.console import Console
from rich.table import Table

from eventual.logging_config import setup_logging
from eventual.selfcheck import run_selfcheck

console = Console()


def check_command(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine activity (DEBUG)"),
):
    """
    Run the self-check scenario on a private scheduler.

    Walks all, resolve, reject, a timer-backed deferred and promised through
    one chain. Exits 1 if any step fails.

    Examples:
        eventual check
        eventual check --json
        eventual check --verbose
    """
    setup_logging(level="DEBUG" if verbose else None)
    report = run_selfcheck()

    if json_output:
        output = report.model_dump()
        output["passed"] = report.passed
        print(json.dumps(output, indent=2, default=repr))
    else:
        table = Table(title="Self-check")
        table.add_column("Step", style="green")
        table.add_column("Expected", style="cyan")
        table.add_column("Actual", style="cyan")
        table.add_column("Result", justify="center")

        for check in report.checks:
            result = "[green]✓[/green]" if check.passed else "[red]✗[/red]"
            table.add_row(check.name, repr(check.expected), repr(check.actual), result)

        console.print(table)
        console.print(f"  Scheduler turns: [cyan]{report.turns}[/cyan]")
        console.print(f"  Virtual time: [cyan]{report.elapsed} ms[/cyan]")
        if report.error:
            console.print(f"[red]Error:[/red] {report.error}")
        if report.passed:
            console.print("[green]✓ All checks passed[/green]")
        else:
            console.print("[red]✗ Self-check failed[/red]")

    raise typer.Exit(0 if report.passed else 1)
