from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table


def print_results(results: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """
    Render scenario results as a rich table.

    Failed scenarios are listed last with their error message.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    passed = sum(1 for r in results if r.get("passed"))
    table = Table(
        title="Write Timestamp Verification",
        box=box.ROUNDED,
        caption=f"{passed}/{len(results)} passed",
    )

    table.add_column("Scenario", style="cyan", no_wrap=True)
    table.add_column("Write", style="magenta")
    table.add_column("Mode", style="blue")
    table.add_column("Ids", justify="right")
    table.add_column("Timestamp (µs)", justify="right", style="green")
    table.add_column("Rows", justify="right")
    table.add_column("Duration (s)", justify="right", style="yellow")
    table.add_column("Result", justify="center")

    # Passing scenarios first, then by name
    ordered = sorted(results, key=lambda r: (not r.get("passed"), r.get("scenario", "")))

    for res in ordered:
        ids = ", ".join(str(i) for i in res.get("ids", []))
        timestamp = res.get("timestamp")
        duration = res.get("duration_seconds") or 0.0
        if res.get("passed"):
            outcome = "[bold green]PASS[/bold green]"
        else:
            outcome = f"[bold red]FAIL[/bold red] {res.get('error', '')}"

        table.add_row(
            res.get("scenario", "Unknown"),
            res.get("write", "-"),
            res.get("mode", "-"),
            ids,
            str(timestamp) if timestamp is not None else "-",
            str(res.get("rows_verified", 0)),
            f"{duration:.3f}",
            outcome,
        )

    console.print(table)
