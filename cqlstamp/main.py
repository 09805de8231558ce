from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List

import typer

from cqlstamp.config import get_settings
from cqlstamp.demos import run_person_demo, run_tweet_demo
from cqlstamp.errors import HarnessError
from cqlstamp.infrastructure.session_factory import connect
from cqlstamp.orchestrator import RunConfig, available_scenarios, run_scenarios
from cqlstamp.reporter import print_results
from cqlstamp.schema import SchemaManager, qualified_table
from cqlstamp.utils.logging import configure_logging
from cqlstamp.verifier import ConsistencyVerifier

app = typer.Typer(help="Cassandra write-timestamp verification harness.")

DEMOS = ("tweet", "person")


def _setup_logging() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    auth = settings.cassandra_username or "-"
    typer.echo(
        f"hosts={','.join(settings.contact_points)}:{settings.cassandra_port} "
        f"user={auth} protocol=v{settings.protocol_version} | "
        f"table={qualified_table(settings)} consistency={settings.consistency} "
        f"compaction={settings.compaction_class}"
    )


@app.command()
def reset() -> None:
    """
    Create the keyspace if needed, then drop and recreate the harness table.
    """
    _setup_logging()
    settings = get_settings()
    with connect(settings, use_keyspace=False) as harness:
        schema = SchemaManager(harness, settings)
        schema.ensure_keyspace()
        schema.reset_table()
    typer.echo(f"Reset {qualified_table(settings)}.")


@app.command()
def run(
    scenario: str = typer.Option(
        "all",
        "--scenario",
        "--scenarios",
        "-s",
        help="Scenario to run (e.g., query_with_timestamp, batch_logged_using_timestamp, all, list).",
    ),
    reset_table: bool = typer.Option(
        True, "--reset/--no-reset", help="Drop and recreate the table before running."
    ),
    persist: bool = typer.Option(True, "--persist/--no-persist", help="Write JSON results."),
    results_dir: Path = typer.Option(Path("results"), "--results-dir", help="Results directory."),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON instead of a table."),
) -> None:
    """
    Run one or all scenarios; exits non-zero if any scenario fails.
    """
    _setup_logging()

    if scenario == "list":
        typer.echo("Available scenarios: " + ", ".join(available_scenarios()))
        return
    if scenario != "all" and scenario not in available_scenarios():
        raise typer.BadParameter(
            f"Unknown scenario '{scenario}'. Available: {', '.join(available_scenarios())}",
            param_hint="--scenario",
        )

    results = run_scenarios(
        RunConfig(
            scenario_names=["all"] if scenario == "all" else [scenario],
            reset=reset_table,
            persist=persist,
            results_dir=results_dir,
        )
    )
    if as_json:
        typer.echo(json.dumps(results, indent=2))
    else:
        print_results(results)
    if not all(result.get("passed") for result in results):
        raise typer.Exit(code=1)


@app.command()
def verify(
    ids: List[int] = typer.Argument(..., help="Record ids to read back."),
    timestamp: int = typer.Option(..., "--timestamp", "-t", help="Expected write time (µs)."),
) -> None:
    """
    Check stored and write-time timestamps of existing rows.
    """
    _setup_logging()
    settings = get_settings()
    with connect(settings) as harness:
        report = ConsistencyVerifier(harness, settings).verify(timestamp, ids)
    typer.echo(f"OK: {report.row_count} row(s) at timestamp {report.expected_timestamp}.")


@app.command()
def demo(name: str = typer.Argument(..., help="Example program to run: tweet or person.")) -> None:
    """
    Run one of the example programs against the configured keyspace.
    """
    if name not in DEMOS:
        raise typer.BadParameter(f"Unknown demo '{name}'. Available: {', '.join(DEMOS)}")
    _setup_logging()
    settings = get_settings()
    with connect(settings) as harness:
        if name == "tweet":
            outcome = run_tweet_demo(harness, settings)
        else:
            outcome = run_person_demo(harness, settings)
    typer.echo(json.dumps(outcome, indent=2, default=str))


def main() -> None:
    try:
        app()
    except HarnessError as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
