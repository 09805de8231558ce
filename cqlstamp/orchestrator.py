"""
Orchestrator for running timestamp scenarios and persisting results.

Usage (example from CLI):
    from cqlstamp.orchestrator import RunConfig, run_scenarios

    results = run_scenarios(RunConfig(scenario_names=["query_with_timestamp"]))
    print(results)

Scenarios run sequentially against one session, each on its own id pair.
Outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Literal, Optional, Sequence

from cqlstamp.config import Settings, get_settings
from cqlstamp.infrastructure.session_factory import HarnessSession, connect
from cqlstamp.scenarios.abstract import Scenario, ScenarioResult
from cqlstamp.scenarios.batch import (
    BatchLoggedUsingTimestampScenario,
    BatchLoggedWithTimestampScenario,
    BatchUnloggedUsingTimestampScenario,
    BatchUnloggedWithTimestampScenario,
)
from cqlstamp.scenarios.single import QueryUsingTimestampScenario, QueryWithTimestampScenario
from cqlstamp.schema import SchemaManager
from cqlstamp.utils.logging import get_logger

log = get_logger(__name__)

FailurePolicy = Literal["tolerant", "strict"]


@dataclass
class RunConfig:
    """
    Parameters for one orchestrator run.

    scenario_names : names to execute; None or ["all"] runs every scenario.
    reset : ensure the keyspace and drop/recreate the table first.
    persist : write JSON results under `results_dir`.
    failure_policy : "tolerant" records failures and continues, "strict" re-raises.
    """

    scenario_names: Optional[Sequence[str]] = None
    reset: bool = True
    persist: bool = True
    results_dir: Path | str = "results"
    failure_policy: FailurePolicy = "tolerant"


def _scenario_factories() -> Dict[str, Callable[[], Scenario]]:
    """Registry of available scenarios."""
    return {
        "query_with_timestamp": lambda: QueryWithTimestampScenario(),
        "query_using_timestamp": lambda: QueryUsingTimestampScenario(),
        "batch_logged_with_timestamp": lambda: BatchLoggedWithTimestampScenario(),
        "batch_unlogged_with_timestamp": lambda: BatchUnloggedWithTimestampScenario(),
        "batch_logged_using_timestamp": lambda: BatchLoggedUsingTimestampScenario(),
        "batch_unlogged_using_timestamp": lambda: BatchUnloggedUsingTimestampScenario(),
    }


def available_scenarios() -> List[str]:
    """List available scenario names."""
    return sorted(_scenario_factories().keys())


def _resolve_scenario(name: str) -> Scenario:
    factories = _scenario_factories()
    if name not in factories:
        raise ValueError(f"Unknown scenario '{name}'. Available: {', '.join(sorted(factories))}")
    return factories[name]()


def _resolve_names(names: Optional[Sequence[str]]) -> List[str]:
    resolved = list(names) if names is not None else ["all"]
    if len(resolved) == 1 and resolved[0] == "all":
        return available_scenarios()
    for name in resolved:
        _resolve_scenario(name)
    return resolved


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    with latest_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    with archive_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def _timed_execute(
    scenario: Scenario,
    harness: HarnessSession,
    settings: Settings,
    failure_policy: FailurePolicy,
) -> dict:
    log.info(f"[SCENARIO START] {scenario.name}", extra={"scenario": scenario.name})
    start_time = time.perf_counter()
    try:
        result = scenario.execute(harness, settings)
        log.info(
            f"[SCENARIO PASSED] {scenario.name}",
            extra={"scenario": scenario.name, "timestamp": result.get("timestamp")},
        )
    except Exception as exc:  # noqa: BLE001 - tolerant mode records failures
        log.exception(f"[SCENARIO FAILED] {scenario.name}", extra={"scenario": scenario.name})
        if failure_policy == "strict":
            raise
        result = ScenarioResult(
            scenario=scenario.name,
            ids=[scenario.first_id, scenario.first_id + 1],
            passed=False,
            rows_verified=0,
            error=str(exc),
            notes="Scenario failed in tolerant mode; run continued.",
            extra={"error_type": type(exc).__name__, "failure_policy": failure_policy},
        )

    merged = dict(result)
    merged.setdefault("duration_seconds", time.perf_counter() - start_time)
    merged["duration_seconds"] = round(merged["duration_seconds"], 4)
    return merged


def run_scenarios(
    config: Optional[RunConfig] = None,
    settings: Optional[Settings] = None,
    harness: Optional[HarnessSession] = None,
) -> List[dict]:
    """
    Run one or more scenarios and optionally persist the results.

    Parameters
    ----------
    config : RunConfig | None
        What to run and how; defaults to every scenario with a table reset.
    settings : Settings | None
        Cluster/schema settings. Defaults to the cached environment settings.
    harness : HarnessSession | None
        An already open session. When omitted, one is opened here and closed
        before returning.

    Returns
    -------
    List[dict]
        One result dictionary per scenario, in execution order.
    """
    config = config or RunConfig()
    settings = settings or get_settings()
    names = _resolve_names(config.scenario_names)

    owns_session = harness is None
    if harness is None:
        harness = connect(settings, use_keyspace=not config.reset)

    results: List[dict] = []
    try:
        if config.reset:
            schema = SchemaManager(harness, settings)
            schema.ensure_keyspace()
            schema.reset_table()

        for index, name in enumerate(names, start=1):
            log.info(
                f"[RUN {index}/{len(names)}] {name}",
                extra={"scenario": name, "run": index, "total": len(names)},
            )
            results.append(_timed_execute(_resolve_scenario(name), harness, settings, config.failure_policy))
    finally:
        if owns_session:
            harness.close()

    passed = sum(1 for result in results if result.get("passed"))
    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "keyspace": settings.keyspace,
        "table": settings.table_name,
        "consistency": settings.consistency,
        "scenarios": names,
        "passed": passed,
        "failed": len(results) - passed,
        "results": results,
    }

    if config.persist:
        _persist_results(payload, Path(config.results_dir))

    log.info(
        f"[ORCHESTRATOR COMPLETE] {passed}/{len(results)} scenario(s) passed",
        extra={"scenarios": names, "passed": passed, "failed": len(results) - passed},
    )

    return results


__all__ = [
    "RunConfig",
    "available_scenarios",
    "run_scenarios",
]
