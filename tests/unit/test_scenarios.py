from __future__ import annotations

import pytest

from cqlstamp.config import Settings
from cqlstamp.domain.models import TimestampMode
from cqlstamp.orchestrator import _resolve_scenario, available_scenarios
from cqlstamp.scenarios import (
    AbstractScenario,
    BatchLoggedUsingTimestampScenario,
    BatchUnloggedWithTimestampScenario,
    QueryWithTimestampScenario,
    Scenario,
)
from cqlstamp.schema import SchemaManager

TIMESTAMP = 1_712_345_678_901_234

EXPECTED_IDS = {
    "query_with_timestamp": [1, 2],
    "query_using_timestamp": [3, 4],
    "batch_logged_with_timestamp": [5, 6],
    "batch_unlogged_with_timestamp": [7, 8],
    "batch_logged_using_timestamp": [9, 10],
    "batch_unlogged_using_timestamp": [11, 12],
}


def test_registry_covers_all_scenarios() -> None:
    assert available_scenarios() == sorted(EXPECTED_IDS)


def test_scenario_id_ranges_are_disjoint() -> None:
    seen: set[int] = set()
    for name in available_scenarios():
        ids = set(_resolve_scenario(name).ids)
        assert not ids & seen
        seen |= ids


@pytest.mark.parametrize("name", sorted(EXPECTED_IDS))
def test_each_scenario_verifies_against_fake_cluster(
    name: str, fake_harness, unit_settings: Settings
) -> None:
    scenario = _resolve_scenario(name)
    scenario._timestamp_factory = lambda: TIMESTAMP
    assert isinstance(scenario, Scenario)

    result = scenario.execute(fake_harness, unit_settings)

    assert result["passed"] is True
    assert result["ids"] == EXPECTED_IDS[name]
    assert result["timestamp"] == TIMESTAMP
    assert result["rows_verified"] == 2
    rows = fake_harness.session.rows
    for record_id in EXPECTED_IDS[name]:
        assert rows[record_id]["a"] == f"foo {record_id}"
        assert rows[record_id]["b"] == f"bar {record_id}"


def test_write_kind_and_mode_are_reported(fake_harness, unit_settings: Settings) -> None:
    logged = BatchLoggedUsingTimestampScenario(timestamp_factory=lambda: TIMESTAMP)
    unlogged = BatchUnloggedWithTimestampScenario(timestamp_factory=lambda: TIMESTAMP)
    single = QueryWithTimestampScenario(timestamp_factory=lambda: TIMESTAMP)

    assert logged.execute(fake_harness, unit_settings)["write"] == "logged_batch"
    assert unlogged.execute(fake_harness, unit_settings)["write"] == "unlogged_batch"
    result = single.execute(fake_harness, unit_settings)
    assert result["write"] == "single"
    assert result["mode"] == TimestampMode.PARAMETER.value


def test_default_timestamp_is_current_microseconds(fake_harness, unit_settings: Settings) -> None:
    result = QueryWithTimestampScenario().execute(fake_harness, unit_settings)
    # Microseconds since the epoch: 16 digits for the foreseeable future.
    assert len(str(result["timestamp"])) == 16


def test_reset_then_rerun_gives_same_outcome(fake_harness, unit_settings: Settings) -> None:
    schema = SchemaManager(fake_harness, unit_settings)
    outcomes = []
    for _ in range(2):
        schema.reset_table()
        fake_harness.session.rows.clear()
        scenario = BatchLoggedUsingTimestampScenario(timestamp_factory=lambda: TIMESTAMP)
        outcomes.append(scenario.execute(fake_harness, unit_settings))
    first, second = outcomes
    assert first["passed"] and second["passed"]
    assert first["ids"] == second["ids"]
    assert first["rows_verified"] == second["rows_verified"] == 2


def test_abstract_scenario_requires_write() -> None:
    with pytest.raises(TypeError):
        AbstractScenario()  # type: ignore[abstract]
