"""
Scenario interfaces and result contracts for the timestamp harness.

A scenario writes a pair of records with a controlled timestamp and then
verifies them. Concrete scenarios differ only in how the write is issued
(single statements vs logged/unlogged batch) and how the timestamp reaches the
coordinator (request-level vs `USING TIMESTAMP`).
"""

from __future__ import annotations

import abc
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, TypedDict, runtime_checkable

from cqlstamp.config import Settings
from cqlstamp.domain.models import (
    TimestampedRecord,
    TimestampMode,
    current_timestamp_micros,
    make_record_pair,
)
from cqlstamp.infrastructure.session_factory import HarnessSession
from cqlstamp.verifier import ConsistencyVerifier
from cqlstamp.writer import WriteExecutor


class ScenarioResult(TypedDict, total=False):
    """
    Outcome contract returned by scenarios and enriched by the orchestrator.
    """

    scenario: str
    ids: List[int]
    timestamp: int
    mode: str
    write: str
    rows_verified: int
    duration_seconds: float
    passed: bool
    error: Optional[str]
    notes: Optional[str]
    extra: Dict[str, Any]


@runtime_checkable
class Scenario(Protocol):
    """
    Common interface all scenarios implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the write path under test.
    first_id : int
        First id of the pair this scenario owns; it also writes `first_id + 1`.
    """

    name: str
    description: str
    first_id: int

    def execute(self, harness: HarnessSession, settings: Settings) -> ScenarioResult:
        """
        Write the scenario's records and verify their timestamps.

        Raises a HarnessError subclass on any failure.
        """
        ...


class AbstractScenario(abc.ABC):
    """
    Base class for the write-then-verify scenarios.

    Subclasses set `name`, `description`, `first_id`, and `mode`, and implement
    `write`.
    """

    name: str
    description: str
    first_id: int
    mode: TimestampMode
    write_kind: str = "single"

    def __init__(self, timestamp_factory: Optional[Callable[[], int]] = None) -> None:
        self._timestamp_factory = timestamp_factory or current_timestamp_micros

    @property
    def ids(self) -> Tuple[int, int]:
        return (self.first_id, self.first_id + 1)

    @abc.abstractmethod
    def write(self, writer: WriteExecutor, records: List[TimestampedRecord]) -> None:  # pragma: no cover - interface only
        """Issue the writes for `records`."""
        raise NotImplementedError

    def execute(self, harness: HarnessSession, settings: Settings) -> ScenarioResult:
        timestamp = self._timestamp_factory()
        records = make_record_pair(self.first_id, timestamp)

        start_time = time.perf_counter()
        self.write(WriteExecutor(harness, settings), records)
        report = ConsistencyVerifier(harness, settings).verify(timestamp, self.ids)
        duration_seconds = time.perf_counter() - start_time

        return ScenarioResult(
            scenario=self.name,
            ids=list(self.ids),
            timestamp=timestamp,
            mode=self.mode.value,
            write=self.write_kind,
            rows_verified=report.row_count,
            duration_seconds=duration_seconds,
            passed=True,
        )


__all__ = [
    "AbstractScenario",
    "Scenario",
    "ScenarioResult",
]
