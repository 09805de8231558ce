"""
Pytest configuration for the timestamp harness.

Provides fixtures for:
- Settings built from the environment (integration) or fixed values (unit)
- An in-memory stand-in for the driver session, good enough to exercise the
  writer, verifier, scenarios and orchestrator without a cluster
- A real cluster session for integration tests, skipped when unreachable
"""

from __future__ import annotations

import os
import re
from collections import namedtuple
from typing import Any, Callable, Dict, Generator, List, Optional, Tuple

import pytest

from cqlstamp import writer as writer_module
from cqlstamp.config import Settings
from cqlstamp.infrastructure.session_factory import HarnessSession
from cqlstamp.infrastructure.timestamps import PinnedTimestampGenerator

WriteTimeResult = namedtuple("WriteTimeResult", ["id", "timestamp", "ta", "tb"])

FALLBACK_TIMESTAMP = 1_000


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        cassandra_hosts=os.getenv("CASSANDRA_HOSTS", "localhost"),
        cassandra_port=int(os.getenv("CASSANDRA_PORT", "9042")),
        keyspace=os.getenv("CASSANDRA_KEYSPACE", "test_lab"),
        table_name=os.getenv("CASSANDRA_TABLE", "gocql_timestamp_test"),
        consistency=os.getenv("CASSANDRA_CONSISTENCY", "LOCAL_QUORUM"),
        log_level="DEBUG",
    )


@pytest.fixture
def unit_settings() -> Settings:
    return Settings(keyspace="test_lab", table_name="ts_test", consistency="ONE")


class FakePrepared:
    """Prepared statement placeholder; only the CQL text matters."""

    def __init__(self, cql: str) -> None:
        self.query_string = cql


class FakeBatch:
    """Records what the writer adds to a batch."""

    def __init__(self, batch_type: Any = None) -> None:
        self.batch_type = batch_type
        self.entries: List[Tuple[Any, Tuple[Any, ...]]] = []

    def add(self, statement: Any, parameters: Any = None) -> None:
        self.entries.append((statement, tuple(parameters or ())))


class FakeCluster:
    def __init__(self, timestamp_generator: Callable[[], int]) -> None:
        self.timestamp_generator = timestamp_generator
        self.shutdown_calls = 0
        self.metadata = None

    def shutdown(self) -> None:
        self.shutdown_calls += 1


class FakeCassandraSession:
    """
    Minimal in-memory emulation of the harness table.

    INSERTs store each cell's write time the way the coordinator would:
    `USING TIMESTAMP` wins, otherwise the request's client timestamp (one per
    request, shared by every statement in a batch). SELECT ... WHERE id IN ?
    returns rows in id order. DDL and anything else is recorded and ignored.
    """

    def __init__(self, cluster: FakeCluster) -> None:
        self.cluster = cluster
        self.rows: Dict[int, Dict[str, Any]] = {}
        self.executed: List[Tuple[Any, Any, int]] = []
        self.prepared: List[str] = []
        self.fail_with: Optional[Exception] = None
        self.fail_when: Callable[[str], bool] = lambda cql: True
        self.select_override: Optional[Callable[[List[int]], Any]] = None

    def prepare(self, cql: str) -> FakePrepared:
        self.prepared.append(cql)
        return FakePrepared(cql)

    def execute(self, statement: Any, parameters: Any = None) -> Any:
        request_timestamp = self.cluster.timestamp_generator()
        self.executed.append((statement, parameters, request_timestamp))

        cql = statement if isinstance(statement, str) else getattr(statement, "query_string", "")
        if self.fail_with is not None and self.fail_when(cql or "BATCH"):
            raise self.fail_with

        if isinstance(statement, FakeBatch):
            for inner, params in statement.entries:
                self._apply(inner.query_string, params, request_timestamp)
            return []
        if cql.lstrip().upper().startswith("SELECT"):
            ids = list(parameters[0])
            if self.select_override is not None:
                return self.select_override(ids)
            return [
                WriteTimeResult(i, self.rows[i]["timestamp"], self.rows[i]["ta"], self.rows[i]["tb"])
                for i in sorted(ids)
                if i in self.rows
            ]
        if cql.lstrip().upper().startswith("INSERT"):
            self._apply(cql, tuple(parameters), request_timestamp)
        return []

    def _apply(self, cql: str, params: Tuple[Any, ...], request_timestamp: int) -> None:
        record_id, a, b, declared = params[:4]
        writetime = params[4] if re.search(r"USING TIMESTAMP \?", cql) else request_timestamp
        self.rows[record_id] = {
            "a": a,
            "b": b,
            "timestamp": declared,
            "ta": writetime,
            "tb": writetime,
        }


@pytest.fixture
def fallback_timestamp() -> int:
    """Client timestamp the fake cluster assigns to unpinned requests."""
    return FALLBACK_TIMESTAMP


@pytest.fixture
def fake_harness(unit_settings: Settings, monkeypatch) -> Generator[HarnessSession, None, None]:
    """
    HarnessSession over the in-memory fake session, with batches captured by
    FakeBatch. Unpinned requests get FALLBACK_TIMESTAMP.
    """
    monkeypatch.setattr(writer_module, "BatchStatement", FakeBatch)
    timestamps = PinnedTimestampGenerator(fallback=lambda: FALLBACK_TIMESTAMP)
    cluster = FakeCluster(timestamps)
    session = FakeCassandraSession(cluster)
    harness = HarnessSession(cluster, session, timestamps, unit_settings)
    yield harness
    harness.close()


@pytest.fixture(scope="session")
def cluster_available(test_settings: Settings) -> bool:
    """
    Check if the cluster is reachable.

    Used to conditionally skip integration tests when Cassandra is not available.
    """
    from cqlstamp.errors import ClusterConnectionError
    from cqlstamp.infrastructure.session_factory import connect

    try:
        with connect(test_settings, use_keyspace=False):
            return True
    except ClusterConnectionError:
        return False


@pytest.fixture(scope="session")
def prepared_schema(test_settings: Settings, cluster_available: bool) -> bool:
    """
    Ensure the keyspace exists and the table is freshly recreated, once per session.
    """
    if not cluster_available:
        pytest.skip("Cassandra not available for integration tests")

    from cqlstamp.infrastructure.session_factory import connect
    from cqlstamp.schema import SchemaManager

    with connect(test_settings, use_keyspace=False) as harness:
        schema = SchemaManager(harness, test_settings)
        schema.ensure_keyspace()
        schema.reset_table()
    return True


@pytest.fixture
def live_harness(
    test_settings: Settings, prepared_schema: bool
) -> Generator[HarnessSession, None, None]:
    """
    A dedicated session per test, bound to the harness keyspace.
    """
    from cqlstamp.infrastructure.session_factory import connect

    harness = connect(test_settings)
    try:
        yield harness
    finally:
        harness.close()
