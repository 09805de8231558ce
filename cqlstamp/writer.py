"""
Write executor: single inserts and logged/unlogged batches with a controlled
write timestamp.

Two ways of getting the timestamp to the coordinator are supported:

- ``TimestampMode.PARAMETER``: the request itself carries the timestamp
  (client-side timestamp pinned on the session's generator).
- ``TimestampMode.STATEMENT``: the CQL carries ``USING TIMESTAMP ?`` and the
  timestamp is bound as a trailing parameter.

In both modes the timestamp is also stored in the ``timestamp`` column so the
verifier can compare it with ``writetime()``. No retries happen here.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from cassandra.query import BatchStatement, BatchType

from cqlstamp.config import Settings
from cqlstamp.domain.models import TimestampedRecord, TimestampMode
from cqlstamp.errors import DRIVER_ERRORS, WriteError
from cqlstamp.infrastructure.session_factory import HarnessSession
from cqlstamp.schema import qualified_table
from cqlstamp.utils.logging import get_logger

log = get_logger(__name__)


def insert_cql(settings: Settings, mode: TimestampMode) -> str:
    """INSERT text for the given mode (bind markers in column order)."""
    cql = f"INSERT INTO {qualified_table(settings)} (id, a, b, timestamp) VALUES (?, ?, ?, ?)"
    if mode is TimestampMode.STATEMENT:
        cql += " USING TIMESTAMP ?"
    return cql


def bind_values(record: TimestampedRecord, mode: TimestampMode) -> Tuple[Any, ...]:
    """Parameters for one insert; STATEMENT mode appends the USING TIMESTAMP value."""
    values = record.values()
    if mode is TimestampMode.STATEMENT:
        return values + (record.timestamp,)
    return values


def shared_timestamp(records: Sequence[TimestampedRecord]) -> int:
    """The single timestamp all records declare, or WriteError if they differ."""
    stamps = {record.timestamp for record in records}
    if len(stamps) != 1:
        raise WriteError(
            f"Records in one batch must share a timestamp, got {sorted(stamps)}"
        )
    return stamps.pop()


class WriteExecutor:
    """
    Issues inserts against the harness table through an open session.

    Prepared statements are created lazily, once per mode.
    """

    def __init__(self, harness: HarnessSession, settings: Settings) -> None:
        self._harness = harness
        self._settings = settings
        self._prepared: Dict[TimestampMode, Any] = {}

    def _statement(self, mode: TimestampMode) -> Any:
        if mode not in self._prepared:
            cql = insert_cql(self._settings, mode)
            try:
                self._prepared[mode] = self._harness.prepare(cql)
            except DRIVER_ERRORS as exc:
                raise WriteError(f"Could not prepare insert ({mode.value}): {exc}") from exc
        return self._prepared[mode]

    def write(self, record: TimestampedRecord, mode: TimestampMode) -> None:
        """
        Insert a single record.

        In PARAMETER mode the request is stamped with `record.timestamp`; in
        STATEMENT mode the timestamp travels in the `USING TIMESTAMP` clause.
        """
        statement = self._statement(mode)
        directive = record.timestamp if mode is TimestampMode.PARAMETER else None
        try:
            with self._harness.pinned_timestamp(directive):
                self._harness.execute(statement, bind_values(record, mode))
        except DRIVER_ERRORS as exc:
            raise WriteError(f"Insert of id={record.id} failed: {exc}") from exc
        log.debug(
            "Record written",
            extra={"id": record.id, "mode": mode.value, "timestamp": record.timestamp},
        )

    def write_many(self, records: Iterable[TimestampedRecord], mode: TimestampMode) -> int:
        """Insert records one statement at a time. Returns the number written."""
        written = 0
        for record in records:
            self.write(record, mode)
            written += 1
        return written

    def build_batch(
        self,
        records: Sequence[TimestampedRecord],
        mode: TimestampMode,
        logged: bool = True,
    ) -> BatchStatement:
        batch_type = BatchType.LOGGED if logged else BatchType.UNLOGGED
        batch = BatchStatement(batch_type=batch_type)
        statement = self._statement(mode)
        for record in records:
            batch.add(statement, bind_values(record, mode))
        return batch

    def write_batch(
        self,
        records: Sequence[TimestampedRecord],
        mode: TimestampMode,
        logged: bool = True,
        batch_timestamp: Optional[int] = None,
    ) -> None:
        """
        Insert records as one batch.

        Parameters
        ----------
        records : Sequence[TimestampedRecord]
            Records to write; must not be empty.
        mode : TimestampMode
            How each statement carries its timestamp.
        logged : bool
            LOGGED (atomic via the batch log) when True, UNLOGGED otherwise.
        batch_timestamp : int | None
            Execution-time timestamp for the whole batch. In PARAMETER mode it
            defaults to the records' shared timestamp; in STATEMENT mode no
            batch-level timestamp is applied unless one is given.

        Raises
        ------
        WriteError
            If the batch is empty, PARAMETER-mode records disagree on their
            timestamp, or the driver rejects the batch.
        """
        records = list(records)
        if not records:
            raise WriteError("Cannot execute an empty batch")
        if mode is TimestampMode.PARAMETER and batch_timestamp is None:
            batch_timestamp = shared_timestamp(records)

        batch = self.build_batch(records, mode, logged=logged)
        ids: List[int] = [record.id for record in records]
        try:
            with self._harness.pinned_timestamp(batch_timestamp):
                self._harness.execute(batch)
        except DRIVER_ERRORS as exc:
            raise WriteError(
                f"{'Logged' if logged else 'Unlogged'} batch for ids={ids} failed: {exc}"
            ) from exc
        log.debug(
            "Batch written",
            extra={
                "ids": ids,
                "mode": mode.value,
                "logged": logged,
                "batch_timestamp": batch_timestamp,
            },
        )


__all__ = [
    "WriteExecutor",
    "bind_values",
    "insert_cql",
    "shared_timestamp",
]
