"""
Consistency verifier: reads rows back and checks that the stored timestamp and
the storage engine's write times agree with the expected write timestamp.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from cqlstamp.config import Settings
from cqlstamp.domain.models import VerificationReport, WriteTimeRow
from cqlstamp.errors import DRIVER_ERRORS, ConsistencyError, CursorError, ReadError
from cqlstamp.infrastructure.session_factory import HarnessSession
from cqlstamp.schema import qualified_table
from cqlstamp.utils.logging import get_logger

log = get_logger(__name__)


def select_writetimes_cql(settings: Settings) -> str:
    return (
        "SELECT id, timestamp, writetime(a) AS ta, writetime(b) AS tb "
        f"FROM {qualified_table(settings)} WHERE id IN ?"
    )


def check_row(row: WriteTimeRow, expected_timestamp: int) -> None:
    """Raise ConsistencyError on the first channel that disagrees."""
    for column, actual in row.channels():
        if actual != expected_timestamp:
            raise ConsistencyError(
                f"Read timestamp doesn't match written timestamp: id={row.id} "
                f"column={column} expected={expected_timestamp} actual={actual}",
                expected=expected_timestamp,
                actual=actual,
                record_id=row.id,
                column=column,
            )


class ConsistencyVerifier:
    """
    Reads `timestamp`, `writetime(a)` and `writetime(b)` for a set of ids in a
    single query and asserts they all equal the expected timestamp.
    """

    def __init__(self, harness: HarnessSession, settings: Settings) -> None:
        self._harness = harness
        self._settings = settings
        self._prepared: Optional[Any] = None

    def _statement(self) -> Any:
        if self._prepared is None:
            try:
                self._prepared = self._harness.prepare(select_writetimes_cql(self._settings))
            except DRIVER_ERRORS as exc:
                raise ReadError(f"Could not prepare verification query: {exc}") from exc
        return self._prepared

    def _rows(self, ids: List[int]) -> Iterable[Any]:
        try:
            return self._harness.execute(self._statement(), (ids,))
        except DRIVER_ERRORS as exc:
            raise ReadError(f"Verification query for ids={ids} failed: {exc}") from exc

    def read_rows(self, ids: Iterable[int]) -> List[WriteTimeRow]:
        """
        Fetch the write-time triple for each id without asserting anything.

        Raises
        ------
        ReadError
            If the query cannot be executed.
        CursorError
            If the driver fails while paging through the result.
        """
        ids = [int(record_id) for record_id in ids]
        result = self._rows(ids)
        rows: List[WriteTimeRow] = []
        try:
            for raw in result:
                rows.append(
                    WriteTimeRow(id=raw.id, timestamp=raw.timestamp, ta=raw.ta, tb=raw.tb)
                )
        except DRIVER_ERRORS as exc:
            raise CursorError(f"Cursor failed after {len(rows)} row(s): {exc}") from exc
        return rows

    def verify(self, expected_timestamp: int, ids: Iterable[int]) -> VerificationReport:
        """
        Verify that every requested id was read back with all three timestamp
        channels equal to `expected_timestamp`.

        Raises
        ------
        ConsistencyError
            On the first mismatching value, when no rows come back, or when a
            requested id is missing from the result.
        ReadError, CursorError
            If the read itself fails.
        """
        ids = [int(record_id) for record_id in ids]
        rows = self.read_rows(ids)
        if not rows:
            raise ConsistencyError(
                f"No rows returned for ids={ids}", expected=expected_timestamp
            )
        for row in rows:
            check_row(row, expected_timestamp)

        missing = sorted(set(ids) - {row.id for row in rows})
        if missing:
            raise ConsistencyError(
                f"Rows missing for ids={missing}",
                expected=expected_timestamp,
                record_id=missing[0],
            )

        log.info(
            "Timestamps consistent",
            extra={"ids": ids, "timestamp": expected_timestamp, "rows": len(rows)},
        )
        return VerificationReport(expected_timestamp=expected_timestamp, ids=ids, rows=rows)


__all__ = [
    "ConsistencyVerifier",
    "check_row",
    "select_writetimes_cql",
]
