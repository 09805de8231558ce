"""
Batch scenarios: both records go out in one LOGGED or UNLOGGED batch.

The `USING TIMESTAMP` variants apply no batch-level timestamp; each statement
carries its own.
"""

from __future__ import annotations

from typing import List

from cqlstamp.domain.models import TimestampedRecord, TimestampMode
from cqlstamp.scenarios.abstract import AbstractScenario
from cqlstamp.writer import WriteExecutor


class _BatchScenario(AbstractScenario):
    logged: bool = True

    @property
    def write_kind(self) -> str:  # type: ignore[override]
        return "logged_batch" if self.logged else "unlogged_batch"

    def write(self, writer: WriteExecutor, records: List[TimestampedRecord]) -> None:
        writer.write_batch(records, self.mode, logged=self.logged)


class BatchLoggedWithTimestampScenario(_BatchScenario):
    name: str = "batch_logged_with_timestamp"
    description: str = "LOGGED batch stamped with a batch-level client timestamp."
    first_id: int = 5
    mode = TimestampMode.PARAMETER
    logged = True


class BatchUnloggedWithTimestampScenario(_BatchScenario):
    name: str = "batch_unlogged_with_timestamp"
    description: str = "UNLOGGED batch stamped with a batch-level client timestamp."
    first_id: int = 7
    mode = TimestampMode.PARAMETER
    logged = False


class BatchLoggedUsingTimestampScenario(_BatchScenario):
    name: str = "batch_logged_using_timestamp"
    description: str = "LOGGED batch whose statements carry USING TIMESTAMP."
    first_id: int = 9
    mode = TimestampMode.STATEMENT
    logged = True


class BatchUnloggedUsingTimestampScenario(_BatchScenario):
    name: str = "batch_unlogged_using_timestamp"
    description: str = "UNLOGGED batch whose statements carry USING TIMESTAMP."
    first_id: int = 11
    mode = TimestampMode.STATEMENT
    logged = False


__all__ = [
    "BatchLoggedUsingTimestampScenario",
    "BatchLoggedWithTimestampScenario",
    "BatchUnloggedUsingTimestampScenario",
    "BatchUnloggedWithTimestampScenario",
]
