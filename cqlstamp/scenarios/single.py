"""
Single-statement scenarios: each record is its own INSERT.
"""

from __future__ import annotations

from typing import List

from cqlstamp.domain.models import TimestampedRecord, TimestampMode
from cqlstamp.scenarios.abstract import AbstractScenario
from cqlstamp.writer import WriteExecutor


class QueryWithTimestampScenario(AbstractScenario):
    """
    Two inserts, each stamped with the timestamp at request level.
    """

    name: str = "query_with_timestamp"
    description: str = "Single INSERTs with a request-level client timestamp."
    first_id: int = 1
    mode = TimestampMode.PARAMETER

    def write(self, writer: WriteExecutor, records: List[TimestampedRecord]) -> None:
        writer.write_many(records, self.mode)


class QueryUsingTimestampScenario(AbstractScenario):
    """
    Two inserts carrying `USING TIMESTAMP ?` in the statement.
    """

    name: str = "query_using_timestamp"
    description: str = "Single INSERTs with USING TIMESTAMP bound as a parameter."
    first_id: int = 3
    mode = TimestampMode.STATEMENT

    def write(self, writer: WriteExecutor, records: List[TimestampedRecord]) -> None:
        writer.write_many(records, self.mode)


__all__ = ["QueryUsingTimestampScenario", "QueryWithTimestampScenario"]
