"""
Domain models for the timestamp harness.

Defines the record written by every scenario, the read-back row produced by the
verifier, and the write modes the executor understands.
"""
from __future__ import annotations

import enum
import time
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class TimestampMode(str, enum.Enum):
    """
    How the write timestamp reaches the coordinator.

    PARAMETER pins the timestamp on the request itself (client-side timestamp),
    STATEMENT embeds it in the CQL text via `USING TIMESTAMP ?`.
    """

    PARAMETER = "parameter"
    STATEMENT = "statement"


class TimestampedRecord(BaseModel):
    """
    Representation of a single row in the harness table.
    """

    id: int = Field(..., description="Primary key (bigint).")
    a: str = Field(..., description="First opaque payload column.")
    b: str = Field(..., description="Second opaque payload column.")
    timestamp: int = Field(..., description="Declared write time in microseconds.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    def values(self) -> Tuple[int, str, str, int]:
        """Bind values in column order (id, a, b, timestamp)."""
        return (self.id, self.a, self.b, self.timestamp)


class WriteTimeRow(BaseModel):
    """
    One row read back by the verifier: stored timestamp plus column write times.
    """

    id: int
    # None when the cell was never written.
    timestamp: Optional[int] = None
    ta: Optional[int] = None
    tb: Optional[int] = None

    model_config = {"frozen": True}

    def channels(self) -> List[Tuple[str, Optional[int]]]:
        return [("timestamp", self.timestamp), ("a", self.ta), ("b", self.tb)]


class VerificationReport(BaseModel):
    """Outcome of a successful verification."""

    expected_timestamp: int
    ids: List[int]
    rows: List[WriteTimeRow] = Field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def current_timestamp_micros() -> int:
    """Wall-clock time in microseconds since the epoch."""
    return time.time_ns() // 1000


def make_record_pair(first_id: int, timestamp: int) -> List[TimestampedRecord]:
    """
    Build the two records a scenario writes: ids `first_id` and `first_id + 1`
    with payloads "foo <id>" / "bar <id>".
    """
    return [
        TimestampedRecord(id=record_id, a=f"foo {record_id}", b=f"bar {record_id}", timestamp=timestamp)
        for record_id in (first_id, first_id + 1)
    ]


__all__ = [
    "TimestampMode",
    "TimestampedRecord",
    "WriteTimeRow",
    "VerificationReport",
    "current_timestamp_micros",
    "make_record_pair",
]
