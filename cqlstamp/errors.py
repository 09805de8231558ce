"""
Error taxonomy for the timestamp harness.

Every failure surfaced by the harness derives from `HarnessError`. Driver
exceptions are wrapped (`raise ... from exc`) so callers can catch by harness
stage while the original cause stays attached.
"""

from __future__ import annotations

from typing import Optional

from cassandra import DriverException
from cassandra.cluster import NoHostAvailable
from cassandra.protocol import ErrorMessage

# Everything the driver raises for a failed request (server error responses,
# client-side timeouts, no live coordinator).
DRIVER_ERRORS = (DriverException, NoHostAvailable, ErrorMessage)


class HarnessError(Exception):
    """Base class for all harness failures."""


class ClusterConnectionError(HarnessError):
    """The cluster could not be reached or the session could not be opened."""


class SchemaError(HarnessError):
    """A DDL statement (keyspace/table drop or create) failed."""


class WriteError(HarnessError):
    """A single insert or batch failed to apply."""


class ReadError(HarnessError):
    """The verification query could not be executed."""


class CursorError(HarnessError):
    """The result cursor failed while draining rows."""


class ConsistencyError(HarnessError):
    """A read-back timestamp disagrees with the expected write timestamp."""

    def __init__(
        self,
        message: str,
        *,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
        record_id: Optional[int] = None,
        column: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.record_id = record_id
        self.column = column


__all__ = [
    "DRIVER_ERRORS",
    "HarnessError",
    "ClusterConnectionError",
    "SchemaError",
    "WriteError",
    "ReadError",
    "CursorError",
    "ConsistencyError",
]
