"""
cqlstamp - write-timestamp verification harness for Cassandra.

Writes records with a controlled write timestamp and checks that the stored
value and the storage engine's `writetime()` agree, across:

- Single INSERTs with a request-level client timestamp
- Single INSERTs with `USING TIMESTAMP`
- LOGGED and UNLOGGED batches in both modes

Also ships small example programs (tweet timeline, person CRUD) built on the
same session factory.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from cqlstamp.config import Settings, get_settings
from cqlstamp.domain.models import (
    TimestampedRecord,
    TimestampMode,
    VerificationReport,
    WriteTimeRow,
    current_timestamp_micros,
    make_record_pair,
)
from cqlstamp.errors import (
    ClusterConnectionError,
    ConsistencyError,
    CursorError,
    HarnessError,
    ReadError,
    SchemaError,
    WriteError,
)
from cqlstamp.infrastructure.session_factory import HarnessSession, connect
from cqlstamp.orchestrator import RunConfig, available_scenarios, run_scenarios
from cqlstamp.schema import SchemaManager
from cqlstamp.utils.logging import configure_logging, get_logger
from cqlstamp.verifier import ConsistencyVerifier
from cqlstamp.writer import WriteExecutor

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "TimestampedRecord",
    "TimestampMode",
    "VerificationReport",
    "WriteTimeRow",
    "current_timestamp_micros",
    "make_record_pair",
    # Errors
    "HarnessError",
    "ClusterConnectionError",
    "SchemaError",
    "WriteError",
    "ReadError",
    "CursorError",
    "ConsistencyError",
    # Harness components
    "HarnessSession",
    "connect",
    "SchemaManager",
    "WriteExecutor",
    "ConsistencyVerifier",
    # Orchestration
    "RunConfig",
    "available_scenarios",
    "run_scenarios",
    # Logging
    "configure_logging",
    "get_logger",
]
