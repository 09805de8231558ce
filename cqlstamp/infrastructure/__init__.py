"""
Infrastructure package for the timestamp harness.

Centralizes cluster connectivity concerns (session factory, client-side
timestamp control). Keep this layer focused on I/O and resource management,
decoupled from scenario/orchestrator logic.
"""

from cqlstamp.infrastructure.session_factory import (
    HarnessSession,
    build_cluster,
    connect,
    resolve_consistency,
)
from cqlstamp.infrastructure.timestamps import PinnedTimestampGenerator

__all__ = [
    "HarnessSession",
    "PinnedTimestampGenerator",
    "build_cluster",
    "connect",
    "resolve_consistency",
]
