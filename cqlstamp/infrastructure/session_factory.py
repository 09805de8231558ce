"""
Cluster/session factory for the timestamp harness.

Builds a driver `Cluster` from `Settings` (contact points, protocol version,
default execution profile, optional credentials) and wraps the resulting
session in a `HarnessSession` capability object that the caller owns and
passes explicitly to the schema manager, writer, and verifier.

Connection attempts go through tenacity; `connect_attempts` defaults to 1 so a
failed connect is fatal unless retries are configured.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from cassandra import ConsistencyLevel, OperationTimedOut
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import EXEC_PROFILE_DEFAULT, Cluster, ExecutionProfile, NoHostAvailable
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from cqlstamp.config import Settings, get_settings
from cqlstamp.errors import ClusterConnectionError
from cqlstamp.infrastructure.timestamps import PinnedTimestampGenerator
from cqlstamp.utils.logging import get_logger

log = get_logger(__name__)

_TRANSIENT_CONNECT_ERRORS = (NoHostAvailable, OperationTimedOut, OSError)


def resolve_consistency(name: str) -> int:
    """
    Map a consistency level name (e.g. "LOCAL_QUORUM") to the driver constant.
    """
    key = name.strip().upper()
    try:
        return ConsistencyLevel.name_to_value[key]
    except KeyError:
        known = ", ".join(sorted(ConsistencyLevel.name_to_value))
        raise ValueError(f"Unknown consistency level '{name}'. Known: {known}") from None


class HarnessSession:
    """
    Owned handle to an open driver session.

    Holds the `Cluster`, its `Session`, and the pinned timestamp generator the
    cluster was built with. Use as a context manager, or call `close()`.
    """

    def __init__(
        self,
        cluster: Any,
        session: Any,
        timestamps: PinnedTimestampGenerator,
        settings: Settings,
    ) -> None:
        self.cluster = cluster
        self.session = session
        self.timestamps = timestamps
        self.settings = settings
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @contextmanager
    def pinned_timestamp(self, timestamp: Optional[int]) -> Generator[None, None, None]:
        """
        Stamp every request issued inside the block with `timestamp`.

        Passing None leaves the generator untouched, so requests fall back to
        driver-assigned client timestamps.
        """
        if timestamp is None:
            yield
            return
        previous = self.timestamps.pinned
        self.timestamps.pin(timestamp)
        try:
            yield
        finally:
            if previous is None:
                self.timestamps.unpin()
            else:
                self.timestamps.pin(previous)

    def execute(self, statement: Any, parameters: Any = None) -> Any:
        """Execute a statement on the underlying session."""
        return self.session.execute(statement, parameters)

    def prepare(self, cql: str) -> Any:
        return self.session.prepare(cql)

    def close(self) -> None:
        """Shut the cluster down. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.cluster.shutdown()
        log.debug("Cluster shut down", extra={"hosts": self.settings.contact_points})

    def __enter__(self) -> "HarnessSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def build_cluster(settings: Settings, timestamps: PinnedTimestampGenerator) -> Cluster:
    """
    Construct (but do not connect) a driver `Cluster` for the given settings.
    """
    profile_kwargs: Dict[str, Any] = {
        "consistency_level": resolve_consistency(settings.consistency),
        "request_timeout": settings.request_timeout_seconds,
    }
    if settings.local_dc:
        profile_kwargs["load_balancing_policy"] = TokenAwarePolicy(
            DCAwareRoundRobinPolicy(local_dc=settings.local_dc)
        )

    cluster_kwargs: Dict[str, Any] = {
        "contact_points": settings.contact_points,
        "port": settings.cassandra_port,
        "protocol_version": settings.protocol_version,
        "connect_timeout": settings.connect_timeout_seconds,
        "execution_profiles": {EXEC_PROFILE_DEFAULT: ExecutionProfile(**profile_kwargs)},
        "timestamp_generator": timestamps,
    }
    if settings.cassandra_username:
        cluster_kwargs["auth_provider"] = PlainTextAuthProvider(
            username=settings.cassandra_username,
            password=settings.cassandra_password or "",
        )
    return Cluster(**cluster_kwargs)


def _open(settings: Settings, keyspace: Optional[str]) -> HarnessSession:
    timestamps = PinnedTimestampGenerator()
    cluster = build_cluster(settings, timestamps)
    try:
        session = cluster.connect(keyspace) if keyspace else cluster.connect()
    except Exception:
        cluster.shutdown()
        raise
    return HarnessSession(cluster, session, timestamps, settings)


def connect(settings: Optional[Settings] = None, use_keyspace: bool = True) -> HarnessSession:
    """
    Open a session against the configured cluster.

    Parameters
    ----------
    settings : Settings | None
        Harness settings. Defaults to the cached environment settings.
    use_keyspace : bool
        Whether to bind the session to `settings.keyspace`. Pass False when the
        keyspace may not exist yet (e.g. before `SchemaManager.ensure_keyspace`).

    Returns
    -------
    HarnessSession
        An open session; the caller is responsible for closing it.

    Raises
    ------
    ClusterConnectionError
        If the cluster is unreachable after the configured number of attempts,
        or the session could not be bound to the keyspace.
    """
    settings = settings or get_settings()
    keyspace = settings.keyspace if use_keyspace else None
    retryer = Retrying(
        stop=stop_after_attempt(settings.connect_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(_TRANSIENT_CONNECT_ERRORS),
        reraise=True,
    )
    log.info(
        "Connecting to cluster",
        extra={
            "hosts": settings.contact_points,
            "keyspace": keyspace,
            "consistency": settings.consistency,
            "protocol_version": settings.protocol_version,
        },
    )
    try:
        return retryer(_open, settings, keyspace)
    except Exception as exc:  # noqa: BLE001 - any connect failure is fatal to the caller
        raise ClusterConnectionError(
            f"Could not connect to {settings.contact_points} (keyspace={keyspace}): {exc}"
        ) from exc


__all__ = [
    "HarnessSession",
    "build_cluster",
    "connect",
    "resolve_consistency",
]
