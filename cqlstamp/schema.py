"""
Schema management for the timestamp harness table.

The table layout matches what the verifier reads back:

    id bigint PRIMARY KEY, a text, b text, timestamp bigint

`reset_table()` drops and recreates it so every suite run starts empty.
"""

from __future__ import annotations

import re

from cqlstamp.config import Settings
from cqlstamp.errors import DRIVER_ERRORS, SchemaError
from cqlstamp.infrastructure.session_factory import HarnessSession
from cqlstamp.utils.logging import get_logger

log = get_logger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z][A-Za-z0-9_]{0,47}$")
_COMPACTION_CLASS = re.compile(r"^[A-Za-z][A-Za-z0-9_.]*$")


def _identifier(value: str, kind: str) -> str:
    if not _IDENTIFIER.match(value):
        raise SchemaError(f"Invalid {kind} name {value!r}")
    return value


def qualified_table(settings: Settings) -> str:
    """`keyspace.table`, validated for safe interpolation into CQL."""
    keyspace = _identifier(settings.keyspace, "keyspace")
    table = _identifier(settings.table_name, "table")
    return f"{keyspace}.{table}"


def drop_table_cql(settings: Settings) -> str:
    return f"DROP TABLE IF EXISTS {qualified_table(settings)}"


def create_table_cql(settings: Settings) -> str:
    if not _COMPACTION_CLASS.match(settings.compaction_class):
        raise SchemaError(f"Invalid compaction class {settings.compaction_class!r}")
    return (
        f"CREATE TABLE {qualified_table(settings)} (\n"
        "    id bigint,\n"
        "    a text,\n"
        "    b text,\n"
        "    timestamp bigint,\n"
        "    PRIMARY KEY (id)\n"
        ")\n"
        f"WITH COMPACTION = {{'class' : '{settings.compaction_class}'}}"
    )


def create_keyspace_cql(settings: Settings) -> str:
    keyspace = _identifier(settings.keyspace, "keyspace")
    return (
        f"CREATE KEYSPACE IF NOT EXISTS {keyspace} WITH replication = "
        f"{{'class': 'SimpleStrategy', 'replication_factor': {settings.replication_factor}}}"
    )


class SchemaManager:
    """
    Issues the DDL the harness needs against an open session.
    """

    def __init__(self, harness: HarnessSession, settings: Settings) -> None:
        self._harness = harness
        self._settings = settings

    def _run(self, cql: str, step: str) -> None:
        if self._harness.closed:
            raise SchemaError(f"Cannot {step}: session is closed")
        try:
            self._harness.execute(cql)
        except DRIVER_ERRORS as exc:
            raise SchemaError(f"{step} failed: {exc}") from exc
        log.debug("DDL applied", extra={"step": step, "cql": cql})

    def ensure_keyspace(self) -> None:
        """Create the configured keyspace (SimpleStrategy) if it does not exist."""
        self._run(create_keyspace_cql(self._settings), "create keyspace")
        log.info(
            "Keyspace ready",
            extra={
                "keyspace": self._settings.keyspace,
                "replication_factor": self._settings.replication_factor,
            },
        )

    def drop_table(self) -> None:
        self._run(drop_table_cql(self._settings), "drop table")

    def reset_table(self) -> None:
        """
        Drop the harness table if present, then create it with the configured
        compaction strategy. The create is skipped if the drop fails.
        """
        self.drop_table()
        self._run(create_table_cql(self._settings), "create table")
        log.info(
            "Table reset",
            extra={
                "table": qualified_table(self._settings),
                "compaction": self._settings.compaction_class,
            },
        )


__all__ = [
    "SchemaManager",
    "create_keyspace_cql",
    "create_table_cql",
    "drop_table_cql",
    "qualified_table",
]
