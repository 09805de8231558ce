"""
Example programs showing everyday driver usage outside the timestamp harness.

- `run_tweet_demo`: a timeline table with a secondary index; insert a tweet,
  read one back at consistency ONE, then iterate the whole timeline.
- `run_person_demo`: create the table only if cluster metadata says it is
  missing, then insert, read, update, list, and delete a person.

Both run in the configured keyspace and return what they read so callers (the
CLI, tests) can inspect it.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from cassandra import ConsistencyLevel
from cassandra.query import SimpleStatement

from cqlstamp.config import Settings
from cqlstamp.errors import DRIVER_ERRORS, ReadError, SchemaError, WriteError
from cqlstamp.infrastructure.session_factory import HarnessSession
from cqlstamp.utils.logging import get_logger

log = get_logger(__name__)


def _ddl(harness: HarnessSession, cql: str) -> None:
    try:
        harness.execute(cql)
    except DRIVER_ERRORS as exc:
        raise SchemaError(f"DDL failed: {exc}") from exc


def _write(harness: HarnessSession, statement: Any, parameters: Any) -> None:
    try:
        harness.execute(statement, parameters)
    except DRIVER_ERRORS as exc:
        raise WriteError(f"Write failed: {exc}") from exc


def _read(harness: HarnessSession, statement: Any, parameters: Any) -> List[Any]:
    try:
        return list(harness.execute(statement, parameters))
    except DRIVER_ERRORS as exc:
        raise ReadError(f"Read failed: {exc}") from exc


def run_tweet_demo(
    harness: HarnessSession,
    settings: Settings,
    timeline: str = "me",
    text: str = "hello world",
) -> Dict[str, Any]:
    """
    Insert a tweet into `timeline` and read the timeline back.

    Returns the single row read at consistency ONE and every row of the
    timeline as `{"id": ..., "text": ...}` dictionaries.
    """
    keyspace = settings.keyspace
    _ddl(
        harness,
        f"CREATE TABLE IF NOT EXISTS {keyspace}.tweet "
        "(timeline text, id uuid, text text, PRIMARY KEY (id))",
    )
    _ddl(harness, f"CREATE INDEX IF NOT EXISTS ON {keyspace}.tweet (timeline)")

    tweet_id = uuid.uuid1()
    _write(
        harness,
        f"INSERT INTO {keyspace}.tweet (timeline, id, text) VALUES (%s, %s, %s)",
        (timeline, tweet_id, text),
    )

    # The secondary index on timeline serves both lookups.
    first = SimpleStatement(
        f"SELECT id, text FROM {keyspace}.tweet WHERE timeline = %s LIMIT 1",
        consistency_level=ConsistencyLevel.ONE,
    )
    first_rows = _read(harness, first, (timeline,))
    latest: Optional[Dict[str, Any]] = None
    if first_rows:
        latest = {"id": first_rows[0].id, "text": first_rows[0].text}
        log.info("Tweet", extra=latest)

    timeline_rows = [
        {"id": row.id, "text": row.text}
        for row in _read(
            harness, f"SELECT id, text FROM {keyspace}.tweet WHERE timeline = %s", (timeline,)
        )
    ]
    for row in timeline_rows:
        log.info("Timeline tweet", extra=row)

    return {"inserted_id": tweet_id, "first": latest, "timeline": timeline_rows}


def _table_exists(harness: HarnessSession, keyspace: str, table: str) -> bool:
    keyspace_meta = harness.cluster.metadata.keyspaces.get(keyspace)
    return keyspace_meta is not None and table in keyspace_meta.tables


def run_person_demo(
    harness: HarnessSession,
    settings: Settings,
    person_id: str = "shalabh",
    name: str = "Shalabh Aggarwal",
    phone: str = "1234567890",
    new_phone: str = "0987654321",
) -> Dict[str, Any]:
    """
    Walk one person record through insert, read, update, list and delete.

    Returns the record as first read, after the update, the full listing, and
    whether the record is gone after the delete.
    """
    keyspace = settings.keyspace
    if not _table_exists(harness, keyspace, "person"):
        _ddl(
            harness,
            f"CREATE TABLE IF NOT EXISTS {keyspace}.person "
            "(id text, name text, phone text, PRIMARY KEY (id))",
        )
        log.info("Created table", extra={"table": f"{keyspace}.person"})

    _write(
        harness,
        f"INSERT INTO {keyspace}.person (id, name, phone) VALUES (%s, %s, %s)",
        (person_id, name, phone),
    )

    select_one = f"SELECT name, phone FROM {keyspace}.person WHERE id = %s"
    rows = _read(harness, select_one, (person_id,))
    inserted = {"name": rows[0].name, "phone": rows[0].phone} if rows else None
    log.info("Person", extra={"id": person_id, "person": inserted})

    _write(
        harness,
        f"UPDATE {keyspace}.person SET phone = %s WHERE id = %s",
        (new_phone, person_id),
    )
    rows = _read(harness, select_one, (person_id,))
    updated = {"name": rows[0].name, "phone": rows[0].phone} if rows else None

    listing = [
        {"name": row.name, "phone": row.phone}
        for row in _read(harness, f"SELECT name, phone FROM {keyspace}.person", None)
    ]

    _write(harness, f"DELETE FROM {keyspace}.person WHERE id = %s", (person_id,))
    deleted = not _read(harness, select_one, (person_id,))

    return {"inserted": inserted, "updated": updated, "listing": listing, "deleted": deleted}


__all__ = ["run_person_demo", "run_tweet_demo"]
