"""
Configuration settings for the Cassandra timestamp harness.

Uses Pydantic Settings to load environment variables for the cluster endpoint,
the target keyspace/table, logging, and connection behaviour. Components take a
`Settings` instance explicitly instead of reading module-level constants.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Cluster
    cassandra_hosts: str = Field("localhost", alias="CASSANDRA_HOSTS")
    cassandra_port: int = Field(9042, alias="CASSANDRA_PORT")
    cassandra_username: Optional[str] = Field(None, alias="CASSANDRA_USERNAME")
    cassandra_password: Optional[str] = Field(None, alias="CASSANDRA_PASSWORD")
    local_dc: Optional[str] = Field(None, alias="CASSANDRA_LOCAL_DC")
    # Client-side timestamps need protocol v3 or newer.
    protocol_version: int = Field(4, alias="CASSANDRA_PROTOCOL_VERSION", ge=3)
    consistency: str = Field("LOCAL_QUORUM", alias="CASSANDRA_CONSISTENCY")
    connect_timeout_seconds: float = Field(5.0, alias="CASSANDRA_CONNECT_TIMEOUT")
    request_timeout_seconds: float = Field(10.0, alias="CASSANDRA_REQUEST_TIMEOUT")
    connect_attempts: int = Field(1, alias="CASSANDRA_CONNECT_ATTEMPTS", ge=1)

    # Schema
    keyspace: str = Field("test_lab", alias="CASSANDRA_KEYSPACE")
    table_name: str = Field("gocql_timestamp_test", alias="CASSANDRA_TABLE")
    compaction_class: str = Field("LeveledCompactionStrategy", alias="CASSANDRA_COMPACTION")
    replication_factor: int = Field(1, alias="CASSANDRA_REPLICATION_FACTOR", ge=1)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("consistency")
    @classmethod
    def _normalize_consistency(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def contact_points(self) -> List[str]:
        """Split the comma-separated host list into contact points."""
        return [host.strip() for host in self.cassandra_hosts.split(",") if host.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
