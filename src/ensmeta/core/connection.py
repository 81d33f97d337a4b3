"""Connection helpers for Ensembl MySQL servers.

This module centralizes creation of PyMySQL connections so the rest of the
code only deals with host/port/schema triples. Driver errors are converted
into `DataAccessError`.
"""

from __future__ import annotations

import pymysql

from ensmeta.core.config import EnsemblConfig, sanitize_host
from ensmeta.core.errors import DataAccessError
from ensmeta.core.models import ConnectionDescriptor


def get_connection(
    host: str,
    port: int,
    schema: str | None = None,
    *,
    user: str = "anonymous",
    password: str = "",
    connect_timeout: int | None = None,
) -> pymysql.connections.Connection:
    """
    Open a PyMySQL connection to `host:port`, optionally selecting `schema`.

    Raises:
        DataAccessError: If the server cannot be reached or refuses the login.
    """
    host = sanitize_host(host)
    try:
        return pymysql.connect(
            host=host,
            port=port,
            user=user,
            password=password,
            database=schema or None,
            charset="utf8mb4",
            # pymysql rejects 0, None means "driver default"
            connect_timeout=connect_timeout or None,
        )
    except pymysql.MySQLError as exc:
        target = f"{host}:{port}/{schema}" if schema else f"{host}:{port}"
        raise DataAccessError(
            f"Could not connect to Ensembl database server {target}: {exc}"
        ) from exc


def connect_metadata_server(config: EnsemblConfig) -> pymysql.connections.Connection:
    """Open the connection used for catalog and meta-table queries."""
    return get_connection(
        config.host,
        config.port,
        config.default_schema,
        user=config.user,
        password=config.password,
        connect_timeout=config.connect_timeout,
    )


def connect_descriptor(
    descriptor: ConnectionDescriptor, config: EnsemblConfig
) -> pymysql.connections.Connection:
    """Open a connection to the schema a descriptor points at."""
    return get_connection(
        descriptor.host,
        descriptor.port,
        descriptor.schema_name,
        user=config.user,
        password=config.password,
        connect_timeout=config.connect_timeout,
    )
