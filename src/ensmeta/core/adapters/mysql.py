from __future__ import annotations

from typing import Any, Callable, Sequence

import pymysql

from ensmeta.core.errors import DataAccessError


def _as_text(value: Any) -> str:
    # older MySQL servers hand back bytes for SHOW DATABASES
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return str(value)


class MySqlCatalogAdapter:
    """Adapter around a PyMySQL connection (catalog listing and queries)."""

    def __init__(self, connect: Callable[[], pymysql.connections.Connection]) -> None:
        """
        Create an adapter that opens its connection on first use.

        Args:
            connect: Zero-argument callable returning a live connection.
        """
        self._connect = connect
        self._connection: pymysql.connections.Connection | None = None

    @property
    def connection(self) -> pymysql.connections.Connection:
        """Return the live connection, opening it if needed."""
        if self._connection is None:
            self._connection = self._connect()
        return self._connection

    def list_catalog_names(self) -> list[str]:
        """List all schema names visible on the server."""
        rows = self.query("SHOW DATABASES")
        if not all(len(row) == 1 for row in rows):
            raise DataAccessError("SHOW DATABASES returned rows in unexpected format.")
        return [_as_text(row[0]) for row in rows]

    def query(self, sql: str, params: Sequence[Any] | None = None) -> list[tuple]:
        """Execute a query and return all rows as tuples."""
        try:
            with self.connection.cursor() as cur:
                cur.execute(sql, tuple(params) if params else None)
                return [tuple(row) for row in cur.fetchall()]
        except pymysql.MySQLError as exc:
            # the next call reconnects instead of reusing a broken socket
            self.close()
            raise DataAccessError(f"Query failed: {sql!r}: {exc}") from exc

    def close(self) -> None:
        """Close the connection if it was opened."""
        if self._connection is None:
            return
        try:
            self._connection.close()
        except pymysql.MySQLError:
            # already closed by the server
            pass
        finally:
            self._connection = None
