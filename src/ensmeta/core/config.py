"""Configuration for the Ensembl metadata resolver.

Configuration is an explicit, immutable value passed to the factory. It can be
built directly or loaded from `ENSMETA_*` environment variables; malformed
numeric values fall back to defaults instead of failing.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from ensmeta.core.models import DatabaseType

DEFAULT_SCHEMA_PATTERN = r"^(.+?)_(.+?)_{type}_(\d{2,})_(.+)$"

_ENV_PREFIX = "ENSMETA_"
_TRUTHY = {"1", "true", "yes", "on"}


def sanitize_host(host: str | None) -> str | None:
    """
    Normalize a database host value.

    - Removes a scheme prefix (e.g. 'mysql://')
    - Removes paths and query strings
    - Removes trailing slashes and a trailing ':port'
    """
    if not host:
        return host
    host = host.strip()
    if "://" in host:
        host = host.split("://", 1)[1]
    host = host.split("?", 1)[0].split("/", 1)[0].rstrip("/")
    # strip ':port', the port is configured separately
    if host.count(":") == 1:
        host = host.split(":", 1)[0]
    return host


def _env(name: str) -> str | None:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_types(name: str) -> tuple[DatabaseType, ...] | None:
    raw = _env(name)
    if raw is None:
        return None
    return tuple(DatabaseType.parse(v) for v in raw.split(",") if v.strip())


@dataclass(frozen=True)
class EnsemblConfig:
    """
    Static settings for one metadata resolver.

    Attributes:
        host: Ensembl MySQL host holding the per-species schemas.
        port: Port of that host.
        user: Database user (Ensembl's public server accepts 'anonymous').
        password: Database password.
        default_schema: Schema used for the initial metadata connection.
        mart_host: Host serving the mart schemas.
        mart_port: Port of the mart host.
        mart_schema_prefix: Mart schema names are `<prefix>_<release>`.
        database_types: Database types scanned when building the index.
        schema_pattern: Regex template with a `{type}` placeholder.
        strict_taxon_ids: Fail instead of overwrite on duplicate taxon ids.
        connect_timeout: Connection timeout in seconds.
    """

    host: str = "ensembldb.ensembl.org"
    port: int = 5306
    user: str = "anonymous"
    password: str = ""
    default_schema: str | None = None
    mart_host: str = "martdb.ensembl.org"
    mart_port: int = 5316
    mart_schema_prefix: str = "ensembl_mart"
    database_types: tuple[DatabaseType, ...] = field(
        default_factory=lambda: tuple(DatabaseType)
    )
    schema_pattern: str = DEFAULT_SCHEMA_PATTERN
    strict_taxon_ids: bool = False
    connect_timeout: int = 10

    def __post_init__(self) -> None:
        object.__setattr__(self, "host", sanitize_host(self.host))
        object.__setattr__(self, "mart_host", sanitize_host(self.mart_host))
        types = tuple(dict.fromkeys(self.database_types))
        if DatabaseType.CORE not in types:
            raise ValueError("database_types must include CORE.")
        object.__setattr__(self, "database_types", types)
        if self.port < 1 or self.mart_port < 1:
            raise ValueError("port and mart_port must be >= 1")

    @classmethod
    def from_env(cls, **overrides) -> EnsemblConfig:
        """
        Build a configuration from `ENSMETA_*` environment variables.

        Keyword overrides that are not None win over the environment.
        """
        defaults = cls()
        values = {
            "host": _env("HOST") or defaults.host,
            "port": _env_int("PORT", defaults.port),
            "user": _env("USER") or defaults.user,
            "password": os.getenv(_ENV_PREFIX + "PASSWORD", defaults.password),
            "default_schema": _env("DEFAULT_SCHEMA"),
            "mart_host": _env("MART_HOST") or defaults.mart_host,
            "mart_port": _env_int("MART_PORT", defaults.mart_port),
            "mart_schema_prefix": _env("MART_SCHEMA_PREFIX")
            or defaults.mart_schema_prefix,
            "database_types": _env_types("DATABASE_TYPES") or defaults.database_types,
            "schema_pattern": _env("SCHEMA_PATTERN") or defaults.schema_pattern,
            "strict_taxon_ids": (_env("STRICT_TAXON_IDS") or "").lower() in _TRUTHY,
            "connect_timeout": max(
                _env_int("CONNECT_TIMEOUT", defaults.connect_timeout), 0
            ),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def mart_schema_name(self, release: int) -> str:
        """Return the mart schema name for a release."""
        return f"{self.mart_schema_prefix}_{release}"
