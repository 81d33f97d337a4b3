"""Factory for Ensembl database handles.

The factory owns one metadata adapter and one cache. It validates a
(taxon id, release, database type) request against the cached metadata,
resolves release 0 to the current release, and returns a handle carrying the
connection descriptor for the resolved schema. Opening the connection itself
is left to `connect()` / `ensmeta.core.connection`.
"""

from __future__ import annotations

import logging
from functools import partial

import pymysql

from ensmeta.core.adapters.mysql import MySqlCatalogAdapter
from ensmeta.core.cache import MetadataCache
from ensmeta.core.config import EnsemblConfig
from ensmeta.core.connection import connect_descriptor, connect_metadata_server
from ensmeta.core.errors import UnknownReleaseError, UnknownSpeciesError
from ensmeta.core.index import CatalogAdapter, MetadataIndex, build_index
from ensmeta.core.metadata import EnsemblMetadata
from ensmeta.core.models import (
    ConnectionDescriptor,
    DatabaseType,
    EnsemblDatabase,
    EnsemblMartDatabase,
)
from ensmeta.core.naming import SchemaNameParser

logger = logging.getLogger(__name__)

CURRENT_RELEASE = 0


class EnsemblDatabaseFactory:
    """Creates Ensembl schema handles validated against server metadata."""

    def __init__(
        self,
        config: EnsemblConfig | None = None,
        adapter: CatalogAdapter | None = None,
        *,
        parser: SchemaNameParser | None = None,
    ):
        """
        Create a factory. No server round trip happens until metadata is read.

        Args:
            config: Static settings (defaults to the public Ensembl server).
            adapter: Catalog adapter; a PyMySQL adapter on `config.host` is
                created when omitted.
            parser: Schema name parser; built from `config.schema_pattern`
                when omitted.
        """
        self.config = config or EnsemblConfig()
        self.adapter = adapter or MySqlCatalogAdapter(
            partial(connect_metadata_server, self.config)
        )
        self.parser = parser or SchemaNameParser(self.config.schema_pattern)
        self.cache = MetadataCache(self._load_index)
        self.metadata = EnsemblMetadata(self.cache)

    @classmethod
    def from_env(cls, **overrides) -> EnsemblDatabaseFactory:
        """Create a factory configured from `ENSMETA_*` environment variables."""
        return cls(EnsemblConfig.from_env(**overrides))

    def __enter__(self) -> EnsemblDatabaseFactory:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _load_index(self) -> MetadataIndex:
        return build_index(
            self.adapter,
            self.config.database_types,
            self.parser,
            strict_taxon_ids=self.config.strict_taxon_ids,
        )

    def populate(self) -> MetadataIndex:
        """Fetch metadata now instead of on first read."""
        return self.cache.ensure_populated()

    def close(self) -> None:
        """Close the metadata connection, if the adapter holds one."""
        close = getattr(self.adapter, "close", None)
        if callable(close):
            close()

    def _resolve_release(
        self, taxon_id: int, release: int, database_type: DatabaseType
    ) -> int:
        if not self.metadata.has_species(taxon_id):
            raise UnknownSpeciesError(taxon_id)
        if release == CURRENT_RELEASE:
            return self.metadata.current_release(taxon_id)
        if not self.metadata.has_release(taxon_id, release, database_type):
            raise UnknownReleaseError(taxon_id, release, database_type)
        return release

    def create_database(
        self,
        taxon_id: int,
        release: int = CURRENT_RELEASE,
        database_type: DatabaseType = DatabaseType.CORE,
    ) -> EnsemblDatabase:
        """
        Return a handle on a species schema.

        Args:
            taxon_id: NCBI taxon id of the species.
            release: Ensembl release, or 0 for the current CORE release.
            database_type: Schema category.

        Raises:
            UnknownSpeciesError: If the species is not in Ensembl.
            UnknownReleaseError: If the release does not exist for the type.
        """
        release = self._resolve_release(taxon_id, release, database_type)
        schema_name = self.metadata.schema_name(taxon_id, release, database_type)
        if schema_name is None:
            # current CORE release not mirrored for this type
            raise UnknownReleaseError(taxon_id, release, database_type)

        descriptor = ConnectionDescriptor(
            host=self.config.host,
            port=self.config.port,
            schema_name=schema_name,
            species_name=self.metadata.species_name(taxon_id),
            release=release,
            taxon_id=taxon_id,
        )
        return EnsemblDatabase(descriptor=descriptor, database_type=database_type)

    def create_mart_database(
        self, taxon_id: int, release: int = CURRENT_RELEASE
    ) -> EnsemblMartDatabase:
        """
        Return a handle on the mart schema of a release.

        Mart releases follow CORE releases, so the release is validated
        against the species' CORE schemas.

        Raises:
            UnknownSpeciesError: If the species is not in Ensembl.
            UnknownReleaseError: If the CORE release does not exist.
        """
        release = self._resolve_release(taxon_id, release, DatabaseType.CORE)
        descriptor = ConnectionDescriptor(
            host=self.config.mart_host,
            port=self.config.mart_port,
            schema_name=self.config.mart_schema_name(release),
            species_name=self.metadata.species_name(taxon_id),
            release=release,
            taxon_id=taxon_id,
        )
        return EnsemblMartDatabase(
            descriptor=descriptor,
            taxon_species=self.metadata.taxon_id_to_species(),
        )

    def connect(
        self, database: EnsemblDatabase | EnsemblMartDatabase | ConnectionDescriptor
    ) -> pymysql.connections.Connection:
        """Open a new connection to the schema behind a handle or descriptor."""
        descriptor = getattr(database, "descriptor", database)
        logger.debug(
            "Connecting to %s:%s/%s",
            descriptor.host,
            descriptor.port,
            descriptor.schema_name,
        )
        return connect_descriptor(descriptor, self.config)
