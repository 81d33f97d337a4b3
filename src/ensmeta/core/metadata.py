"""Query facade over the cached Ensembl metadata.

Every operation makes sure the cache is populated before answering, so the
first call on a fresh factory pays for the catalog scan and all later calls
are served from memory. Lookups return None/False/empty sets for things that
do not exist; `current_release`, `release_versions` and `schema_names` raise
`UnknownSpeciesError` for taxon ids that are not indexed at all.
"""

from __future__ import annotations

from ensmeta.core.cache import MetadataCache
from ensmeta.core.errors import ParseWarning, UnknownSpeciesError
from ensmeta.core.index import MetadataIndex
from ensmeta.core.models import DatabaseType


class EnsemblMetadata:
    """Species, release and schema lookups keyed by NCBI taxon id."""

    def __init__(self, cache: MetadataCache):
        self.cache = cache

    def _index(self) -> MetadataIndex:
        return self.cache.ensure_populated()

    def species_name(self, taxon_id: int) -> str | None:
        """Return the species name for a taxon id, or None if unknown."""
        return self._index().taxon_ids.get(taxon_id)

    def has_species(self, taxon_id: int) -> bool:
        """Return True if the taxon id is indexed."""
        return taxon_id in self._index().taxon_ids

    def has_release(
        self, taxon_id: int, release: int, database_type: DatabaseType
    ) -> bool:
        """Return True if a schema exists for species, release and type."""
        index = self._index()
        species_name = index.taxon_ids.get(taxon_id)
        return release in index.species_releases(database_type, species_name)

    def current_release(self, taxon_id: int) -> int:
        """
        Return the latest CORE release for a species.

        CORE numbering is used for every database type.

        Raises:
            UnknownSpeciesError: If the species has no CORE schema.
        """
        index = self._index()
        by_release = index.species_releases(
            DatabaseType.CORE, index.taxon_ids.get(taxon_id)
        )
        if not by_release:
            raise UnknownSpeciesError(taxon_id)
        return max(by_release)

    def schema_name(
        self, taxon_id: int, release: int, database_type: DatabaseType
    ) -> str | None:
        """Return the schema name for species, release and type, or None."""
        index = self._index()
        species_name = index.taxon_ids.get(taxon_id)
        return index.species_releases(database_type, species_name).get(release)

    def release_versions(self, taxon_id: int, database_type: DatabaseType) -> set[int]:
        """
        Return every release available for a species and database type.

        Raises:
            UnknownSpeciesError: If the taxon id is not indexed.
        """
        index = self._index()
        species_name = index.taxon_ids.get(taxon_id)
        if species_name is None:
            raise UnknownSpeciesError(taxon_id)
        return set(index.species_releases(database_type, species_name))

    def schema_names(
        self, taxon_id: int, database_type: DatabaseType
    ) -> dict[int, str]:
        """Return release -> schema name for a species and type, ascending."""
        index = self._index()
        species_name = index.taxon_ids.get(taxon_id)
        if species_name is None:
            raise UnknownSpeciesError(taxon_id)
        return dict(index.species_releases(database_type, species_name))

    def database_types(self, taxon_id: int) -> set[DatabaseType]:
        """Return the database types with at least one schema for a species."""
        index = self._index()
        species_name = index.taxon_ids.get(taxon_id)
        if species_name is None:
            return set()
        return {
            database_type
            for database_type, by_species in index.releases.items()
            if by_species.get(species_name)
        }

    def species_names(self) -> set[str]:
        return set(self._index().taxon_ids.values())

    def taxon_ids(self) -> set[int]:
        return set(self._index().taxon_ids)

    def taxon_id_to_species(self) -> dict[int, str]:
        """Return a copy of the taxon id -> species name index."""
        return dict(self._index().taxon_ids)

    def parse_warnings(self) -> list[ParseWarning]:
        """Return the anomalies skipped while the index was built."""
        return list(self._index().warnings)
