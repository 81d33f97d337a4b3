"""Metadata index construction.

The index is built in two ordered passes over the server:

1. Catalog pass: the schema listing is parsed once per configured database
   type into `releases[type][species][release] = schema_name`.
2. Taxon pass: for every CORE species, the `meta` table of its latest CORE
   schema is asked for `species.taxonomy_id`, giving `taxon_id -> species`.

The taxon pass reads the CORE result of the catalog pass, so CORE must be one
of the configured types. Naming and integer anomalies degrade the index (the
entry is dropped and a `ParseWarning` recorded); I/O failures abort the build
with `DataAccessError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol, Sequence

from ensmeta.core.errors import MetadataConsistencyError, ParseWarning
from ensmeta.core.models import DatabaseType
from ensmeta.core.naming import SchemaNameParser

logger = logging.getLogger(__name__)

TAXONOMY_ID_META_KEY = "species.taxonomy_id"
SQL_SELECT_TAXON_ID = "SELECT meta_value FROM {meta_table} WHERE meta_key = %s"

# species name -> release -> schema name, ascending by release
SpeciesReleases = Mapping[str, Mapping[int, str]]


class CatalogAdapter(Protocol):
    """Interface for the server operations used to build the index."""

    def list_catalog_names(self) -> list[str]:
        """Return every schema name visible on the server."""
        ...

    def query(self, sql: str, params: Sequence[Any] | None = None) -> list[tuple]:
        """Execute a query and return its rows."""
        ...


@dataclass(frozen=True)
class MetadataIndex:
    """
    Read-only result of one metadata fetch.

    Attributes:
        releases: Database type -> species name -> release -> schema name.
            Inner mappings are sorted ascending, so the last key is the
            latest release; every species present has at least one release.
        taxon_ids: NCBI taxon id -> species name.
        warnings: Anomalies skipped while building.
    """

    releases: Mapping[DatabaseType, SpeciesReleases] = field(default_factory=dict)
    taxon_ids: Mapping[int, str] = field(default_factory=dict)
    warnings: tuple[ParseWarning, ...] = ()

    def species_releases(
        self, database_type: DatabaseType, species_name: str | None
    ) -> Mapping[int, str]:
        """Return release -> schema name for one species/type (empty if absent)."""
        if species_name is None:
            return {}
        return self.releases.get(database_type, {}).get(species_name, {})


def meta_table_reference(schema_name: str) -> str:
    """
    Return the backtick-quoted `<schema>.meta` table reference.

    `%` is doubled because the reference is embedded in a parameterized query.
    """
    quoted = schema_name.replace("`", "``").replace("%", "%%")
    return f"`{quoted}`.`meta`"


def index_catalog(
    names: Iterable[str],
    database_type: DatabaseType,
    parser: SchemaNameParser,
    warnings: list[ParseWarning] | None = None,
) -> dict[str, dict[int, str]]:
    """
    Fold the catalog names that match one database type into a species map.

    A duplicate (species, release) keeps the last name seen.
    """
    found: dict[str, dict[int, str]] = {}
    on_warning = warnings.append if warnings is not None else None
    for name in names:
        record = parser.parse(name, database_type, on_warning=on_warning)
        if record is None:
            continue
        found.setdefault(record.species_name, {})[record.release] = record.schema_name

    return {
        species: dict(sorted(by_release.items()))
        for species, by_release in sorted(found.items())
    }


def fetch_taxon_ids(
    adapter: CatalogAdapter,
    core: SpeciesReleases,
    *,
    strict: bool = False,
    warnings: list[ParseWarning] | None = None,
) -> dict[int, str]:
    """
    Resolve NCBI taxon ids for every CORE species.

    Uses the latest CORE schema of each species. Species whose meta table has
    no taxonomy row are left out; non-integer values are recorded as
    warnings. Duplicate ids overwrite earlier species unless `strict`.

    Raises:
        MetadataConsistencyError: On a duplicate taxon id in strict mode.
    """
    taxon_ids: dict[int, str] = {}
    for species_name, by_release in core.items():
        latest = max(by_release)
        schema_name = by_release[latest]

        sql = SQL_SELECT_TAXON_ID.format(meta_table=meta_table_reference(schema_name))
        rows = adapter.query(sql, (TAXONOMY_ID_META_KEY,))
        if not rows:
            logger.debug("No %s in %s", TAXONOMY_ID_META_KEY, schema_name)
            continue

        raw_value = rows[0][0]
        if isinstance(raw_value, (bytes, bytearray)):
            raw_value = raw_value.decode("utf-8")
        try:
            taxon_id = int(str(raw_value).strip(), 10)
        except ValueError:
            warning = ParseWarning(
                name=schema_name,
                value=str(raw_value),
                reason=f"{TAXONOMY_ID_META_KEY} is not an integer",
            )
            logger.warning("Skipping species %s: %s", species_name, warning)
            if warnings is not None:
                warnings.append(warning)
            continue

        previous = taxon_ids.get(taxon_id)
        if previous is not None and previous != species_name:
            if strict:
                raise MetadataConsistencyError(
                    f"NCBI taxon ID {taxon_id} is reported by both "
                    f"'{previous}' and '{species_name}'."
                )
            warning = ParseWarning(
                name=schema_name,
                value=str(taxon_id),
                reason=f"taxon id already assigned to '{previous}', overwritten",
            )
            logger.warning("Duplicate taxon id: %s", warning)
            if warnings is not None:
                warnings.append(warning)

        taxon_ids[taxon_id] = species_name

    return dict(sorted(taxon_ids.items()))


def build_index(
    adapter: CatalogAdapter,
    database_types: Iterable[DatabaseType],
    parser: SchemaNameParser | None = None,
    *,
    strict_taxon_ids: bool = False,
) -> MetadataIndex:
    """
    Build the full metadata index from the server.

    Args:
        adapter: Catalog adapter used for the listing and meta queries.
        database_types: Types to index; must include CORE.
        parser: Schema name parser (default pattern if omitted).
        strict_taxon_ids: Fail on duplicate taxon ids instead of overwriting.

    Returns:
        The populated MetadataIndex.

    Raises:
        ValueError: If CORE is not among the database types.
        DataAccessError: If a server query fails.
        MetadataConsistencyError: On duplicate taxon ids in strict mode.
    """
    types = tuple(dict.fromkeys(database_types))
    if DatabaseType.CORE not in types:
        raise ValueError("Taxon ids are read from CORE schemas; CORE must be indexed.")
    parser = parser or SchemaNameParser()
    warnings: list[ParseWarning] = []

    logger.info("Fetching Ensembl metadata (%s).", ", ".join(t.token for t in types))

    # catalog pass
    names = adapter.list_catalog_names()
    releases = {t: index_catalog(names, t, parser, warnings) for t in types}

    # taxon pass, needs the CORE releases above
    taxon_ids = fetch_taxon_ids(
        adapter,
        releases[DatabaseType.CORE],
        strict=strict_taxon_ids,
        warnings=warnings,
    )

    logger.info(
        "Indexed %d schema names: %d CORE species, %d taxon ids, %d warnings.",
        len(names),
        len(releases[DatabaseType.CORE]),
        len(taxon_ids),
        len(warnings),
    )
    return MetadataIndex(
        releases=releases, taxon_ids=taxon_ids, warnings=tuple(warnings)
    )
