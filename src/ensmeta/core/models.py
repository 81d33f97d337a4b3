"""Core domain models for the Ensembl metadata resolver.

These models represent Ensembl catalog entities in a simple, immutable form.
They are intentionally free of PyMySQL types and UI/CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from ensmeta.core.errors import UnknownSpeciesError


class DatabaseType(str, Enum):
    """
    Enumeration of Ensembl schema categories.

    The lower-cased value is the token embedded in schema names, e.g.
    `homo_sapiens_core_47_36` is a CORE schema.

    Values:
        CORE: Core genomic annotation.
        CDNA: cDNA alignments.
        OTHERFEATURES: Additional feature sets (ESTs, RefSeq imports, ...).
        VARIATION: Variation data.
        FUNCGEN: Functional genomics (regulation).
        VEGA: Manually curated Vega annotation.
    """

    CORE = "CORE"
    CDNA = "CDNA"
    OTHERFEATURES = "OTHERFEATURES"
    VARIATION = "VARIATION"
    FUNCGEN = "FUNCGEN"
    VEGA = "VEGA"

    @property
    def token(self) -> str:
        """Return the token used for this type inside schema names."""
        return self.value.lower()

    @classmethod
    def parse(cls, value: str) -> DatabaseType:
        """Resolve a type from its name or schema token (case-insensitive)."""
        try:
            return cls(value.strip().upper())
        except ValueError as exc:
            known = ", ".join(t.token for t in cls)
            raise ValueError(
                f"Unknown database type '{value}'. Expected one of: {known}."
            ) from exc


@dataclass(frozen=True)
class SchemaNameRecord:
    """
    Parsed form of one catalog entry.

    Attributes:
        genus: First organism token (e.g. `homo`).
        species: Second organism token (e.g. `sapiens`).
        release: Ensembl release version, always > 0.
        schema_name: The raw schema name as reported by the server.
        database_type: Type the name was matched against.
        suffix: Residual suffix after the release (usually the assembly).
    """

    genus: str
    species: str
    release: int
    schema_name: str
    database_type: DatabaseType
    suffix: str = ""

    @property
    def species_name(self) -> str:
        """Canonical species key, `"<genus> <species>"`."""
        return f"{self.genus} {self.species}"


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Everything needed to open a connection to one resolved schema."""

    host: str
    port: int
    schema_name: str
    species_name: str | None = None
    release: int | None = None
    taxon_id: int | None = None


@dataclass(frozen=True)
class EnsemblDatabase:
    """Handle on a species schema of a given release and database type."""

    descriptor: ConnectionDescriptor
    database_type: DatabaseType = DatabaseType.CORE

    @property
    def schema_name(self) -> str:
        return self.descriptor.schema_name

    @property
    def release(self) -> int | None:
        return self.descriptor.release

    @property
    def species_name(self) -> str | None:
        return self.descriptor.species_name

    @property
    def taxon_id(self) -> int | None:
        return self.descriptor.taxon_id


def mart_table_prefix(species_name: str) -> str:
    """
    Return the mart dataset prefix for a species name.

    Mart datasets are named after the first letter of the genus followed by
    the species epithet, e.g. `homo sapiens` -> `hsapiens`.
    """
    parts = species_name.split()
    if len(parts) < 2 or not parts[0]:
        raise ValueError(f"Species name must be '<genus> <species>': {species_name!r}")
    return f"{parts[0][0]}{parts[-1]}".lower()


@dataclass(frozen=True)
class EnsemblMartDatabase:
    """
    Handle on the Ensembl mart schema of a release.

    Attributes:
        descriptor: Connection descriptor for the mart schema.
        taxon_species: Snapshot of the taxon id -> species name index used
            to derive dataset prefixes for other species in the same mart.
    """

    descriptor: ConnectionDescriptor
    taxon_species: Mapping[int, str] = field(default_factory=dict)

    @property
    def schema_name(self) -> str:
        return self.descriptor.schema_name

    @property
    def release(self) -> int | None:
        return self.descriptor.release

    @property
    def species_name(self) -> str | None:
        return self.descriptor.species_name

    @property
    def taxon_id(self) -> int | None:
        return self.descriptor.taxon_id

    def table_name_prefix(self, taxon_id: int | None = None) -> str:
        """Return the mart table prefix for this species, or for `taxon_id`."""
        if taxon_id is None:
            if not self.species_name:
                raise ValueError("Mart database has no species attached.")
            return mart_table_prefix(self.species_name)
        species_name = self.taxon_species.get(taxon_id)
        if species_name is None:
            raise UnknownSpeciesError(taxon_id)
        return mart_table_prefix(species_name)
