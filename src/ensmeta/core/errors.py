"""Error types raised by the Ensembl metadata resolver.

Transport failures (`DataAccessError`) and caller input failures
(`UnknownSpeciesError`, `UnknownReleaseError`) are kept apart so callers can
tell "the server could not be read" from "the thing you asked for does not
exist". Naming-convention anomalies are not exceptions at all: they are
recorded as `ParseWarning` values and logged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ensmeta.core.models import DatabaseType


class EnsemblError(RuntimeError):
    """Base class for resolver errors."""


class DataAccessError(EnsemblError):
    """Raised when catalog or meta-table queries cannot be executed."""


class MetadataConsistencyError(EnsemblError):
    """Raised when server metadata contradicts itself (strict mode only)."""


class UnknownSpeciesError(EnsemblError, LookupError):
    """Raised when no species is indexed for a taxon id."""

    def __init__(self, taxon_id: int):
        self.taxon_id = taxon_id
        super().__init__(
            f"Ensembl does not contain species identified by NCBI taxon ID {taxon_id}."
        )


class UnknownReleaseError(EnsemblError, LookupError):
    """Raised when a release does not exist for a species and database type."""

    def __init__(self, taxon_id: int, release: int, database_type: DatabaseType):
        self.taxon_id = taxon_id
        self.release = release
        self.database_type = database_type
        super().__init__(
            f"Release {release} of database type '{database_type.value}' does not "
            f"exist for species identified by NCBI taxon ID {taxon_id}."
        )


@dataclass(frozen=True)
class ParseWarning:
    """
    A catalog name or meta value that failed the naming/integer convention.

    Attributes:
        name: Schema name the value came from.
        value: Offending raw value.
        reason: Human-readable explanation.
    """

    name: str
    value: str
    reason: str

    def __str__(self) -> str:
        return f"{self.name}: {self.reason} ({self.value!r})"
