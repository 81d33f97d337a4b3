"""Schema name parsing.

Ensembl names every per-species schema as
`<genus>_<species>_<type>_<release>_<suffix>`, e.g. `homo_sapiens_core_47_36`.
This module turns such names into `SchemaNameRecord` values. The pattern is a
template with a `{type}` placeholder, so one raw catalog listing can be tested
once per database type.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from ensmeta.core.config import DEFAULT_SCHEMA_PATTERN
from ensmeta.core.errors import ParseWarning
from ensmeta.core.models import DatabaseType, SchemaNameRecord

logger = logging.getLogger(__name__)

_TYPE_PLACEHOLDER = "{type}"
_GROUPS = 4


class SchemaNameParser:
    """
    Parser for Ensembl schema names of a given database type.

    Capture groups of the pattern are, in order: genus, species, release and
    residual suffix.
    """

    def __init__(self, pattern: str = DEFAULT_SCHEMA_PATTERN):
        """
        Create a parser from a pattern template.

        Args:
            pattern: Regular expression containing the `{type}` placeholder
                and exactly four capture groups.

        Raises:
            ValueError: If the template lacks the placeholder, does not
                compile, or has the wrong number of groups.
        """
        if _TYPE_PLACEHOLDER not in pattern:
            raise ValueError(f"Schema pattern must contain '{_TYPE_PLACEHOLDER}'.")
        self.pattern = pattern
        self._compiled: dict[DatabaseType, re.Pattern] = {}
        # validates the template up front
        rx = self.compiled(DatabaseType.CORE)
        if rx.groups != _GROUPS:
            raise ValueError(
                f"Schema pattern must have {_GROUPS} capture groups, got {rx.groups}."
            )

    def compiled(self, database_type: DatabaseType) -> re.Pattern:
        """Return the pattern compiled for one database type."""
        rx = self._compiled.get(database_type)
        if rx is None:
            source = self.pattern.replace(
                _TYPE_PLACEHOLDER, re.escape(database_type.token)
            )
            try:
                rx = re.compile(source)
            except re.error as exc:
                raise ValueError(f"Invalid schema pattern: {exc}") from exc
            self._compiled[database_type] = rx
        return rx

    def parse(
        self,
        raw_name: str,
        database_type: DatabaseType,
        *,
        on_warning: Callable[[ParseWarning], None] | None = None,
    ) -> SchemaNameRecord | None:
        """
        Parse one catalog name for a database type.

        Names that do not match return None silently. A release that is not
        an integer is reported through a logged `ParseWarning` (also passed
        to `on_warning`) and returns None. Release 0 is reserved for "current
        release" and is never a record.
        """
        match = self.compiled(database_type).search(raw_name)
        if not match:
            return None

        genus, species, release_text, suffix = match.groups()
        try:
            release = int(release_text, 10)
        except (TypeError, ValueError):
            release = None

        if release is None or release < 0:
            warning = ParseWarning(
                name=raw_name,
                value=str(release_text),
                reason="release is not a positive integer",
            )
            logger.warning("Skipping schema %s", warning)
            if on_warning is not None:
                on_warning(warning)
            return None

        if release == 0:
            logger.debug("Skipping schema %s with reserved release 0", raw_name)
            return None

        return SchemaNameRecord(
            genus=genus,
            species=species,
            release=release,
            schema_name=raw_name,
            database_type=database_type,
            suffix=suffix or "",
        )
