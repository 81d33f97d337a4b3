from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from ensmeta.core.index import meta_table_reference  # noqa: E402

CATALOG = [
    "information_schema",
    "homo_sapiens_core_46_36",
    "homo_sapiens_core_47_36",
    "homo_sapiens_variation_47_36",
    "homo_sapiens_core_expression_est_47_36",
    "mus_musculus_core_46_37",
    "foo_bar_47_36",
    "homo_sapiens_core_x_36",
    "homo_sapiens_core_00_36",
    "ensembl_mart_47",
]

TAXONOMY = {
    "homo_sapiens_core_47_36": "9606",
    "mus_musculus_core_46_37": "10090",
}


class StubCatalogAdapter:
    """In-memory catalog adapter that records every server call."""

    def __init__(self, names=None, taxonomy=None):
        self.names = list(CATALOG if names is None else names)
        self.taxonomy = dict(TAXONOMY if taxonomy is None else taxonomy)
        self.calls: list[str] = []
        self.closed = False

    def list_catalog_names(self) -> list[str]:
        self.calls.append("list_catalog_names")
        return list(self.names)

    def query(self, sql, params=None):
        self.calls.append(f"query:{sql}")
        for schema_name, value in self.taxonomy.items():
            if meta_table_reference(schema_name) in sql:
                return [(value,)]
        return []

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def adapter() -> StubCatalogAdapter:
    return StubCatalogAdapter()


@pytest.fixture
def make_adapter():
    return StubCatalogAdapter
