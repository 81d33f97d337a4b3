import pytest

from ensmeta.core.cache import MetadataCache
from ensmeta.core.errors import UnknownSpeciesError
from ensmeta.core.index import build_index
from ensmeta.core.metadata import EnsemblMetadata
from ensmeta.core.models import DatabaseType
from ensmeta.core.naming import SchemaNameParser

CORE = DatabaseType.CORE
UNKNOWN_TAXON = 424242


@pytest.fixture
def metadata(adapter) -> EnsemblMetadata:
    cache = MetadataCache(lambda: build_index(adapter, tuple(DatabaseType)))
    return EnsemblMetadata(cache)


def test_human_mouse_scenario(metadata):
    assert metadata.release_versions(9606, CORE) == {46, 47}
    assert metadata.current_release(9606) == 47
    assert metadata.schema_name(9606, 47, CORE) == "homo_sapiens_core_47_36"
    assert {"homo sapiens", "mus musculus"} <= metadata.species_names()
    assert metadata.taxon_ids() == {9606, 10090}


def test_accessors_are_idempotent_and_scan_once(metadata, adapter):
    first = (metadata.release_versions(9606, CORE), metadata.species_names())
    second = (metadata.release_versions(9606, CORE), metadata.species_names())

    assert first == second
    assert adapter.calls.count("list_catalog_names") == 1


def test_nothing_is_fetched_before_first_read(metadata, adapter):
    assert adapter.calls == []

    metadata.has_species(9606)

    assert adapter.calls.count("list_catalog_names") == 1


@pytest.mark.parametrize("taxon_id", [9606, 10090])
def test_current_release_is_max_core_release(metadata, taxon_id):
    assert metadata.current_release(taxon_id) == max(
        metadata.release_versions(taxon_id, CORE)
    )


def test_has_release(metadata):
    assert metadata.has_release(9606, 46, CORE) is True
    assert metadata.has_release(9606, 45, CORE) is False
    assert metadata.has_release(9606, 47, DatabaseType.VARIATION) is True
    assert metadata.has_release(10090, 46, DatabaseType.VARIATION) is False
    assert metadata.has_release(9606, 47, DatabaseType.FUNCGEN) is False


@pytest.mark.parametrize("database_type", list(DatabaseType))
def test_unknown_species_has_no_release(metadata, database_type):
    assert metadata.has_release(UNKNOWN_TAXON, 47, database_type) is False
    assert metadata.schema_name(UNKNOWN_TAXON, 47, database_type) is None


def test_unknown_species_errors(metadata):
    assert metadata.has_species(UNKNOWN_TAXON) is False
    assert metadata.species_name(UNKNOWN_TAXON) is None

    with pytest.raises(UnknownSpeciesError) as excinfo:
        metadata.current_release(UNKNOWN_TAXON)
    assert excinfo.value.taxon_id == UNKNOWN_TAXON

    with pytest.raises(UnknownSpeciesError):
        metadata.release_versions(UNKNOWN_TAXON, CORE)


def test_schema_name_absent_is_none(metadata):
    assert metadata.schema_name(9606, 45, CORE) is None
    assert metadata.schema_name(10090, 46, DatabaseType.VARIATION) is None


def test_release_versions_empty_for_type_without_schemas(metadata):
    assert metadata.release_versions(10090, DatabaseType.VARIATION) == set()


def test_database_types(metadata):
    assert metadata.database_types(9606) == {CORE, DatabaseType.VARIATION}
    assert metadata.database_types(10090) == {CORE}
    assert metadata.database_types(UNKNOWN_TAXON) == set()


def test_schema_names_are_ascending(metadata):
    assert list(metadata.schema_names(9606, CORE).items()) == [
        (46, "homo_sapiens_core_46_36"),
        (47, "homo_sapiens_core_47_36"),
    ]


def test_taxon_id_to_species_is_a_copy(metadata):
    mapping = metadata.taxon_id_to_species()
    mapping[1] = "changed"

    assert 1 not in metadata.taxon_ids()


def test_schema_names_round_trip_through_parser(metadata):
    parser = SchemaNameParser()

    for taxon_id in metadata.taxon_ids():
        species_name = metadata.species_name(taxon_id)
        for database_type in DatabaseType:
            for release in metadata.release_versions(taxon_id, database_type):
                assert metadata.has_release(taxon_id, release, database_type)
                schema_name = metadata.schema_name(taxon_id, release, database_type)
                assert schema_name is not None
                record = parser.parse(schema_name, database_type)
                assert record.release == release
                assert record.species_name == species_name
