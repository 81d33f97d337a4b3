import pytest

from ensmeta.core.config import DEFAULT_SCHEMA_PATTERN, EnsemblConfig, sanitize_host
from ensmeta.core.models import DatabaseType


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "HOST",
        "PORT",
        "USER",
        "PASSWORD",
        "DEFAULT_SCHEMA",
        "MART_HOST",
        "MART_PORT",
        "MART_SCHEMA_PREFIX",
        "DATABASE_TYPES",
        "SCHEMA_PATTERN",
        "STRICT_TAXON_IDS",
        "CONNECT_TIMEOUT",
    ):
        monkeypatch.delenv(f"ENSMETA_{name}", raising=False)


def test_defaults_point_at_public_server():
    config = EnsemblConfig()

    assert config.host == "ensembldb.ensembl.org"
    assert config.port == 5306
    assert config.user == "anonymous"
    assert config.database_types == tuple(DatabaseType)
    assert config.schema_pattern == DEFAULT_SCHEMA_PATTERN
    assert config.strict_taxon_ids is False


def test_from_env_reads_variables(monkeypatch):
    monkeypatch.setenv("ENSMETA_HOST", "mysql://db.local:3306/")
    monkeypatch.setenv("ENSMETA_PORT", "3306")
    monkeypatch.setenv("ENSMETA_MART_SCHEMA_PREFIX", "ensembl_mart_test")
    monkeypatch.setenv("ENSMETA_DATABASE_TYPES", "core, variation")
    monkeypatch.setenv("ENSMETA_STRICT_TAXON_IDS", "yes")

    config = EnsemblConfig.from_env()

    assert config.host == "db.local"
    assert config.port == 3306
    assert config.mart_schema_name(47) == "ensembl_mart_test_47"
    assert config.database_types == (DatabaseType.CORE, DatabaseType.VARIATION)
    assert config.strict_taxon_ids is True


def test_from_env_falls_back_on_bad_numbers(monkeypatch):
    monkeypatch.setenv("ENSMETA_PORT", "not-a-port")
    monkeypatch.setenv("ENSMETA_CONNECT_TIMEOUT", "-5")

    config = EnsemblConfig.from_env()

    assert config.port == 5306
    assert config.connect_timeout == 0


def test_from_env_overrides_win(monkeypatch):
    monkeypatch.setenv("ENSMETA_HOST", "env.example.org")

    config = EnsemblConfig.from_env(host="cli.example.org", port=None)

    assert config.host == "cli.example.org"
    assert config.port == 5306


def test_database_types_must_include_core():
    with pytest.raises(ValueError, match="CORE"):
        EnsemblConfig(database_types=(DatabaseType.VARIATION,))


def test_unknown_database_type_in_env(monkeypatch):
    monkeypatch.setenv("ENSMETA_DATABASE_TYPES", "core,compara")

    with pytest.raises(ValueError, match="compara"):
        EnsemblConfig.from_env()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("ensembldb.ensembl.org", "ensembldb.ensembl.org"),
        ("ensembldb.ensembl.org/", "ensembldb.ensembl.org"),
        ("mysql://ensembldb.ensembl.org:5306", "ensembldb.ensembl.org"),
        ("ensembldb.ensembl.org/homo_sapiens_core_47_36?x=1", "ensembldb.ensembl.org"),
        (None, None),
        ("", ""),
    ],
)
def test_sanitize_host(raw, expected):
    assert sanitize_host(raw) == expected
