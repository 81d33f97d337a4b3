"""Application context management for the CLI."""

from dataclasses import dataclass

from ensmeta.cli.common.exits import die
from ensmeta.core.config import EnsemblConfig
from ensmeta.core.factory import EnsemblDatabaseFactory


@dataclass
class AppContext:
    """Application context holding the configuration and database factory."""

    config: EnsemblConfig
    factory: EnsemblDatabaseFactory


def build_app_context(
    host: str | None = None,
    port: int | None = None,
    user: str | None = None,
) -> AppContext:
    """Build and return the application context.

    Args:
        host: Optional host overriding the environment configuration.
        port: Optional port overriding the environment configuration.
        user: Optional user overriding the environment configuration.

    Returns:
        AppContext: Context with configuration and a lazily connecting factory.
    """
    try:
        config = EnsemblConfig.from_env(host=host, port=port, user=user)
    except ValueError as exc:
        die(f"Invalid configuration: {exc}", code=2)
    return AppContext(config=config, factory=EnsemblDatabaseFactory(config))
