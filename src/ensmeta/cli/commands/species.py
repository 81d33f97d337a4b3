from __future__ import annotations

import typer

from ensmeta.cli.common.context import AppContext
from ensmeta.cli.common.exits import exit_on_ensembl_errors, warn_exit
from ensmeta.cli.common.options import TaxonArg, TypeOpt
from ensmeta.cli.common.output import out
from ensmeta.cli.tui import select_species
from ensmeta.core.models import DatabaseType

species_app = typer.Typer(
    help="Species, releases and taxon IDs known to the Ensembl server.",
    no_args_is_help=True,
)


def parse_type_or_exit(value: str) -> DatabaseType:
    """Resolve a --type value and convert unknown types into CLI input errors."""
    try:
        return DatabaseType.parse(value)
    except ValueError as exc:
        out.error(str(exc))
        raise typer.Exit(2) from exc


@species_app.command("list")
def species_list(
    ctx: typer.Context,
    name: str | None = typer.Option(
        None, "--name", help="Case-insensitive substring filter on species name"
    ),
):
    """List species with their NCBI taxon IDs."""
    appctx: AppContext = ctx.obj
    metadata = appctx.factory.metadata

    with exit_on_ensembl_errors():
        with out.status("Loading Ensembl metadata..."):
            species = metadata.taxon_id_to_species()

    if name:
        want = name.lower()
        species = {k: v for k, v in species.items() if want in v.lower()}

    if not species:
        warn_exit("No species found.")

    out.header("Species")
    out.info(f"Host: {appctx.config.host} | Species: {len(species)}")
    out.species_table(species)


@species_app.command("releases")
def species_releases(
    ctx: typer.Context,
    taxon_id: int = TaxonArg,
    type_: str = TypeOpt,
):
    """List the releases (and schema names) available for a species."""
    appctx: AppContext = ctx.obj
    metadata = appctx.factory.metadata
    database_type = parse_type_or_exit(type_)

    with exit_on_ensembl_errors():
        with out.status("Loading Ensembl metadata..."):
            releases = metadata.schema_names(taxon_id, database_type)
            current = metadata.current_release(taxon_id)
        species_name = metadata.species_name(taxon_id)

    if not releases:
        warn_exit(f"No {database_type.token} schemas for {species_name} ({taxon_id}).")

    out.header(f"{species_name} ({taxon_id})")
    out.releases_table(
        releases, current=current, title=f"{database_type.token} releases"
    )


@species_app.command("current")
def species_current(ctx: typer.Context, taxon_id: int = TaxonArg):
    """Print the current (latest core) release of a species."""
    appctx: AppContext = ctx.obj

    with exit_on_ensembl_errors():
        with out.status("Loading Ensembl metadata..."):
            release = appctx.factory.metadata.current_release(taxon_id)

    typer.echo(release)


@species_app.command("warnings")
def species_warnings(ctx: typer.Context):
    """Show schema names and meta values skipped while indexing."""
    appctx: AppContext = ctx.obj

    with exit_on_ensembl_errors():
        with out.status("Loading Ensembl metadata..."):
            warnings = appctx.factory.metadata.parse_warnings()

    if not warnings:
        out.success("No schema names were skipped.")
        raise typer.Exit(0)

    out.header("Skipped entries")
    out.warnings_table(warnings)


@species_app.command("pick")
def species_pick(ctx: typer.Context, type_: str = TypeOpt):
    """Pick a species interactively and show its releases."""
    appctx: AppContext = ctx.obj
    database_type = parse_type_or_exit(type_)

    with exit_on_ensembl_errors():
        with out.status("Loading Ensembl metadata..."):
            species = appctx.factory.metadata.taxon_id_to_species()

    taxon_id = select_species(species)
    if taxon_id is None:
        warn_exit("No species selected.")

    species_releases(ctx, taxon_id=taxon_id, type_=database_type.token)
