from __future__ import annotations

import typer

from ensmeta.cli.commands.species import parse_type_or_exit
from ensmeta.cli.common.context import AppContext
from ensmeta.cli.common.exits import exit_on_ensembl_errors
from ensmeta.cli.common.options import MartOpt, ReleaseOpt, TaxonArg, TypeOpt
from ensmeta.cli.common.output import out
from ensmeta.core.models import DatabaseType

db_app = typer.Typer(
    help="Resolve schema names and connection details.",
    no_args_is_help=True,
)


@db_app.command("schema")
def db_schema(
    ctx: typer.Context,
    taxon_id: int = TaxonArg,
    release: int = ReleaseOpt,
    type_: str = TypeOpt,
):
    """Print the schema name for a species, release and database type."""
    appctx: AppContext = ctx.obj
    database_type = parse_type_or_exit(type_)

    with exit_on_ensembl_errors():
        with out.status("Loading Ensembl metadata..."):
            database = appctx.factory.create_database(
                taxon_id, release=release, database_type=database_type
            )

    typer.echo(database.schema_name)


@db_app.command("describe")
def db_describe(
    ctx: typer.Context,
    taxon_id: int = TaxonArg,
    release: int = ReleaseOpt,
    type_: str = TypeOpt,
    mart: bool = MartOpt,
):
    """Show the connection descriptor for a species schema or mart schema."""
    appctx: AppContext = ctx.obj
    factory = appctx.factory
    database_type = parse_type_or_exit(type_)

    if mart and database_type is not DatabaseType.CORE:
        out.warn("--type is ignored with --mart; mart releases follow core releases.")

    with exit_on_ensembl_errors():
        with out.status("Loading Ensembl metadata..."):
            if mart:
                database = factory.create_mart_database(taxon_id, release=release)
            else:
                database = factory.create_database(
                    taxon_id, release=release, database_type=database_type
                )

    d = database.descriptor
    out.header("Mart database" if mart else f"{database_type.token} database")
    items = {
        "species": d.species_name,
        "taxon id": d.taxon_id,
        "release": d.release,
        "host": d.host,
        "port": d.port,
        "schema": d.schema_name,
    }
    if mart:
        items["table prefix"] = database.table_name_prefix()
    out.kv(items)
