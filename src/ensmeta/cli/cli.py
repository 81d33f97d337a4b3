"""CLI application for Ensembl metadata lookups."""

import typer

from ensmeta.cli.commands.databases import db_app
from ensmeta.cli.commands.species import species_app
from ensmeta.cli.common.context import build_app_context
from ensmeta.cli.common.options import HostOpt, PortOpt, UserOpt, VerboseOpt
from ensmeta.cli.common.output import setup_logging

app = typer.Typer(
    help="ensmeta - Ensembl species, release and schema resolver",
    no_args_is_help=True,
)

app.add_typer(species_app, name="species")
app.add_typer(db_app, name="db")


@app.callback()
def _init(
    ctx: typer.Context,
    host: str | None = HostOpt,
    port: int | None = PortOpt,
    user: str | None = UserOpt,
    verbose: bool = VerboseOpt,
):
    """Configure logging and the Ensembl database factory."""
    setup_logging(verbose)
    ctx.obj = build_app_context(host=host, port=port, user=user)
    ctx.call_on_close(ctx.obj.factory.close)


if __name__ == "__main__":
    app()
