"""Common CLI options for the CLI."""

import typer

HostOpt = typer.Option(
    None,
    "--host",
    help="Ensembl MySQL host (overrides ENSMETA_HOST)",
)

PortOpt = typer.Option(
    None,
    "--port",
    help="Ensembl MySQL port (overrides ENSMETA_PORT)",
)

UserOpt = typer.Option(
    None,
    "--user",
    "-u",
    help="Database user (overrides ENSMETA_USER)",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Show debug logging",
)

TaxonArg = typer.Argument(
    ...,
    help="NCBI taxon ID of the species (e.g. 9606)",
)

ReleaseOpt = typer.Option(
    0,
    "--release",
    "-r",
    min=0,
    help="Ensembl release (0 = current release)",
)

TypeOpt = typer.Option(
    "core",
    "--type",
    "-t",
    help="Database type (core, variation, funcgen, ...)",
)

MartOpt = typer.Option(
    False,
    "--mart",
    help="Describe the mart schema instead of the species schema",
)
