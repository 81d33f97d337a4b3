"""Exit handling utilities for the CLI."""

from contextlib import contextmanager
from typing import NoReturn

import typer

from ensmeta.cli.common.output import out
from ensmeta.core.errors import (
    DataAccessError,
    MetadataConsistencyError,
    UnknownReleaseError,
    UnknownSpeciesError,
)

EXIT_DATA_ACCESS = 1
EXIT_BAD_INPUT = 2


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """
    Helper function to print an error message and exit with a given code.

    Exists to satisfy pylint W0707 and to standardize error exits.
    """
    out.error(message)
    raise typer.Exit(code) from exc


@contextmanager
def exit_on_ensembl_errors():
    """Turn resolver errors into CLI exits (2 for bad input, 1 for I/O)."""
    try:
        yield
    except (UnknownSpeciesError, UnknownReleaseError) as exc:
        exit_from_exc(exc, message=str(exc), code=EXIT_BAD_INPUT)
    except (DataAccessError, MetadataConsistencyError) as exc:
        exit_from_exc(exc, message=str(exc), code=EXIT_DATA_ACCESS)
