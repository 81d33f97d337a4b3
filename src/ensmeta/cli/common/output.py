"""Output formatting utilities for the CLI."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through Rich on the CLI console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def print(self, msg: str) -> None:
        """Print a raw Rich-formatted message to the console."""
        console.print(msg)

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def species_table(
        self, species: Mapping[int, str], title: str = "Species"
    ) -> None:
        """Render taxon id -> species name pairs."""
        t = Table(title=title, show_lines=False)
        t.add_column("Taxon ID", style="ok", no_wrap=True)
        t.add_column("Species")

        for taxon_id, name in species.items():
            t.add_row(str(taxon_id), name)

        console.print(t)

    def releases_table(
        self, releases: Mapping[int, str], *, current: int | None = None, title: str
    ) -> None:
        """
        Render release -> schema name pairs, marking the current release.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Release", style="ok", no_wrap=True)
        t.add_column("Schema")
        t.add_column("", style="meta")

        for release, schema_name in releases.items():
            marker = "current" if release == current else ""
            t.add_row(str(release), schema_name, marker)

        console.print(t)

    def warnings_table(self, warnings: Iterable[Any], title: str = "Warnings") -> None:
        """
        Expects objects with .name .value .reason (like ParseWarning)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Schema", style="warn")
        t.add_column("Value", style="meta")
        t.add_column("Reason")

        for w in warnings:
            t.add_row(str(w.name), str(w.value), str(w.reason))

        console.print(t)


out = Out()
