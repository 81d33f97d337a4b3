"""Terminal UI utilities for the Ensembl metadata CLI."""

from __future__ import annotations

from typing import Mapping

import questionary
from prompt_toolkit.styles import Style

_MAX_SPECIES_NAME_WIDTH = 64

# matches the rich theme in cli/common/output.py
_PICKER_STYLE = Style.from_dict(
    {
        "question": "bold ansibrightcyan",
        "pointer": "bold ansibrightgreen",
        "highlighted": "bold ansibrightgreen",
        "answer": "bold ansibrightgreen",
        "instruction": "ansibrightblack",
    }
)


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _species_choice_title(taxon_id: int, species_name: str, *, name_width: int) -> str:
    """Format one species as `<name>  (taxon: <id>)` with aligned id column."""
    short_name = _truncate(species_name, _MAX_SPECIES_NAME_WIDTH)
    return f"{short_name.ljust(name_width)}  (taxon: {taxon_id})"


def select_species(species: Mapping[int, str]) -> int | None:
    """Display a select prompt to pick one species.

    Args:
        species: Mapping of taxon id to species name.

    Returns:
        The selected taxon id, or None if cancelled or nothing to choose.
    """
    if not species:
        return None

    ordered = sorted(species.items(), key=lambda item: item[1])
    shown_names = [_truncate(name, _MAX_SPECIES_NAME_WIDTH) for _, name in ordered]
    name_width = max((len(name) for name in shown_names), default=0)

    choices = [
        questionary.Choice(
            title=_species_choice_title(taxon_id, name, name_width=name_width),
            value=taxon_id,
        )
        for taxon_id, name in ordered
    ]

    return questionary.select(
        "Select species:",
        choices=choices,
        style=_PICKER_STYLE,
    ).ask()
