"""Subcommand modules for hnstories.

Provides register_commands() which uses deferred imports to keep
``hnstories --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from hnstories.commands.browse import browse
    from hnstories.commands.search import search
    from hnstories.commands.term import term

    cli.add_command(search)
    cli.add_command(term)
    cli.add_command(browse)
