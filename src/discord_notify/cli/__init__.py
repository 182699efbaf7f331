from __future__ import annotations

import click

from discord_notify import __version__

from . import commands
from .args_common import DefaultGroup
from .commands import config, send


@click.group(cls=DefaultGroup, name="discord-notify")
@click.version_option(__version__, prog_name="discord-notify")
def cli() -> None:
    """Post task-status notifications to a Discord webhook."""


commands.add_commands(cli)


def main() -> None:
    cli()


__all__ = ["DefaultGroup", "cli", "main", "send", "config"]
