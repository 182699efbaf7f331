from __future__ import annotations

import click
from pydantic import ValidationError

from discord_notify.config import ConfigError


def config_error_message(ex: Exception) -> str:
    if isinstance(ex, ValidationError):
        parts = []
        for err in ex.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()) if p != "")
            parts.append(f"  - {loc or '<config>'}: {err.get('msg', 'invalid value')}")
        return "Invalid configuration:\n" + "\n".join(parts)
    return f"Invalid configuration: {ex}"


class DefaultGroup(click.Group):
    """
    Click group that supports a default command.

    Keeps the short form working:
      discord-notify "Build finished" "all green" ✅ 42
    alongside subcommands:
      discord-notify config

    Config errors surface as a one-line usage failure (exit 1), not a traceback.
    """

    _GROUP_FLAGS = {"--help", "--version"}

    def __init__(self, *args, default_cmd: str = "send", **kwargs) -> None:
        kwargs.setdefault("no_args_is_help", False)
        super().__init__(*args, **kwargs)
        self.default_cmd = str(default_cmd)

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if not args or (args[0] not in self.commands and args[0] not in self._GROUP_FLAGS):
            args.insert(0, self.default_cmd)
        return super().parse_args(ctx, args)

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except (ConfigError, ValidationError) as ex:
            raise click.ClickException(config_error_message(ex)) from ex
