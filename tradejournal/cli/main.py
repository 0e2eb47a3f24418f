"""Main CLI entry point for the trade journal.

This module provides the main click group and lazy loading
of subcommands to keep startup fast.
"""

from typing import Optional

import click


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when one of their commands
    is actually invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = getattr(module, cmd_name, None)
        if not isinstance(cmd, click.Command):
            cmd = None
            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if isinstance(attr, click.Command) and attr.name == cmd_name:
                    cmd = attr
                    break

        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    "init": "tradejournal.cli.setup",
    # Card grid
    "cards": "tradejournal.cli.cards",
    "show": "tradejournal.cli.cards",
    "stats": "tradejournal.cli.cards",
    "emotions": "tradejournal.cli.cards",
    # Entries
    "add": "tradejournal.cli.trade",
    "edit": "tradejournal.cli.trade",
    "delete": "tradejournal.cli.trade",
    "publish": "tradejournal.cli.trade",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tradejournal")
@click.option("-c", "--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Config file (default: ~/.config/tradejournal/config.toml).")
@click.option("-u", "--user", "user_id", default=None, help="User id (overrides journal.user_id).")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], user_id: Optional[str]) -> None:
    """Trade Journal - record trades with the emotions behind them.

    \b
    Quick Start:
      tradejournal init                         # Create a config file
      tradejournal add confident --symbol EURUSD --pnl +120
      tradejournal cards --emotion anxious      # Filter the card grid
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["user_id"] = user_id


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
