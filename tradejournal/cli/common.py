"""Shared helpers for trade journal CLI commands."""

from typing import Any, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from tradejournal.errors import DateParseError
from tradejournal.models import DateRange, FilterSpec, parse_trade_date

console = Console()


class RecordIdCommand(click.Command):
    """A click Command whose record id argument may start with '-'.

    Push ids begin with '-' while the timestamp is small, so click would
    read them as options. Tokens that look like options but name none of
    this command's options are passed on as arguments after '--'.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        """Move unknown dash-prefixed tokens behind '--' before parsing."""
        options: dict[str, click.Option] = {}
        for param in self.get_params(ctx):
            if isinstance(param, click.Option):
                for name in param.opts + param.secondary_opts:
                    options[name] = param

        remaining = list(args)
        ordered: list[str] = []
        positional: list[str] = []
        while remaining:
            arg = remaining.pop(0)
            if arg == "--":
                positional.extend(remaining)
                break
            option = options.get(arg.split("=", 1)[0])
            if option is not None:
                ordered.append(arg)
                takes_value = not (option.is_flag or option.count)
                if takes_value and "=" not in arg and remaining:
                    ordered.append(remaining.pop(0))
            elif arg.startswith("-") and len(arg) > 1:
                positional.append(arg)
            else:
                ordered.append(arg)

        if positional:
            ordered += ["--", *positional]
        return super().parse_args(ctx, ordered)


def error_panel(message: str, title: str = "Error") -> None:
    """Print an error panel. The message is shown verbatim, not as markup."""
    console.print(Panel(
        f"[red]{escape(message)}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def _get_config(ctx: click.Context) -> dict:
    """Load configuration for the current invocation."""
    from tradejournal.config import load_config
    from tradejournal.logging_config import setup_logging

    obj = ctx.find_root().ensure_object(dict)
    if "config" not in obj:
        config = load_config(obj.get("config_path"))
        logging_config = config.get("logging", {})
        setup_logging(logging_config.get("level"), logging_config.get("file") or None)
        obj["config"] = config
    return obj["config"]


def get_controller(ctx: click.Context):
    """Build and load a dashboard controller for the configured user.

    Exits with status 1 when no user id is configured.
    """
    from tradejournal.config import build_store, resolve_user_id
    from tradejournal.dashboard import DashboardController

    config = _get_config(ctx)
    user_id = resolve_user_id(config, ctx.find_root().obj.get("user_id"))
    if not user_id:
        error_panel(
            "No user id configured.\n\n"
            "Pass --user ID or set journal.user_id in config.toml."
        )
        raise SystemExit(1)

    controller = DashboardController(build_store(config), user_id)
    controller.load()
    return controller


def filter_options(func):
    """Attach the card filter options to a command."""
    options = [
        click.option("--emotion", "emotions", multiple=True,
                     help="Only show this emotion (name or emoji). Repeatable."),
        click.option("--symbol", "symbols", multiple=True,
                     help="Only show this instrument. Repeatable."),
        click.option("--session", "sessions", multiple=True,
                     help="Only show this session. Repeatable."),
        click.option("--strategy", "strategies", multiple=True,
                     help="Only show this strategy. Repeatable."),
        click.option("--from", "start", default=None, help="First date included (dd-MM-yyyy)."),
        click.option("--to", "end", default=None, help="Last date included (dd-MM-yyyy)."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_filter_spec(
    emotions: tuple[str, ...],
    symbols: tuple[str, ...],
    sessions: tuple[str, ...],
    strategies: tuple[str, ...],
    start: Optional[str],
    end: Optional[str],
) -> FilterSpec:
    """Build a filter spec from the filter options."""
    if bool(start) != bool(end):
        raise click.UsageError("--from and --to must be given together")

    for option_name, value in (("--from", start), ("--to", end)):
        if value:
            try:
                parse_trade_date(value)
            except DateParseError as e:
                raise click.BadParameter(str(e), param_hint=option_name) from e

    date_range = DateRange(start=start, end=end) if start and end else None
    return FilterSpec(
        emotions=emotions,
        symbols=symbols,
        sessions=sessions,
        strategies=strategies,
        date_range=date_range,
    )


def record_fields_options(func):
    """Attach the trade field options to a command."""
    options = [
        click.option("--symbol", default=None, help="Instrument traded (e.g. EURUSD)."),
        click.option("--session", default=None, help="Market session (e.g. London)."),
        click.option("--strategy", default=None, help="Strategy used."),
        click.option("--entry", "entry_point", default=None, help="Entry price or level."),
        click.option("--exit", "exit_point", default=None, help="Exit price or level."),
        click.option("--size", "position_size", default=None, help="Position size."),
        click.option("--pnl", "profit_loss", default=None, help="Profit or loss (e.g. +120)."),
        click.option("--reason", default=None, help="Why the trade was taken."),
        click.option("--description", default=None, help="Free-text notes."),
        click.option("--tag", "tags", multiple=True, help="Tag for the trade. Repeatable."),
        click.option("--date", "date", default=None, help="Trade date (dd-MM-yyyy)."),
        click.option("--time", "time", default=None, help="Trade time (e.g. 14:30)."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def form_data_from_options(**options: Any) -> dict[str, Any]:
    """Keep only the options that were actually given."""
    form_data = {}
    for name, value in options.items():
        if value is None or value == ():
            continue
        form_data[name] = list(value) if isinstance(value, tuple) else value
    return form_data
