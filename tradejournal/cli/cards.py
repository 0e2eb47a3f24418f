"""Card grid commands for the trade journal CLI.

Handles listing and filtering cards, the detail overlay, the P&L
summary, and the emotion legend.
"""

from typing import Optional

import click
from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel

from tradejournal.cli.common import (
    RecordIdCommand,
    build_filter_spec,
    console,
    error_panel,
    filter_options,
    get_controller,
)
from tradejournal.cli.render import render_emotions, render_grid, render_overlay
from tradejournal.dashboard import distinct_values
from tradejournal.errors import TradeJournalError
from tradejournal.models import Visibility


def _available_choices(records) -> str:
    """List the values each filter option can take for these records."""
    lines = [
        f"{name.title()}: {escape(', '.join(values))}"
        for name, values in distinct_values(records).items()
        if values
    ]
    if not lines:
        return ""
    return "\n\nAvailable:\n" + "\n".join(lines)


@click.command("cards")
@filter_options
@click.pass_context
def cards(
    ctx: click.Context,
    emotions: tuple[str, ...],
    symbols: tuple[str, ...],
    sessions: tuple[str, ...],
    strategies: tuple[str, ...],
    start: Optional[str],
    end: Optional[str],
) -> None:
    """Show trade cards, newest private cards first.

    All given filters must match. Repeating an option matches any of
    its values.

    \b
    Examples:
      tradejournal cards
      tradejournal cards --symbol EURUSD --emotion anxious
      tradejournal cards --from 01-06-2023 --to 30-06-2023
    """
    spec = build_filter_spec(emotions, symbols, sessions, strategies, start, end)

    try:
        controller = get_controller(ctx)
        records = controller.apply_filters(spec)
    except (TradeJournalError, ValidationError) as e:
        error_panel(f"Failed to load trades:\n\n{e}")
        raise SystemExit(1)

    if not records:
        if spec.is_empty():
            hint = "No trades yet. Use 'tradejournal add EMOTION --symbol SYMBOL' to create one."
        else:
            hint = "No trades match these filters." + _available_choices(controller.records)
        console.print(Panel(f"[dim]{hint}[/dim]", title="[bold]Trades[/bold]", border_style="dim"))
        return

    console.print(render_grid(records))
    console.print(f"\n[dim]Showing {len(records)} of {len(controller.records)} trades[/dim]")


@click.command("show", cls=RecordIdCommand)
@click.argument("record_id")
@click.option("--public", "public", is_flag=True, default=False,
              help="Show the public trade with this id.")
@click.pass_context
def show(ctx: click.Context, record_id: str, public: bool) -> None:
    """Show the full detail of one trade.

    RECORD_ID is the id shown under each card.
    """
    try:
        controller = get_controller(ctx)
        visibility = Visibility.PUBLIC if public else None
        controller.select_for_overlay(controller.find(record_id, visibility))
        record = controller.overlay_record()
    except TradeJournalError as e:
        error_panel(str(e))
        raise SystemExit(1)

    console.print(render_overlay(record))


@click.command("stats")
@filter_options
@click.pass_context
def stats(
    ctx: click.Context,
    emotions: tuple[str, ...],
    symbols: tuple[str, ...],
    sessions: tuple[str, ...],
    strategies: tuple[str, ...],
    start: Optional[str],
    end: Optional[str],
) -> None:
    """Summarize P&L over the (filtered) trades."""
    spec = build_filter_spec(emotions, symbols, sessions, strategies, start, end)

    try:
        controller = get_controller(ctx)
        controller.apply_filters(spec)
        summary = controller.summary()
    except (TradeJournalError, ValidationError) as e:
        error_panel(f"Failed to summarize trades:\n\n{e}")
        raise SystemExit(1)

    net = summary["net_pnl"]
    net_color = "green" if net >= 0 else "red"
    net_sign = "+" if net >= 0 else ""

    console.print(Panel(
        f"Trades:   {summary['total_trades']}\n"
        f"Net P&L:  [{net_color}]{net_sign}{net:.2f}[/{net_color}]\n"
        f"{'─' * 30}\n"
        f"[dim]Wins: {summary['winning_trades']} | "
        f"Losses: {summary['losing_trades']} | "
        f"Win Rate: {summary['win_rate']:.1f}%[/dim]\n"
        f"[dim]Avg Win: {summary['avg_win']:.2f} | "
        f"Avg Loss: {summary['avg_loss']:.2f}[/dim]",
        title="[bold cyan]P&L Summary[/bold cyan]",
        border_style="cyan",
    ))


@click.command("emotions")
def emotions() -> None:
    """List the emotions with their colour and emoji."""
    console.print(render_emotions())
