"""Trade entry commands for the trade journal CLI.

Handles creating, editing, deleting and publishing trade records.
"""

import click
from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel

from tradejournal.cli.common import (
    RecordIdCommand,
    console,
    error_panel,
    form_data_from_options,
    get_controller,
    record_fields_options,
)
from tradejournal.cli.render import render_card
from tradejournal.errors import TradeJournalError
from tradejournal.models import Emotion, Visibility


def _emotion(value: str) -> Emotion:
    try:
        return Emotion.from_value(value)
    except ValueError:
        choices = ", ".join(e.value for e in Emotion)
        raise click.BadParameter(f"{value!r} is not an emotion. Choose from: {choices}") from None


@click.command("add")
@click.argument("emotion")
@record_fields_options
@click.pass_context
def add(ctx: click.Context, emotion: str, **fields) -> None:
    """Record a new trade.

    EMOTION is how the trade felt (name or emoji, see 'tradejournal emotions').
    The date defaults to today.

    \b
    Examples:
      tradejournal add confident --symbol EURUSD --pnl +120 --tag breakout
      tradejournal add anxious --symbol GBPUSD --session London --date 15-06-2023
    """
    chosen = _emotion(emotion)
    form_data = form_data_from_options(**fields)

    try:
        controller = get_controller(ctx)
        controller.select_for_create(chosen)
        record = controller.save_form(form_data)
    except (TradeJournalError, ValidationError) as e:
        error_panel(f"Failed to add trade:\n\n{e}")
        raise SystemExit(1)

    console.print(render_card(record))
    console.print(f"[green]✓ Added trade {record.id}[/green]")


@click.command("edit", cls=RecordIdCommand)
@click.argument("record_id")
@click.option("--emotion", default=None, help="Change the emotion (name or emoji).")
@record_fields_options
@click.pass_context
def edit(ctx: click.Context, record_id: str, emotion: str, **fields) -> None:
    """Edit one of your trades.

    Only the given fields change. Passing --tag replaces all tags.
    """
    form_data = form_data_from_options(**fields)
    if emotion is not None:
        form_data["emotion"] = _emotion(emotion)

    if not form_data:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    try:
        controller = get_controller(ctx)
        controller.select_for_edit(controller.find(record_id, Visibility.PRIVATE))
        record = controller.save_form(form_data)
    except (TradeJournalError, ValidationError) as e:
        error_panel(f"Failed to edit trade:\n\n{e}")
        raise SystemExit(1)

    console.print(render_card(record))
    console.print(f"[green]✓ Updated trade {record.id}[/green]")


@click.command("delete", cls=RecordIdCommand)
@click.argument("record_id")
@click.option("-y", "--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
@click.pass_context
def delete(ctx: click.Context, record_id: str, yes: bool) -> None:
    """Delete one of your trades."""
    try:
        controller = get_controller(ctx)
        record = controller.find(record_id, Visibility.PRIVATE)
    except TradeJournalError as e:
        error_panel(str(e))
        raise SystemExit(1)

    if not yes and not click.confirm(f"Delete {record.emoji} {record.symbol} trade {record_id}?"):
        console.print("[dim]Cancelled[/dim]")
        return

    try:
        controller.delete_record(record_id)
    except TradeJournalError as e:
        error_panel(str(e))
        raise SystemExit(1)

    console.print(f"[green]✓ Deleted trade {record_id}[/green]")


@click.command("publish", cls=RecordIdCommand)
@click.argument("record_id")
@click.pass_context
def publish(ctx: click.Context, record_id: str) -> None:
    """Share a copy of one of your trades publicly."""
    try:
        controller = get_controller(ctx)
        record = controller.publish_record(record_id)
    except TradeJournalError as e:
        error_panel(f"Failed to publish trade:\n\n{e}")
        raise SystemExit(1)

    console.print(Panel(
        f"[bold green]Trade shared[/bold green]\n\n"
        f"Public id: {record.id}\n"
        f"Symbol:    {escape(record.symbol)}",
        title="[bold]Publish[/bold]",
        border_style="green",
    ))
