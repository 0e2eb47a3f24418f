"""Rich rendering of trade cards and the detail overlay."""

from typing import Optional

from rich.columns import Columns
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tradejournal.models import EMOTION_STYLES, TradeRecord


def _pnl_text(record: TradeRecord) -> Text:
    pnl = record.pnl_value()
    style = "bold"
    if pnl is not None:
        style = "bold green" if pnl >= 0 else "bold red"
    return Text(record.profit_loss or "-", style=style)


def _chips(values: list[Optional[str]], style: str = "") -> Text:
    text = Text()
    for value in values:
        if not value:
            continue
        if text.plain:
            text.append("  ")
        text.append(f" {value} ", style=f"reverse {style}".strip())
    return text


def render_card(record: TradeRecord) -> Panel:
    """Render one record as a compact card."""
    header = Text()
    header.append(f"{record.emoji} ")
    header.append(record.symbol or "-", style="bold")
    header.append("  ")
    header.append_text(_pnl_text(record))

    lines = [header]
    if record.reason:
        lines.append(Text(record.reason))
    when = " ".join(v for v in (record.date, record.time) if v)
    lines.append(Text(when, style="dim"))
    if record.tags:
        lines.append(Text(" ".join(f"#{tag}" for tag in record.tags), style="italic"))

    subtitle = f"[dim]{record.id}[/dim]"
    if record.is_public:
        subtitle = f"[cyan]public[/cyan] {subtitle}"

    return Panel(
        Group(*lines),
        border_style=record.color or "white",
        subtitle=subtitle,
        width=36,
    )


def render_grid(records: list[TradeRecord]) -> Columns:
    """Render records as a grid of cards."""
    return Columns([render_card(record) for record in records], equal=True)


def render_overlay(record: TradeRecord) -> Panel:
    """Render the read-only detail view of a record."""
    body = []
    if record.reason:
        body.append(Text(record.reason, style="bold"))
        body.append(Text(""))

    body.append(_chips(
        [record.symbol, record.profit_loss, record.entry_point, record.exit_point, record.position_size],
        style="bold",
    ))

    details = Table.grid(padding=(0, 2))
    details.add_column(style="dim")
    details.add_column()
    for label, value in (
        ("Session", record.session),
        ("Strategy", record.strategy),
        ("Entry", record.entry_point),
        ("Exit", record.exit_point),
        ("Size", record.position_size),
    ):
        if value:
            details.add_row(label, value)
    if details.row_count:
        body.append(Text(""))
        body.append(details)

    if record.description:
        body.append(Text(""))
        body.append(Text(record.description))

    body.append(Text(""))
    body.append(Text(" ".join(v for v in (record.date, record.time) if v), style="dim"))
    if record.tags:
        body.append(_chips(record.tags))

    title = f"{record.emoji} [bold]{record.emotion.value.title()}[/bold]"
    if record.is_public:
        title += " [cyan](public)[/cyan]"

    return Panel(
        Group(*body),
        title=title,
        subtitle=f"[dim]{record.id}[/dim]",
        border_style=record.color or "white",
        padding=(1, 2),
    )


def render_emotions() -> Table:
    """Render the emotion legend."""
    table = Table(title="Emotions", show_header=True, header_style="bold cyan")
    table.add_column("Emoji", justify="center")
    table.add_column("Emotion", style="bold")
    table.add_column("Colour")

    for emotion, (color, emoji) in EMOTION_STYLES.items():
        table.add_row(emoji, emotion.value, f"[{color}]██[/{color}] {color}")
    return table
