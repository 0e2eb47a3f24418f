"""Setup command for the trade journal CLI."""

import click
from rich.markup import escape
from rich.panel import Panel

from tradejournal.cli.common import console


@click.command("init")
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file.")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Create a template config file."""
    from tradejournal.config import create_template_config, get_config_path

    config_path = get_config_path(ctx.find_root().obj.get("config_path"))
    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists at {escape(str(config_path))}[/yellow]")
        console.print("[dim]Use --force to overwrite it.[/dim]")
        return

    written = create_template_config(config_path)
    console.print(Panel(
        f"[bold green]Config created[/bold green]\n\n"
        f"[cyan]{escape(str(written))}[/cyan]\n\n"
        "[dim]Set journal.user_id before adding trades.[/dim]",
        title="[bold]Trade Journal[/bold]",
        border_style="green",
    ))
