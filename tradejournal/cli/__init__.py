"""CLI commands for the trade journal.

This package provides the command-line interface: the card grid,
the detail view, and commands to add, edit and delete trades.
"""

from tradejournal.cli.main import cli, main

__all__ = ["cli", "main"]
