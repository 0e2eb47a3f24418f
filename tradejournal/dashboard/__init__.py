"""Dashboard state and filtering for the trade journal."""

from tradejournal.dashboard.controller import DashboardController
from tradejournal.dashboard.filters import apply_filters, distinct_values
from tradejournal.dashboard.stats import summarize_records

__all__ = [
    "DashboardController",
    "apply_filters",
    "distinct_values",
    "summarize_records",
]
