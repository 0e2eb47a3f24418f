"""Filter evaluation over trade records.

All predicates are independent and conjunctive, so the order they are
applied in never changes the result.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from tradejournal.errors import DateParseError
from tradejournal.models import DateRange, FilterSpec, TradeRecord, parse_trade_date

logger = logging.getLogger(__name__)


def matches_emotion(record: TradeRecord, emotions: frozenset[str]) -> bool:
    """Emotion selections may name the emotion or carry its emoji."""
    return record.emotion.value in emotions or record.emoji in emotions


def _resolve_range(date_range: DateRange) -> Optional[tuple[date, date]]:
    try:
        return parse_trade_date(date_range.start), parse_trade_date(date_range.end)
    except DateParseError as e:
        logger.error("Ignoring records for invalid date range %s..%s: %s",
                     date_range.start, date_range.end, e)
        return None


def _in_range(record: TradeRecord, bounds: Optional[tuple[date, date]]) -> bool:
    if bounds is None:
        return False
    try:
        trade_date = record.trade_date()
    except DateParseError as e:
        logger.debug("Excluding record %s from date filter: %s", record.id, e)
        return False
    start, end = bounds
    return start <= trade_date <= end


def apply_filters(records: Iterable[TradeRecord], spec: Optional[FilterSpec]) -> list[TradeRecord]:
    """Select the records matching every non-empty field of a filter spec.

    Args:
        records: Base list of records. Not modified.
        spec: Filter specification. None or an empty spec matches everything.

    Returns:
        Matching records in their original order.
    """
    records = list(records)
    if spec is None or spec.is_empty():
        return records

    date_active = spec.date_range is not None and spec.date_range.is_active()
    bounds = _resolve_range(spec.date_range) if date_active else None

    result = []
    for record in records:
        if spec.emotions and not matches_emotion(record, spec.emotions):
            continue
        if spec.symbols and record.symbol not in spec.symbols:
            continue
        if spec.sessions and record.session not in spec.sessions:
            continue
        if spec.strategies and record.strategy not in spec.strategies:
            continue
        if date_active and not _in_range(record, bounds):
            continue
        result.append(record)
    return result


def distinct_values(records: Iterable[TradeRecord]) -> dict[str, list[str]]:
    """Collect the choices available for each filter field.

    Args:
        records: Records to scan.

    Returns:
        Dictionary of field name to sorted distinct values.
    """
    emotions: set[str] = set()
    symbols: set[str] = set()
    sessions: set[str] = set()
    strategies: set[str] = set()
    for record in records:
        emotions.add(record.emotion.value)
        if record.symbol:
            symbols.add(record.symbol)
        if record.session:
            sessions.add(record.session)
        if record.strategy:
            strategies.add(record.strategy)
    return {
        "emotions": sorted(emotions),
        "symbols": sorted(symbols),
        "sessions": sorted(sessions),
        "strategies": sorted(strategies),
    }
