"""Data models for the trade journal."""

from tradejournal.models.emotion import EMOTION_STYLES, Emotion, emotion_color, emotion_emoji
from tradejournal.models.filters import DateRange, FilterSpec
from tradejournal.models.trade_record import (
    DATE_FORMAT,
    TradeRecord,
    Visibility,
    format_trade_date,
    parse_trade_date,
)
from tradejournal.models.view_state import FormOpen, Idle, OverlayOpen, ViewState

__all__ = [
    "DATE_FORMAT",
    "DateRange",
    "EMOTION_STYLES",
    "Emotion",
    "FilterSpec",
    "FormOpen",
    "Idle",
    "OverlayOpen",
    "TradeRecord",
    "ViewState",
    "Visibility",
    "emotion_color",
    "emotion_emoji",
    "format_trade_date",
    "parse_trade_date",
]
