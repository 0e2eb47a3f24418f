"""TradeRecord data model."""

import re
from datetime import date as date_type
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from tradejournal.errors import DateParseError
from tradejournal.models.emotion import Emotion, emotion_color, emotion_emoji

# Persisted date format (dd-MM-yyyy)
DATE_FORMAT = "%d-%m-%Y"

_DATE_RE = re.compile(r"[0-9]{2}-[0-9]{2}-[0-9]{4}")
_NUMBER_RE = re.compile(r"[-+]?\d[\d,]*(?:\.\d+)?|[-+]?\.\d+")


def parse_trade_date(text: Any) -> date_type:
    """Parse a dd-MM-yyyy date string.

    Day and month must be two digits, with no surrounding whitespace.

    Args:
        text: Date string as persisted on a record.

    Returns:
        The parsed date.

    Raises:
        DateParseError: If the text is not a valid dd-MM-yyyy date.
    """
    if not isinstance(text, str) or not _DATE_RE.fullmatch(text):
        raise DateParseError(f"Invalid trade date {text!r}: expected dd-MM-yyyy")
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise DateParseError(f"Invalid trade date {text!r}: expected dd-MM-yyyy") from e


def format_trade_date(value: date_type) -> str:
    """Format a date as dd-MM-yyyy."""
    return value.strftime(DATE_FORMAT)


class Visibility(str, Enum):
    """Which collection a record belongs to."""

    PRIVATE = "private"
    PUBLIC = "public"


class TradeRecord(BaseModel):
    """A single journal entry: a trade and its emotional context.

    Colour and emoji are always derived from the emotion, whatever the
    input carries for them.
    """

    id: Optional[str] = Field(default=None, description="Store-assigned key")
    emotion: Emotion = Field(..., description="Emotion felt during the trade")
    color: str = Field(default="", description="Card colour derived from emotion")
    emoji: str = Field(default="", description="Emoji derived from emotion")
    symbol: str = Field(
        default="",
        validation_alias=AliasChoices("symbol", "instrument"),
        description="Traded instrument",
    )
    session: Optional[str] = Field(default=None, description="Market session")
    strategy: Optional[str] = Field(default=None, description="Strategy name")
    entry_point: Optional[str] = Field(default=None, description="Entry price or level")
    exit_point: Optional[str] = Field(default=None, description="Exit price or level")
    position_size: Optional[str] = Field(default=None, description="Position size")
    profit_loss: Optional[str] = Field(default=None, description="Profit or loss")
    reason: Optional[str] = Field(default=None, description="Why the trade was taken")
    description: Optional[str] = Field(default=None, description="Free-text notes")
    tags: list[str] = Field(default_factory=list, description="Ordered free-text tags")
    date: Optional[str] = Field(default=None, description="Trade date (dd-MM-yyyy)")
    time: Optional[str] = Field(default=None, description="Trade time")
    visibility: Visibility = Field(default=Visibility.PRIVATE, description="Owning collection")

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_style(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and data.get("emotion") is not None:
            emotion = Emotion.from_value(data["emotion"])
            data = {
                **data,
                "emotion": emotion,
                "color": emotion_color(emotion),
                "emoji": emotion_emoji(emotion),
            }
        return data

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        elif isinstance(value, Mapping):
            # sparse arrays come back from the document store as index-keyed maps
            value = [value[k] for k in sorted(value, key=lambda k: int(k) if str(k).isdigit() else 0)]
        tags: list[str] = []
        for tag in value:
            tag = str(tag).strip()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    @classmethod
    def field_name(cls, key: str) -> str:
        """Map a persisted (camelCase) or alias key to its field name."""
        if key in cls.model_fields:
            return key
        if key == "instrument":
            return "symbol"
        for name, info in cls.model_fields.items():
            if info.alias == key:
                return name
        return key

    @property
    def key(self) -> tuple[Visibility, Optional[str]]:
        """Merge key identifying the record across collections."""
        return (self.visibility, self.id)

    @property
    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    def trade_date(self) -> date_type:
        """Parse this record's date.

        Raises:
            DateParseError: If the stored date is malformed.
        """
        return parse_trade_date(self.date)

    def pnl_value(self) -> Optional[float]:
        """Numeric profit/loss, or None if it does not contain a number."""
        if not self.profit_loss:
            return None
        match = _NUMBER_RE.search(re.sub(r"[^\d+\-.,]", "", self.profit_loss))
        if match is None:
            return None
        return float(match.group(0).replace(",", ""))

    def with_changes(self, changes: Mapping[str, Any]) -> "TradeRecord":
        """Return a copy with the given fields replaced.

        Fields absent from ``changes`` are kept. The id is never changed.

        Args:
            changes: Field values keyed by field name or persisted key.

        Returns:
            A new, re-validated TradeRecord.
        """
        data = self.model_dump()
        for key, value in changes.items():
            name = self.field_name(key)
            if name in ("id", "visibility", "color", "emoji"):
                continue
            if name in TradeRecord.model_fields:
                data[name] = value
        return TradeRecord.model_validate(data)

    def to_document(self) -> dict[str, Any]:
        """Serialize for the document store (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True, exclude={"visibility"})
