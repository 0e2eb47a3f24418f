"""Filter specification models."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class DateRange(BaseModel):
    """Closed date interval, both bounds in dd-MM-yyyy."""

    start: Optional[str] = Field(default=None, alias="startDate", description="First day included")
    end: Optional[str] = Field(default=None, alias="endDate", description="Last day included")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def is_active(self) -> bool:
        """A range only constrains when both bounds are given."""
        return bool(self.start) and bool(self.end)


class FilterSpec(BaseModel):
    """Conjunctive set of optional constraints on trade records.

    An empty or missing field imposes no constraint.
    """

    emotions: frozenset[str] = Field(default_factory=frozenset, description="Emotion names or emojis")
    symbols: frozenset[str] = Field(default_factory=frozenset, description="Instruments")
    sessions: frozenset[str] = Field(default_factory=frozenset, description="Market sessions")
    strategies: frozenset[str] = Field(default_factory=frozenset, description="Strategies")
    date_range: Optional[DateRange] = Field(default=None, description="Date interval")

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @field_validator("emotions", "symbols", "sessions", "strategies", mode="before")
    @classmethod
    def _drop_blanks(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        return frozenset(str(v).strip() for v in value if v is not None and str(v).strip())

    def is_empty(self) -> bool:
        """Check whether this spec constrains nothing."""
        return not (
            self.emotions
            or self.symbols
            or self.sessions
            or self.strategies
            or (self.date_range is not None and self.date_range.is_active())
        )
