"""Dashboard view state.

Exactly one of these is current at any time, so a form and an overlay
can never be open together.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from tradejournal.models.emotion import Emotion
from tradejournal.models.trade_record import Visibility


class Idle(BaseModel):
    """Nothing open; the card grid is showing."""

    kind: Literal["idle"] = "idle"

    model_config = {"frozen": True}


class FormOpen(BaseModel):
    """Entry form open, either for a new record or for editing one."""

    kind: Literal["form"] = "form"
    emotion: Emotion = Field(..., description="Emotion pre-selected in the form")
    editing_id: Optional[str] = Field(default=None, description="Id of the record being edited")

    model_config = {"frozen": True}

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None


class OverlayOpen(BaseModel):
    """Read-only detail overlay open for one record."""

    kind: Literal["overlay"] = "overlay"
    record_id: str = Field(..., description="Id of the record shown")
    visibility: Visibility = Field(default=Visibility.PRIVATE, description="Collection of the record shown")

    model_config = {"frozen": True}


ViewState = Union[Idle, FormOpen, OverlayOpen]
