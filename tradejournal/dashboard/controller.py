"""Dashboard controller: local record state mediated against a store."""

import logging
from datetime import date
from typing import Any, Callable, Mapping, Optional, Union

from tradejournal.dashboard.filters import apply_filters
from tradejournal.dashboard.stats import summarize_records
from tradejournal.errors import ReadOnlyRecordError, RecordNotFoundError, TradeJournalError
from tradejournal.models import (
    Emotion,
    FilterSpec,
    FormOpen,
    Idle,
    OverlayOpen,
    TradeRecord,
    ViewState,
    Visibility,
    format_trade_date,
)
from tradejournal.stores.base import BaseTradeStore

logger = logging.getLogger(__name__)

# Keys a form may not set directly
_DERIVED_FIELDS = {"id", "visibility", "color", "emoji"}


class DashboardController:
    """Owns the in-memory record list behind the card grid.

    Local state is updated first, then the change is written to the store.
    A failed write is logged and local state is kept as is, so the two can
    diverge until the next ``load``.
    """

    def __init__(self, store: BaseTradeStore, user_id: Optional[str]):
        """Initialize the controller.

        Args:
            store: Store facade used for reads and writes.
            user_id: Owner of the private collection. Nothing loads without it.
        """
        self._store = store
        self.user_id = user_id
        self._records: list[TradeRecord] = []
        self.filters = FilterSpec()
        self.view: ViewState = Idle()
        self.loading = True

    @property
    def records(self) -> list[TradeRecord]:
        """Base record list: private records first, then public."""
        return list(self._records)

    # ==================== Loading ====================

    def load(self) -> list[TradeRecord]:
        """Fetch private and public records and merge them.

        Records are identified by (visibility, id), so a public record
        sharing an id with a private one is kept as a separate entry.
        Fetch errors are logged and leave the list empty.

        Returns:
            The merged base list.
        """
        if not self.user_id:
            logger.debug("No user id; skipping load")
            return []

        try:
            private = self._store.fetch_private(self.user_id)
            public = self._store.fetch_public()
        except Exception:
            logger.exception("Error fetching trades for user %s", self.user_id)
            self._records = []
        else:
            self._records = [
                *(_as_visibility(r, Visibility.PRIVATE) for r in private.values()),
                *(_as_visibility(r, Visibility.PUBLIC) for r in public.values()),
            ]
        self.loading = False
        return self.records

    # ==================== Filtering ====================

    def apply_filters(self, spec: Union[FilterSpec, Mapping[str, Any], None]) -> list[TradeRecord]:
        """Derive the filtered view from the base list.

        The base list is left untouched; the spec becomes the current filter.
        """
        if spec is None:
            spec = FilterSpec()
        elif not isinstance(spec, FilterSpec):
            spec = FilterSpec.model_validate(spec)
        self.filters = spec
        return apply_filters(self._records, spec)

    def visible_records(self) -> list[TradeRecord]:
        """Records matching the current filter."""
        return apply_filters(self._records, self.filters)

    def summary(self, records: Optional[list[TradeRecord]] = None) -> dict:
        """P&L summary over the given records, or the visible ones."""
        return summarize_records(self.visible_records() if records is None else records)

    # ==================== Lookup ====================

    def find(self, record_id: str, visibility: Optional[Visibility] = None) -> TradeRecord:
        """Get a record by id.

        Args:
            record_id: Record id.
            visibility: Restrict the search to one collection. Private
                records win when not given.

        Raises:
            RecordNotFoundError: If no record matches.
        """
        for record in self._records:
            if record.id == record_id and (visibility is None or record.visibility is visibility):
                return record
        raise RecordNotFoundError(f"No trade with id {record_id}")

    def _private_index(self, record_id: str) -> int:
        for i, record in enumerate(self._records):
            if record.id == record_id and not record.is_public:
                return i
        if any(record.id == record_id for record in self._records):
            raise ReadOnlyRecordError(f"Trade {record_id} is public and cannot be modified")
        raise RecordNotFoundError(f"No trade with id {record_id}")

    # ==================== Mutations ====================

    def create_record(self, form_data: Mapping[str, Any], emotion: Union[Emotion, str]) -> TradeRecord:
        """Create a private record and prepend it to the list.

        The id is reserved from the store first, so the local record
        carries it immediately. The date defaults to today.

        Args:
            form_data: Submitted form fields.
            emotion: Emotion chosen for the card.

        Returns:
            The new record.
        """
        if not self.user_id:
            raise TradeJournalError("Cannot create a trade without a user id")

        emotion = Emotion.from_value(emotion)
        data = {k: v for k, v in form_data.items() if TradeRecord.field_name(k) not in _DERIVED_FIELDS}
        data.setdefault("date", format_trade_date(date.today()))

        record_id = self._store.reserve_id(self.user_id)
        record = TradeRecord.model_validate(
            {**data, "id": record_id, "emotion": emotion, "visibility": Visibility.PRIVATE}
        )

        self._records.insert(0, record)
        self._persist("create", self._store.put, self.user_id, record)
        return record

    def update_record(
        self,
        existing: Union[TradeRecord, str],
        form_data: Mapping[str, Any],
    ) -> TradeRecord:
        """Replace a private record's fields in place.

        The id and every field absent from ``form_data`` are preserved.

        Args:
            existing: Record (or its id) being edited.
            form_data: Fields to change.

        Returns:
            The updated record.

        Raises:
            RecordNotFoundError: If no private record has that id.
            ReadOnlyRecordError: If the id belongs to a public record.
        """
        record_id = existing.id if isinstance(existing, TradeRecord) else existing
        index = self._private_index(record_id)
        updated = self._records[index].with_changes(form_data)
        self._records[index] = updated

        self._persist(
            "update", self._store.update, self.user_id, record_id, _changed_document(updated, form_data)
        )
        return updated

    def delete_record(self, record_id: str) -> None:
        """Remove a private record locally and from the store.

        Raises:
            RecordNotFoundError: If no private record has that id.
            ReadOnlyRecordError: If the id belongs to a public record.
        """
        index = self._private_index(record_id)
        del self._records[index]

        if _view_record_id(self.view) == record_id:
            self.view = Idle()

        self._persist("delete", self._store.delete, self.user_id, record_id)

    def publish_record(self, record_id: str) -> TradeRecord:
        """Share a copy of a private record in the public collection.

        Unlike the other writes this is not optimistic: the public copy is
        added locally only once the store has accepted it.

        Raises:
            RecordNotFoundError: If no private record has that id.
            StoreError: If the store rejects the write.
        """
        record = self.find(record_id, Visibility.PRIVATE)
        public_id = self._store.publish(record.model_copy(update={"id": None}))
        published = record.model_copy(update={"id": public_id, "visibility": Visibility.PUBLIC})
        self._records.append(published)
        return published

    def _persist(self, action: str, write: Callable[..., Any], *args: Any) -> None:
        try:
            write(*args)
        except Exception:
            logger.exception("Failed to %s trade for user %s", action, self.user_id)

    # ==================== View state ====================

    def select_for_create(self, emotion: Union[Emotion, str]) -> ViewState:
        """Open an empty form for the chosen emotion."""
        self.view = FormOpen(emotion=Emotion.from_value(emotion))
        return self.view

    def select_for_edit(self, record: TradeRecord) -> ViewState:
        """Open the form pre-filled with a private record."""
        self._private_index(record.id)
        self.view = FormOpen(emotion=record.emotion, editing_id=record.id)
        return self.view

    def select_for_overlay(self, record: TradeRecord) -> ViewState:
        """Open the read-only detail overlay for a record."""
        self.view = OverlayOpen(record_id=record.id, visibility=record.visibility)
        return self.view

    def close(self) -> ViewState:
        """Close any open form or overlay."""
        self.view = Idle()
        return self.view

    def overlay_record(self) -> Optional[TradeRecord]:
        """Record shown in the overlay, if one is open."""
        if not isinstance(self.view, OverlayOpen):
            return None
        return self.find(self.view.record_id, self.view.visibility)

    def editing_record(self) -> Optional[TradeRecord]:
        """Record being edited, if the form is open in edit mode."""
        if not isinstance(self.view, FormOpen) or not self.view.is_editing:
            return None
        return self.find(self.view.editing_id, Visibility.PRIVATE)

    def save_form(self, form_data: Mapping[str, Any]) -> TradeRecord:
        """Submit the open form, then close it.

        Edits the record being edited, or creates a new one with the
        form's emotion.

        Raises:
            TradeJournalError: If no form is open.
        """
        view = self.view
        if not isinstance(view, FormOpen):
            raise TradeJournalError("No trade form is open")

        if view.is_editing:
            record = self.update_record(view.editing_id, form_data)
        else:
            record = self.create_record(form_data, view.emotion)
        self.close()
        return record


def _as_visibility(record: TradeRecord, visibility: Visibility) -> TradeRecord:
    if record.visibility is visibility:
        return record
    return record.model_copy(update={"visibility": visibility})


def _view_record_id(view: ViewState) -> Optional[str]:
    if isinstance(view, OverlayOpen) and view.visibility is Visibility.PRIVATE:
        return view.record_id
    if isinstance(view, FormOpen):
        return view.editing_id
    return None


def _changed_document(record: TradeRecord, form_data: Mapping[str, Any]) -> dict[str, Any]:
    """Persisted-key payload holding only the fields a form touched."""
    document = record.to_document()
    touched = {TradeRecord.field_name(k) for k in form_data} & set(TradeRecord.model_fields)
    touched -= _DERIVED_FIELDS
    if "emotion" in touched:
        touched |= {"color", "emoji"}
    keys = [TradeRecord.model_fields[name].alias or name for name in touched]
    return {key: document[key] for key in keys}
