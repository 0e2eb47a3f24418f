"""In-memory document store."""

import copy
from typing import Any, Callable, Mapping, Optional

from tradejournal.errors import MissingRecordIdError
from tradejournal.models import TradeRecord, Visibility
from tradejournal.stores.base import BaseTradeStore, records_from_documents
from tradejournal.stores.ids import generate_push_id


class InMemoryTradeStore(BaseTradeStore):
    """Store that keeps the document tree in a nested dict.

    The tree mirrors the remote layout::

        {"users": {uid: {"privateTrades": {id: doc}}}, "publicTrades": {id: doc}}
    """

    def __init__(
        self,
        tree: Optional[dict] = None,
        id_factory: Callable[[], str] = generate_push_id,
    ):
        """Initialize the store.

        Args:
            tree: Initial document tree. Copied, not shared.
            id_factory: Produces fresh record ids.
        """
        self._tree: dict = copy.deepcopy(tree) if tree else {}
        self._tree.setdefault("users", {})
        self._tree.setdefault("publicTrades", {})
        self._id_factory = id_factory

    @property
    def tree(self) -> dict:
        """A deep copy of the current document tree."""
        return copy.deepcopy(self._tree)

    def _private(self, user_id: str) -> dict:
        user = self._tree["users"].setdefault(user_id, {})
        return user.setdefault("privateTrades", {})

    def fetch_private(self, user_id: str) -> dict[str, TradeRecord]:
        documents = self._tree["users"].get(user_id, {}).get("privateTrades", {})
        return records_from_documents(documents, Visibility.PRIVATE)

    def fetch_public(self) -> dict[str, TradeRecord]:
        return records_from_documents(self._tree["publicTrades"], Visibility.PUBLIC)

    def reserve_id(self, user_id: str) -> str:
        return self._id_factory()

    def put(self, user_id: str, record: TradeRecord) -> None:
        if not record.id:
            raise MissingRecordIdError("Record must carry a reserved id before put()")
        self._private(user_id)[record.id] = record.to_document()

    def update(self, user_id: str, record_id: str, changes: Mapping[str, Any]) -> None:
        document = self._private(user_id).setdefault(record_id, {})
        document.update(copy.deepcopy(dict(changes)))

    def delete(self, user_id: str, record_id: str) -> None:
        self._private(user_id).pop(record_id, None)

    def publish(self, record: TradeRecord) -> str:
        record_id = record.id or self._id_factory()
        document = record.to_document()
        document["id"] = record_id
        self._tree["publicTrades"][record_id] = document
        return record_id
