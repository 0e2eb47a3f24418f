"""Base store facade for the trade journal."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping

from pydantic import ValidationError

from tradejournal.models import TradeRecord, Visibility

logger = logging.getLogger(__name__)


class BaseTradeStore(ABC):
    """Abstract persistence boundary for trade records.

    Records live in a document tree: each user owns a private collection,
    and one public collection is shared by everyone. Creating a record is
    a two-step contract: ``reserve_id`` hands out a fresh key, then ``put``
    writes the record under it.
    """

    @abstractmethod
    def fetch_private(self, user_id: str) -> dict[str, TradeRecord]:
        """Get a user's private records.

        Args:
            user_id: Owner of the collection.

        Returns:
            Mapping of record id to record, in store order.

        Raises:
            StoreError: If the collection cannot be read.
        """
        pass

    @abstractmethod
    def fetch_public(self) -> dict[str, TradeRecord]:
        """Get the shared public records.

        Returns:
            Mapping of record id to record, in store order.

        Raises:
            StoreError: If the collection cannot be read.
        """
        pass

    @abstractmethod
    def reserve_id(self, user_id: str) -> str:
        """Reserve a fresh, unique key in a user's private collection.

        Args:
            user_id: Owner of the collection.

        Returns:
            Opaque unique id.
        """
        pass

    @abstractmethod
    def put(self, user_id: str, record: TradeRecord) -> None:
        """Write a record under its reserved id.

        Args:
            user_id: Owner of the collection.
            record: Record carrying an id from ``reserve_id``.

        Raises:
            MissingRecordIdError: If the record has no id.
            StoreError: If the write fails.
        """
        pass

    @abstractmethod
    def update(self, user_id: str, record_id: str, changes: Mapping[str, Any]) -> None:
        """Apply a partial update to a record.

        Keys not present in ``changes`` keep their stored values.

        Args:
            user_id: Owner of the collection.
            record_id: Id of the record to update.
            changes: Persisted keys and their new values.

        Raises:
            StoreError: If the write fails.
        """
        pass

    @abstractmethod
    def delete(self, user_id: str, record_id: str) -> None:
        """Delete a record. Deleting a missing id is not an error.

        Args:
            user_id: Owner of the collection.
            record_id: Id of the record to delete.
        """
        pass

    @abstractmethod
    def publish(self, record: TradeRecord) -> str:
        """Write a record to the public collection.

        Args:
            record: Record to share. A missing id is generated.

        Returns:
            The id the record was stored under.
        """
        pass


def records_from_documents(
    documents: Mapping[str, Mapping[str, Any]],
    visibility: Visibility,
) -> dict[str, TradeRecord]:
    """Build records from raw store documents.

    The document key is authoritative for the id. Documents that fail
    validation are skipped with a warning.

    Args:
        documents: Mapping of record id to stored document.
        visibility: Collection the documents were read from.

    Returns:
        Mapping of record id to record, in document order.
    """
    records: dict[str, TradeRecord] = {}
    for record_id, document in documents.items():
        try:
            records[record_id] = TradeRecord.model_validate(
                {**document, "id": record_id, "visibility": visibility}
            )
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed %s record %s: %s", visibility.value, record_id, e)
    return records
