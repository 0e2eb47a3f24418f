"""Store facade implementations for the trade journal."""

from tradejournal.stores.base import BaseTradeStore, records_from_documents
from tradejournal.stores.ids import PushIdGenerator, generate_push_id
from tradejournal.stores.memory import InMemoryTradeStore

__all__ = [
    "BaseTradeStore",
    "InMemoryTradeStore",
    "PushIdGenerator",
    "generate_push_id",
    "records_from_documents",
]
