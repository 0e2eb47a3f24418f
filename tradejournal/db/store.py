"""SQLite-backed document store for the trade journal."""

import json
import sqlite3
from pathlib import Path
from typing import Any, Callable, Mapping

from tradejournal.errors import MissingRecordIdError, StoreError
from tradejournal.models import TradeRecord, Visibility
from tradejournal.stores.base import BaseTradeStore, records_from_documents
from tradejournal.stores.ids import generate_push_id

PRIVATE_COLLECTION = "privateTrades"
PUBLIC_COLLECTION = "publicTrades"

# Owner value used for the shared public collection
PUBLIC_OWNER = ""


class SQLiteTradeStore(BaseTradeStore):
    """Trade store persisting the document tree in SQLite.

    Each record is one JSON document keyed by (owner, collection, record_id).
    Documents are returned in the order they were first written.
    """

    REQUIRED_TABLES = [
        "trade_documents",
    ]

    def __init__(self, db_path: Path, id_factory: Callable[[], str] = generate_push_id):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
            id_factory: Produces fresh record ids.
        """
        self.db_path = Path(db_path)
        self._id_factory = id_factory
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open database {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trade_documents (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner TEXT NOT NULL,
                    collection TEXT NOT NULL,
                    record_id TEXT NOT NULL,
                    document TEXT NOT NULL,
                    UNIQUE(owner, collection, record_id)
                )
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Cannot initialize schema: {e}") from e
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Reads ====================

    def _fetch_documents(self, owner: str, collection: str) -> dict[str, dict]:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT record_id, document
                FROM trade_documents
                WHERE owner = ? AND collection = ?
                ORDER BY seq
                """,
                (owner, collection),
            )
            documents = {}
            for row in cursor.fetchall():
                try:
                    documents[row["record_id"]] = json.loads(row["document"])
                except json.JSONDecodeError:
                    # left for records_from_documents to report and skip
                    documents[row["record_id"]] = None
            return documents
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read {collection}: {e}") from e
        finally:
            conn.close()

    def fetch_private(self, user_id: str) -> dict[str, TradeRecord]:
        documents = self._fetch_documents(user_id, PRIVATE_COLLECTION)
        return records_from_documents(documents, Visibility.PRIVATE)

    def fetch_public(self) -> dict[str, TradeRecord]:
        documents = self._fetch_documents(PUBLIC_OWNER, PUBLIC_COLLECTION)
        return records_from_documents(documents, Visibility.PUBLIC)

    # ==================== Writes ====================

    def reserve_id(self, user_id: str) -> str:
        return self._id_factory()

    def _write_document(self, owner: str, collection: str, record_id: str, document: dict) -> None:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO trade_documents (owner, collection, record_id, document)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(owner, collection, record_id)
                DO UPDATE SET document = excluded.document
                """,
                (owner, collection, record_id, json.dumps(document)),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to write {collection}/{record_id}: {e}") from e
        finally:
            conn.close()

    def put(self, user_id: str, record: TradeRecord) -> None:
        if not record.id:
            raise MissingRecordIdError("Record must carry a reserved id before put()")
        self._write_document(user_id, PRIVATE_COLLECTION, record.id, record.to_document())

    def update(self, user_id: str, record_id: str, changes: Mapping[str, Any]) -> None:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT document FROM trade_documents
                WHERE owner = ? AND collection = ? AND record_id = ?
                """,
                (user_id, PRIVATE_COLLECTION, record_id),
            )
            row = cursor.fetchone()
            document = json.loads(row["document"]) if row else {}
            document.update(changes)
            cursor.execute(
                """
                INSERT INTO trade_documents (owner, collection, record_id, document)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(owner, collection, record_id)
                DO UPDATE SET document = excluded.document
                """,
                (user_id, PRIVATE_COLLECTION, record_id, json.dumps(document)),
            )
            conn.commit()
        except (sqlite3.Error, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to update {PRIVATE_COLLECTION}/{record_id}: {e}") from e
        finally:
            conn.close()

    def delete(self, user_id: str, record_id: str) -> None:
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                DELETE FROM trade_documents
                WHERE owner = ? AND collection = ? AND record_id = ?
                """,
                (user_id, PRIVATE_COLLECTION, record_id),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to delete {PRIVATE_COLLECTION}/{record_id}: {e}") from e
        finally:
            conn.close()

    def publish(self, record: TradeRecord) -> str:
        record_id = record.id or self._id_factory()
        document = record.to_document()
        document["id"] = record_id
        self._write_document(PUBLIC_OWNER, PUBLIC_COLLECTION, record_id, document)
        return record_id

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with document counts per collection.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT collection, COUNT(*) AS count
                FROM trade_documents
                GROUP BY collection
                """
            )
            stats = {PRIVATE_COLLECTION: 0, PUBLIC_COLLECTION: 0}
            for row in cursor.fetchall():
                stats[row["collection"]] = row["count"]
            return stats
        finally:
            conn.close()
