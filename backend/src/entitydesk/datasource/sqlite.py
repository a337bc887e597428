"""SQLite document store."""

import json
import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Any

from entitydesk.datasource.memory import generate_id
from entitydesk.schema.types import EntityReference

_TYPE_KEY = "__type__"


def _encode(value: Any) -> Any:
    """Convert native values into JSON-safe tagged objects."""
    if isinstance(value, EntityReference):
        return {_TYPE_KEY: "reference", "id": value.id, "path": value.path}
    if isinstance(value, datetime):
        return {_TYPE_KEY: "timestamp", "value": value.isoformat()}
    if isinstance(value, date):
        return {_TYPE_KEY: "date", "value": value.isoformat()}
    if isinstance(value, dict):
        return {key: _encode(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    return value


def _decode_object(obj: dict[str, Any]) -> Any:
    tag = obj.get(_TYPE_KEY)
    if tag == "reference":
        return EntityReference(id=obj["id"], path=obj["path"])
    if tag == "timestamp":
        return datetime.fromisoformat(obj["value"])
    if tag == "date":
        return date.fromisoformat(obj["value"])
    return obj


class SQLiteDataSource:
    """Documents stored as JSON in a single SQLite table.

    The async methods satisfy the DataSource protocol but run their sqlite3
    calls inline: each one blocks the event loop until the query finishes.
    Suited to tests, the CLI and small single-user consoles.
    """

    def __init__(self, db_path: Path | str = ":memory:"):
        self.db_path = str(db_path)
        self.conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        """Establish database connection and create the documents table."""
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute(
            "CREATE TABLE IF NOT EXISTS documents ("
            "collection TEXT NOT NULL, "
            "id TEXT NOT NULL, "
            "data TEXT NOT NULL, "
            "PRIMARY KEY (collection, id))"
        )
        self.conn.commit()

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def _require_conn(self) -> sqlite3.Connection:
        if not self.conn:
            raise RuntimeError("Database not connected")
        return self.conn

    async def get(self, collection_path: str, entity_id: str) -> dict[str, Any] | None:
        """Fetch a single document by id."""
        conn = self._require_conn()
        row = conn.execute(
            "SELECT data FROM documents WHERE collection = ? AND id = ?",
            [collection_path, entity_id],
        ).fetchone()
        if row is None:
            return None
        return json.loads(row["data"], object_hook=_decode_object)

    async def set(
        self,
        collection_path: str,
        entity_id: str | None,
        record: dict[str, Any],
    ) -> str:
        """Insert or replace a document, generating an id if needed."""
        conn = self._require_conn()
        if entity_id is None:
            entity_id = generate_id()
        conn.execute(
            "INSERT OR REPLACE INTO documents (collection, id, data) VALUES (?, ?, ?)",
            [collection_path, entity_id, json.dumps(_encode(record))],
        )
        conn.commit()
        return entity_id

    async def delete(self, collection_path: str, entity_id: str) -> None:
        """Delete a document. Raises KeyError if it does not exist."""
        conn = self._require_conn()
        cursor = conn.execute(
            "DELETE FROM documents WHERE collection = ? AND id = ?",
            [collection_path, entity_id],
        )
        conn.commit()
        if cursor.rowcount == 0:
            raise KeyError(f"No document '{collection_path}/{entity_id}'")

    def list_ids(self, collection_path: str) -> list[str]:
        """List document ids in a collection."""
        conn = self._require_conn()
        rows = conn.execute(
            "SELECT id FROM documents WHERE collection = ? ORDER BY id",
            [collection_path],
        ).fetchall()
        return [row["id"] for row in rows]
