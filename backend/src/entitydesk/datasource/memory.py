"""In-memory data source."""

import copy
import uuid
from typing import Any


def generate_id() -> str:
    """Generate a 20-character document id."""
    return uuid.uuid4().hex[:20]


class InMemoryDataSource:
    """Dict-backed document store.

    Records are deep-copied on the way in and out so callers never share
    state with the store. Counters make write activity observable in tests.
    """

    def __init__(self, documents: dict[str, dict[str, dict[str, Any]]] | None = None):
        self._collections: dict[str, dict[str, dict[str, Any]]] = copy.deepcopy(documents or {})
        self.write_count = 0
        self.delete_count = 0

    async def get(self, collection_path: str, entity_id: str) -> dict[str, Any] | None:
        record = self._collections.get(collection_path, {}).get(entity_id)
        return copy.deepcopy(record) if record is not None else None

    async def set(
        self,
        collection_path: str,
        entity_id: str | None,
        record: dict[str, Any],
    ) -> str:
        if entity_id is None:
            entity_id = generate_id()
        self._collections.setdefault(collection_path, {})[entity_id] = copy.deepcopy(record)
        self.write_count += 1
        return entity_id

    async def delete(self, collection_path: str, entity_id: str) -> None:
        collection = self._collections.get(collection_path, {})
        if entity_id not in collection:
            raise KeyError(f"No document '{collection_path}/{entity_id}'")
        del collection[entity_id]
        self.delete_count += 1

    def list_ids(self, collection_path: str) -> list[str]:
        """List document ids in a collection."""
        return list(self._collections.get(collection_path, {}).keys())
