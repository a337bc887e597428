"""DataSource Protocol: the document store interface the core depends on."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DataSource(Protocol):
    """Interface all data sources must implement.

    Records are flat key/value maps addressed by the schema's property keys.
    Retry and timeout policy belong to the implementation, not the core.
    """

    async def get(self, collection_path: str, entity_id: str) -> dict[str, Any] | None:
        """Fetch a record, or None if it does not exist."""
        ...

    async def set(
        self,
        collection_path: str,
        entity_id: str | None,
        record: dict[str, Any],
    ) -> str:
        """Write a record, generating an id when none is given.

        Returns:
            The committed id
        """
        ...

    async def delete(self, collection_path: str, entity_id: str) -> None:
        """Delete a record. Raises if the delete could not be performed."""
        ...
