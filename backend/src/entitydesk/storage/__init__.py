"""Storage collaborator interface.

Binary blobs referenced by properties (see Property.storage) live in an
external storage source. The core only carries the handle around.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StorageSource(Protocol):
    """Interface for binary storage backends."""

    async def get_download_url(self, storage_path: str) -> str:
        """Resolve a stored path to a URL the client can fetch."""
        ...

    async def upload_file(
        self,
        data: bytes,
        file_name: str,
        path: str,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Store a blob and return its storage path."""
        ...


__all__ = ["StorageSource"]
