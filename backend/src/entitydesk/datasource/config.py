"""Data source configuration and factory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from entitydesk.datasource.adapter import DataSource


@dataclass
class DataSourceConfig:
    """Data source connection configuration.

    Supports memory:// and sqlite:/// URL schemes.
    """

    url: str

    @classmethod
    def from_env(cls) -> DataSourceConfig:
        """Create config from environment variables.

        Resolution order:
        1. ENTITYDESK_DATA_URL env var
        2. DATABASE_URL env var (standard)
        3. Default: memory://
        """
        url = os.environ.get("ENTITYDESK_DATA_URL") or os.environ.get("DATABASE_URL")
        if url:
            return cls(url=url)
        return cls(url="memory://")

    @property
    def is_memory(self) -> bool:
        return self.url.startswith("memory://")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


def create_data_source(config: DataSourceConfig) -> DataSource:
    """Create a data source based on the URL scheme.

    SQLite sources are returned connected.

    Raises:
        ValueError: For unsupported URL schemes.
    """
    if config.is_memory:
        from entitydesk.datasource.memory import InMemoryDataSource

        return InMemoryDataSource()

    if config.is_sqlite:
        from entitydesk.datasource.sqlite import SQLiteDataSource

        # Extract path from sqlite:///path
        db_path = config.url.replace("sqlite:///", "", 1)
        if not db_path or db_path == config.url:
            db_path = ":memory:"
        source = SQLiteDataSource(db_path)
        source.connect()
        return source

    raise ValueError(f"Unsupported data source URL scheme: {config.url}")
