"""Data source collaborators - document store interface and implementations."""

from entitydesk.datasource.adapter import DataSource
from entitydesk.datasource.config import DataSourceConfig, create_data_source
from entitydesk.datasource.memory import InMemoryDataSource
from entitydesk.datasource.sqlite import SQLiteDataSource

__all__ = [
    "DataSource",
    "DataSourceConfig",
    "InMemoryDataSource",
    "SQLiteDataSource",
    "create_data_source",
]
