"""Application context handed to lifecycle hooks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from entitydesk.auth.controller import AuthController
    from entitydesk.datasource.adapter import DataSource
    from entitydesk.storage import StorageSource


@dataclass
class AppContext:
    """Collaborators available to hooks and pipelines.

    Attributes:
        data_source: Document store
        storage_source: Binary storage, if configured
        auth_controller: Session authorization state; when it carries a
            role registry, pipelines check mutations against it
        extra: Free-form application values
    """

    data_source: DataSource
    storage_source: StorageSource | None = None
    auth_controller: AuthController | None = None
    extra: dict[str, Any] = field(default_factory=dict)
