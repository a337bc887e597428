"""Exception hierarchy for entitydesk.

Pre-commit errors (SchemaResolutionError, PreSaveAborted, PreDeleteAborted,
MissingEntityIdError) guarantee that no external state changed.
PersistenceError wraps a failed data source write or delete.
AuthorizationDenied covers both access to the console and role-based
mutation checks.

Per-field validation issues are not exceptions; see
entitydesk.values.types.ValidationError.
"""


class EntityDeskError(Exception):
    """Base class for all entitydesk errors."""


class SchemaResolutionError(EntityDeskError):
    """A property builder raised while resolving a schema.

    Attributes:
        key_path: Collection path, or "<collection path>.<property key>"
            for a per-property builder
    """

    def __init__(self, key_path: str, cause: BaseException):
        self.key_path = key_path
        self.cause = cause
        super().__init__(f"Failed to resolve properties at '{key_path}': {cause}")


class MissingEntityIdError(EntityDeskError, ValueError):
    """The schema requires a caller-supplied id that was not provided or is not allowed."""


class PreSaveAborted(EntityDeskError):
    """onPreSave raised; nothing was written."""


class PreDeleteAborted(EntityDeskError):
    """onPreDelete raised; nothing was deleted."""


class PersistenceError(EntityDeskError):
    """The data source failed to write or delete a document.

    Attributes:
        operation: "save" or "delete"
        collection_path: Target collection
        entity_id: Target id, None when the data source was to generate one
    """

    def __init__(
        self,
        operation: str,
        collection_path: str,
        entity_id: str | None,
        cause: BaseException,
    ):
        self.operation = operation
        self.collection_path = collection_path
        self.entity_id = entity_id
        self.cause = cause
        target = f"{collection_path}/{entity_id}" if entity_id else collection_path
        super().__init__(f"Failed to {operation} '{target}': {cause}")


class AuthorizationDenied(EntityDeskError):
    """The current principal may not access the console or perform an operation."""
