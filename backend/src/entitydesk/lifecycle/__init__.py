"""Save and delete lifecycle pipelines."""

from entitydesk.lifecycle.delete import DeletePipeline, DeleteState, delete_entity
from entitydesk.lifecycle.save import SavePipeline, SaveState, save_entity

__all__ = [
    "DeletePipeline",
    "DeleteState",
    "SavePipeline",
    "SaveState",
    "delete_entity",
    "save_entity",
]
