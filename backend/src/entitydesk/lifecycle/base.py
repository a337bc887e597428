"""Shared state machine plumbing for the save and delete pipelines."""

import logging
from enum import Enum
from typing import Generic, TypeVar

from entitydesk.context import AppContext
from entitydesk.errors import AuthorizationDenied

logger = logging.getLogger(__name__)

StateT = TypeVar("StateT", bound=Enum)


class Pipeline(Generic[StateT]):
    """A single-use state machine.

    Subclasses declare their idle, aborted and terminal states. The
    transition log starts at the idle state and is public so tests can
    assert on exact sequences.
    """

    IDLE: StateT
    ABORTED: StateT
    TERMINAL: frozenset

    def __init__(self, context: AppContext):
        self.context = context
        self.state: StateT = self.IDLE
        self.transitions: list[StateT] = [self.IDLE]

    @property
    def finished(self) -> bool:
        return self.state in self.TERMINAL

    def _transition(self, state: StateT) -> None:
        if self.finished:
            raise RuntimeError(f"{type(self).__name__} already finished in {self.state.name}")
        logger.debug("%s: %s -> %s", type(self).__name__, self.state.name, state.name)
        self.state = state
        self.transitions.append(state)

    def _start(self) -> None:
        if self.state is not self.IDLE:
            raise RuntimeError(f"{type(self).__name__} can only run once")

    def _check_permission(self, operation: str, collection_path: str) -> None:
        """Abort unless the session's roles allow the operation.

        Without an auth controller or role registry every mutation is allowed.
        """
        controller = self.context.auth_controller
        if controller is None or controller.can(operation, collection_path):
            return
        self._transition(self.ABORTED)
        raise AuthorizationDenied(
            f"Not allowed to {operation} entities in '{collection_path}'"
        )
