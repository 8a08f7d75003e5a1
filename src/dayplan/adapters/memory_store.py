"""In-memory state storage adapter."""

import copy

from dayplan.core.state import AppState


class MemoryStateStore:
    """
    In-memory state storage.

    Implements StateStore protocol. Keeps a serialised snapshot so every
    load returns an independent copy, matching file-backed behaviour.
    """

    def __init__(self, initial: AppState | None = None):
        self._snapshot: dict | None = None
        self.saves = 0
        if initial is not None:
            self._snapshot = copy.deepcopy(initial.to_dict())

    def load(self) -> AppState:
        if self._snapshot is None:
            return AppState()
        return AppState.from_dict(copy.deepcopy(self._snapshot))

    def save(self, state: AppState) -> None:
        self._snapshot = copy.deepcopy(state.to_dict())
        self.saves += 1

    def snapshot(self) -> dict | None:
        """The stored document as last saved, or None if never saved."""
        return copy.deepcopy(self._snapshot)
