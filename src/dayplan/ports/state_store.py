"""State store interface."""

from typing import Protocol

from dayplan.core.state import AppState


class StateStore(Protocol):
    """Interface for loading and saving the whole planner state."""

    def load(self) -> AppState:
        """Load the current state. Returns an empty state if none exists yet."""
        ...

    def save(self, state: AppState) -> None:
        """Atomically replace the stored state."""
        ...
