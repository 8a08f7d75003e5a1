"""Ports - interfaces/protocols for external dependencies."""

from .state_store import StateStore
from .planner import Planner

__all__ = [
    "StateStore",
    "Planner",
]
