"""Adapters - I/O implementations of ports."""

from .json_file_store import JsonFileStateStore
from .memory_store import MemoryStateStore
from .http_client import HttpPlannerClient

__all__ = [
    "JsonFileStateStore",
    "MemoryStateStore",
    "HttpPlannerClient",
]
