"""Planner interface shared by the local service and the HTTP client."""

from datetime import date
from typing import Protocol

from dayplan.core.categories import CategoryState
from dayplan.core.summary import DaySummary
from dayplan.core.tasks import Task


class Planner(Protocol):
    """Interface for task and category operations addressed by ISO date."""

    def list_tasks(self, date_iso: str) -> list[Task]:
        """Tasks for a date in start-time order."""
        ...

    def all_tasks(self) -> dict[str, list[Task]]:
        """Every date's tasks."""
        ...

    def create_task(self, date_iso: str, payload: dict) -> Task:
        ...

    def patch_task(self, date_iso: str, payload: dict) -> Task:
        """Apply a partial update; payload must carry the task id."""
        ...

    def delete_task(self, date_iso: str, task_id: str) -> bool:
        ...

    def get_categories(self, date_iso: str) -> CategoryState:
        ...

    def set_category(self, date_iso: str, payload: dict) -> tuple[str, CategoryState]:
        """Set one flag from {key, value}; returns the date and full record."""
        ...

    def summarize(self, start: date, end: date) -> list[DaySummary]:
        ...
