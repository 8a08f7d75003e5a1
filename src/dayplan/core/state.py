"""The root aggregate persisted by state stores."""

from dataclasses import dataclass, field
from typing import Any

from dayplan.errors import StorageError

from .categories import CategoryState
from .tasks import Task


@dataclass
class AppState:
    """All tasks and category flags, keyed by ISO date."""

    tasks_by_date: dict[str, list[Task]] = field(default_factory=dict)
    categories_by_date: dict[str, CategoryState] = field(default_factory=dict)

    def tasks_for(self, date_iso: str) -> list[Task]:
        return list(self.tasks_by_date.get(date_iso, []))

    def set_tasks(self, date_iso: str, tasks: list[Task]) -> None:
        """Replace a date's task list. An empty list drops the date."""
        if tasks:
            self.tasks_by_date[date_iso] = tasks
        else:
            self.tasks_by_date.pop(date_iso, None)

    def categories_for(self, date_iso: str) -> CategoryState:
        return self.categories_by_date.get(date_iso) or CategoryState()

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasksByDate": {
                d: [t.to_dict() for t in tasks] for d, tasks in self.tasks_by_date.items()
            },
            "categoriesByDate": {
                d: c.to_dict() for d, c in self.categories_by_date.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Any) -> "AppState":
        """Parse a stored document. Raises StorageError if it has the wrong shape."""
        if not isinstance(data, dict):
            raise StorageError("State document must be an object")
        raw_tasks = data.get("tasksByDate", {})
        raw_categories = data.get("categoriesByDate", {})
        if not isinstance(raw_tasks, dict):
            raise StorageError("tasksByDate must be an object")
        if not isinstance(raw_categories, dict):
            raise StorageError("categoriesByDate must be an object")
        try:
            tasks_by_date = {d: _parse_tasks(d, tasks) for d, tasks in raw_tasks.items()}
            categories_by_date = {
                d: _parse_categories(d, c) for d, c in raw_categories.items()
            }
        except (AttributeError, KeyError, TypeError) as e:
            raise StorageError(f"Malformed state document: {e}") from e
        return cls(tasks_by_date=tasks_by_date, categories_by_date=categories_by_date)


def _parse_tasks(date_iso: str, tasks: Any) -> list[Task]:
    if not isinstance(tasks, list):
        raise TypeError(f"tasks for {date_iso} must be a list")
    return [Task.from_dict(t) for t in tasks]


def _parse_categories(date_iso: str, categories: Any) -> CategoryState:
    if not isinstance(categories, dict):
        raise TypeError(f"categories for {date_iso} must be an object")
    return CategoryState.from_dict(categories)
