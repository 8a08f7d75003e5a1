"""Planner service - serialised load/modify/save over a state store.

Every mutating operation loads the whole state, applies one change and saves
it back while holding a single lock, so two writers in the same process can
never overwrite each other's update.
"""

import logging
import threading
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from .core.categories import CategoryState, toggle_category
from .core.state import AppState
from .core.summary import DaySummary, parse_iso_date, summarize_range
from .core.tasks import Task, add_task, apply_patch, find_task, new_task, remove_task, replace_task
from .errors import MissingFieldError, NotFoundError, ValidationError
from .ports.state_store import StateStore

logger = logging.getLogger(__name__)


def _require_object(payload: Any) -> dict:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


class PlannerService:
    """
    Local planner backed by a StateStore.

    Implements Planner protocol. Stateless between calls: each operation
    reloads from the store.
    """

    def __init__(self, store: StateStore, clock: Callable[[], datetime] | None = None):
        self.store = store
        self.clock = clock or datetime.now
        self._lock = threading.Lock()

    def _mutate(self, change: Callable[[AppState], Any]) -> Any:
        """Run one load/modify/save cycle under the lock."""
        with self._lock:
            state = self.store.load()
            result = change(state)
            self.store.save(state)
            return result

    # ============== Tasks ==============

    def list_tasks(self, date_iso: str) -> list[Task]:
        parse_iso_date(date_iso)
        return self.store.load().tasks_for(date_iso)

    def all_tasks(self) -> dict[str, list[Task]]:
        return self.store.load().tasks_by_date

    def create_task(self, date_iso: str, payload: Any) -> Task:
        parse_iso_date(date_iso)
        payload = _require_object(payload)
        task = new_task(
            payload.get("startTime"),
            payload.get("approxEndTime"),
            payload.get("description"),
        )

        def change(state: AppState) -> Task:
            state.set_tasks(date_iso, add_task(state.tasks_for(date_iso), task))
            return task

        self._mutate(change)
        logger.info(f"Created task {task.id} on {date_iso} at {task.start_time}")
        return task

    def patch_task(self, date_iso: str, payload: Any) -> Task:
        parse_iso_date(date_iso)
        payload = _require_object(payload)
        task_id = payload.get("id")
        if not task_id:
            raise MissingFieldError("id")
        patch = {k: v for k, v in payload.items() if k != "id"}

        # An unknown id raises before save, leaving the store untouched.
        with self._lock:
            state = self.store.load()
            tasks = state.tasks_for(date_iso)
            current = find_task(tasks, task_id)
            if current is None:
                raise NotFoundError(f"Task {task_id} not found on {date_iso}")
            updated = apply_patch(current, patch, now=self.clock())
            state.set_tasks(date_iso, replace_task(tasks, updated))
            self.store.save(state)

        logger.info(f"Patched task {task_id} on {date_iso}: {sorted(patch)}")
        return updated

    def delete_task(self, date_iso: str, task_id: str | None) -> bool:
        """Remove a task. Returns False (and saves nothing) if it does not exist."""
        parse_iso_date(date_iso)
        if not task_id:
            raise MissingFieldError("id")

        with self._lock:
            state = self.store.load()
            remaining, removed = remove_task(state.tasks_for(date_iso), task_id)
            if not removed:
                return False
            state.set_tasks(date_iso, remaining)
            self.store.save(state)

        logger.info(f"Deleted task {task_id} on {date_iso}")
        return True

    # ============== Categories ==============

    def get_categories(self, date_iso: str) -> CategoryState:
        parse_iso_date(date_iso)
        return self.store.load().categories_for(date_iso)

    def set_category(self, date_iso: str, payload: Any) -> tuple[str, CategoryState]:
        parse_iso_date(date_iso)
        payload = _require_object(payload)
        key = payload.get("key")
        value = payload.get("value")
        # Reject bad input without touching the store
        toggle_category(None, key, value)

        def change(state: AppState) -> CategoryState:
            updated = toggle_category(state.categories_by_date.get(date_iso), key, value)
            state.categories_by_date[date_iso] = updated
            return updated

        categories = self._mutate(change)
        logger.info(f"Set {key}={value} on {date_iso}")
        return date_iso, categories

    # ============== Summaries ==============

    def summarize(self, start: date, end: date) -> list[DaySummary]:
        return summarize_range(self.store.load(), start, end)

    def today(self) -> str:
        """Today's ISO date according to the service clock."""
        return self.clock().date().isoformat()
