"""Pure task lifecycle logic - no I/O dependencies."""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from dayplan.errors import MissingFieldError, ValidationError

from .timeutil import Completion, completion_status, compute_duration_seconds, now_hms

PATCHABLE_FIELDS = ("completed", "actualEndTime", "startTime", "approxEndTime", "description")


@dataclass(frozen=True)
class Task:
    """A scheduled activity on one calendar date."""

    id: str
    start_time: str
    approx_end_time: str
    description: str
    completed: bool = False
    actual_end_time: str | None = None
    duration_seconds: int | None = None

    @property
    def completion(self) -> Completion:
        return completion_status(self.approx_end_time, self.actual_end_time)

    def to_dict(self) -> dict[str, Any]:
        """Wire form. Optional timing fields are omitted when absent."""
        data: dict[str, Any] = {
            "id": self.id,
            "startTime": self.start_time,
            "approxEndTime": self.approx_end_time,
            "description": self.description,
            "completed": self.completed,
        }
        if self.actual_end_time is not None:
            data["actualEndTime"] = self.actual_end_time
        if self.duration_seconds is not None:
            data["durationSeconds"] = self.duration_seconds
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from its wire form. Raises TypeError on a wrongly typed field."""
        task = cls(
            id=str(data["id"]),
            start_time=data.get("startTime", ""),
            approx_end_time=data.get("approxEndTime", ""),
            description=data.get("description", ""),
            completed=data.get("completed", False),
            actual_end_time=data.get("actualEndTime"),
            duration_seconds=data.get("durationSeconds"),
        )
        for name in ("start_time", "approx_end_time", "description"):
            if not isinstance(getattr(task, name), str):
                raise TypeError(f"task {task.id}: {name} must be a string")
        if not isinstance(task.completed, bool):
            raise TypeError(f"task {task.id}: completed must be a boolean")
        if task.actual_end_time is not None and not isinstance(task.actual_end_time, str):
            raise TypeError(f"task {task.id}: actual_end_time must be a string")
        # bool is an int subclass
        if task.duration_seconds is not None and (
            isinstance(task.duration_seconds, bool) or not isinstance(task.duration_seconds, int)
        ):
            raise TypeError(f"task {task.id}: duration_seconds must be an integer")
        return task


def _with_end_time(task: Task, end_time: str | None) -> Task:
    """Set or clear the actual end time together with its derived duration."""
    if not end_time:
        return replace(task, actual_end_time=None, duration_seconds=None)
    return replace(
        task,
        actual_end_time=end_time,
        duration_seconds=compute_duration_seconds(task.start_time, end_time),
    )


def _require_time(value: Any, field: str) -> str:
    if value is None or value == "":
        raise MissingFieldError(field)
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value


def _clean_description(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("description must not be empty")
    return value.strip()


def new_task(
    start_time: Any,
    approx_end_time: Any,
    description: Any,
    task_id: str | None = None,
) -> Task:
    """Create an incomplete task. Description is trimmed and must be non-empty."""
    return Task(
        id=task_id or uuid.uuid4().hex,
        start_time=_require_time(start_time, "startTime"),
        approx_end_time=_require_time(approx_end_time, "approxEndTime"),
        description=_clean_description(description),
    )


def sort_by_start(tasks: list[Task]) -> list[Task]:
    """Sort tasks ascending by start time. Zero-padded strings sort correctly."""
    return sorted(tasks, key=lambda t: t.start_time)


def add_task(tasks: list[Task], task: Task) -> list[Task]:
    """Append a task and keep the list in start-time order."""
    return sort_by_start([*tasks, task])


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    return next((t for t in tasks if t.id == task_id), None)


def remove_task(tasks: list[Task], task_id: str) -> tuple[list[Task], bool]:
    """
    Drop the task with the given id.

    Returns: (remaining_tasks, removed)
    """
    remaining = [t for t in tasks if t.id != task_id]
    return remaining, len(remaining) != len(tasks)


def replace_task(tasks: list[Task], updated: Task) -> list[Task]:
    """Swap in an updated task by id and re-sort."""
    return sort_by_start([updated if t.id == updated.id else t for t in tasks])


def complete_task(task: Task, end_time: str | None = None, now: datetime | None = None) -> Task:
    """
    Mark a task completed.

    The end time is the explicit one if given, otherwise one already recorded
    on the task, otherwise the current wall-clock time. Duration is always
    recomputed.
    """
    end = end_time or task.actual_end_time or now_hms(now)
    return _with_end_time(replace(task, completed=True), end)


def uncomplete_task(task: Task) -> Task:
    """Mark a task incomplete, discarding its recorded end time and duration."""
    return _with_end_time(replace(task, completed=False), None)


def set_actual_end_time(task: Task, end_time: str | None) -> Task:
    """Record (or clear, when empty) the actual end time without touching completion."""
    return _with_end_time(task, end_time)


def apply_patch(task: Task, patch: dict, now: datetime | None = None) -> Task:
    """
    Apply a partial update in wire field names.

    Plain fields are applied first, then completion, then an explicit
    actualEndTime, so an end time given alongside completed=True wins.
    Unknown keys are ignored.
    """
    updated = task

    if "description" in patch:
        updated = replace(updated, description=_clean_description(patch["description"]))
    if "approxEndTime" in patch:
        updated = replace(updated, approx_end_time=_require_time(patch["approxEndTime"], "approxEndTime"))
    if "startTime" in patch:
        updated = replace(updated, start_time=_require_time(patch["startTime"], "startTime"))
        if updated.actual_end_time:
            # Keep duration consistent with the new start
            updated = _with_end_time(updated, updated.actual_end_time)

    if "completed" in patch:
        completed = patch["completed"]
        if not isinstance(completed, bool):
            raise ValidationError("completed must be a boolean")
        updated = complete_task(updated, now=now) if completed else uncomplete_task(updated)

    if "actualEndTime" in patch:
        end_time = patch["actualEndTime"]
        if end_time is not None and not isinstance(end_time, str):
            raise ValidationError("actualEndTime must be a string")
        updated = set_actual_end_time(updated, end_time)

    return updated


def count_completed(tasks: list[Task]) -> int:
    return sum(1 for t in tasks if t.completed)
