"""Functional core - pure business logic with no I/O."""

from .timeutil import (
    CompletionStatus,
    completion_status,
    compute_delta_from_approx,
    compute_duration_seconds,
    format_duration_human,
    format_time_12h,
    parse_time_to_seconds,
)
from .tasks import Task, apply_patch, complete_task, new_task, set_actual_end_time, uncomplete_task
from .categories import CATEGORY_KEYS, CategoryState, toggle_category
from .state import AppState
from .summary import DaySummary, summarize_range

__all__ = [
    # Time
    "CompletionStatus",
    "completion_status",
    "compute_delta_from_approx",
    "compute_duration_seconds",
    "format_duration_human",
    "format_time_12h",
    "parse_time_to_seconds",
    # Tasks
    "Task",
    "apply_patch",
    "complete_task",
    "new_task",
    "set_actual_end_time",
    "uncomplete_task",
    # Categories
    "CATEGORY_KEYS",
    "CategoryState",
    "toggle_category",
    # State
    "AppState",
    # Summary
    "DaySummary",
    "summarize_range",
]
