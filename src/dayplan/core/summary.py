"""Pure date helpers and completion summaries - no I/O dependencies."""

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta

from dayplan.errors import ValidationError

from .categories import CategoryState
from .state import AppState
from .tasks import count_completed

MAX_SUMMARY_DAYS = 366

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse a strict "yyyy-mm-dd" string."""
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise ValidationError(f"Invalid date: {value!r} (expected yyyy-mm-dd)")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value!r}") from e


def start_of_week(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


def date_range(start: date, end: date) -> list[date]:
    """Dates from start to end, inclusive."""
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def week_dates(d: date) -> list[date]:
    """Monday-to-Sunday week containing d."""
    monday = start_of_week(d)
    return date_range(monday, monday + timedelta(days=6))


def month_dates(year: int, month: int) -> list[date]:
    last_day = calendar.monthrange(year, month)[1]
    return date_range(date(year, month, 1), date(year, month, last_day))


def year_dates(year: int) -> list[date]:
    return date_range(date(year, 1, 1), date(year, 12, 31))


@dataclass
class DaySummary:
    """Task completion and habit flags for one date."""

    date: date
    total: int
    completed: int
    categories: CategoryState

    @property
    def completion_ratio(self) -> float:
        """Fraction of tasks completed (0.0 when there are no tasks)."""
        if not self.total:
            return 0.0
        return self.completed / self.total

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.completed == self.total

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "total": self.total,
            "completed": self.completed,
            "completionRatio": round(self.completion_ratio, 4),
            "categories": self.categories.to_dict(),
        }


def summarize_days(state: AppState, days: list[date]) -> list[DaySummary]:
    summaries = []
    for d in days:
        key = d.isoformat()
        tasks = state.tasks_for(key)
        summaries.append(
            DaySummary(
                date=d,
                total=len(tasks),
                completed=count_completed(tasks),
                categories=state.categories_for(key),
            )
        )
    return summaries


def summarize_range(state: AppState, start: date, end: date) -> list[DaySummary]:
    """Summaries for every date from start to end, inclusive."""
    if end < start:
        raise ValidationError("end must not be before start")
    if (end - start).days + 1 > MAX_SUMMARY_DAYS:
        raise ValidationError(f"Range is limited to {MAX_SUMMARY_DAYS} days")
    return summarize_days(state, date_range(start, end))
