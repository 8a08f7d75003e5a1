"""Pure wall-clock arithmetic - no I/O dependencies."""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

SECONDS_PER_DAY = 24 * 3600
HALF_DAY = 12 * 3600

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_component(part: str, upper: int) -> int:
    """Leading integer of a time component, clamped to [0, upper]."""
    match = _LEADING_INT.match(part)
    value = int(match.group(1)) if match else 0
    return max(0, min(upper, value))


def parse_time_to_seconds(time: str | None) -> int:
    """
    Convert "HH:MM" or "HH:MM:SS" to seconds since midnight.

    Out-of-range or garbage components are clamped rather than rejected,
    so this never raises. Empty input yields 0.
    """
    if not time:
        return 0
    parts = time.split(":")
    h_str = parts[0] if len(parts) > 0 else "0"
    m_str = parts[1] if len(parts) > 1 else "0"
    s_str = parts[2] if len(parts) > 2 else "0"
    h = _parse_component(h_str, 23)
    m = _parse_component(m_str, 59)
    s = _parse_component(s_str, 59)
    return h * 3600 + m * 60 + s


def seconds_to_hms(total_seconds: int) -> tuple[int, int, int]:
    """Split a second count into (hours, minutes, seconds)."""
    h, rem = divmod(total_seconds, 3600)
    m, s = divmod(rem, 60)
    return h, m, s


def format_duration_human(total_seconds: int) -> str:
    """Render seconds as e.g. "1h 5m 3s", dropping zero-valued units."""
    h, m, s = seconds_to_hms(max(0, total_seconds))
    parts = []
    if h > 0:
        parts.append(f"{h}h")
    if m > 0:
        parts.append(f"{m}m")
    if s > 0 or not parts:
        parts.append(f"{s}s")
    return " ".join(parts)


def compute_duration_seconds(start_time: str | None, end_time: str | None) -> int:
    """Seconds from start to end, wrapping past midnight. Never negative."""
    diff = parse_time_to_seconds(end_time) - parse_time_to_seconds(start_time)
    if diff < 0:
        diff += SECONDS_PER_DAY
    return diff


def compute_delta_from_approx(approx_end: str | None, actual_end: str | None) -> int:
    """
    Signed seconds between the approximate and actual end.

    Positive = finished late, negative = finished early. Only a delta below
    minus twelve hours is treated as crossing midnight, so finishing a few
    minutes early still reads as early.
    """
    delta = parse_time_to_seconds(actual_end) - parse_time_to_seconds(approx_end)
    if delta < -HALF_DAY:
        delta += SECONDS_PER_DAY
    return delta


def format_time_12h(time: str | None) -> str:
    """Render "HH:MM[:SS]" as "h:mm AM/PM"."""
    if not time:
        return ""
    parts = time.split(":")
    h24 = _parse_component(parts[0], 23)
    m = _parse_component(parts[1], 59) if len(parts) > 1 else 0
    period = "PM" if h24 >= 12 else "AM"
    h12 = h24 % 12 or 12
    return f"{h12}:{m:02d} {period}"


def now_hms(now: datetime | None = None) -> str:
    """Current wall-clock time as "HH:MM:SS"."""
    now = now or datetime.now()
    return now.strftime("%H:%M:%S")


class CompletionStatus(Enum):
    """How a task finished relative to its approximate end."""

    PENDING = "pending"
    LATE = "late"
    EARLY = "early"
    ON_TIME = "on-time"


@dataclass
class Completion:
    """Completion status plus the absolute delta in seconds."""

    status: CompletionStatus
    delta_seconds: int = 0

    def format(self) -> str:
        match self.status:
            case CompletionStatus.PENDING:
                return ""
            case CompletionStatus.ON_TIME:
                return "on time"
            case _:
                return f"{format_duration_human(self.delta_seconds)} {self.status.value}"


def completion_status(approx_end: str | None, actual_end: str | None) -> Completion:
    """Classify a finish as late, early or on time."""
    if not actual_end:
        return Completion(CompletionStatus.PENDING)
    delta = compute_delta_from_approx(approx_end, actual_end)
    if delta > 0:
        return Completion(CompletionStatus.LATE, delta)
    if delta < 0:
        return Completion(CompletionStatus.EARLY, -delta)
    return Completion(CompletionStatus.ON_TIME)
