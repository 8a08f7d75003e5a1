"""Pure daily habit category logic - no I/O dependencies."""

from dataclasses import asdict, dataclass, replace
from typing import Any

from dayplan.errors import MissingFieldError, ValidationError

CATEGORY_KEYS = ("water", "meat", "sleep", "gym")


@dataclass(frozen=True)
class CategoryState:
    """Four independent habit flags for one date."""

    water: bool = False
    meat: bool = False
    sleep: bool = False
    gym: bool = False

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CategoryState":
        return cls(**{key: bool(data.get(key, False)) for key in CATEGORY_KEYS})

    def count(self) -> int:
        """Number of flags set."""
        return sum(1 for key in CATEGORY_KEYS if getattr(self, key))


def toggle_category(current: CategoryState | None, key: Any, value: Any) -> CategoryState:
    """
    Set one flag on a date's category record.

    Absent records start from all-false. Returns the full updated record.
    """
    if not key:
        raise MissingFieldError("key")
    if key not in CATEGORY_KEYS:
        raise ValidationError(f"Unknown category: {key}")
    if not isinstance(value, bool):
        raise ValidationError("value must be a boolean")
    return replace(current or CategoryState(), **{key: value})
