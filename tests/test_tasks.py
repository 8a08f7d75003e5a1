"""Tests for core task lifecycle logic."""

from datetime import datetime

import pytest

from dayplan.core.tasks import (
    Task,
    add_task,
    apply_patch,
    complete_task,
    count_completed,
    find_task,
    new_task,
    remove_task,
    replace_task,
    set_actual_end_time,
    sort_by_start,
    uncomplete_task,
)
from dayplan.errors import MissingFieldError, ValidationError


# Fixtures
@pytest.fixture
def now():
    return datetime(2025, 1, 15, 9, 47, 0)


@pytest.fixture
def task():
    return Task(id="t1", start_time="09:00", approx_end_time="10:00", description="Write report")


@pytest.fixture
def sample_tasks():
    return [
        Task(id="a", start_time="08:00", approx_end_time="08:30", description="Gym"),
        Task(id="b", start_time="09:00", approx_end_time="10:00", description="Write report"),
        Task(id="c", start_time="13:15:00", approx_end_time="14:00", description="Review"),
    ]


def assert_derived_pair_consistent(t: Task):
    assert (t.actual_end_time is None) == (t.duration_seconds is None)


class TestNewTask:
    def test_creates_incomplete_task(self):
        t = new_task("09:00", "10:00", "Write report")
        assert t.completed is False
        assert t.actual_end_time is None
        assert t.duration_seconds is None
        assert t.id

    def test_ids_are_unique(self):
        assert new_task("09:00", "10:00", "x").id != new_task("09:00", "10:00", "x").id

    def test_description_is_trimmed(self):
        assert new_task("09:00", "10:00", "  Write report \n").description == "Write report"

    @pytest.mark.parametrize("description", ["", "   ", "\t\n", None, 5])
    def test_rejects_empty_description(self, description):
        with pytest.raises(ValidationError):
            new_task("09:00", "10:00", description)

    def test_missing_start_time(self):
        with pytest.raises(MissingFieldError) as exc:
            new_task(None, "10:00", "x")
        assert exc.value.field == "startTime"

    def test_non_string_time(self):
        with pytest.raises(ValidationError):
            new_task(900, "10:00", "x")


class TestOrdering:
    def test_add_keeps_sorted(self, sample_tasks):
        result = add_task(sample_tasks, Task(id="d", start_time="08:45", approx_end_time="09:00", description="x"))
        assert [t.id for t in result] == ["a", "d", "b", "c"]

    def test_add_does_not_mutate_input(self, sample_tasks):
        add_task(sample_tasks, Task(id="d", start_time="07:00", approx_end_time="08:00", description="x"))
        assert len(sample_tasks) == 3

    def test_sort_by_start(self, sample_tasks):
        shuffled = [sample_tasks[2], sample_tasks[0], sample_tasks[1]]
        assert sort_by_start(shuffled) == sample_tasks

    def test_replace_resorts(self, sample_tasks):
        moved = Task(id="a", start_time="15:00", approx_end_time="16:00", description="Gym")
        assert [t.id for t in replace_task(sample_tasks, moved)] == ["b", "c", "a"]


class TestFindAndRemove:
    def test_find(self, sample_tasks):
        assert find_task(sample_tasks, "b").description == "Write report"
        assert find_task(sample_tasks, "zzz") is None

    def test_remove_existing(self, sample_tasks):
        remaining, removed = remove_task(sample_tasks, "b")
        assert removed is True
        assert len(remaining) == len(sample_tasks) - 1
        assert find_task(remaining, "b") is None

    def test_remove_missing(self, sample_tasks):
        remaining, removed = remove_task(sample_tasks, "nope")
        assert removed is False
        assert len(remaining) == len(sample_tasks)


class TestCompletion:
    def test_complete_uses_now(self, task, now):
        done = complete_task(task, now=now)
        assert done.completed is True
        assert done.actual_end_time == "09:47:00"
        assert done.duration_seconds == 2820

    def test_complete_with_explicit_end(self, task, now):
        done = complete_task(task, "10:30", now=now)
        assert done.actual_end_time == "10:30"
        assert done.duration_seconds == 5400

    def test_complete_keeps_preset_end_time(self, task, now):
        preset = set_actual_end_time(task, "09:15")
        done = complete_task(preset, now=now)
        assert done.actual_end_time == "09:15"
        assert done.duration_seconds == 900

    def test_uncomplete_clears_timing(self, task, now):
        undone = uncomplete_task(complete_task(task, "11:00", now=now))
        assert undone.completed is False
        assert undone.actual_end_time is None
        assert undone.duration_seconds is None

    def test_does_not_mutate_original(self, task, now):
        complete_task(task, now=now)
        assert task.completed is False

    def test_set_actual_end_time_leaves_completion_alone(self, task):
        updated = set_actual_end_time(task, "09:30")
        assert updated.completed is False
        assert updated.actual_end_time == "09:30"
        assert updated.duration_seconds == 1800

    def test_set_actual_end_time_empty_clears(self, task, now):
        cleared = set_actual_end_time(complete_task(task, now=now), "")
        assert cleared.completed is True
        assert cleared.actual_end_time is None
        assert cleared.duration_seconds is None

    def test_overnight_duration(self):
        t = Task(id="n", start_time="23:00", approx_end_time="23:45", description="Late shift")
        assert complete_task(t, "00:30").duration_seconds == 5400


class TestApplyPatch:
    def test_complete_then_uncomplete(self, task, now):
        done = apply_patch(task, {"completed": True}, now=now)
        assert done.actual_end_time == "09:47:00"
        assert done.duration_seconds == 2820

        undone = apply_patch(done, {"completed": False}, now=now)
        assert undone.actual_end_time is None
        assert undone.duration_seconds is None

    def test_explicit_end_time_wins_over_completion(self, task, now):
        result = apply_patch(task, {"completed": True, "actualEndTime": "10:10"}, now=now)
        assert result.completed is True
        assert result.actual_end_time == "10:10"
        assert result.duration_seconds == 4200

    def test_end_time_with_uncomplete_still_sets_end(self, task, now):
        result = apply_patch(task, {"completed": False, "actualEndTime": "09:20"}, now=now)
        assert result.completed is False
        assert result.actual_end_time == "09:20"
        assert result.duration_seconds == 1200

    def test_clear_actual_end_time_with_null(self, task, now):
        done = complete_task(task, now=now)
        result = apply_patch(done, {"actualEndTime": None})
        assert result.actual_end_time is None
        assert result.duration_seconds is None

    def test_start_time_change_recomputes_duration(self, task, now):
        done = complete_task(task, "10:00", now=now)
        moved = apply_patch(done, {"startTime": "09:30"})
        assert moved.duration_seconds == 1800

    def test_plain_fields(self, task):
        result = apply_patch(task, {"approxEndTime": "11:00", "description": " Edit report "})
        assert result.approx_end_time == "11:00"
        assert result.description == "Edit report"

    def test_empty_description_rejected(self, task):
        with pytest.raises(ValidationError):
            apply_patch(task, {"description": "  "})

    def test_non_bool_completed_rejected(self, task):
        with pytest.raises(ValidationError):
            apply_patch(task, {"completed": "yes"})

    def test_unknown_keys_ignored(self, task):
        assert apply_patch(task, {"color": "red"}) == task

    @pytest.mark.parametrize(
        "patch",
        [
            {"completed": True},
            {"completed": False},
            {"actualEndTime": "12:00"},
            {"actualEndTime": ""},
            {"completed": True, "actualEndTime": "08:00"},
            {"startTime": "08:00"},
        ],
    )
    def test_derived_pair_stays_consistent(self, task, now, patch):
        assert_derived_pair_consistent(apply_patch(task, patch, now=now))
        assert_derived_pair_consistent(apply_patch(complete_task(task, now=now), patch, now=now))


class TestSerialization:
    def test_optional_fields_omitted(self, task):
        data = task.to_dict()
        assert "actualEndTime" not in data
        assert "durationSeconds" not in data
        assert data == {
            "id": "t1",
            "startTime": "09:00",
            "approxEndTime": "10:00",
            "description": "Write report",
            "completed": False,
        }

    def test_completed_fields_present(self, task, now):
        data = complete_task(task, now=now).to_dict()
        assert data["actualEndTime"] == "09:47:00"
        assert data["durationSeconds"] == 2820

    def test_from_dict(self):
        t = Task.from_dict(
            {
                "id": "x",
                "startTime": "07:00",
                "approxEndTime": "07:30",
                "description": "Run",
                "completed": True,
                "actualEndTime": "07:40:00",
                "durationSeconds": 2400,
            }
        )
        assert t.completed is True
        assert t.duration_seconds == 2400

    @pytest.mark.parametrize(
        "field, value",
        [
            ("startTime", 900),
            ("approxEndTime", None),
            ("description", ["Run"]),
            ("completed", "yes"),
            ("actualEndTime", 1000),
            ("durationSeconds", "2400"),
            ("durationSeconds", True),
        ],
    )
    def test_from_dict_rejects_wrong_types(self, field, value):
        data = {"id": "x", "startTime": "07:00", "approxEndTime": "07:30", "description": "Run"}
        data[field] = value
        with pytest.raises(TypeError):
            Task.from_dict(data)

    def test_count_completed(self, sample_tasks, now):
        tasks = [complete_task(sample_tasks[0], now=now), *sample_tasks[1:]]
        assert count_completed(tasks) == 1
