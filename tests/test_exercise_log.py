import itertools
import json

import pytest

from basement_lab.errors import InvalidInput
from basement_lab.exercise_log import ExerciseLog, log_key, merge_field


def test_log_key_format():
    assert log_key(12, 3) == "12_3"


def test_merge_keeps_sibling_fields():
    record = merge_field(None, "weight", 45, day=1, now=100)
    record = merge_field(record, "difficulty", "good", day=1, now=200)
    record = merge_field(record, "notes", "solid", day=1, now=300)

    assert record == {
        "weight": 45,
        "difficulty": "good",
        "notes": "solid",
        "day": 1,
        "timestamp": 300,
    }


def test_merge_does_not_mutate_input():
    original = {"weight": 45, "day": 1, "timestamp": 1}
    merge_field(original, "weight", 50, day=1, now=2)
    assert original["weight"] == 45


def test_merge_new_value_wins():
    record = merge_field({"weight": 45}, "weight", 50, day=2, now=9)
    assert record["weight"] == 50
    assert record["day"] == 2


def test_non_failed_difficulty_drops_failure_point():
    record = {"difficulty": "failed", "failedSet": 2, "failedRep": 5}
    record = merge_field(record, "difficulty", "hard", day=1, now=1)
    assert "failedSet" not in record
    assert "failedRep" not in record


def test_merge_rejects_unknown_field():
    with pytest.raises(InvalidInput):
        merge_field(None, "reps", 10, day=1, now=1)


def test_clear_field_prunes_empty_entry():
    log = ExerciseLog()
    log.upsert_field("1_0", "exercise", "Squat", 1, 1)
    log.upsert_field("1_0", "weight", 45, 1, 2)

    assert log.clear_field("1_0", "weight") is None
    assert "1_0" not in log


def test_clear_field_keeps_entry_with_remaining_fields():
    log = ExerciseLog()
    log.upsert_field("1_0", "weight", 45, 1, 1)
    log.upsert_field("1_0", "notes", "ok", 1, 2)

    remaining = log.clear_field("1_0", "weight")
    assert remaining["notes"] == "ok"
    assert "weight" not in remaining


def test_clearing_difficulty_drops_failure_point():
    log = ExerciseLog()
    log.upsert_field("1_0", "weight", 45, 1, 1)
    log.upsert_field("1_0", "difficulty", "failed", 1, 2)
    log.upsert_field("1_0", "failedSet", 3, 1, 3)
    log.upsert_field("1_0", "failedRep", 4, 1, 4)

    remaining = log.clear_field("1_0", "difficulty")
    assert set(remaining) == {"weight", "day", "timestamp"}


@pytest.mark.parametrize(
    "order", list(itertools.permutations(["weight", "difficulty", "notes"]))
)
def test_no_entry_left_once_all_fields_cleared(order):
    values = {"weight": 45, "difficulty": "good", "notes": "fine"}
    log = ExerciseLog()
    for i, field in enumerate(order):
        log.upsert_field("3_1", field, values[field], 3, i)
    for field in order:
        log.clear_field("3_1", field)
    assert len(log) == 0


def test_prune_if_empty_only_removes_empty_entries():
    log = ExerciseLog({"1_0": {"exercise": "Squat", "day": 1, "timestamp": 1},
                       "1_1": {"exercise": "Row", "weight": 20, "day": 1, "timestamp": 1}})
    assert log.prune_if_empty("1_0") is True
    assert log.prune_if_empty("1_1") is False
    assert [k for k, _ in log.all_entries()] == ["1_1"]


def test_all_entries_is_a_snapshot():
    log = ExerciseLog()
    log.upsert_field("1_0", "weight", 45, 1, 1)
    (_, record), = log.all_entries()
    record["weight"] = 999
    assert log.get("1_0")["weight"] == 45


def test_blob_roundtrip_and_empty_blob():
    log = ExerciseLog()
    log.upsert_field("1_0", "weight", 45, 1, 1)
    restored = ExerciseLog.from_blob(log.to_blob())
    assert restored.get("1_0") == log.get("1_0")
    assert len(ExerciseLog.from_blob(None)) == 0


def test_from_blob_rejects_non_object():
    with pytest.raises(ValueError):
        ExerciseLog.from_blob(json.dumps([1, 2, 3]))
