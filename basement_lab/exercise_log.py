# basement_lab/exercise_log.py
"""
Per-day, per-slot exercise log.

Entries are partial records keyed by ``"{day}_{index}"``. Fields are written
one at a time through ``merge_field`` so that weight, difficulty and notes
never clobber one another. Precedence rules:

  * the written field always wins over its previous value;
  * every other field is carried over untouched;
  * ``day`` and ``timestamp`` are re-stamped on every write;
  * a difficulty other than ``failed`` drops ``failedSet`` / ``failedRep``.

An entry with none of ``weight``, ``difficulty`` or ``notes`` is removed.
"""
import copy
import json
from typing import Any, Dict, List, Optional, Tuple

from .errors import InvalidInput

DIFFICULTIES = ("easy", "good", "hard", "failed")
FAILED = "failed"

MEANINGFUL_FIELDS = ("weight", "difficulty", "notes")
FAILURE_FIELDS = ("failedSet", "failedRep")
WRITABLE_FIELDS = ("exercise",) + MEANINGFUL_FIELDS + FAILURE_FIELDS


def log_key(day: int, index: int) -> str:
    return f"{day}_{index}"


def merge_field(
    record: Optional[Dict[str, Any]], field: str, value: Any, day: int, now: int
) -> Dict[str, Any]:
    """Return a new record with ``field`` overlaid onto ``record``."""
    if field not in WRITABLE_FIELDS:
        raise InvalidInput(f"unknown log field '{field}'")

    merged = dict(record or {})
    merged[field] = value

    if field == "difficulty" and value != FAILED:
        for dep in FAILURE_FIELDS:
            merged.pop(dep, None)

    merged["day"] = day
    merged["timestamp"] = now
    return merged


def is_empty(record: Optional[Dict[str, Any]]) -> bool:
    if not record:
        return True
    return all(record.get(f) is None for f in MEANINGFUL_FIELDS)


class ExerciseLog:
    def __init__(self, entries: Optional[Dict[str, Dict[str, Any]]] = None):
        self._entries: Dict[str, Dict[str, Any]] = {
            k: dict(v) for k, v in (entries or {}).items() if isinstance(v, dict)
        }

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key in self._entries

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        record = self._entries.get(key)
        return dict(record) if record is not None else None

    def upsert_field(self, key: str, field: str, value: Any, day: int, now: int) -> Dict[str, Any]:
        merged = merge_field(self._entries.get(key), field, value, day, now)
        self._entries[key] = merged
        return dict(merged)

    def clear_field(self, key: str, field: str) -> Optional[Dict[str, Any]]:
        """
        Drop one field from an entry. Clearing ``difficulty`` also drops the
        failure point. Returns the remaining record, or None if it was pruned.
        """
        record = self._entries.get(key)
        if record is None:
            return None

        record.pop(field, None)
        if field == "difficulty":
            for dep in FAILURE_FIELDS:
                record.pop(dep, None)

        if self.prune_if_empty(key):
            return None
        return dict(record)

    def prune_if_empty(self, key: str) -> bool:
        if key in self._entries and is_empty(self._entries[key]):
            del self._entries[key]
            return True
        return False

    def all_entries(self) -> List[Tuple[str, Dict[str, Any]]]:
        return [(k, copy.deepcopy(v)) for k, v in self._entries.items()]

    def clear(self) -> None:
        self._entries.clear()

    # ------------------------------
    # Blob codec
    # ------------------------------
    def to_blob(self) -> str:
        return json.dumps(self._entries)

    @classmethod
    def from_blob(cls, blob: Optional[str]) -> "ExerciseLog":
        if not blob:
            return cls()
        data = json.loads(blob)
        if not isinstance(data, dict):
            raise ValueError("exercise log blob must be a JSON object")
        return cls(data)
