# basement_lab/session.py
"""
TrainingSession: the explicit context every engine operation runs against.

A session is opened from a blob store and a loaded catalog, holds the
progress cursor and the exercise log in memory, and writes each of them back
after every mutation. Reads that fail fall back to in-memory defaults and the
session then refuses to write over the unread data; writes that fail
are reported through ``saved: False`` and never raise.
"""
import logging
import math
import time
from typing import Any, Callable, Dict, List, Optional

from .errors import InvalidInput, StorageError
from .exercise_log import DIFFICULTIES, FAILED, ExerciseLog, log_key
from .program_catalog import Catalog, Exercise
from .progression import (
    PROGRAM_LENGTH_DAYS,
    ProgressState,
    complete_workout,
    initial_progress,
)
from .schedule import REST, describe_day, resolve_today
from .storage import BlobStore
from .weights import adjust_weight, suggest_weight

logger = logging.getLogger(__name__)

STATE_KEY = "basement_lab_state"
LOG_KEY = "basement_lab_log"


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def _parse_weight(value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidInput("weight must be a number")
    try:
        weight = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"weight must be a number, got {value!r}")
    if not math.isfinite(weight) or weight <= 0:
        raise InvalidInput("weight must be a positive number")
    return int(weight) if weight.is_integer() else weight


def _parse_positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be a whole number")
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be a whole number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidInput(f"{name} must be a whole number, got {value!r}")
    if n < 1:
        raise InvalidInput(f"{name} must be at least 1")
    return n


class TrainingSession:
    def __init__(
        self,
        catalog: Catalog,
        store: BlobStore,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.catalog = catalog
        self.store = store
        self.clock = clock or _epoch_millis
        # set when a read fails: the stored data is unknown, so never overwrite it
        self.read_degraded = False
        self.progress = self._load_progress()
        self.log = self._load_log()

    # ------------------------------
    # Loading / persisting
    # ------------------------------
    def _read(self, key: str) -> Optional[str]:
        try:
            return self.store.get(key)
        except StorageError as e:
            logger.warning("Could not read %s, using defaults: %s", key, e)
            self.read_degraded = True
            return None

    def _load_progress(self) -> ProgressState:
        blob = self._read(STATE_KEY)
        try:
            state = ProgressState.from_blob(blob)
        except ValueError as e:
            logger.warning("Discarding unreadable progress state: %s", e)
            state = None

        if state is None:
            state = initial_progress(self.catalog)
            if not self.read_degraded:
                self._write(STATE_KEY, state.to_blob())
        return state

    def _load_log(self) -> ExerciseLog:
        try:
            return ExerciseLog.from_blob(self._read(LOG_KEY))
        except ValueError as e:
            logger.warning("Discarding unreadable exercise log: %s", e)
            return ExerciseLog()

    def _write(self, key: str, blob: str) -> bool:
        if self.read_degraded:
            logger.warning("Progress not saved (%s): stored data could not be read", key)
            return False
        try:
            self.store.set(key, blob)
        except StorageError:
            logger.exception("Progress not saved (%s)", key)
            return False
        return True

    def _save_log(self) -> bool:
        return self._write(LOG_KEY, self.log.to_blob())

    # ------------------------------
    # Today
    # ------------------------------
    def today(self):
        return resolve_today(self.progress, self.catalog)

    def _exercise_at(self, index: Any) -> Exercise:
        workout = self.today()
        if workout is REST:
            raise InvalidInput(f"day {self.progress.global_day} is a rest day")
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidInput("exercise index must be an integer")
        if index < 0 or index >= len(workout.exercises):
            raise InvalidInput(
                f"exercise index {index} out of range (0..{len(workout.exercises) - 1})"
            )
        return workout.exercises[index]

    def _key(self, index: int) -> str:
        return log_key(self.progress.global_day, index)

    def get_todays_schedule(self) -> Dict[str, Any]:
        payload = describe_day(self.progress, self.catalog)
        payload["program_complete"] = self.progress.global_day >= PROGRAM_LENGTH_DAYS

        workout = self.today()
        if workout is REST:
            payload["rest"] = True
            payload["workout"] = None
            return payload

        entries = self.log.all_entries()
        payload["rest"] = False
        payload["workout"] = workout.to_dict()
        for i, (ex, item) in enumerate(zip(workout.exercises, payload["workout"]["exercises"])):
            key = self._key(i)
            item["index"] = i
            item["key"] = key
            item["log"] = self.log.get(key)
            item["suggested_weight"] = (
                suggest_weight(
                    ex.name,
                    ex.starting_weight,
                    ex.weight_increment,
                    entries,
                    self.progress.global_day,
                )
                if ex.uses_weight
                else None
            )
        return payload

    # ------------------------------
    # Field updates
    # ------------------------------
    def _upsert(self, index: int, ex: Exercise, **fields: Any) -> Dict[str, Any]:
        key = self._key(index)
        now = self.clock()
        day = self.progress.global_day
        entry = self.log.upsert_field(key, "exercise", ex.name, day, now)
        for field, value in fields.items():
            entry = self.log.upsert_field(key, field, value, day, now)
        return {"key": key, "entry": entry, "saved": self._save_log()}

    def _clear(self, index: int, field: str) -> Dict[str, Any]:
        key = self._key(index)
        if key not in self.log:
            return {"key": key, "entry": None, "saved": True}
        entry = self.log.clear_field(key, field)
        return {"key": key, "entry": entry, "saved": self._save_log()}

    def record_weight(self, index: int, value: Any) -> Dict[str, Any]:
        ex = self._exercise_at(index)
        if value is None or (isinstance(value, str) and not value.strip()):
            return self._clear(index, "weight")
        if not ex.uses_weight:
            raise InvalidInput(f"'{ex.name}' does not use weight")
        return self._upsert(index, ex, weight=_parse_weight(value))

    def record_difficulty(self, index: int, value: Optional[str]) -> Dict[str, Any]:
        ex = self._exercise_at(index)
        if value is None or not str(value).strip():
            return self._clear(index, "difficulty")
        difficulty = str(value).strip().lower()
        if difficulty not in DIFFICULTIES:
            raise InvalidInput(
                f"difficulty must be one of {', '.join(DIFFICULTIES)}, got {value!r}"
            )
        return self._upsert(index, ex, difficulty=difficulty)

    def record_failed_point(self, index: int, failed_set: Any, failed_rep: Any) -> Dict[str, Any]:
        ex = self._exercise_at(index)
        current = self.log.get(self._key(index)) or {}
        if current.get("difficulty") != FAILED:
            raise InvalidInput("a failure point can only be recorded for a failed exercise")

        set_no = _parse_positive_int(failed_set, "failed set")
        rep_no = _parse_positive_int(failed_rep, "failed rep")
        if set_no > ex.sets:
            raise InvalidInput(f"failed set {set_no} exceeds the {ex.sets} prescribed sets")

        return self._upsert(index, ex, failedSet=set_no, failedRep=rep_no)

    def record_notes(self, index: int, text: Optional[str]) -> Dict[str, Any]:
        ex = self._exercise_at(index)
        if text is None or not str(text).strip():
            return self._clear(index, "notes")
        return self._upsert(index, ex, notes=str(text))

    def adjust_weight(self, index: int, direction: int) -> Dict[str, Any]:
        """Step today's weight by the exercise increment, clamped to [5, 80]."""
        ex = self._exercise_at(index)
        if not ex.uses_weight:
            raise InvalidInput(f"'{ex.name}' does not use weight")

        current = (self.log.get(self._key(index)) or {}).get("weight")
        if current is None:
            current = self.get_suggested_weight(index)
        return self.record_weight(index, adjust_weight(current, ex.weight_increment, direction))

    def get_suggested_weight(self, index: int) -> Optional[float]:
        ex = self._exercise_at(index)
        if not ex.uses_weight:
            return None
        return suggest_weight(
            ex.name,
            ex.starting_weight,
            ex.weight_increment,
            self.log.all_entries(),
            self.progress.global_day,
        )

    def exercise_history(self, exercise_name: str) -> List[Dict[str, Any]]:
        rows = [
            dict(record, key=key)
            for key, record in self.log.all_entries()
            if record.get("exercise") == exercise_name
        ]
        rows.sort(key=lambda r: (r.get("day", 0), r["key"]))
        return rows

    # ------------------------------
    # Progression
    # ------------------------------
    def complete_workout(self) -> Dict[str, Any]:
        result = complete_workout(self.progress, self.catalog)
        if result.program_complete:
            logger.info("Program complete at day %s", self.progress.global_day)
            return {
                "progress": self.progress.to_dict(),
                "program_complete": True,
                "phase_changed": False,
                "saved": True,
            }

        self.progress = result.progress
        saved = self._write(STATE_KEY, self.progress.to_blob())
        return {
            "progress": self.progress.to_dict(),
            "program_complete": False,
            "phase_changed": result.phase_changed,
            "saved": saved,
        }

    def reset_progress(self, confirmed: bool) -> Dict[str, Any]:
        if not confirmed:
            return {"reset": False, "progress": self.progress.to_dict(), "saved": True}

        saved = True
        for key in (STATE_KEY, LOG_KEY):
            try:
                self.store.remove(key)
            except StorageError:
                logger.exception("Could not remove %s during reset", key)
                saved = False

        self.log.clear()
        self.progress = initial_progress(self.catalog)
        # an explicit reset replaces whatever was stored, readable or not
        self.read_degraded = False
        saved = self._write(STATE_KEY, self.progress.to_blob()) and saved
        logger.info("Progress reset to day 1 (%s)", self.progress.current_phase)
        return {"reset": True, "progress": self.progress.to_dict(), "saved": saved}
