# basement_lab/program_catalog.py
"""
Read-only model of the training program document.

The document is authored and validated elsewhere; this module only turns it
into immutable objects and refuses documents it cannot make sense of at all
(no phases list, a phase without an id, an exercise without a name).
Cross-references such as schedule tokens are checked lazily by the schedule
resolver.
"""
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from .errors import CatalogLoadError, UnknownPhase

REST_TOKEN = "Rest"

DEFAULT_STARTING_WEIGHT = 10
DEFAULT_WEIGHT_INCREMENT = 5


@dataclass(frozen=True)
class Exercise:
    name: str
    sets: int
    reps: str
    rest: str
    note: Optional[str] = None
    video_id: Optional[str] = None
    video_start: Optional[int] = None
    uses_weight: bool = True
    starting_weight: float = DEFAULT_STARTING_WEIGHT
    weight_increment: float = DEFAULT_WEIGHT_INCREMENT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "rest": self.rest,
            "note": self.note,
            "video_id": self.video_id,
            "video_start": self.video_start,
            "uses_weight": self.uses_weight,
            "starting_weight": self.starting_weight,
            "weight_increment": self.weight_increment,
        }


@dataclass(frozen=True)
class Workout:
    key: str
    name: str
    focus: str
    exercises: Tuple[Exercise, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "focus": self.focus,
            "exercises": [ex.to_dict() for ex in self.exercises],
        }


@dataclass(frozen=True)
class Phase:
    id: str
    name: str
    duration_weeks: int
    schedule_pattern: Optional[Tuple[str, ...]] = None
    workouts: Dict[str, Workout] = field(default_factory=dict)

    @property
    def duration_days(self) -> int:
        return self.duration_weeks * 7

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "duration_weeks": self.duration_weeks,
            "schedule_pattern": list(self.schedule_pattern)
            if self.schedule_pattern is not None
            else None,
            "workouts": {k: w.name for k, w in self.workouts.items()},
        }


@dataclass(frozen=True)
class Catalog:
    phases: Tuple[Phase, ...]
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def first_phase_id(self) -> str:
        return self.phases[0].id

    def phase(self, phase_id: str) -> Phase:
        for p in self.phases:
            if p.id == phase_id:
                return p
        raise UnknownPhase(phase_id)

    def phase_index(self, phase_id: str) -> int:
        for i, p in enumerate(self.phases):
            if p.id == phase_id:
                return i
        raise UnknownPhase(phase_id)

    def summary(self) -> Dict[str, Any]:
        return {
            "meta": dict(self.meta),
            "phases": [p.summary() for p in self.phases],
        }


# ------------------------------
# Parsing
# ------------------------------
def _opt_number(v: Any, default, where: str):
    if v is None:
        return default
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise CatalogLoadError(f"{where}: expected a number, got {v!r}")
    return v


def _parse_exercise(data: Dict[str, Any], where: str) -> Exercise:
    if not isinstance(data, dict):
        raise CatalogLoadError(f"{where}: expected an object")
    name = data.get("name")
    if not name:
        raise CatalogLoadError(f"{where}: missing name")

    sets = data.get("sets")
    if isinstance(sets, bool) or not isinstance(sets, int) or sets < 1:
        raise CatalogLoadError(f"{where}: sets must be a positive integer")

    video_start = data.get("video_start")
    if video_start is not None and (not isinstance(video_start, int) or video_start < 0):
        raise CatalogLoadError(f"{where}: video_start must be a non-negative integer")

    uses_weight = data.get("uses_weight")

    return Exercise(
        name=name,
        sets=sets,
        reps=str(data.get("reps") or ""),
        rest=str(data.get("rest") or ""),
        note=data.get("note") or None,
        video_id=data.get("video_id") or None,
        video_start=video_start,
        uses_weight=True if uses_weight is None else bool(uses_weight),
        starting_weight=_opt_number(data.get("starting_weight"), DEFAULT_STARTING_WEIGHT, where),
        weight_increment=_opt_number(data.get("weight_increment"), DEFAULT_WEIGHT_INCREMENT, where),
    )


def _parse_workout(key: str, data: Dict[str, Any], where: str) -> Workout:
    if not isinstance(data, dict):
        raise CatalogLoadError(f"{where}: expected an object")
    exercises = data.get("exercises")
    if not isinstance(exercises, list):
        raise CatalogLoadError(f"{where}: exercises must be a list")
    return Workout(
        key=key,
        name=data.get("name") or key,
        focus=data.get("focus") or "",
        exercises=tuple(
            _parse_exercise(ex, f"{where}.exercises[{j}]") for j, ex in enumerate(exercises)
        ),
    )


def _parse_phase(data: Dict[str, Any], where: str) -> Phase:
    if not isinstance(data, dict):
        raise CatalogLoadError(f"{where}: expected an object")
    phase_id = data.get("id")
    if not phase_id:
        raise CatalogLoadError(f"{where}: missing id")

    duration = data.get("duration_weeks")
    if isinstance(duration, bool) or not isinstance(duration, int) or duration < 1:
        raise CatalogLoadError(f"{where}: duration_weeks must be a positive integer")

    pattern = data.get("schedule_pattern")
    if pattern is not None and not isinstance(pattern, list):
        raise CatalogLoadError(f"{where}: schedule_pattern must be a list")

    workouts = data.get("workouts") or {}
    if not isinstance(workouts, dict):
        raise CatalogLoadError(f"{where}: workouts must be an object")

    return Phase(
        id=str(phase_id),
        name=data.get("name") or str(phase_id),
        duration_weeks=duration,
        schedule_pattern=tuple(str(t) for t in pattern) if pattern is not None else None,
        workouts={
            key: _parse_workout(key, w, f"{where}.workouts.{key}")
            for key, w in workouts.items()
        },
    )


def parse_catalog(document: Any) -> Catalog:
    if not isinstance(document, dict):
        raise CatalogLoadError("program document must be a JSON object")

    phases = document.get("phases")
    if not isinstance(phases, list) or not phases:
        raise CatalogLoadError("program document needs a non-empty 'phases' list")

    parsed: List[Phase] = [_parse_phase(p, f"phases[{i}]") for i, p in enumerate(phases)]

    seen = set()
    for p in parsed:
        if p.id in seen:
            raise CatalogLoadError(f"duplicate phase id '{p.id}'")
        seen.add(p.id)

    meta = document.get("meta") or {}
    return Catalog(phases=tuple(parsed), meta=dict(meta) if isinstance(meta, dict) else {})


def _fetch(source: str, timeout: int) -> str:
    if source.startswith(("http://", "https://")):
        try:
            resp = requests.get(source, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise CatalogLoadError(f"failed to fetch program from {source}: {e}") from e
        return resp.text

    if not os.path.exists(source):
        raise CatalogLoadError(f"program file not found: {source}")
    try:
        with open(source, encoding="utf-8") as fh:
            return fh.read()
    except OSError as e:
        raise CatalogLoadError(f"failed to read program file {source}: {e}") from e


def load_catalog(source: str, timeout: int = 10) -> Catalog:
    """
    Load the program from a local path or an http(s) URL.

    Raises CatalogLoadError for anything that prevents building a catalog:
    unreachable source, invalid JSON, structurally unusable document.
    """
    text = _fetch(source, timeout)
    try:
        document = json.loads(text)
    except ValueError as e:
        raise CatalogLoadError(f"invalid JSON in program document: {e}") from e
    return parse_catalog(document)
