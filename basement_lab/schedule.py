# basement_lab/schedule.py
from typing import Any, Dict, Optional, Union

from .errors import MalformedSchedule, UnknownWorkoutKey
from .program_catalog import REST_TOKEN, Catalog, Phase, Workout

DAYS_PER_WEEK = 7


class _Rest:
    """Sentinel returned by the resolver on rest days."""

    def __repr__(self):
        return "REST"

    def __bool__(self):
        return False


REST = _Rest()


def day_index(global_day: int) -> int:
    """Zero-based weekday slot; the 7-slot pattern repeats every 7 global days."""
    return (global_day - 1) % DAYS_PER_WEEK


def week_number(global_day: int) -> int:
    """One-based training week containing ``global_day``."""
    return (global_day - 1) // DAYS_PER_WEEK + 1


def _token_for(phase: Phase, global_day: int) -> Optional[str]:
    pattern = phase.schedule_pattern
    if pattern is None:
        return None
    if len(pattern) != DAYS_PER_WEEK:
        raise MalformedSchedule(phase.id, len(pattern))
    return pattern[day_index(global_day)]


def resolve_today(progress, catalog: Catalog) -> Union[Workout, _Rest]:
    phase = catalog.phase(progress.current_phase)
    token = _token_for(phase, progress.global_day)

    if token is None or token == REST_TOKEN:
        return REST

    workout = phase.workouts.get(token)
    if workout is None:
        raise UnknownWorkoutKey(phase.id, token)
    return workout


def describe_day(progress, catalog: Catalog) -> Dict[str, Any]:
    phase = catalog.phase(progress.current_phase)
    token = _token_for(phase, progress.global_day)
    return {
        "day": progress.global_day,
        "week": week_number(progress.global_day),
        "day_index": day_index(progress.global_day),
        "phase": {"id": phase.id, "name": phase.name},
        "workout_type": token or REST_TOKEN,
    }
