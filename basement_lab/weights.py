# basement_lab/weights.py
"""Weekly weight progression."""
import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from .schedule import week_number

logger = logging.getLogger(__name__)

MIN_WEIGHT = 5
MAX_WEIGHT = 80


def latest_weighted_entry(
    exercise_name: str, entries: Iterable[Tuple[str, Dict[str, Any]]]
) -> Optional[Dict[str, Any]]:
    """Most recently written entry (by timestamp) that carries a weight."""
    latest = None
    for _key, record in entries:
        if record.get("exercise") != exercise_name or record.get("weight") is None:
            continue
        if latest is None or record.get("timestamp", 0) > latest.get("timestamp", 0):
            latest = record
    return latest


def suggest_weight(
    exercise_name: str,
    starting_weight: float,
    increment: float,
    entries: Iterable[Tuple[str, Dict[str, Any]]],
    current_global_day: int,
) -> float:
    last = latest_weighted_entry(exercise_name, entries)
    if last is None:
        return starting_weight

    current_week = week_number(current_global_day)
    last_week = week_number(last["day"])

    if current_week > last_week:
        suggestion = min(last["weight"] + increment, MAX_WEIGHT)
    else:
        suggestion = last["weight"]

    logger.debug(
        "Suggesting %s for %s: last=%s (week %s) current week=%s",
        suggestion,
        exercise_name,
        last["weight"],
        last_week,
        current_week,
    )
    return suggestion


def clamp_weight(value: float) -> float:
    return max(MIN_WEIGHT, min(value, MAX_WEIGHT))


def adjust_weight(current: float, step: float, direction: int) -> float:
    """Move ``current`` one step up (direction > 0) or down, inside [5, 80]."""
    if direction > 0:
        return clamp_weight(current + step)
    return clamp_weight(current - step)
