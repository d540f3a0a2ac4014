# basement_lab/progression.py
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .program_catalog import Catalog

logger = logging.getLogger(__name__)

PROGRAM_LENGTH_DAYS = 365


@dataclass
class ProgressState:
    global_day: int
    current_phase: str

    def to_dict(self) -> Dict[str, Any]:
        return {"globalDay": self.global_day, "currentPhase": self.current_phase}

    def to_blob(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_blob(cls, blob: Optional[str]) -> Optional["ProgressState"]:
        if not blob:
            return None
        data = json.loads(blob)
        day = data.get("globalDay") if isinstance(data, dict) else None
        phase = data.get("currentPhase") if isinstance(data, dict) else None
        if isinstance(day, bool) or not isinstance(day, int) or day < 1 or not phase:
            raise ValueError(f"malformed progress blob: {blob!r}")
        return cls(global_day=day, current_phase=str(phase))


def initial_progress(catalog: Catalog) -> ProgressState:
    return ProgressState(global_day=1, current_phase=catalog.first_phase_id)


@dataclass
class CompletionResult:
    progress: ProgressState
    program_complete: bool = False
    phase_changed: bool = False


def complete_workout(progress: ProgressState, catalog: Catalog) -> CompletionResult:
    """
    Advance one day. At or past the final day nothing changes and the result
    is flagged ``program_complete``. At most one phase advance per call, even
    when the new day lies beyond several phases.
    """
    if progress.global_day >= PROGRAM_LENGTH_DAYS:
        return CompletionResult(progress=progress, program_complete=True)

    next_state = ProgressState(
        global_day=progress.global_day + 1,
        current_phase=progress.current_phase,
    )

    phase = catalog.phase(next_state.current_phase)
    phase_changed = False
    if next_state.global_day > phase.duration_days and len(catalog.phases) > 1:
        idx = catalog.phase_index(phase.id)
        if idx < len(catalog.phases) - 1:
            next_state.current_phase = catalog.phases[idx + 1].id
            phase_changed = True
            logger.info(
                "Phase transition on day %s: %s -> %s",
                next_state.global_day,
                phase.id,
                next_state.current_phase,
            )

    return CompletionResult(progress=next_state, phase_changed=phase_changed)
