# basement_lab/errors.py


class BasementLabError(Exception):
    """Base class for every error raised by the training engine."""


# -----------------------------
# Program catalog
# -----------------------------
class CatalogError(BasementLabError):
    pass


class CatalogLoadError(CatalogError):
    """The program document could not be fetched or parsed."""


class CatalogIntegrityError(CatalogError):
    """
    The loaded program contradicts itself (dangling phase id, schedule token
    without a workout, wrong pattern length). Never recovered at runtime.
    """


class UnknownPhase(CatalogIntegrityError):
    def __init__(self, phase_id):
        super().__init__(f"unknown phase '{phase_id}'")
        self.phase_id = phase_id


class UnknownWorkoutKey(CatalogIntegrityError):
    def __init__(self, phase_id, workout_key):
        super().__init__(
            f"phase '{phase_id}' schedules workout '{workout_key}' which it does not define"
        )
        self.phase_id = phase_id
        self.workout_key = workout_key


class MalformedSchedule(CatalogIntegrityError):
    def __init__(self, phase_id, length):
        super().__init__(
            f"phase '{phase_id}' schedule_pattern has {length} slots, expected 7"
        )
        self.phase_id = phase_id
        self.length = length


# -----------------------------
# User input / storage
# -----------------------------
class InvalidInput(BasementLabError):
    """Rejected at the boundary before it reaches the log store."""


class StorageError(BasementLabError):
    """A persisted blob could not be read or written."""
