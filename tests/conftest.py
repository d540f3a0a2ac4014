import copy
import itertools
import json

import pytest

from basement_lab import create_app
from basement_lab.program_catalog import parse_catalog
from basement_lab.session import TrainingSession
from basement_lab.storage import MemoryBlobStore
from config import Config

PROGRAM = {
    "meta": {"version": "test", "startDate": "2026-01-05"},
    "phases": [
        {
            "id": "p1",
            "name": "Foundation",
            "duration_weeks": 1,
            "schedule_pattern": ["A", "B", "A", "B", "C", "Rest", "Rest"],
            "workouts": {
                "A": {
                    "name": "Lower Body",
                    "focus": "Squat pattern",
                    "exercises": [
                        {"name": "Squat", "sets": 3, "reps": "8", "rest": "90s",
                         "starting_weight": 45, "weight_increment": 5,
                         "video_id": "abc123", "video_start": 30},
                        {"name": "Plank", "sets": 3, "reps": "30s", "rest": "30s",
                         "uses_weight": False},
                    ],
                },
                "B": {
                    "name": "Upper Body",
                    "focus": "Press and pull",
                    "exercises": [
                        {"name": "Press", "sets": 3, "reps": "10", "rest": "60s",
                         "starting_weight": 20, "weight_increment": 5},
                        {"name": "Row", "sets": 3, "reps": "10", "rest": "60s"},
                    ],
                },
                "C": {
                    "name": "Mobility Flow",
                    "focus": "Hips",
                    "exercises": [
                        {"name": "Hip Switch", "sets": 2, "reps": "8", "rest": "30s",
                         "uses_weight": False},
                    ],
                },
            },
        },
        {
            "id": "p2",
            "name": "Build",
            "duration_weeks": 2,
            "schedule_pattern": ["A", "Rest", "A", "Rest", "A", "Rest", "Rest"],
            "workouts": {
                "A": {
                    "name": "Heavy Lower",
                    "focus": "Strength",
                    "exercises": [
                        {"name": "Squat", "sets": 5, "reps": "5", "rest": "120s",
                         "starting_weight": 45, "weight_increment": 5},
                    ],
                },
            },
        },
        {"id": "p3", "name": "Peak", "duration_weeks": 4},
    ],
}


@pytest.fixture
def program_doc():
    return copy.deepcopy(PROGRAM)


@pytest.fixture
def catalog(program_doc):
    return parse_catalog(program_doc)


@pytest.fixture
def clock():
    counter = itertools.count(1_000)
    return lambda: next(counter)


@pytest.fixture
def store():
    return MemoryBlobStore()


@pytest.fixture
def session(catalog, store, clock):
    return TrainingSession(catalog, store, clock=clock)


@pytest.fixture
def program_file(tmp_path, program_doc):
    path = tmp_path / "program.json"
    path.write_text(json.dumps(program_doc), encoding="utf-8")
    return path


@pytest.fixture
def app(program_file):
    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = "sqlite://"
        PROGRAM_SOURCE = str(program_file)

    return create_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()
