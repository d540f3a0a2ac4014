import json

import pytest
import requests

from basement_lab.errors import CatalogLoadError, UnknownPhase
from basement_lab.program_catalog import (
    DEFAULT_STARTING_WEIGHT,
    DEFAULT_WEIGHT_INCREMENT,
    load_catalog,
    parse_catalog,
)


def test_parse_keeps_order_and_defaults(catalog):
    assert [p.id for p in catalog.phases] == ["p1", "p2", "p3"]
    assert catalog.first_phase_id == "p1"

    row = catalog.phase("p1").workouts["B"].exercises[1]
    assert row.name == "Row"
    assert row.uses_weight is True
    assert row.starting_weight == DEFAULT_STARTING_WEIGHT
    assert row.weight_increment == DEFAULT_WEIGHT_INCREMENT

    squat = catalog.phase("p1").workouts["A"].exercises[0]
    assert squat.video_id == "abc123"
    assert squat.video_start == 30


def test_phase_lookup(catalog):
    assert catalog.phase_index("p2") == 1
    with pytest.raises(UnknownPhase):
        catalog.phase("p9")


def test_phase_without_pattern(catalog):
    assert catalog.phase("p3").schedule_pattern is None
    assert catalog.phase("p3").workouts == {}


@pytest.mark.parametrize(
    "document",
    [
        [],
        {},
        {"phases": []},
        {"phases": [{"name": "no id", "duration_weeks": 1}]},
        {"phases": [{"id": "p1", "duration_weeks": 0}]},
        {"phases": [{"id": "p1", "duration_weeks": 1, "schedule_pattern": "A"}]},
        {"phases": [{"id": "p1", "duration_weeks": 1}, {"id": "p1", "duration_weeks": 1}]},
        {"phases": [{"id": "p1", "duration_weeks": 1,
                     "workouts": {"A": {"name": "A", "exercises": [{"name": "x", "sets": "3"}]}}}]},
    ],
)
def test_unusable_documents_are_rejected(document):
    with pytest.raises(CatalogLoadError):
        parse_catalog(document)


def test_load_from_file(program_file):
    catalog = load_catalog(str(program_file))
    assert catalog.meta["version"] == "test"


def test_load_missing_file(tmp_path):
    with pytest.raises(CatalogLoadError):
        load_catalog(str(tmp_path / "missing.json"))


def test_load_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{ not json", encoding="utf-8")
    with pytest.raises(CatalogLoadError):
        load_catalog(str(path))


class _FakeResponse:
    def __init__(self, text, status=200):
        self.text = text
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def test_load_from_url(monkeypatch, program_doc):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return _FakeResponse(json.dumps(program_doc))

    monkeypatch.setattr(requests, "get", fake_get)
    catalog = load_catalog("https://example.com/program.json", timeout=3)

    assert calls == [("https://example.com/program.json", 3)]
    assert catalog.first_phase_id == "p1"


def test_load_from_url_http_error(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, timeout: _FakeResponse("", status=404))
    with pytest.raises(CatalogLoadError):
        load_catalog("https://example.com/program.json")
