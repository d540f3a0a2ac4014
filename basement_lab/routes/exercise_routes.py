# basement_lab/routes/exercise_routes.py

from flask import Blueprint, jsonify, request

from ..errors import InvalidInput
from .common import json_body, open_session, saved_response

exercises_bp = Blueprint("exercises", __name__)

STEP_DIRECTIONS = {"up": 1, "down": -1}


# ------------------------------
# Suggestion / history
# ------------------------------
@exercises_bp.route("/<int:index>/suggestion", methods=["GET"])
def suggested_weight(index):
    """
    GET /api/exercises/<index>/suggestion

    Suggested working weight for today's exercise at <index>
    (null for exercises that don't use weight).
    """
    session = open_session()
    return jsonify({"index": index, "suggested_weight": session.get_suggested_weight(index)}), 200


@exercises_bp.route("/history", methods=["GET"])
def exercise_history():
    """
    GET /api/exercises/history?name=Squat

    Every log entry recorded for the named exercise, oldest day first.
    """
    name = (request.args.get("name") or "").strip()
    if not name:
        raise InvalidInput("name is required")

    session = open_session()
    return jsonify({"exercise": name, "entries": session.exercise_history(name)}), 200


# ------------------------------
# Field updates
# ------------------------------
@exercises_bp.route("/<int:index>/weight", methods=["PUT"])
def record_weight(index):
    """
    Expected body:
    { "weight": 45 }      # or null / "" to clear
    """
    data = json_body()
    session = open_session()
    return saved_response(session.record_weight(index, data.get("weight")), "exercises/weight")


@exercises_bp.route("/<int:index>/weight/step", methods=["POST"])
def step_weight(index):
    """
    Expected body:
    { "direction": "up" }  # or "down"
    """
    data = json_body()
    direction = STEP_DIRECTIONS.get(str(data.get("direction") or "").lower())
    if direction is None:
        raise InvalidInput("direction must be 'up' or 'down'")

    session = open_session()
    return saved_response(session.adjust_weight(index, direction), "exercises/weight/step")


@exercises_bp.route("/<int:index>/difficulty", methods=["PUT"])
def record_difficulty(index):
    """
    Expected body:
    { "difficulty": "easy" | "good" | "hard" | "failed" | null }
    """
    data = json_body()
    session = open_session()
    return saved_response(
        session.record_difficulty(index, data.get("difficulty")), "exercises/difficulty"
    )


@exercises_bp.route("/<int:index>/failed-point", methods=["PUT"])
def record_failed_point(index):
    """
    Expected body:
    { "set": 2, "rep": 5 }
    """
    data = json_body()
    session = open_session()
    return saved_response(
        session.record_failed_point(index, data.get("set"), data.get("rep")),
        "exercises/failed-point",
    )


@exercises_bp.route("/<int:index>/notes", methods=["PUT"])
def record_notes(index):
    """
    Expected body:
    { "notes": "felt strong" }   # empty clears
    """
    data = json_body()
    session = open_session()
    return saved_response(session.record_notes(index, data.get("notes")), "exercises/notes")
