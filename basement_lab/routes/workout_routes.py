# basement_lab/routes/workout_routes.py

from typing import Any

from flask import Blueprint, current_app, jsonify

from .common import json_body, open_session, saved_response

workouts_bp = Blueprint("workouts", __name__)


# ------------------------------
# Helpers
# ------------------------------
def _truthy(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "y")
    return bool(v)


# ------------------------------
# GET /api/workouts/today
# ------------------------------
@workouts_bp.route("/today", methods=["GET"])
def todays_workout():
    """
    Returns:
    {
      "day": 3,
      "week": 1,
      "day_index": 2,
      "phase": {"id": "p1", "name": "Foundation"},
      "workout_type": "A",
      "program_complete": false,
      "rest": false,
      "workout": {
        "key": "A",
        "name": "Posterior Chain",
        "focus": "...",
        "exercises": [
          {"index": 0, "key": "3_0", "name": "...", "sets": 3, ...,
           "log": {...} | null, "suggested_weight": 45}
        ]
      }
    }
    """
    session = open_session()
    return jsonify(session.get_todays_schedule()), 200


# ------------------------------
# POST /api/workouts/complete
# ------------------------------
@workouts_bp.route("/complete", methods=["POST"])
def complete_workout():
    session = open_session()
    result = session.complete_workout()

    if result["program_complete"]:
        current_app.logger.info("[workouts/complete] program already complete")
        result = dict(
            result, message="Congratulations! You completed the 365-day program!"
        )
        return jsonify(result), 200

    if result["phase_changed"]:
        current_app.logger.info(
            f"[workouts/complete] entered phase {result['progress']['currentPhase']}"
        )

    return saved_response(result, "workouts/complete")


# ------------------------------
# POST /api/workouts/reset
# ------------------------------
@workouts_bp.route("/reset", methods=["POST"])
def reset_progress():
    """
    Expected body:
    { "confirm": true }

    Without confirmation nothing is touched.
    """
    data = json_body(required=False)
    confirmed = _truthy(data.get("confirm"))

    session = open_session()
    result = session.reset_progress(confirmed)
    if not result["reset"]:
        return jsonify(dict(result, message="Reset not confirmed")), 200

    current_app.logger.info("[workouts/reset] progress and exercise log cleared")
    return saved_response(result, "workouts/reset")
