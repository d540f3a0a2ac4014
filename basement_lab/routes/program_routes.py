# basement_lab/routes/program_routes.py
from flask import Blueprint, jsonify

from .common import loaded_catalog

program_bp = Blueprint("program", __name__)


@program_bp.route("", methods=["GET"])
def program_overview():
    """
    Public: program meta and phase layout.

    GET /api/program
    """
    return jsonify(loaded_catalog().summary()), 200
