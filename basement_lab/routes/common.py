# basement_lab/routes/common.py
from typing import Any, Dict

from flask import current_app, jsonify, request

from ..errors import CatalogLoadError, InvalidInput
from ..program_catalog import Catalog
from ..session import TrainingSession
from ..storage import SqlBlobStore

NOT_SAVED_MESSAGE = "progress not saved"


def loaded_catalog() -> Catalog:
    catalog = current_app.extensions.get("program_catalog")
    if catalog is None:
        raise CatalogLoadError(
            current_app.extensions.get("program_load_error") or "program not loaded"
        )
    return catalog


def open_session() -> TrainingSession:
    """Build a session for this request from the stored blobs."""
    return TrainingSession(loaded_catalog(), SqlBlobStore())


def saved_response(payload: Dict[str, Any], tag: str):
    if not payload.get("saved", True):
        current_app.logger.warning(f"[{tag}] {NOT_SAVED_MESSAGE}")
        payload = dict(payload, message=NOT_SAVED_MESSAGE)
    return jsonify(payload), 200


def json_body(required: bool = True) -> Dict[str, Any]:
    """Request body as a JSON object; anything else is rejected with a 400."""
    data = request.get_json(silent=True)
    if data is None and not required:
        return {}
    if not isinstance(data, dict):
        raise InvalidInput("expected a JSON object body")
    return data
