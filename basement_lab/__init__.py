# basement_lab/__init__.py

from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy

from config import Config

db = SQLAlchemy()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Init extensions
    db.init_app(app)

    # CORS: the front end is served separately and calls /api/*
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # -----------------------------
    # Program catalog (loaded once)
    # -----------------------------
    from .errors import CatalogIntegrityError, CatalogLoadError, InvalidInput
    from .program_catalog import load_catalog

    app.extensions["program_catalog"] = None
    app.extensions["program_load_error"] = None
    try:
        catalog = load_catalog(
            app.config["PROGRAM_SOURCE"],
            timeout=app.config.get("PROGRAM_FETCH_TIMEOUT", 10),
        )
        app.extensions["program_catalog"] = catalog
        app.logger.info(
            f"[program] loaded {len(catalog.phases)} phase(s) from {app.config['PROGRAM_SOURCE']}"
        )
    except CatalogLoadError as e:
        app.extensions["program_load_error"] = str(e)
        app.logger.error(f"[program] failed to load: {e}")

    # -----------------------------
    # Error handlers
    # -----------------------------
    @app.errorhandler(CatalogLoadError)
    def catalog_load_error(err):
        return (
            jsonify(
                {
                    "message": "Program could not be loaded",
                    "error": str(err),
                }
            ),
            503,
        )

    @app.errorhandler(CatalogIntegrityError)
    def catalog_integrity_error(err):
        app.logger.error(f"[program] integrity error: {err}")
        return (
            jsonify(
                {
                    "message": "Program definition is inconsistent",
                    "error": str(err),
                }
            ),
            500,
        )

    @app.errorhandler(InvalidInput)
    def invalid_input(err):
        return jsonify({"message": str(err)}), 400

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.program_routes import program_bp
    from .routes.workout_routes import workouts_bp
    from .routes.exercise_routes import exercises_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(program_bp, url_prefix="/api/program")
    app.register_blueprint(workouts_bp, url_prefix="/api/workouts")
    app.register_blueprint(exercises_bp, url_prefix="/api/exercises")

    @app.route("/api/health")
    def health():
        return {
            "status": "ok",
            "program_loaded": app.extensions["program_catalog"] is not None,
        }

    # -----------------------------
    # DB init
    # -----------------------------
    from .models.blob import StoredBlob  # noqa: F401  (registers the table)

    with app.app_context():
        db.create_all()

    return app
