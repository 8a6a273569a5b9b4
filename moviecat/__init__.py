import os
import logging
from typing import Any, Mapping, Optional
from flask import Flask, jsonify
from dotenv import load_dotenv

from moviecat.db import DEFAULT_DATABASE_URL, SessionProvider, init_db
from moviecat.errors import NotFoundError, PersistenceError, ValidationError
from moviecat.services.category_service import CategoryStore
from moviecat.services.movie_service import MovieStore
from moviecat.blueprints import register_blueprints

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_EXTENSIONS = ".mp4,.mpeg4"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def _split_extensions(raw: str) -> tuple[str, ...]:
    return tuple(e.strip().lower() for e in raw.split(",") if e.strip())


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    load_dotenv()
    app = Flask(__name__)

    # Secrets / DB
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "dev-secret-change-me")
    app.config["DATABASE_URL"] = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    app.config["DATABASE_ECHO"] = _env_flag("DATABASE_ECHO")
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO")

    # Erlaubte Dateiendungen für lokale Filmdateien (URLs sind immer erlaubt)
    app.config["ALLOWED_VIDEO_EXTENSIONS"] = _split_extensions(
        os.getenv("ALLOWED_VIDEO_EXTENSIONS", DEFAULT_VIDEO_EXTENSIONS)
    )

    if config:
        app.config.update(config)

    _configure_logging(app.config["LOG_LEVEL"])

    # DB initialisieren, Stores einmal pro Prozess bauen
    provider = SessionProvider.from_url(app.config["DATABASE_URL"], echo=app.config["DATABASE_ECHO"])
    init_db(provider)
    app.extensions["moviecat"] = {
        "provider": provider,
        "movies": MovieStore(provider),
        "categories": CategoryStore(provider),
    }

    register_blueprints(app)

    # Fehler-Taxonomie -> HTTP
    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return jsonify({"ok": False, "error": e.detail}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return jsonify({"ok": False, "error": e.detail}), 404

    @app.errorhandler(PersistenceError)
    def handle_persistence(e: PersistenceError):
        logger.error("Request failed: %s", e.detail)
        return jsonify({"ok": False, "error": "database error"}), 500

    return app
