"""Flask application serving the survey data to the game client."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from flask import Blueprint, Flask, abort, current_app, jsonify
from flask_cors import CORS

if TYPE_CHECKING:
    from flask import Response
    from werkzeug.exceptions import HTTPException

    from abyss.server.world_state import WorldState

logger = logging.getLogger(__name__)

EXTENSION_KEY = "abyss.world"

# Datasets exposed as flat record arrays under /api/<name>.
PUBLIC_DATASETS = ("corals", "hazards", "poi", "life", "resources")

api = Blueprint("api", __name__, url_prefix="/api")


def _world() -> WorldState:
    return current_app.extensions[EXTENSION_KEY]


@api.get("/gamestate")
def gamestate() -> Response:
    return jsonify(_world().gamestate())


@api.get("/health")
def health() -> Response:
    return jsonify(status="ok", timestamp=datetime.now(timezone.utc).isoformat())


@api.get("/<name>")
def dataset(name: str) -> Response:
    if name not in PUBLIC_DATASETS:
        abort(404)
    return jsonify(_world().dataset(name))


def _not_found(error: HTTPException) -> tuple[Response, int]:
    return jsonify(error="not found"), 404


def create_app(world: WorldState, *, cors_origins: str | list[str] = "*") -> Flask:
    """Build the Flask app around a loaded WorldState.

    Args:
        world: Data to serve; the app never mutates it.
        cors_origins: Origins allowed to call the API.
    """
    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = world
    CORS(app, origins=cors_origins)
    app.register_blueprint(api)
    app.register_error_handler(404, _not_found)
    logger.debug("Serving a %dx%d world", world.rows, world.cols)
    return app
