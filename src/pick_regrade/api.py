"""HTTP endpoint for triggering the regrade job."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from .config import AppConfig, load_config, normalize_sports
from .regrade import regrade_from_config

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def parse_request_body(body: Any, default_sports: list[str]) -> tuple[bool, list[str]]:
    """Read ``dry_run`` and ``sports`` from a possibly missing JSON body."""

    if not isinstance(body, Mapping):
        return False, list(default_sports)
    dry_run = bool(body.get("dry_run"))
    sports = list(default_sports)
    raw_sports = body.get("sports")
    if isinstance(raw_sports, list) and raw_sports:
        sports = normalize_sports(raw_sports)
    return dry_run, sports


def create_app(config_loader: Callable[[], AppConfig] = load_config) -> Flask:
    app = Flask(__name__)

    @app.after_request
    def _cors(response):
        response.headers.update(CORS_HEADERS)
        return response

    @app.route("/regrade-avatar-pushes", methods=["POST", "OPTIONS"])
    def regrade_avatar_pushes():
        if request.method == "OPTIONS":
            return "ok", 200

        config = config_loader()
        body = request.get_json(force=True, silent=True)
        dry_run, sports = parse_request_body(body, config.settings.sports)
        logger.info("Regrade requested for %s (dry_run=%s)", ", ".join(sports), dry_run)

        payload = regrade_from_config(config, sports=sports, dry_run=dry_run)
        status = 200 if payload.get("success") else 500
        return jsonify(payload), status

    return app


if __name__ == "__main__":  # pragma: no cover
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    load_dotenv()
    create_app().run(host="127.0.0.1", port=5001, debug=False)
