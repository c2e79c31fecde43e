#!/usr/bin/env python3
"""
HRBI - HR bulk employee import service
======================================

Single-command run:  python main.py

See config.py for all environment-variable tunables.
"""

import logging

from flask import Flask, jsonify

import config
from db import init_db
from api import api_bp


def create_app(db_url: str | None = None) -> Flask:
    """Flask application factory."""

    app = Flask(__name__)
    app.secret_key = config.SECRET
    # Werkzeug rejects oversized bodies before the parser sees them
    app.config["MAX_CONTENT_LENGTH"] = config.MAX_UPLOAD_BYTES + config.REQUEST_OVERHEAD_BYTES

    # ── Initialise database ─────────────────────────────────────────
    init_db(db_url or config.DB_URL)

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    # ── Error handlers ──────────────────────────────────────────────
    @app.errorhandler(404)
    def _404(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(500)
    def _500(e):
        return jsonify({"error": "internal server error"}), 500

    return app


def _configure_logging():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def main():
    _configure_logging()

    print("=" * 56)
    print("  HRBI - HR Bulk Import")
    print("=" * 56)

    app = create_app()
    print(f"  Database: {config.DB_URL}")
    print(f"  Upload limit: {config.MAX_UPLOAD_BYTES} bytes, {config.MAX_ROWS} rows")

    print(f"\n  http://{config.HOST}:{config.PORT}")
    print(f"  Template: http://{config.HOST}:{config.PORT}/api/v1/bulk-import/template")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()
