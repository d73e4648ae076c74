#!/usr/bin/env python3
"""
MatDB - Materials Catalog Web Application
==========================================

Single-command run:  python main.py
Queue worker:        celery -A jobs.celery_app worker

See config.py for all environment-variable tunables.
"""

import logging
from pathlib import Path

from flask import Flask, jsonify

import config
from db import init_db, get_session, Material
from api import api_bp

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    """Flask application factory."""

    app = Flask(__name__)
    app.secret_key = config.SECRET
    app.config["MAX_CONTENT_LENGTH"] = config.MAX_UPLOAD_BYTES

    # ── Initialise database + upload storage ────────────────────────
    init_db(config.DB_URL)
    Path(config.IMPORTS_DIR).mkdir(parents=True, exist_ok=True)
    logger.info("Database: %s", config.DB_URL)

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    # ── Error handlers ──────────────────────────────────────────────
    @app.errorhandler(404)
    def _404(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(500)
    def _500(e):
        return jsonify({"error": "internal server error"}), 500

    return app


def _seed_if_empty():
    """Auto-import seed CSV when the database is empty."""
    session = get_session()
    count = session.query(Material).count()
    session.close()

    if count > 0:
        print(f"\n  Database has {count} materials.")
        return

    if not config.CSV_SEED_PATH.exists():
        print(f"\n  No seed CSV at {config.CSV_SEED_PATH} - starting empty.")
        return

    print(f"\n  Database empty → auto-importing {config.CSV_SEED_PATH.name} …")
    from services import import_file

    result = import_file(config.CSV_SEED_PATH)
    print(f"  {result['message']}")
    summary = result.get("summary") or {}
    if summary.get("rejections"):
        print("  First rejections (max 10):")
        for rej in summary["rejections"][:10]:
            print(f"    Row {rej['row']}: {rej['reason']}")


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    print("=" * 56)
    print("  MatDB - Materials Catalog")
    print("=" * 56)

    app = create_app()
    _seed_if_empty()

    print(f"\n  http://{config.HOST}:{config.PORT}/api/v1")
    print(f"  Import threshold: {config.IMPORT_SYNC_MAX_BYTES} bytes "
          f"({'queued via Redis' if config.REDIS_URL else 'eager, no broker'})")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()
