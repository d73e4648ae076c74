"""
api.errors - JSON error bodies for the API blueprint.

Route handlers return {"error": ...} bodies directly; these cover aborts
and errors raised before a route runs (oversized uploads).
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException

from api import api_bp
import config


def _error(message: str, code: int):
    return jsonify({"error": message}), code


@api_bp.errorhandler(404)
def api_not_found(e: HTTPException):
    return _error("Resource not found", 404)


@api_bp.errorhandler(400)
def api_bad_request(e: HTTPException):
    return _error(e.description or "Bad request", 400)


@api_bp.errorhandler(413)
def api_upload_too_large(_e):
    limit_mib = config.MAX_UPLOAD_BYTES // (1024 * 1024)
    return _error(f"Upload exceeds the {limit_mib} MiB limit", 413)


@api_bp.errorhandler(500)
def api_server_error(_e):
    return _error("Internal server error", 500)
