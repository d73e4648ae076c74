"""
api.routes_catalog - read-only listings of categories, suppliers and
materials.
"""

from flask import request, jsonify

from api import api_bp
from db import get_session, Category, Supplier
from services import CatalogService
import config


def _page_args() -> tuple[int, int]:
    try:
        limit = max(min(int(request.args.get("limit", config.API_DEFAULT_LIMIT)),
                        config.API_MAX_LIMIT), 1)
        offset = max(int(request.args.get("offset", 0)), 0)
    except ValueError:
        limit, offset = config.API_DEFAULT_LIMIT, 0
    return limit, offset


def _list_named(model, key: str):
    q = request.args.get("q", "").strip()
    limit, offset = _page_args()
    session = get_session()
    try:
        rows, total = CatalogService.list_named(
            session, model, q=q, limit=limit, offset=offset,
        )
        return jsonify({
            "total": total,
            "offset": offset,
            "limit": limit,
            key: [r.to_dict() for r in rows],
        })
    finally:
        session.close()


@api_bp.route("/categories")
def list_categories():
    """GET /api/v1/categories?q=&limit=100&offset=0"""
    return _list_named(Category, "categories")


@api_bp.route("/suppliers")
def list_suppliers():
    """GET /api/v1/suppliers?q=&limit=100&offset=0"""
    return _list_named(Supplier, "suppliers")


@api_bp.route("/materials")
def list_materials():
    """GET /api/v1/materials?q=&category=&supplier=&limit=100&offset=0"""
    limit, offset = _page_args()
    session = get_session()
    try:
        rows, total = CatalogService.list_materials(
            session,
            q=request.args.get("q", "").strip(),
            category=request.args.get("category", "").strip(),
            supplier=request.args.get("supplier", "").strip(),
            limit=limit, offset=offset,
        )
        return jsonify({
            "total": total,
            "offset": offset,
            "limit": limit,
            "materials": [m.to_dict() for m in rows],
        })
    finally:
        session.close()


@api_bp.route("/dashboard")
def dashboard():
    """GET /api/v1/dashboard - catalogue totals."""
    session = get_session()
    try:
        return jsonify({"stats": CatalogService.counts(session)})
    finally:
        session.close()
