"""
api.routes_export - /api/v1/materials/export download.
"""

import io

from flask import request, jsonify, send_file

from api import api_bp
from db import get_session
from export_engine import export_materials
from import_engine import FieldSpec, FieldSpecError
from import_engine.field_map import split_identifiers


@api_bp.route("/materials/export")
def api_export_materials():
    """
    GET /api/v1/materials/export?fields=name,category&format=csv|xlsx

    Columns follow ``fields`` in the given order.
    """
    try:
        fields = split_identifiers(request.args.getlist("fields"))
        field_spec = FieldSpec.for_export(fields or None)
    except FieldSpecError as exc:
        return jsonify({"error": str(exc)}), 400

    fmt = request.args.get("format", "").strip().lower() or None

    session = get_session()
    try:
        export = export_materials(session, field_spec, fmt)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    finally:
        session.close()

    return send_file(
        io.BytesIO(export.content),
        mimetype=export.mimetype,
        as_attachment=True,
        download_name=export.filename,
    )
