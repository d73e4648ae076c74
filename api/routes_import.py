"""
api.routes_import - /api/v1/materials/import and import job status.

Accepts a CSV or XLSX file via multipart upload.
"""

from flask import request, jsonify

from api import api_bp
from import_engine import FieldSpec, FieldSpecError, PipelineFatalError
from import_engine.field_map import split_identifiers
from import_engine.tabular import file_type
from jobs import get_job
from services import start_import

STATUS_CODES = {"completed": 200, "queued": 202, "error": 422}


@api_bp.route("/materials/import", methods=["POST"])
def api_import_materials():
    """
    POST /api/v1/materials/import

    Multipart: field name 'file' (.csv or .xlsx), optional 'fields'.
    Small files are imported at once (200), large ones are queued (202).
    """
    f = request.files.get("file")
    if not f or not f.filename:
        return jsonify({"error": "no file in upload"}), 400

    try:
        file_type(f.filename)
    except PipelineFatalError as exc:
        return jsonify({"error": str(exc)}), 400

    try:
        fields = split_identifiers(request.form.getlist("fields"))
        field_spec = FieldSpec.for_import(fields) if fields else None
    except FieldSpecError as exc:
        return jsonify({"error": str(exc)}), 400

    content = f.read()
    if not content:
        return jsonify({"error": "empty file"}), 400

    result = start_import(f.filename, content, field_spec=field_spec)
    return jsonify(result), STATUS_CODES[result["status"]]


@api_bp.route("/imports/<job_id>")
def api_import_status(job_id: str):
    """GET /api/v1/imports/{job_id} - current state of an import job."""
    job = get_job(job_id)
    if job is None:
        return jsonify({"error": "not found"}), 404
    return jsonify(job.to_dict())
