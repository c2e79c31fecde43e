"""
api.routes_import - /api/v1/bulk-import endpoints.

Multipart upload, file field 'file'.  Tenant comes from X-Tenant-ID.
"""

import io
import logging

from flask import request, jsonify, send_file
from sqlalchemy.exc import SQLAlchemyError

from api import api_bp
from api.tenancy import current_tenant
from import_engine import ImportFormatError, build_template, run_import, run_validate
from import_engine.parser import XLSX_MIME
from import_engine.template import TEMPLATE_FILENAME

logger = logging.getLogger(__name__)


def _upload():
    """Return (tenant_id, FileStorage) or an error response tuple."""
    tenant_id = current_tenant()
    if not tenant_id:
        return None, (jsonify({"error": "tenant id required"}), 400)
    f = request.files.get("file")
    if not f:
        return None, (jsonify({"error": "no file in upload"}), 400)
    return (tenant_id, f), None


def _storage_unavailable(exc: Exception):
    logger.error(f"Storage unavailable during bulk import: {exc}")
    return jsonify({
        "error": "StorageUnavailable",
        "message": "Employee store is unavailable, nothing was imported",
    }), 503


@api_bp.route("/bulk-import/validate", methods=["POST"])
def bulk_import_validate():
    """
    POST /api/v1/bulk-import/validate

    Runs parsing, field validation and consistency checks without
    writing anything.
    """
    upload, error = _upload()
    if error:
        return error
    tenant_id, f = upload

    try:
        result = run_validate(f.stream, f.mimetype, tenant_id=tenant_id)
    except ImportFormatError as exc:
        return jsonify(exc.to_dict()), exc.http_status
    except SQLAlchemyError as exc:
        return _storage_unavailable(exc)
    return jsonify(result.to_dict())


@api_bp.route("/bulk-import", methods=["POST"])
def bulk_import():
    """
    POST /api/v1/bulk-import

    200 all rows created, 207 some created, 422 none created,
    503 none created because the store went away mid-import.
    """
    upload, error = _upload()
    if error:
        return error
    tenant_id, f = upload

    try:
        result = run_import(f.stream, f.mimetype, tenant_id=tenant_id)
    except ImportFormatError as exc:
        return jsonify(exc.to_dict()), exc.http_status
    except SQLAlchemyError as exc:
        return _storage_unavailable(exc)

    if result.success:
        status = 200
    elif result.success_count > 0:
        status = 207
    elif result.aborted:
        status = 503
    else:
        status = 422
    return jsonify(result.to_dict()), status


@api_bp.route("/bulk-import/template")
def bulk_import_template():
    """GET /api/v1/bulk-import/template - xlsx with example rows + column docs."""
    return send_file(
        io.BytesIO(build_template()),
        mimetype=XLSX_MIME,
        as_attachment=True,
        download_name=TEMPLATE_FILENAME,
    )
