"""
api.routes_employees - /api/v1/employees/* endpoints the create form uses.
"""

from flask import jsonify

import config
from api import api_bp
from api.tenancy import current_tenant
from schema.numbering import build_employee_code
from services.sequence_service import SequenceAllocator, SequenceUnavailable


@api_bp.route("/employees/next-code")
def next_employee_code():
    """
    GET /api/v1/employees/next-code

    Preview only.  The code is not reserved: a concurrent import or
    create may take it before the form is saved, in which case the
    saved employee gets a later code.
    """
    tenant_id = current_tenant()
    if not tenant_id:
        return jsonify({"error": "tenant id required"}), 400
    try:
        seq = SequenceAllocator().peek(tenant_id, config.EMPLOYEE_ENTITY_CLASS)
    except SequenceUnavailable as exc:
        return jsonify({"error": "StorageUnavailable", "message": str(exc)}), 503
    return jsonify({"nextEmployeeCode": build_employee_code(seq)})
