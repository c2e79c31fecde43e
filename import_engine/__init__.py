"""
import_engine - Bulk employee import pipeline.

Public API:
    run_validate(content, mimetype, tenant_id=…) → ValidationResult
    run_import(content, mimetype, tenant_id=…)   → UploadResult
    build_template()                             → xlsx bytes
"""

from import_engine.importer import run_import, run_validate          # noqa: F401
from import_engine.report import UploadResult, ValidationResult      # noqa: F401
from import_engine.errors import ImportFormatError                   # noqa: F401
from import_engine.template import build_template                    # noqa: F401
