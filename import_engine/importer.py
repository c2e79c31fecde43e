"""
import_engine.importer - Top-level orchestrator.

Coordinates parser → row_validator → consistency → ingestor and
produces a structured result.

    Received → Parsed → Validated → Consistency-Checked → Ingested → Reported

Everything before ingestion is read-only, so a call that fails there
(ImportFormatError, storage error) leaves no trace.
"""

from __future__ import annotations

import logging
import time
from typing import BinaryIO, Callable, Optional

import config
from db.engine import get_session
from import_engine.consistency import BatchConsistencyChecker, ConsistencyOutcome
from import_engine.ingestor import Ingestor
from import_engine.parser import ImportRow, parse_upload
from import_engine.report import (
    UploadResult, ValidationResult, build_upload_result, build_validation_result,
    collect_errors,
)
from import_engine.row_validator import build_record, validate_row
from services.sequence_service import SequenceAllocator

logger = logging.getLogger(__name__)


def run_validate(
    file_content: bytes | BinaryIO,
    mimetype: str,
    *,
    tenant_id: str,
) -> ValidationResult:
    """Dry run: every check, no writes."""
    rows = parse_upload(file_content, mimetype)
    _validate_fields(rows)
    outcome = _check_consistency(rows, tenant_id)
    return build_validation_result(rows, outcome.reference_values)


def run_import(
    file_content: bytes | BinaryIO,
    mimetype: str,
    *,
    tenant_id: str,
    allocator: Optional[SequenceAllocator] = None,
    clock: Callable[[], float] = time.monotonic,
) -> UploadResult:
    """
    Import an employee spreadsheet for one tenant.

    Parameters
    ----------
    file_content : raw upload (bytes or a binary stream)
    mimetype     : MIME type declared by the client
    tenant_id    : tenant whose employees and counter are written
    allocator    : sequence allocator (defaults to the database one)
    clock        : monotonic clock used for the time budget

    Returns
    -------
    UploadResult with per-row error details and created employee labels
    """
    started = clock()
    rows = parse_upload(file_content, mimetype)
    _validate_fields(rows)
    outcome = _check_consistency(rows, tenant_id)

    ingestor = Ingestor(
        tenant_id,
        allocator or SequenceAllocator(),
        deadline=started + time_budget(len(rows)),
        clock=clock,
    )
    ingested = ingestor.ingest(outcome.eligible, outcome.department_ids)

    result = build_upload_result(
        len(rows), collect_errors(rows), ingested.created, aborted=ingested.aborted,
    )
    logger.info(
        f"Import for tenant {tenant_id}: {result.success_count} created, "
        f"{result.failed_count} failed / {result.total_rows} rows"
        + (" (aborted)" if result.aborted else "")
    )
    return result


def time_budget(total_rows: int) -> float:
    """Seconds allowed for one import of total_rows rows."""
    return config.IMPORT_BASE_SECONDS + total_rows * config.IMPORT_SECONDS_PER_ROW


# ── Stages ─────────────────────────────────────────────────────────────

def _validate_fields(rows: list[ImportRow]) -> None:
    for row in rows:
        row.errors.extend(validate_row(row.fields, row.ordinal))
        if row.ok:
            row.record = build_record(row.fields)


def _check_consistency(rows: list[ImportRow], tenant_id: str) -> ConsistencyOutcome:
    session = get_session()
    try:
        return BatchConsistencyChecker(session, tenant_id).check(rows)
    finally:
        session.close()
