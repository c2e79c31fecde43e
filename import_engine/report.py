"""
import_engine.report - Structured results of a validate / import run.

Neither result is persisted; both are built once per call and always
fully populated, so the caller can render a complete diagnostic even
when nothing was created.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional


class ErrorCode:
    # Field stage
    MISSING_FIELD  = "MissingField"
    INVALID_EMAIL  = "InvalidEmail"
    INVALID_DATE   = "InvalidDate"
    INVALID_ENUM   = "InvalidEnum"
    INVALID_NUMBER = "InvalidNumber"
    # Consistency stage
    REFERENCE_NOT_FOUND = "ReferenceNotFound"
    DUPLICATE_IN_FILE   = "DuplicateInFile"
    ALREADY_EXISTS      = "AlreadyExists"
    # Ingestion stage
    CREATE_FAILED = "CreateFailed"
    TIMEOUT       = "Timeout"
    ABORTED       = "Aborted"


@dataclass(frozen=True)
class ValidationError:
    row: int
    field: str
    message: str
    code: str
    value: Optional[str] = None

    def to_dict(self) -> dict:
        d = {
            "row": self.row,
            "field": self.field,
            "message": self.message,
            "code": self.code,
        }
        if self.value is not None:
            d["value"] = self.value
        return d


def collect_errors(rows: Iterable) -> list[ValidationError]:
    """Flatten per-row errors, ordered by row ordinal then stage."""
    errors: list[ValidationError] = []
    for row in sorted(rows, key=lambda r: r.ordinal):
        errors.extend(row.errors)
    return errors


# ── Import ─────────────────────────────────────────────────────────────

@dataclass
class UploadResult:
    success: bool
    total_rows: int
    success_count: int
    failed_count: int
    errors: list[ValidationError] = field(default_factory=list)
    created_entities: list[str] = field(default_factory=list)
    aborted: bool = False

    @property
    def partial(self) -> bool:
        return 0 < self.success_count < self.total_rows

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "totalRows": self.total_rows,
            "successCount": self.success_count,
            "failedCount": self.failed_count,
            "errors": [e.to_dict() for e in self.errors],
            "createdEntities": list(self.created_entities),
            "aborted": self.aborted,
        }


def build_upload_result(
    total_rows: int,
    errors: list[ValidationError],
    created: list[str],
    *,
    aborted: bool = False,
) -> UploadResult:
    success_count = len(created)
    failed_count = total_rows - success_count
    return UploadResult(
        success=failed_count == 0,
        total_rows=total_rows,
        success_count=success_count,
        failed_count=failed_count,
        errors=list(errors),
        created_entities=list(created),
        aborted=aborted,
    )


# ── Validate (dry run) ─────────────────────────────────────────────────

@dataclass
class ValidationResult:
    total_rows: int
    valid_rows: int
    errors: list[ValidationError] = field(default_factory=list)
    reference_values: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.valid_rows == self.total_rows

    @property
    def invalid_rows(self) -> int:
        return self.total_rows - self.valid_rows

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "totalRows": self.total_rows,
            "validRows": self.valid_rows,
            "invalidRows": self.invalid_rows,
            "errors": [e.to_dict() for e in self.errors],
            "availableReferenceValues": list(self.reference_values),
        }


def build_validation_result(rows: list, reference_values: list[str]) -> ValidationResult:
    return ValidationResult(
        total_rows=len(rows),
        valid_rows=sum(1 for r in rows if not r.errors),
        errors=collect_errors(rows),
        reference_values=list(reference_values),
    )
