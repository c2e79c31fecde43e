"""
import_engine.ingestor - Persist eligible rows one at a time.

A fold over independent per-row creates.  Each row allocates its code,
inserts, and commits on its own; nothing is rolled back when a later
row fails.  Outcomes per row:

  • created        → "EMP00007 - Jane Smith" appended to the result
  • IntegrityError → CreateFailed on that row, next row continues
  • storage down   → this and every remaining row marked Aborted
  • out of time    → every remaining row marked Timeout

The sequence number of a row that fails after allocation is burned;
codes may have gaps but are never reused.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

import config
from db.engine import get_session
from import_engine.parser import ImportRow
from import_engine.report import ErrorCode, ValidationError
from schema.numbering import build_employee_code
from services.employee_service import EmployeeService
from services.sequence_service import SequenceAllocator, SequenceUnavailable

logger = logging.getLogger(__name__)


@dataclass
class IngestOutcome:
    created: list[str] = field(default_factory=list)
    aborted: bool = False


class Ingestor:

    def __init__(
        self,
        tenant_id: str,
        allocator: SequenceAllocator,
        *,
        deadline: float,
        clock: Callable[[], float] = time.monotonic,
        session_factory: Callable[[], Session] = get_session,
    ):
        self.tenant_id = tenant_id
        self.allocator = allocator
        self.deadline = deadline
        self._clock = clock
        self._session_factory = session_factory

    def ingest(self, eligible: list[ImportRow], department_ids: dict[str, int]) -> IngestOutcome:
        """Create one employee per eligible row, in file order."""
        outcome = IngestOutcome()
        session = self._session_factory()
        try:
            for idx, row in enumerate(eligible):
                if self._clock() > self.deadline:
                    self._fail_remaining(eligible[idx:], ErrorCode.TIMEOUT,
                                         "Import time budget exceeded before this row was processed")
                    logger.warning(f"Import for tenant {self.tenant_id} timed out; "
                                   f"{len(eligible) - idx} rows not processed")
                    break

                try:
                    label = self._create_one(session, row, department_ids)
                except IntegrityError as exc:
                    session.rollback()
                    row.errors.append(ValidationError(
                        row.ordinal, "general",
                        f"Failed to create employee: {exc.orig}",
                        ErrorCode.CREATE_FAILED,
                    ))
                    logger.warning(f"Row {row.ordinal}: create failed: {exc.orig}")
                    continue
                except (SequenceUnavailable, SQLAlchemyError) as exc:
                    session.rollback()
                    self._fail_remaining(eligible[idx:], ErrorCode.ABORTED,
                                         f"Import aborted: {exc}")
                    outcome.aborted = True
                    logger.error(f"Import for tenant {self.tenant_id} aborted at row "
                                 f"{row.ordinal} after {len(outcome.created)} creates: {exc}")
                    break

                outcome.created.append(label)
        finally:
            session.close()
        return outcome

    # ── Private helpers ────────────────────────────────────────────────

    def _create_one(self, session: Session, row: ImportRow, department_ids: dict[str, int]) -> str:
        record = row.record
        seq = self.allocator.allocate(self.tenant_id, config.EMPLOYEE_ENTITY_CLASS)
        code = build_employee_code(seq)
        employee = EmployeeService.create(
            session, self.tenant_id, record,
            department_id=department_ids[record.department.lower()],
            employee_code=code,
        )
        session.commit()
        return f"{employee.employee_code} - {employee.display_name}"

    @staticmethod
    def _fail_remaining(rows: list[ImportRow], code: str, message: str) -> None:
        for row in rows:
            row.errors.append(ValidationError(row.ordinal, "general", message, code))
