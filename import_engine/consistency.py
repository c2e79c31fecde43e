"""
import_engine.consistency - Batch-wide and store-wide checks.

The only stage that reads shared state.  Exactly two queries per call
regardless of file size: all tenant departments, then one batched
existence lookup over every candidate email.

Every check runs on every row, including rows that already failed
field validation, so one validate call shows the user everything that
is wrong with the file.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from import_engine.parser import ImportRow
from import_engine.report import ErrorCode, ValidationError
from services.department_service import DepartmentService
from services.employee_service import EmployeeService

logger = logging.getLogger(__name__)


@dataclass
class ConsistencyOutcome:
    eligible: list[ImportRow] = field(default_factory=list)
    rejected: list[ImportRow] = field(default_factory=list)
    reference_values: list[str] = field(default_factory=list)
    department_ids: dict[str, int] = field(default_factory=dict)   # lower name → id


class BatchConsistencyChecker:

    def __init__(self, session: Session, tenant_id: str):
        self.session = session
        self.tenant_id = tenant_id

    def check(self, rows: list[ImportRow]) -> ConsistencyOutcome:
        """Append consistency errors to rows and split them eligible/rejected."""
        departments = DepartmentService.list_for_tenant(self.session, self.tenant_id)
        department_ids = DepartmentService.name_map(departments)

        self._check_references(rows, department_ids)
        duplicated = self._check_duplicates(rows)
        self._check_store(rows, duplicated)

        outcome = ConsistencyOutcome(
            reference_values=[d.name for d in departments],
            department_ids=department_ids,
        )
        for row in rows:
            (outcome.eligible if row.ok else outcome.rejected).append(row)

        logger.info(
            f"Consistency check for tenant {self.tenant_id}: "
            f"{len(outcome.eligible)} eligible, {len(outcome.rejected)} rejected"
        )
        return outcome

    # ── Checks ─────────────────────────────────────────────────────────

    @staticmethod
    def _check_references(rows: list[ImportRow], department_ids: dict[str, int]) -> None:
        for row in rows:
            name = row.get("department").strip()
            if name and name.lower() not in department_ids:
                row.errors.append(ValidationError(
                    row.ordinal, "department",
                    f'Department "{name}" does not exist. Please create it first.',
                    ErrorCode.REFERENCE_NOT_FOUND, name,
                ))

    @staticmethod
    def _check_duplicates(rows: list[ImportRow]) -> set[str]:
        """Flag every member of each duplicate group; return the duplicated keys."""
        groups: dict[str, list[ImportRow]] = defaultdict(list)
        for row in rows:
            key = _email_key(row)
            if key:
                groups[key].append(row)

        duplicated: set[str] = set()
        for key, members in groups.items():
            if len(members) < 2:
                continue
            duplicated.add(key)
            ordinals = ", ".join(str(m.ordinal) for m in members)
            for member in members:
                member.errors.append(ValidationError(
                    member.ordinal, "email",
                    f"Duplicate email found in rows: {ordinals}",
                    ErrorCode.DUPLICATE_IN_FILE, member.get("email").strip(),
                ))
        return duplicated

    def _check_store(self, rows: list[ImportRow], duplicated: set[str]) -> None:
        candidates = [r for r in rows if _email_key(r) and _email_key(r) not in duplicated]
        existing = EmployeeService.existing_emails(
            self.session, self.tenant_id, (_email_key(r) for r in candidates),
        )
        for row in candidates:
            stored = existing.get(_email_key(row))
            if stored is not None:
                row.errors.append(ValidationError(
                    row.ordinal, "email",
                    "Employee with this email already exists",
                    ErrorCode.ALREADY_EXISTS, stored,
                ))


def _email_key(row: ImportRow) -> str:
    return row.get("email").strip().lower()
