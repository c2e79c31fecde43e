"""
services.employee_service - The employee operations the importer needs.

All session management is the caller's responsibility (open before,
close/commit after).  This keeps the service testable and lets the
ingestor commit each row on its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models import Employee

if TYPE_CHECKING:
    from import_engine.row_validator import EmployeeRecord


class EmployeeService:

    # ── Create ─────────────────────────────────────────────────────────

    @staticmethod
    def create(
        session: Session,
        tenant_id: str,
        record: EmployeeRecord,
        *,
        department_id: int,
        employee_code: str,
    ) -> Employee:
        """
        Add a new Employee built from a validated record and flush it so
        unique-constraint violations surface here as IntegrityError.
        """
        employee = Employee(
            tenant_id=tenant_id,
            employee_code=employee_code,
            first_name=record.first_name,
            last_name=record.last_name,
            email=record.email.lower(),
            phone=record.phone,
            date_of_birth=record.date_of_birth,
            gender=record.gender,
            marital_status=record.marital_status,
            department_id=department_id,
            designation=record.designation,
            joining_date=record.joining_date,
            employment_type=record.employment_type,
            basic_salary=record.salary,
            status="active",
            street=record.street,
            city=record.city,
            state=record.state,
            country=record.country,
            zip_code=record.zip_code,
        )
        session.add(employee)
        session.flush()
        return employee

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def existing_emails(session: Session, tenant_id: str, emails: Iterable[str]) -> dict[str, str]:
        """
        One batched lookup: lower-cased email → stored email for every
        candidate that already belongs to an employee of the tenant.
        """
        keys = sorted({e.strip().lower() for e in emails if e and e.strip()})
        if not keys:
            return {}
        stored = session.execute(
            select(Employee.email).where(
                Employee.tenant_id == tenant_id,
                func.lower(Employee.email).in_(keys),
            )
        ).scalars()
        return {e.lower(): e for e in stored}
