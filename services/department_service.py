"""
services.department_service - Read-only department lookups.

Departments are owned elsewhere; the importer only matches names.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models import Department

logger = logging.getLogger(__name__)


class DepartmentService:

    @staticmethod
    def list_for_tenant(session: Session, tenant_id: str) -> list[Department]:
        return list(session.execute(
            select(Department)
            .where(Department.tenant_id == tenant_id)
            .order_by(Department.name)
        ).scalars())

    @staticmethod
    def name_map(departments: list[Department]) -> dict[str, int]:
        """
        Case-insensitive name → id.  When two departments differ only by
        case the first one listed wins and the clash is logged.
        """
        ids: dict[str, int] = {}
        for d in departments:
            key = d.name.strip().lower()
            if key in ids:
                logger.warning(
                    f"Department {d.name!r} (id {d.id}) clashes case-insensitively "
                    f"with id {ids[key]}; rows naming it import into id {ids[key]}"
                )
                continue
            ids[key] = d.id
        return ids
