"""
services.sequence_service - Per-tenant sequence allocation.

Isolated so both the "next code" preview and the import engine share
the same counter.  Nothing else reads or writes sequence_counters.

allocate() is a single INSERT … ON CONFLICT DO UPDATE … RETURNING
statement, so concurrent callers never observe the same value, even
across service instances.  Each allocation commits in its own short
transaction: the counter row is never held locked while the caller
does other work, and a number whose row later fails to persist is
burned rather than reused.
"""

from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.engine import get_session
from db.models import SequenceCounter

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class SequenceUnavailable(RuntimeError):
    """Counter storage could not be reached or did not return a value."""
    pass


class SequenceAllocator:

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory

    # ── Allocate ───────────────────────────────────────────────────────

    def allocate(self, tenant_id: str, entity_class: str) -> int:
        """
        Atomically increment the (tenant, entity_class) counter and
        return the new value.  The first call for a key returns 1.
        """
        session = self._session_factory()
        try:
            stmt = self._upsert_statement(session, tenant_id, entity_class)
            seq = session.execute(stmt).scalar_one()
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error(f"Sequence allocation failed for {tenant_id}/{entity_class}: {exc}")
            raise SequenceUnavailable(
                f"cannot allocate {entity_class} sequence for tenant {tenant_id}"
            ) from exc
        finally:
            session.close()
        return int(seq)

    # ── Peek ───────────────────────────────────────────────────────────

    def peek(self, tenant_id: str, entity_class: str) -> int:
        """
        Return the value the next allocate() would return, without
        reserving it.  A concurrent allocate() may take it first.
        """
        session = self._session_factory()
        try:
            current = session.execute(
                select(SequenceCounter.seq).where(
                    SequenceCounter.tenant_id == tenant_id,
                    SequenceCounter.entity_class == entity_class,
                )
            ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise SequenceUnavailable(
                f"cannot read {entity_class} sequence for tenant {tenant_id}"
            ) from exc
        finally:
            session.close()
        return (current or 0) + 1

    # ── Private helpers ────────────────────────────────────────────────

    @staticmethod
    def _upsert_statement(session: Session, tenant_id: str, entity_class: str):
        dialect = session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            logger.error(f"No atomic sequence upsert for dialect {dialect}")
            raise SequenceUnavailable(f"atomic sequence upsert not available on {dialect}")

        stmt = insert(SequenceCounter).values(
            tenant_id=tenant_id, entity_class=entity_class, seq=1,
        )
        return stmt.on_conflict_do_update(
            index_elements=[SequenceCounter.tenant_id, SequenceCounter.entity_class],
            set_={"seq": SequenceCounter.seq + 1},
        ).returning(SequenceCounter.seq)
