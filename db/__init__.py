"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    get_session()   → new Session
    Department, Employee, SequenceCounter → ORM models
"""

from db.engine import init_db, get_session, get_engine            # noqa: F401
from db.models import Base, Department, Employee, SequenceCounter  # noqa: F401
