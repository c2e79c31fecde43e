"""
db.models - SQLAlchemy ORM declarations.

Tables
------
departments        - tenant reference data consulted by the importer.
employees          - one row per employee.  Unique per tenant on both the
                     business email and the human-readable employee code.
sequence_counters  - one row per (tenant, entity class).  Only
                     services.sequence_service reads or writes it.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Date, DateTime, Float, ForeignKey, Index,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


class Department(Base):
    __tablename__ = "departments"

    id        = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    name      = Column(String(200), nullable=False)

    employees = relationship("Employee", back_populates="department")

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_department_tenant_name"),
    )

    def to_dict(self) -> dict:
        return {"id": self.id, "tenant_id": self.tenant_id, "name": self.name}


class Employee(Base):
    __tablename__ = "employees"

    id            = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id     = Column(String(64), nullable=False, index=True)
    employee_code = Column(String(32), nullable=False)                 # EMP00001

    # ── Personal ───────────────────────────────────────────────────────
    first_name     = Column(String(100), nullable=False)
    last_name      = Column(String(100), nullable=False)
    email          = Column(String(254), nullable=False)               # stored lower-case
    phone          = Column(String(50), nullable=False)
    date_of_birth  = Column(Date, nullable=False)
    gender         = Column(String(16), nullable=False)
    marital_status = Column(String(16), nullable=False, default="single")

    # ── Employment ─────────────────────────────────────────────────────
    department_id   = Column(Integer, ForeignKey("departments.id"), nullable=False)
    designation     = Column(String(200), nullable=False)
    joining_date    = Column(Date, nullable=False)
    employment_type = Column(String(16), nullable=False, default="full-time")
    basic_salary    = Column(Float, nullable=False, default=0.0)
    status          = Column(String(16), nullable=False, default="active")

    # ── Address ────────────────────────────────────────────────────────
    street   = Column(String(200), default="")
    city     = Column(String(100), default="")
    state    = Column(String(100), default="")
    country  = Column(String(100), default="")
    zip_code = Column(String(20), default="")

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    department = relationship("Department", back_populates="employees")

    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_employee_tenant_email"),
        UniqueConstraint("tenant_id", "employee_code", name="uq_employee_tenant_code"),
        Index("ix_employee_tenant_department", "tenant_id", "department_id"),
    )

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "employee_code": self.employee_code,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else "",
            "gender": self.gender,
            "marital_status": self.marital_status,
            "department_id": self.department_id,
            "designation": self.designation,
            "joining_date": self.joining_date.isoformat() if self.joining_date else "",
            "employment_type": self.employment_type,
            "basic_salary": self.basic_salary,
            "status": self.status,
            "address": {
                "street": self.street or "",
                "city": self.city or "",
                "state": self.state or "",
                "country": self.country or "",
                "zip_code": self.zip_code or "",
            },
            "created_at": self.created_at.isoformat() if self.created_at else "",
        }


class SequenceCounter(Base):
    """Per-(tenant, entity class) monotonic counter.  Never deleted."""
    __tablename__ = "sequence_counters"

    tenant_id    = Column(String(64), primary_key=True)
    entity_class = Column(String(64), primary_key=True)
    seq          = Column(Integer, nullable=False, default=0)
