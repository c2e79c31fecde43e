import csv
import io
from datetime import date

import factory
from factory.alchemy import SQLAlchemyModelFactory

from db.models import Department, Employee
from import_engine.field_map import FIELD_NAMES
from services.sequence_service import SequenceAllocator, SequenceUnavailable

TENANT = "tenant-a"


class DepartmentFactory(SQLAlchemyModelFactory):
    """Factory for creating Department reference rows."""

    class Meta:
        model = Department
        sqlalchemy_session = None            # bound per test in conftest
        sqlalchemy_session_persistence = "commit"

    tenant_id = TENANT
    name = factory.Sequence(lambda n: f"Department{n}")


class EmployeeFactory(SQLAlchemyModelFactory):
    """Factory for employees that already exist before an import runs."""

    class Meta:
        model = Employee
        sqlalchemy_session = None
        sqlalchemy_session_persistence = "commit"

    tenant_id = TENANT
    # Far from anything the allocator hands out in a test
    employee_code = factory.Sequence(lambda n: f"EMP9{n:04d}")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    email = factory.Sequence(lambda n: f"existing{n}@example.com")
    phone = "5550000000"
    date_of_birth = date(1985, 3, 1)
    gender = "female"
    department = factory.SubFactory(DepartmentFactory, tenant_id=factory.SelfAttribute("..tenant_id"))
    designation = "Analyst"
    joining_date = date(2020, 1, 6)


def bind_session(session):
    for f in (DepartmentFactory, EmployeeFactory):
        f._meta.sqlalchemy_session = session


class FlakyAllocator(SequenceAllocator):
    """Hands out `healthy` numbers, then behaves like a dead counter store."""

    def __init__(self, healthy: int):
        super().__init__()
        self.healthy = healthy
        self.calls = 0

    def allocate(self, tenant_id, entity_class):
        self.calls += 1
        if self.calls > self.healthy:
            raise SequenceUnavailable("counter store down")
        return super().allocate(tenant_id, entity_class)


# ── Upload helpers ─────────────────────────────────────────────────────

def employee_row(n: int, **overrides) -> dict:
    """A row that passes field validation (department 'Engineering')."""
    row = {
        "firstName": f"First{n}",
        "lastName": f"Last{n}",
        "email": f"person{n}@example.com",
        "phone": f"555010{n:04d}",
        "dateOfBirth": "1990-01-15",
        "gender": "male",
        "department": "Engineering",
        "designation": "Engineer",
        "joiningDate": "2024-01-01",
    }
    row.update(overrides)
    return row


def csv_bytes(rows: list[dict], headers=FIELD_NAMES) -> bytes:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=list(headers), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buf.getvalue().encode("utf-8")
