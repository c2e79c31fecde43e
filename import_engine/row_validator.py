"""
import_engine.row_validator - Field-level rules for one row.

validate_row() is a pure function of the row's fields: no database, no
knowledge of other rows.  build_record() turns a row that validated
cleanly into a typed EmployeeRecord for the ingestor.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Mapping, Optional

from import_engine.field_map import FIELD_LABELS, REQUIRED_FIELDS
from import_engine.report import ErrorCode, ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DATE_FORMAT = "%Y-%m-%d"
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")      # strptime alone accepts 2024-1-5

GENDERS          = ("male", "female", "other")
EMPLOYMENT_TYPES = ("full-time", "part-time", "contract", "intern")
MARITAL_STATUSES = ("single", "married", "divorced", "widowed")

DEFAULT_EMPLOYMENT_TYPE = "full-time"
DEFAULT_MARITAL_STATUS  = "single"

ENUM_FIELDS: dict[str, tuple[str, ...]] = {
    "gender":         GENDERS,
    "employmentType": EMPLOYMENT_TYPES,
    "maritalStatus":  MARITAL_STATUSES,
}
DATE_FIELDS = ("dateOfBirth", "joiningDate")


@dataclass(frozen=True)
class EmployeeRecord:
    first_name: str
    last_name: str
    email: str
    phone: str
    date_of_birth: date
    gender: str
    department: str
    designation: str
    joining_date: date
    employment_type: str = DEFAULT_EMPLOYMENT_TYPE
    marital_status: str = DEFAULT_MARITAL_STATUS
    salary: float = 0.0
    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zip_code: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


def validate_row(fields: Mapping[str, str], ordinal: int) -> list[ValidationError]:
    """Return every field-level problem with the row (empty list = valid)."""
    errors: list[ValidationError] = []

    def err(name: str, message: str, code: str, value: Optional[str] = None):
        errors.append(ValidationError(ordinal, name, message, code, value))

    def get(name: str) -> str:
        return (fields.get(name) or "").strip()

    for name in REQUIRED_FIELDS:
        if not get(name):
            err(name, f"{FIELD_LABELS[name]} is required", ErrorCode.MISSING_FIELD)

    email = get("email")
    if email and not EMAIL_RE.match(email):
        err("email", "Invalid email format", ErrorCode.INVALID_EMAIL, email)

    for name in DATE_FIELDS:
        raw = get(name)
        if raw and parse_date(raw) is None:
            err(name, f"{FIELD_LABELS[name]} must be a valid date (YYYY-MM-DD)",
                ErrorCode.INVALID_DATE, raw)

    for name, allowed in ENUM_FIELDS.items():
        raw = get(name)
        if raw and raw.lower() not in allowed:
            err(name, f"{FIELD_LABELS[name]} must be one of: {', '.join(allowed)}",
                ErrorCode.INVALID_ENUM, raw)

    salary = get("salary")
    if salary:
        amount = parse_number(salary)
        if amount is None or amount < 0:
            err("salary", "Salary must be a non-negative number",
                ErrorCode.INVALID_NUMBER, salary)

    return errors


def build_record(fields: Mapping[str, str]) -> EmployeeRecord:
    """Type a row that validate_row() accepted.  Raises ValueError otherwise."""
    def get(name: str) -> str:
        return (fields.get(name) or "").strip()

    dob = parse_date(get("dateOfBirth"))
    joined = parse_date(get("joiningDate"))
    if dob is None or joined is None:
        raise ValueError("row has not been validated")

    return EmployeeRecord(
        first_name=get("firstName"),
        last_name=get("lastName"),
        email=get("email").lower(),
        phone=get("phone"),
        date_of_birth=dob,
        gender=get("gender").lower(),
        department=get("department"),
        designation=get("designation"),
        joining_date=joined,
        employment_type=get("employmentType").lower() or DEFAULT_EMPLOYMENT_TYPE,
        marital_status=get("maritalStatus").lower() or DEFAULT_MARITAL_STATUS,
        salary=parse_number(get("salary")) or 0.0,
        street=get("street"),
        city=get("city"),
        state=get("state"),
        country=get("country"),
        zip_code=get("zipCode"),
    )


def parse_date(raw: str) -> Optional[date]:
    raw = raw.strip()
    if not DATE_RE.match(raw):
        return None
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        return None


def parse_number(raw: str) -> Optional[float]:
    """Accept '50000', '50,000.50', ' 1e3 '; reject NaN/inf and text."""
    try:
        value = float(raw.replace(",", "").strip())
    except ValueError:
        return None
    if value != value or value in (float("inf"), float("-inf")):
        return None
    return value
