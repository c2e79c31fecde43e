"""
import_engine.field_map - Column-name ↔ logical-field mapping.

The logical field names are the headers of the downloadable template.
Uploaded headers are matched after normalisation (case, spaces,
underscores and hyphens ignored), so "First Name", "first_name" and
"firstName" all land on firstName.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    required: bool
    fmt: str
    description: str
    example: tuple[str, str]


# Ordered as they appear in the template
COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("firstName", True, "Text", "Employee first name", ("John", "Jane")),
    ColumnSpec("lastName", True, "Text", "Employee last name", ("Doe", "Smith")),
    ColumnSpec("email", True, "name@domain.tld", "Unique email address within the organisation",
               ("john.doe@example.com", "jane.smith@example.com")),
    ColumnSpec("phone", True, "Text", "Phone number", ("1234567890", "0987654321")),
    ColumnSpec("dateOfBirth", True, "YYYY-MM-DD", "Date of birth", ("1990-01-15", "1992-05-20")),
    ColumnSpec("gender", True, "male | female | other", "Gender", ("male", "female")),
    ColumnSpec("department", True, "Text", "Department name (must already exist)", ("Engineering", "HR")),
    ColumnSpec("designation", True, "Text", "Job title / designation", ("Software Engineer", "HR Manager")),
    ColumnSpec("joiningDate", True, "YYYY-MM-DD", "First working day", ("2024-01-01", "2024-02-15")),
    ColumnSpec("employmentType", False, "full-time | part-time | contract | intern",
               "Employment type (default: full-time)", ("full-time", "full-time")),
    ColumnSpec("salary", False, "Number", "Basic salary amount (default: 0)", ("50000", "60000")),
    ColumnSpec("maritalStatus", False, "single | married | divorced | widowed",
               "Marital status (default: single)", ("single", "married")),
    ColumnSpec("street", False, "Text", "Street address", ("123 Main St", "456 Oak Ave")),
    ColumnSpec("city", False, "Text", "City", ("New York", "Los Angeles")),
    ColumnSpec("state", False, "Text", "State / province", ("NY", "CA")),
    ColumnSpec("country", False, "Text", "Country", ("USA", "USA")),
    ColumnSpec("zipCode", False, "Text", "ZIP / postal code", ("10001", "90001")),
)

FIELD_NAMES = tuple(c.name for c in COLUMNS)
REQUIRED_FIELDS = tuple(c.name for c in COLUMNS if c.required)

# Human-readable labels used in error messages
FIELD_LABELS: dict[str, str] = {
    "firstName":      "First name",
    "lastName":       "Last name",
    "email":          "Email",
    "phone":          "Phone",
    "dateOfBirth":    "Date of birth",
    "gender":         "Gender",
    "department":     "Department",
    "designation":    "Designation",
    "joiningDate":    "Joining date",
    "employmentType": "Employment type",
    "salary":         "Salary",
    "maritalStatus":  "Marital status",
    "street":         "Street",
    "city":           "City",
    "state":          "State",
    "country":        "Country",
    "zipCode":        "ZIP code",
}

# Extra header spellings seen in real spreadsheets
_ALIASES: dict[str, str] = {
    "dob":             "dateOfBirth",
    "birthdate":       "dateOfBirth",
    "emailaddress":    "email",
    "phonenumber":     "phone",
    "mobile":          "phone",
    "jobtitle":        "designation",
    "title":           "designation",
    "startdate":       "joiningDate",
    "dateofjoining":   "joiningDate",
    "basicsalary":     "salary",
    "zip":             "zipCode",
    "postalcode":      "zipCode",
    "postcode":        "zipCode",
    "address":         "street",
}

_HEADER_LOOKUP: dict[str, str] = {
    **_ALIASES,
    **{re.sub(r"[\s_\-]", "", name).lower(): name for name in FIELD_NAMES},
}


def normalise_header(header: str) -> Optional[str]:
    """Map a raw header cell onto a logical field name, or None if unknown."""
    key = re.sub(r"[\s_\-]", "", str(header or "")).lower()
    return _HEADER_LOOKUP.get(key)
