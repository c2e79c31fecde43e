from datetime import date

import pytest

from import_engine.field_map import REQUIRED_FIELDS
from import_engine.report import ErrorCode
from import_engine.row_validator import build_record, validate_row
from tests.factories import employee_row


def _codes(errors):
    return [(e.field, e.code) for e in errors]


def test_valid_row_has_no_errors():
    assert validate_row(employee_row(1), 2) == []


@pytest.mark.parametrize("name", REQUIRED_FIELDS)
def test_blank_required_field_is_reported(name):
    errors = validate_row(employee_row(1, **{name: "   "}), 7)
    assert _codes(errors) == [(name, ErrorCode.MISSING_FIELD)]
    assert errors[0].row == 7


def test_missing_column_reports_every_required_field():
    errors = validate_row({}, 2)
    assert sorted(e.field for e in errors) == sorted(REQUIRED_FIELDS)
    assert {e.code for e in errors} == {ErrorCode.MISSING_FIELD}


@pytest.mark.parametrize("email", ["john.doe", "john@", "john doe@example.com", "a@b"])
def test_malformed_email(email):
    errors = validate_row(employee_row(1, email=email), 3)
    assert _codes(errors) == [("email", ErrorCode.INVALID_EMAIL)]
    assert errors[0].value == email


@pytest.mark.parametrize("value", ["15/01/1990", "1990-13-01", "1990-02-30", "1990-1-5", "yesterday"])
def test_bad_dates(value):
    errors = validate_row(employee_row(1, dateOfBirth=value, joiningDate=value), 2)
    assert _codes(errors) == [
        ("dateOfBirth", ErrorCode.INVALID_DATE),
        ("joiningDate", ErrorCode.INVALID_DATE),
    ]


def test_enums_are_case_insensitive():
    row = employee_row(1, gender="FEMALE", employmentType="Part-Time", maritalStatus="Married")
    assert validate_row(row, 2) == []


@pytest.mark.parametrize("name,value", [
    ("gender", "unknown"),
    ("employmentType", "freelance"),
    ("maritalStatus", "complicated"),
])
def test_values_outside_enum_are_rejected(name, value):
    errors = validate_row(employee_row(1, **{name: value}), 2)
    assert _codes(errors) == [(name, ErrorCode.INVALID_ENUM)]
    assert errors[0].value == value


@pytest.mark.parametrize("salary", ["lots", "-10", "nan"])
def test_bad_salary(salary):
    errors = validate_row(employee_row(1, salary=salary), 2)
    assert _codes(errors) == [("salary", ErrorCode.INVALID_NUMBER)]


def test_salary_accepts_thousands_separator():
    assert validate_row(employee_row(1, salary="52,000.50"), 2) == []


def test_several_problems_on_one_row_are_all_reported():
    row = employee_row(1, firstName="", email="nope", gender="x")
    assert _codes(validate_row(row, 2)) == [
        ("firstName", ErrorCode.MISSING_FIELD),
        ("email", ErrorCode.INVALID_EMAIL),
        ("gender", ErrorCode.INVALID_ENUM),
    ]


def test_validation_is_deterministic_and_independent_of_other_rows():
    good = employee_row(1)
    bad = employee_row(2, email="broken", joiningDate="soon")

    first = validate_row(bad, 3)
    validate_row(good, 2)
    validate_row(employee_row(3, email="broken"), 4)
    second = validate_row(bad, 3)

    assert first == second
    assert validate_row(dict(bad), 3) == first


def test_build_record_applies_defaults_and_normalises():
    record = build_record(employee_row(1, email="Person1@Example.COM ", gender="MALE"))

    assert record.email == "person1@example.com"
    assert record.gender == "male"
    assert record.employment_type == "full-time"
    assert record.marital_status == "single"
    assert record.salary == 0.0
    assert record.date_of_birth == date(1990, 1, 15)
    assert record.joining_date == date(2024, 1, 1)
    assert record.display_name == "First1 Last1"


def test_build_record_keeps_optional_values():
    record = build_record(employee_row(
        1, employmentType="Contract", maritalStatus="widowed", salary="52,000.50",
        city="Oslo", zipCode="0150",
    ))
    assert record.employment_type == "contract"
    assert record.marital_status == "widowed"
    assert record.salary == 52000.5
    assert record.city == "Oslo"
    assert record.zip_code == "0150"


def test_build_record_refuses_unvalidated_rows():
    with pytest.raises(ValueError):
        build_record(employee_row(1, dateOfBirth="not a date"))
