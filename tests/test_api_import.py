import io

import pytest
from openpyxl import load_workbook
from sqlalchemy.exc import OperationalError

import config
import import_engine.importer as importer_mod
from import_engine.parser import XLSX_MIME
from tests.factories import TENANT, DepartmentFactory, FlakyAllocator, csv_bytes, employee_row

VALIDATE = "/api/v1/bulk-import/validate"
IMPORT = "/api/v1/bulk-import"


@pytest.fixture(autouse=True)
def departments(session):
    return [DepartmentFactory(name="Engineering"), DepartmentFactory(name="HR")]


def test_tenant_header_is_required(upload):
    resp = upload(IMPORT, csv_bytes([employee_row(1)]), tenant=None)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "tenant id required"}


def test_file_field_is_required(client):
    resp = client.post(IMPORT, data={}, headers={"X-Tenant-ID": TENANT},
                       content_type="multipart/form-data")
    assert resp.status_code == 400


def test_validate_reports_all_problems_without_writing(upload, client):
    content = csv_bytes([
        employee_row(1, email="dup@example.com"),
        employee_row(2, email="not-an-email"),
        employee_row(3, email="dup@example.com"),
    ])
    resp = upload(VALIDATE, content)
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["valid"] is False
    assert body["totalRows"] == 3
    assert body["validRows"] == 0
    assert [(e["row"], e["code"]) for e in body["errors"]] == [
        (2, "DuplicateInFile"), (3, "InvalidEmail"), (4, "DuplicateInFile"),
    ]
    assert body["availableReferenceValues"] == ["Engineering", "HR"]

    assert upload(VALIDATE, content).get_json() == body
    code = client.get("/api/v1/employees/next-code", headers={"X-Tenant-ID": TENANT})
    assert code.get_json() == {"nextEmployeeCode": "EMP00001"}


def test_import_all_rows_returns_200(upload):
    resp = upload(IMPORT, csv_bytes([employee_row(1), employee_row(2)]))
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["success"] is True
    assert body["successCount"] == 2
    assert body["failedCount"] == 0
    assert body["createdEntities"] == ["EMP00001 - First1 Last1", "EMP00002 - First2 Last2"]


def test_import_some_rows_returns_207(upload):
    content = csv_bytes([employee_row(1), employee_row(2, department="Nope")])
    resp = upload(IMPORT, content)
    body = resp.get_json()

    assert resp.status_code == 207
    assert body["success"] is False
    assert body["successCount"] == 1
    assert body["failedCount"] == 1
    assert body["errors"][0]["code"] == "ReferenceNotFound"
    assert body["errors"][0]["value"] == "Nope"


def test_import_no_rows_returns_422_with_full_result(upload):
    resp = upload(IMPORT, csv_bytes([employee_row(1, email="")]))
    body = resp.get_json()

    assert resp.status_code == 422
    assert body["successCount"] == 0
    assert body["failedCount"] == body["totalRows"] == 1
    assert body["createdEntities"] == []


def test_same_file_twice_second_reports_already_exists(upload):
    content = csv_bytes([employee_row(n) for n in range(1, 6)])
    first = upload(IMPORT, content).get_json()
    second = upload(IMPORT, content)

    assert [c.split(" - ")[0] for c in first["createdEntities"]] == [
        "EMP00001", "EMP00002", "EMP00003", "EMP00004", "EMP00005",
    ]
    assert second.status_code == 422
    assert {e["code"] for e in second.get_json()["errors"]} == {"AlreadyExists"}


def test_tenants_get_independent_codes(upload):
    DepartmentFactory(tenant_id="tenant-b", name="Engineering")
    upload(IMPORT, csv_bytes([employee_row(1)]))
    resp = upload(IMPORT, csv_bytes([employee_row(1)]), tenant="tenant-b")

    assert resp.status_code == 200
    assert resp.get_json()["createdEntities"] == ["EMP00001 - First1 Last1"]


def test_unsupported_type_returns_415(upload):
    resp = upload(IMPORT, b"%PDF-1.4", mimetype="application/pdf", filename="cv.pdf")
    assert resp.status_code == 415
    assert resp.get_json()["error"] == "UnsupportedFormat"


def test_empty_file_returns_400(upload):
    resp = upload(VALIDATE, b"firstName,lastName\n")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "EmptyFile"


def test_oversized_file_returns_413(upload, monkeypatch):
    monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 64)
    resp = upload(IMPORT, csv_bytes([employee_row(1)]))
    assert resp.status_code == 413
    assert resp.get_json()["error"] == "FileTooLarge"


def test_storage_outage_before_ingestion_returns_503(upload, monkeypatch):
    def _down():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(importer_mod, "get_session", _down)
    resp = upload(IMPORT, csv_bytes([employee_row(1)]))

    assert resp.status_code == 503
    assert resp.get_json()["error"] == "StorageUnavailable"


def test_counter_outage_with_nothing_created_returns_503(upload, monkeypatch):
    monkeypatch.setattr(importer_mod, "SequenceAllocator", lambda: FlakyAllocator(healthy=0))
    resp = upload(IMPORT, csv_bytes([employee_row(1), employee_row(2)]))
    body = resp.get_json()

    assert resp.status_code == 503
    assert body["aborted"] is True
    assert body["success"] is False
    assert body["totalRows"] == 2
    assert body["successCount"] == 0
    assert body["failedCount"] == 2
    assert body["createdEntities"] == []
    assert [(e["row"], e["code"]) for e in body["errors"]] == [(2, "Aborted"), (3, "Aborted")]


def test_counter_outage_after_some_creates_returns_207(upload, monkeypatch):
    monkeypatch.setattr(importer_mod, "SequenceAllocator", lambda: FlakyAllocator(healthy=1))
    resp = upload(IMPORT, csv_bytes([employee_row(1), employee_row(2), employee_row(3)]))
    body = resp.get_json()

    assert resp.status_code == 207
    assert body["aborted"] is True
    assert body["createdEntities"] == ["EMP00001 - First1 Last1"]
    assert body["failedCount"] == 2
    assert {e["code"] for e in body["errors"]} == {"Aborted"}


def test_next_code_requires_tenant(client):
    assert client.get("/api/v1/employees/next-code").status_code == 400


def test_next_code_follows_imports(upload, client):
    upload(IMPORT, csv_bytes([employee_row(1), employee_row(2)]))
    resp = client.get("/api/v1/employees/next-code", headers={"X-Tenant-ID": TENANT})
    assert resp.get_json() == {"nextEmployeeCode": "EMP00003"}


def test_template_download(client):
    resp = client.get("/api/v1/bulk-import/template")

    assert resp.status_code == 200
    assert resp.mimetype == XLSX_MIME
    assert "employee_upload_template.xlsx" in resp.headers["Content-Disposition"]

    wb = load_workbook(io.BytesIO(resp.data))
    assert wb.sheetnames == ["Employees", "Instructions"]
    header = [c.value for c in wb["Employees"][1]]
    assert header[:3] == ["firstName", "lastName", "email"]
    assert wb["Instructions"]["A1"].value == "Field"
    assert wb["Instructions"].max_row == len(header) + 1


def test_template_round_trips_through_import(client, upload):
    template = client.get("/api/v1/bulk-import/template").data
    resp = upload(IMPORT, template, mimetype=XLSX_MIME, filename="employees.xlsx")
    body = resp.get_json()

    assert resp.status_code == 200, body
    assert body["createdEntities"] == ["EMP00001 - John Doe", "EMP00002 - Jane Smith"]
