"""
HRBI - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("HRBI_DB", f"sqlite:///{BASE_DIR / 'hrbi.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST      = os.environ.get("HRBI_HOST", "0.0.0.0")
PORT      = int(os.environ.get("HRBI_PORT", "5000"))
DEBUG     = os.environ.get("HRBI_DEBUG", "0") == "1"
SECRET    = os.environ.get("HRBI_SECRET", "hrbi-dev-key-change-in-prod")
LOG_LEVEL = os.environ.get("HRBI_LOG_LEVEL", "INFO").upper()

# ── Tenancy ────────────────────────────────────────────────────────────
TENANT_HEADER = "X-Tenant-ID"

# ── Employee codes ─────────────────────────────────────────────────────
EMPLOYEE_ENTITY_CLASS = "employee"
EMPLOYEE_CODE_PREFIX  = "EMP"
EMPLOYEE_CODE_WIDTH   = 5

# ── Bulk import limits ─────────────────────────────────────────────────
MAX_UPLOAD_BYTES = int(os.environ.get("HRBI_MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
MAX_ROWS         = int(os.environ.get("HRBI_MAX_ROWS", "5000"))

# Wall-clock budget for one import: base + per-row allowance
IMPORT_BASE_SECONDS    = float(os.environ.get("HRBI_IMPORT_BASE_SECONDS", "30"))
IMPORT_SECONDS_PER_ROW = float(os.environ.get("HRBI_IMPORT_SECONDS_PER_ROW", "0.05"))

# Slack on top of MAX_UPLOAD_BYTES for multipart boundaries and form fields
REQUEST_OVERHEAD_BYTES = 64 * 1024
