"""
schema - Identifier formats.

Public API:
    numbering.build_employee_code
"""

from schema.numbering import build_employee_code   # noqa: F401
