"""
import_engine.template - Downloadable upload template.

Sheet "Employees":    header row + two example rows.  Required headers
                      are highlighted, the header row is frozen.
Sheet "Instructions": one line per column: field, required, format,
                      description.
"""

from __future__ import annotations

import io

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from import_engine.field_map import COLUMNS

TEMPLATE_FILENAME = "employee_upload_template.xlsx"

_REQUIRED_FILL = PatternFill(fill_type="solid", fgColor="E65100")
_OPTIONAL_FILL = PatternFill(fill_type="solid", fgColor="CFD8DC")
_REQUIRED_FONT = Font(bold=True, color="FFFFFF")
_OPTIONAL_FONT = Font(bold=True, color="1A237E")
_CENTER = Alignment(horizontal="center", vertical="center")


def build_template() -> bytes:
    """Return the template workbook as xlsx bytes."""
    wb = Workbook()

    ws = wb.active
    ws.title = "Employees"
    for col_idx, column in enumerate(COLUMNS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=column.name)
        cell.fill = _REQUIRED_FILL if column.required else _OPTIONAL_FILL
        cell.font = _REQUIRED_FONT if column.required else _OPTIONAL_FONT
        cell.alignment = _CENTER
        for row_idx, example in enumerate(column.example, start=2):
            ws.cell(row=row_idx, column=col_idx, value=example)
        ws.column_dimensions[get_column_letter(col_idx)].width = max(14, len(column.example[0]) + 4)
    ws.freeze_panes = "A2"

    info = wb.create_sheet("Instructions")
    info.append(["Field", "Required", "Format", "Description"])
    for cell in info[1]:
        cell.font = Font(bold=True)
    for column in COLUMNS:
        info.append([column.name, "Yes" if column.required else "No",
                     column.fmt, column.description])
    for letter, width in zip("ABCD", (16, 10, 42, 50)):
        info.column_dimensions[letter].width = width

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
