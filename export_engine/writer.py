"""
export_engine.writer - Serialise projected rows to CSV or XLSX bytes.
"""

from __future__ import annotations

import csv
import io

from openpyxl import Workbook
from openpyxl.styles import Font

EXPORT_FORMATS: dict[str, str] = {
    "csv":  "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def write_csv(headers: list[str], rows: list[dict[str, str]]) -> bytes:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=headers, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    # UTF-8 BOM so spreadsheet apps pick the right encoding
    return buf.getvalue().encode("utf-8-sig")


def write_xlsx(headers: list[str], rows: list[dict[str, str]], title: str = "Materials") -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = title

    ws.append(headers)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in rows:
        ws.append([row.get(h, "") for h in headers])

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def render(headers: list[str], rows: list[dict[str, str]], fmt: str) -> bytes:
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format '{fmt}'")
    if fmt == "csv":
        return write_csv(headers, rows)
    return write_xlsx(headers, rows)
