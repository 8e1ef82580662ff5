"""Monthly spreadsheet export for one employee."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .models import Employee
from .months import Month
from .roster_view import monthly_summary

logger = logging.getLogger(__name__)

SHEET_TITLE = "Diarias"
HEADERS = ["Data", "Tipo", "Horas Extras", "Valor"]
BRL_FORMAT = '"R$" #,##0.00'


def _clean_filename(text: str) -> str:
    return re.sub(r'[\\/:*?"<>|]+', "_", text).strip() or "funcionario"


def export_filename(employee: Employee, month: Month) -> str:
    """``Ana Souza_março de 2024.xlsx``"""
    return f"{_clean_filename(employee.name)}_{month.label_pt()}.xlsx"


def build_workbook(employee: Employee, month: Month) -> Optional[Workbook]:
    """One row per work day of ``month`` plus a TOTAL row; ``None`` if the month is empty."""
    summary = monthly_summary(employee, month)
    if not summary.work_days:
        return None

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append(HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for wd in summary.work_days:
        ws.append([
            wd.date.strftime("%d/%m/%Y"),
            wd.type.value,
            wd.extra_hours or 0,
            float(wd.value),
        ])
    ws.append(["TOTAL", "", "", float(summary.total)])
    ws.cell(ws.max_row, 1).font = Font(bold=True)

    for r in range(2, ws.max_row + 1):
        ws.cell(r, 4).number_format = BRL_FORMAT
    for idx, width in enumerate((12, 14, 14, 14), start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width
    ws.freeze_panes = "A2"
    return wb


def export_month(
    employee: Employee, month: Month, directory: Union[str, Path] = "."
) -> Optional[Path]:
    """Write the month's spreadsheet into ``directory``.

    Returns the written path, or ``None`` when the month has no work days
    (callers show a notice instead of producing an empty file).
    """
    wb = build_workbook(employee, month)
    if wb is None:
        logger.info("No work days for %s in %s; nothing exported", employee.id, month)
        return None

    target = Path(directory) / export_filename(employee, month)
    target.parent.mkdir(parents=True, exist_ok=True)
    wb.save(target)
    logger.info("Exported %s work days of %s to %s", month, employee.id, target)
    return target
