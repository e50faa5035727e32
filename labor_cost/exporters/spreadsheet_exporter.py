"""Weekly timesheet export to Excel.

All values are computed in Python and written as plain cell values; the
workbook contains no formulas.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.workbook import Workbook

from labor_cost.aggregators.weekly_cost_aggregator import WeeklyTimesheet
from labor_cost.errors import ExportError
from labor_cost.exporters.formatting import (
    Branding,
    document_filename,
    format_currency,
    format_long_date,
    format_rate,
    format_week_range,
)
from labor_cost.models.employee import Employee
from labor_cost.utils.logging_utils import log_timing

logger = logging.getLogger(__name__)

SHEET_TITLE = "Timesheet"
COLUMN_WIDTHS = (20, 30, 10, 12)
TABLE_HEADERS = ("Date", "Project", "Hours", "Cost")

THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
TITLE_FONT = Font(name="Calibri", size=14, bold=True, color="1A3A52")
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
LABEL_FONT = Font(name="Calibri", size=11, bold=True)
HEADER_FILL = PatternFill(start_color="1A3A52", end_color="1A3A52", fill_type="solid")
TOTAL_FILL = PatternFill(start_color="6BC4C9", end_color="6BC4C9", fill_type="solid")
CENTER_ALIGN = Alignment(horizontal="center", vertical="center")
HOURS_FORMAT = "0.0"


def build_timesheet_workbook(
    employee: Employee,
    timesheet: WeeklyTimesheet,
    branding: Optional[Branding] = None,
) -> Workbook:
    """Build the timesheet workbook for one employee and week.

    Layout, one item per row: company name, "Employee Timesheet", a blank
    row, employee, role, local rate, Dublin rate, week range, a blank row,
    the Date/Project/Hours/Cost table, a blank row and the Total row.
    """
    branding = branding or Branding()
    symbol = branding.currency_symbol

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append([branding.company_name])
    ws.append(["Employee Timesheet"])
    ws.append([])
    ws.append(["Employee:", employee.name])
    ws.append(["Role:", employee.role])
    ws.append(["Local Rate:", format_rate(employee.local_rate, symbol)])
    ws.append(["Dublin Rate:", format_rate(employee.dublin_rate, symbol)])
    ws.append(["Week:", format_week_range(timesheet.week_start, timesheet.week_end)])
    ws.append([])

    ws["A1"].font = TITLE_FONT
    ws["A2"].font = LABEL_FONT
    for row in range(4, 9):
        ws.cell(row=row, column=1).font = LABEL_FONT

    ws.append(list(TABLE_HEADERS))
    header_row = ws.max_row
    for col in range(1, len(TABLE_HEADERS) + 1):
        cell = ws.cell(row=header_row, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER_ALIGN
        cell.border = THIN_BORDER

    for line in timesheet.daily_entries:
        ws.append(
            [
                format_long_date(line.date),
                line.project_name,
                float(line.hours),
                format_currency(line.cost, symbol),
            ]
        )
        row = ws.max_row
        ws.cell(row=row, column=3).number_format = HOURS_FORMAT
        for col in range(1, len(TABLE_HEADERS) + 1):
            ws.cell(row=row, column=col).border = THIN_BORDER

    ws.append([])
    ws.append(
        [
            "Total",
            "",
            float(timesheet.total_hours),
            format_currency(timesheet.total_cost, symbol),
        ]
    )
    total_row = ws.max_row
    ws.cell(row=total_row, column=3).number_format = HOURS_FORMAT
    for col in range(1, len(TABLE_HEADERS) + 1):
        cell = ws.cell(row=total_row, column=col)
        cell.font = LABEL_FONT
        cell.fill = TOTAL_FILL
        cell.border = THIN_BORDER

    for index, width in enumerate(COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width

    return wb


@log_timing(level="INFO")
def export_timesheet_xlsx(
    employee: Employee,
    timesheet: WeeklyTimesheet,
    output_dir: Union[str, Path],
    branding: Optional[Branding] = None,
) -> Path:
    """Write the weekly timesheet workbook to ``output_dir``.

    Returns:
        Path of the written ``<name>_Timesheet_<week start>.xlsx`` file

    Raises:
        ExportError: If the file cannot be written
    """
    output_dir = Path(output_dir)
    path = output_dir / document_filename(
        employee.name, "Timesheet", timesheet.week_start, "xlsx"
    )

    wb = build_timesheet_workbook(employee, timesheet, branding)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        wb.save(str(path))
    except OSError as e:
        raise ExportError(f"Could not write timesheet to {path}: {e}") from e

    logger.info(
        f"Exported timesheet for {employee.name}, week {timesheet.week_start} "
        f"({timesheet.entry_count} entries) to {path}"
    )
    return path
