"""Timesheet and payslip documents."""

from .formatting import (
    Branding,
    document_filename,
    format_currency,
    format_hours,
    format_long_date,
    format_rate,
    format_week_range,
)
from .pdf_exporter import (
    EarningsLine,
    export_payslip_pdf,
    export_timesheet_pdf,
    payslip_earnings,
    render_payslip_pdf,
    render_timesheet_pdf,
)
from .spreadsheet_exporter import build_timesheet_workbook, export_timesheet_xlsx

__all__ = [
    "Branding",
    "document_filename",
    "format_currency",
    "format_hours",
    "format_long_date",
    "format_rate",
    "format_week_range",
    "EarningsLine",
    "payslip_earnings",
    "render_timesheet_pdf",
    "render_payslip_pdf",
    "export_timesheet_pdf",
    "export_payslip_pdf",
    "build_timesheet_workbook",
    "export_timesheet_xlsx",
]
