"""Weekly timesheet and payslip export to PDF.

Documents use the core Helvetica font, which only covers latin-1, so text
passes through ``_safe`` before it is drawn.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from labor_cost.aggregators.weekly_cost_aggregator import WeeklyTimesheet
from labor_cost.errors import ExportError
from labor_cost.exporters.formatting import (
    Branding,
    document_filename,
    format_currency,
    format_hours,
    format_long_date,
    format_rate,
    format_week_range,
)
from labor_cost.models.employee import Employee
from labor_cost.utils.logging_utils import log_timing

logger = logging.getLogger(__name__)

NAVY = (26, 58, 82)
TEAL = (107, 196, 201)
GOLD = (253, 185, 19)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

TABLE_HEADERS = ("Date", "Project", "Hours", "Cost")
TABLE_WIDTHS = (55, 75, 25, 27)
EARNINGS_HEADERS = ("Description", "Hours", "Rate", "Amount")
EARNINGS_WIDTHS = (84, 30, 30, 38)

LOGO_WIDTH = 30
ROW_HEIGHT = 7

_RATE_LABELS = {"local": "Local Rate", "dublin": "Dublin Rate"}
_RATE_ORDER = {"local": 0, "dublin": 1, None: 2}


def _safe(text) -> str:
    """Make text drawable with a core font."""
    return str(text).replace("€", "EUR ").encode("latin-1", "replace").decode("latin-1")


@dataclass
class EarningsLine:
    """One payslip earnings row: hours paid at a single rate."""

    description: str
    hours: Decimal
    rate: Optional[Decimal]
    amount: Decimal


def payslip_earnings(timesheet: WeeklyTimesheet) -> List[EarningsLine]:
    """Split a week's pay into one line per applied rate.

    Lines are ordered local rate first, then Dublin rate, then hours that
    could not be priced.

    Example:
        >>> [line.description for line in payslip_earnings(timesheet)]
        ['Regular Hours (Local Rate)', 'Regular Hours (Dublin Rate)']
    """
    groups: Dict[Tuple[Optional[str], Optional[Decimal]], List] = {}
    for line in timesheet.daily_entries:
        groups.setdefault((line.rate_type, line.rate), []).append(line)

    earnings = []
    for (rate_type, rate), lines in sorted(
        groups.items(),
        key=lambda item: (_RATE_ORDER[item[0][0]], item[0][1] or Decimal("0")),
    ):
        if rate is None:
            description = "Unpriced Hours"
        else:
            description = f"Regular Hours ({_RATE_LABELS[rate_type]})"
        earnings.append(
            EarningsLine(
                description=description,
                hours=sum((line.hours for line in lines), Decimal("0")),
                rate=rate,
                amount=sum((line.cost for line in lines), Decimal("0")),
            )
        )
    return earnings


class LaborCostPDF(FPDF):
    """FPDF document with the company header and table helpers."""

    def __init__(self, branding: Branding):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.branding = branding
        self.set_auto_page_break(auto=True, margin=15)
        self.set_margins(14, 14, 14)

    def draw_logo(self) -> None:
        """Draw the logo top-right; a logo that cannot be loaded is skipped."""
        logo = self.branding.logo_path
        if logo is None:
            return
        try:
            saved_y = self.get_y()
            self.image(
                str(logo),
                x=self.w - self.r_margin - LOGO_WIDTH,
                y=self.t_margin,
                w=LOGO_WIDTH,
            )
            self.set_y(saved_y)
        except Exception as e:
            logger.warning(f"Skipping logo {logo}: {type(e).__name__}: {e}")

    def title_block(self, title: str) -> None:
        self.draw_logo()
        self.set_text_color(*NAVY)
        self.set_font("Helvetica", "B", 12)
        self.cell(0, 8, _safe(self.branding.company_name), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_font("Helvetica", "B", 20)
        self.cell(0, 12, _safe(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_text_color(*BLACK)
        self.ln(4)

    def text_line(self, text: str, size: int = 11, style: str = "") -> None:
        self.set_font("Helvetica", style, size)
        self.cell(0, ROW_HEIGHT, _safe(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def section_bar(self, title: str, color=TEAL) -> None:
        """Coloured full-width section title."""
        if self.get_y() + 30 > self.page_break_trigger:
            self.add_page()
        self.ln(3)
        self.set_fill_color(*color)
        self.set_text_color(*WHITE)
        self.set_font("Helvetica", "B", 12)
        self.cell(0, 9, f"  {_safe(title)}", fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_text_color(*BLACK)
        self.ln(2)

    def table_header(self, headers: Sequence[str], widths: Sequence[float]) -> None:
        self.set_fill_color(*NAVY)
        self.set_text_color(*WHITE)
        self.set_font("Helvetica", "B", 10)
        for header, width in zip(headers, widths):
            self.cell(width, ROW_HEIGHT + 1, header, border=1, align="C", fill=True)
        self.ln()
        self.set_text_color(*BLACK)
        self.set_font("Helvetica", "", 10)

    def table_row(
        self,
        values: Sequence[str],
        widths: Sequence[float],
        aligns: Sequence[str],
        headers: Sequence[str],
        fill_color=None,
        bold: bool = False,
    ) -> None:
        """Draw one gridded row, repeating the header on a new page."""
        if self.get_y() + ROW_HEIGHT > self.page_break_trigger:
            self.add_page()
            self.table_header(headers, widths)
        if fill_color is not None:
            self.set_fill_color(*fill_color)
        self.set_font("Helvetica", "B" if bold else "", 10)
        for value, width, align in zip(values, widths, aligns):
            self.cell(
                width,
                ROW_HEIGHT,
                _safe(value),
                border=1,
                align=align,
                fill=fill_color is not None,
            )
        self.ln()
        self.set_font("Helvetica", "", 10)


def _rates_line(employee: Employee, symbol: str, suffix: str = "") -> str:
    return (
        f"Local Rate: {format_rate(employee.local_rate, symbol)}{suffix} | "
        f"Dublin Rate: {format_rate(employee.dublin_rate, symbol)}{suffix}"
    )


def render_timesheet_pdf(
    employee: Employee,
    timesheet: WeeklyTimesheet,
    branding: Optional[Branding] = None,
) -> bytes:
    """Render the weekly timesheet document.

    Returns:
        PDF file content
    """
    branding = branding or Branding()
    symbol = branding.currency_symbol

    pdf = LaborCostPDF(branding)
    pdf.add_page()
    pdf.title_block("Employee Timesheet")

    pdf.text_line(f"Employee: {employee.name}")
    pdf.text_line(f"Role: {employee.role}")
    pdf.text_line(_rates_line(employee, symbol))
    pdf.text_line(f"Week: {format_week_range(timesheet.week_start, timesheet.week_end)}")
    pdf.ln(4)

    aligns = ("L", "L", "R", "R")
    pdf.table_header(TABLE_HEADERS, TABLE_WIDTHS)
    for line in timesheet.daily_entries:
        pdf.table_row(
            (
                format_long_date(line.date),
                line.project_name,
                format_hours(line.hours),
                format_currency(line.cost, symbol),
            ),
            TABLE_WIDTHS,
            aligns,
            TABLE_HEADERS,
        )
    pdf.set_text_color(*WHITE)
    pdf.table_row(
        (
            "Total",
            "",
            format_hours(timesheet.total_hours),
            format_currency(timesheet.total_cost, symbol),
        ),
        TABLE_WIDTHS,
        aligns,
        TABLE_HEADERS,
        fill_color=TEAL,
        bold=True,
    )
    pdf.set_text_color(*BLACK)

    return bytes(pdf.output())


def render_payslip_pdf(
    employee: Employee,
    timesheet: WeeklyTimesheet,
    branding: Optional[Branding] = None,
    generated_on: Optional[dt.date] = None,
) -> bytes:
    """Render the weekly payslip document.

    Returns:
        PDF file content
    """
    branding = branding or Branding()
    symbol = branding.currency_symbol
    generated_on = generated_on or dt.date.today()

    pdf = LaborCostPDF(branding)
    pdf.add_page()
    pdf.draw_logo()

    pdf.set_text_color(*NAVY)
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, _safe(branding.company_name), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", "B", 22)
    pdf.cell(0, 14, "PAYSLIP", align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*BLACK)

    pdf.section_bar("Employee Information")
    pdf.text_line(f"Name: {employee.name}")
    pdf.text_line(f"Role: {employee.role}")
    pdf.text_line(_rates_line(employee, symbol, "/hr"))

    pdf.section_bar("Pay Period")
    pdf.text_line(format_week_range(timesheet.week_start, timesheet.week_end))

    pdf.section_bar("Earnings")
    aligns = ("L", "R", "R", "R")
    pdf.table_header(EARNINGS_HEADERS, EARNINGS_WIDTHS)
    for line in payslip_earnings(timesheet):
        pdf.table_row(
            (
                line.description,
                format_hours(line.hours),
                format_rate(line.rate, symbol),
                format_currency(line.amount, symbol),
            ),
            EARNINGS_WIDTHS,
            aligns,
            EARNINGS_HEADERS,
        )

    pdf.ln(6)
    pdf.set_fill_color(*GOLD)
    pdf.set_text_color(*NAVY)
    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(EARNINGS_WIDTHS[0], 12, "  Total Payment:", fill=True)
    pdf.cell(
        sum(EARNINGS_WIDTHS[1:]),
        12,
        _safe(format_currency(timesheet.total_cost, symbol)) + "  ",
        fill=True,
        align="R",
        new_x=XPos.LMARGIN,
        new_y=YPos.NEXT,
    )
    pdf.set_text_color(*BLACK)

    pdf.set_y(-25)
    pdf.set_font("Helvetica", "I", 9)
    pdf.cell(
        0,
        8,
        f"Generated on {generated_on.strftime('%d/%m/%Y')}",
        align="C",
    )

    return bytes(pdf.output())


def _write(content: bytes, path: Path) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    except OSError as e:
        raise ExportError(f"Could not write {path}: {e}") from e
    return path


@log_timing(level="INFO")
def export_timesheet_pdf(
    employee: Employee,
    timesheet: WeeklyTimesheet,
    output_dir: Union[str, Path],
    branding: Optional[Branding] = None,
) -> Path:
    """Write the weekly timesheet PDF to ``output_dir``.

    Returns:
        Path of the written ``<name>_Timesheet_<week start>.pdf`` file

    Raises:
        ExportError: If the file cannot be written
    """
    path = Path(output_dir) / document_filename(
        employee.name, "Timesheet", timesheet.week_start, "pdf"
    )
    _write(render_timesheet_pdf(employee, timesheet, branding), path)
    logger.info(f"Exported timesheet PDF for {employee.name} to {path}")
    return path


@log_timing(level="INFO")
def export_payslip_pdf(
    employee: Employee,
    timesheet: WeeklyTimesheet,
    output_dir: Union[str, Path],
    branding: Optional[Branding] = None,
    generated_on: Optional[dt.date] = None,
) -> Path:
    """Write the weekly payslip PDF to ``output_dir``.

    Returns:
        Path of the written ``<name>_Payslip_<week start>.pdf`` file

    Raises:
        ExportError: If the file cannot be written
    """
    path = Path(output_dir) / document_filename(
        employee.name, "Payslip", timesheet.week_start, "pdf"
    )
    _write(render_payslip_pdf(employee, timesheet, branding, generated_on), path)
    logger.info(f"Exported payslip for {employee.name} to {path}")
    return path
