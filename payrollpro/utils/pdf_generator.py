# payrollpro/utils/pdf_generator.py
import io
import re
import logging
from pathlib import Path
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List, Optional, Tuple, Union

from pydantic import BaseModel
from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib import colors

from payrollpro.config import (
    COMPANY_NAME,
    COMPANY_TAGLINE,
    PAYSLIP_CURRENCY_SYMBOL,
    SALARY_SLIP_DIR,
)

logger = logging.getLogger(__name__)

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

NOT_AVAILABLE = "N/A"
NOT_ASSIGNED = "Not Assigned"
NOT_PROVIDED = "Not provided"

TITLE = "SALARY PAYSLIP"
DISCLAIMER = "This is a computer-generated document. No signature required."

PRIMARY = colors.HexColor("#2563EB")
LABEL_GREY = colors.HexColor("#646464")
PANEL_BG = colors.HexColor("#F5F7FA")
GREEN = colors.HexColor("#008000")
RED = colors.HexColor("#C80000")
FOOTER_GREY = colors.HexColor("#969696")


class PayslipLayout(BaseModel):
    """Every piece of text on the payslip, in drawing order."""

    company_name: str
    tagline: str
    title: str
    period: str
    details: List[Tuple[str, str, str, str]]
    earnings: List[Tuple[str, str]]
    deductions: List[Tuple[str, str]]
    gross_salary: str
    total_deductions: str
    net_salary: str
    payment_date: Optional[str] = None
    disclaimer: str
    generated_on: str
    filename: str


# -------------------- formatting helpers --------------------
def _get(obj: Any, name: str, default=None):
    if obj is None:
        return default
    if isinstance(obj, dict):
        value = obj.get(name, default)
    else:
        value = getattr(obj, name, default)
    return default if value is None else value


def _sanitize_filename_part(s: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]", "_", str(s))


def _truncate(s: str, max_len: int = 30) -> str:
    s = str(s or "")
    return s if len(s) <= max_len else s[:max_len - 1] + "…"


def month_name(month: int) -> str:
    try:
        m = int(month)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid month: {month!r}")
    if not 1 <= m <= 12:
        raise ValueError(f"Month out of range 1-12: {month!r}")
    return MONTHS[m - 1]


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: Union[Decimal, float, int, None], symbol: str = "₹") -> str:
    """Whole rupees with Indian digit grouping, e.g. ``-₹1,23,456``."""
    if amount is None:
        amount = 0
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    if not value.is_finite():
        return f"{symbol}{value}"
    whole = int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    # the sign follows the unrounded amount, so -0.4 reads "-₹0"
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{_group_indian(str(abs(whole)))}"


def format_date(value: Union[date, datetime, str, None]) -> Optional[str]:
    """d/m/yyyy without zero padding, or None when there is no date."""
    if not value:
        return None
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return f"{value.day}/{value.month}/{value.year}"


def mask_account_number(number: Optional[str], placeholder: str = NOT_PROVIDED) -> str:
    if not number:
        return placeholder
    return f"****{str(number)[-4:]}"


def payslip_filename(payroll: Any) -> str:
    employee = _get(payroll, "employee")
    code = _get(employee, "employee_code", NOT_AVAILABLE)
    name = f"Payslip_{code}_{month_name(_get(payroll, 'month'))}_{_get(payroll, 'year')}.pdf"
    return _sanitize_filename_part(name)


# -------------------- layout --------------------
def _employee_details(employee: Any) -> List[Tuple[str, str, str, str]]:
    if employee is None:
        return [
            ("Employee Name", NOT_AVAILABLE, "Employee Code", NOT_AVAILABLE),
            ("Designation", NOT_AVAILABLE, "Department", NOT_AVAILABLE),
            ("PAN Number", NOT_AVAILABLE, "PF Number", NOT_AVAILABLE),
            ("Bank Name", NOT_AVAILABLE, "Account Number", NOT_AVAILABLE),
        ]
    department = _get(employee, "department")
    return [
        ("Employee Name", _get(employee, "full_name") or NOT_AVAILABLE,
         "Employee Code", _get(employee, "employee_code") or NOT_AVAILABLE),
        ("Designation", _get(employee, "designation") or NOT_AVAILABLE,
         "Department", _get(department, "name") or NOT_ASSIGNED),
        ("PAN Number", _get(employee, "pan_number") or NOT_AVAILABLE,
         "PF Number", _get(employee, "pf_number") or NOT_AVAILABLE),
        ("Bank Name", _get(employee, "bank_name") or NOT_PROVIDED,
         "Account Number", mask_account_number(_get(employee, "bank_account_number"))),
    ]


def build_payslip_layout(
    payroll: Any,
    generated_at: Optional[datetime] = None,
    currency_symbol: str = PAYSLIP_CURRENCY_SYMBOL,
) -> PayslipLayout:
    """
    Collect the payslip text for one payroll record.

    Totals come from the stored record and are not recomputed. Missing
    employee, department, bank or tax details fall back to placeholders.
    """
    if payroll is None:
        raise ValueError("A payroll record is required to build a payslip")

    def money(name):
        return format_currency(_get(payroll, name, 0), symbol=currency_symbol)

    employee = _get(payroll, "employee")
    generated_at = generated_at or datetime.now()

    return PayslipLayout(
        company_name=COMPANY_NAME,
        tagline=COMPANY_TAGLINE,
        title=TITLE,
        period=f"{month_name(_get(payroll, 'month'))} {_get(payroll, 'year')}",
        details=_employee_details(employee),
        earnings=[
            ("Basic Salary", money("basic_salary")),
            ("HRA", money("hra")),
            ("Conveyance Allowance", money("conveyance_allowance")),
            ("Medical Allowance", money("medical_allowance")),
            ("Special Allowance", money("special_allowance")),
            ("Overtime", money("overtime_amount")),
            ("Bonus", money("bonus")),
        ],
        deductions=[
            ("Provident Fund (PF)", money("pf_deduction")),
            ("Income Tax", money("income_tax")),
            ("Other Deductions", money("other_deductions")),
        ],
        gross_salary=money("gross_salary"),
        total_deductions=money("total_deductions"),
        net_salary=money("net_salary"),
        payment_date=format_date(_get(payroll, "payment_date")),
        disclaimer=DISCLAIMER,
        generated_on=format_date(generated_at),
        filename=payslip_filename(payroll),
    )


# -------------------- drawing --------------------
def _draw_layout(c: canvas.Canvas, layout: PayslipLayout):
    width, height = A4

    def y(top_mm: float) -> float:
        # positions are measured in mm from the top edge
        return height - top_mm * mm

    # Header band
    c.setFillColor(PRIMARY)
    c.rect(0, y(40), width, 40 * mm, stroke=0, fill=1)

    c.setFillColor(colors.white)
    c.setFont("Helvetica-Bold", 22)
    c.drawString(20 * mm, y(20), layout.company_name)
    c.setFont("Helvetica", 10)
    c.drawString(20 * mm, y(28), layout.tagline)

    c.setFont("Helvetica-Bold", 14)
    c.drawCentredString(150 * mm, y(25), layout.title)
    c.setFont("Helvetica", 10)
    c.drawCentredString(150 * mm, y(32), layout.period)

    # Employee details
    c.setFillColor(colors.black)
    c.setFont("Helvetica-Bold", 12)
    c.drawString(20 * mm, y(55), "Employee Details")
    c.setStrokeColor(PRIMARY)
    c.setLineWidth(0.5 * mm)
    c.line(20 * mm, y(58), 190 * mm, y(58))

    row_h = 8
    top = 62
    columns = (20, 55, 105, 140)
    for i, row in enumerate(layout.details):
        row_y = y(top + row_h * i + 5.5)
        for col, (x, text) in enumerate(zip(columns, row)):
            if col % 2 == 0:
                c.setFont("Helvetica-Bold", 9)
                c.setFillColor(LABEL_GREY)
            else:
                c.setFont("Helvetica", 9)
                c.setFillColor(colors.black)
            c.drawString(x * mm, row_y, _truncate(text))
    final_y = top + row_h * len(layout.details) + 10

    # Earnings / deductions, both starting at the same offset
    c.setFillColor(colors.black)
    c.setFont("Helvetica-Bold", 12)
    c.drawString(20 * mm, y(final_y), "Earnings")
    c.drawString(115 * mm, y(final_y), "Deductions")
    c.setStrokeColor(PRIMARY)
    c.line(20 * mm, y(final_y + 3), 100 * mm, y(final_y + 3))
    c.line(115 * mm, y(final_y + 3), 190 * mm, y(final_y + 3))

    line_h = 6
    c.setFont("Helvetica", 9)

    def draw_column(rows, label_x, amount_x):
        last = final_y + 7
        for i, (label, amount) in enumerate(rows):
            last = final_y + 7 + line_h * (i + 1)
            c.drawString(label_x * mm, y(last - 1.5), label)
            c.drawRightString(amount_x * mm, y(last - 1.5), amount)
        return last

    earnings_end = draw_column(layout.earnings, 20, 100)
    deductions_end = draw_column(layout.deductions, 115, 190)

    # Summary panel
    summary_y = max(max(earnings_end, deductions_end) + 15, final_y + 80)
    c.setFillColor(PANEL_BG)
    c.roundRect(20 * mm, y(summary_y + 35), 170 * mm, 35 * mm, 3 * mm, stroke=0, fill=1)

    c.setFont("Helvetica-Bold", 10)
    c.setFillColor(GREEN)
    c.drawString(30 * mm, y(summary_y + 12), "Gross Salary:")
    c.drawString(90 * mm, y(summary_y + 12), layout.gross_salary)

    c.setFillColor(RED)
    c.drawString(30 * mm, y(summary_y + 22), "Total Deductions:")
    c.drawString(90 * mm, y(summary_y + 22), layout.total_deductions)

    c.setFillColor(PRIMARY)
    c.setFont("Helvetica-Bold", 12)
    c.drawString(110 * mm, y(summary_y + 17), "Net Salary:")
    c.setFont("Helvetica-Bold", 14)
    c.drawString(155 * mm, y(summary_y + 17), layout.net_salary)

    if layout.payment_date:
        c.setFont("Helvetica", 9)
        c.setFillColor(LABEL_GREY)
        c.drawString(30 * mm, y(summary_y + 30), f"Payment Date: {layout.payment_date}")

    # Footer
    c.setFont("Helvetica", 8)
    c.setFillColor(FOOTER_GREY)
    c.drawCentredString(105 * mm, y(280), layout.disclaimer)
    c.drawCentredString(105 * mm, y(285), f"Generated on: {layout.generated_on}")


def render_payslip_pdf(payroll: Any, generated_at: Optional[datetime] = None) -> bytes:
    """Render one payroll record as a single-page A4 PDF and return its bytes."""
    layout = build_payslip_layout(payroll, generated_at=generated_at)

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"{layout.title} - {layout.period}")
    c.setAuthor(layout.company_name)
    _draw_layout(c, layout)
    c.showPage()
    c.save()

    logger.debug("Rendered payslip %s (%d bytes)", layout.filename, buffer.tell())
    return buffer.getvalue()


def _ensure_dir(directory: Path):
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(f"Could not create salary directory {directory!s}: {e}")


def generate_and_save_pdf(
    payroll: Any,
    directory: Optional[Path] = None,
    generated_at: Optional[datetime] = None,
) -> Path:
    """
    Render a payslip and save it under its payslip filename.

    Returns the path of the written file. A second call for the same employee
    and period overwrites the earlier file.
    """
    directory = Path(directory or SALARY_SLIP_DIR)
    _ensure_dir(directory)

    content = render_payslip_pdf(payroll, generated_at=generated_at)
    out_path = directory / payslip_filename(payroll)
    try:
        with open(out_path, "wb") as f:
            f.write(content)
    except OSError as e:
        logger.exception("Error writing PDF to disk")
        raise RuntimeError(f"Failed to write PDF to disk ({out_path}): {e}")

    logger.info("Saved payslip PDF -> %s", out_path)
    return out_path
