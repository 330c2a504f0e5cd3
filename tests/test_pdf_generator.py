from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from payrollpro.utils import pdf_generator
from payrollpro.utils.pdf_generator import (
    build_payslip_layout,
    format_currency,
    format_date,
    generate_and_save_pdf,
    mask_account_number,
    month_name,
    payslip_filename,
    render_payslip_pdf,
)


def make_payroll(employee="default", **overrides):
    if employee == "default":
        employee = SimpleNamespace(
            full_name="Ravi Kumar",
            employee_code="EMP001",
            designation="Software Engineer",
            department=SimpleNamespace(name="Engineering"),
            pan_number="ABCDE1234F",
            pf_number="MH/BAN/0001234",
            bank_name="HDFC Bank",
            bank_account_number="1234567890",
        )
    data = dict(
        month=3,
        year=2024,
        basic_salary=Decimal("30000"),
        hra=Decimal("12000"),
        conveyance_allowance=Decimal("1600"),
        medical_allowance=Decimal("1250"),
        special_allowance=Decimal("5000"),
        overtime_amount=Decimal("0"),
        bonus=Decimal("0"),
        gross_salary=Decimal("49850"),
        pf_deduction=Decimal("3600"),
        income_tax=Decimal("2000"),
        other_deductions=Decimal("0"),
        total_deductions=Decimal("5600"),
        net_salary=Decimal("44250"),
        payment_date=date(2024, 4, 1),
        employee=employee,
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def test_month_names():
    assert month_name(1) == "January"
    assert month_name(12) == "December"


@pytest.mark.parametrize("bad", [0, 13, -1, None, "x"])
def test_month_out_of_range_is_an_error(bad):
    with pytest.raises(ValueError):
        month_name(bad)


@pytest.mark.parametrize("amount,expected", [
    (0, "₹0"),
    (999, "₹999"),
    (1000, "₹1,000"),
    (49850, "₹49,850"),
    (123456, "₹1,23,456"),
    (12345678, "₹1,23,45,678"),
    (Decimal("1499.5"), "₹1,500"),
    (Decimal("1499.49"), "₹1,499"),
    (-5600, "-₹5,600"),
    (Decimal("-0.4"), "-₹0"),
    (Decimal("-0.5"), "-₹1"),
])
def test_currency_uses_indian_grouping(amount, expected):
    assert format_currency(amount) == expected


def test_currency_symbol_is_configurable():
    assert format_currency(44250, symbol="Rs. ") == "Rs. 44,250"


def test_account_number_masking():
    assert mask_account_number("1234567890") == "****7890"
    assert mask_account_number(None) == "Not provided"
    assert mask_account_number("") == "Not provided"


def test_format_date():
    assert format_date(date(2024, 4, 1)) == "1/4/2024"
    assert format_date("2024-12-25") == "25/12/2024"
    assert format_date(None) is None


def test_filename_encodes_code_month_and_year():
    assert payslip_filename(make_payroll()) == "Payslip_EMP001_March_2024.pdf"


def test_layout_sections():
    layout = build_payslip_layout(make_payroll(), generated_at=datetime(2024, 4, 2, 10, 0))

    assert layout.title == "SALARY PAYSLIP"
    assert layout.period == "March 2024"
    assert layout.details[0] == ("Employee Name", "Ravi Kumar", "Employee Code", "EMP001")
    assert layout.details[1][3] == "Engineering"
    assert layout.details[3][3] == "****7890"
    assert [label for label, _ in layout.earnings] == [
        "Basic Salary", "HRA", "Conveyance Allowance", "Medical Allowance",
        "Special Allowance", "Overtime", "Bonus",
    ]
    assert [label for label, _ in layout.deductions] == [
        "Provident Fund (PF)", "Income Tax", "Other Deductions",
    ]
    assert layout.gross_salary == "Rs. 49,850"
    assert layout.total_deductions == "Rs. 5,600"
    assert layout.net_salary == "Rs. 44,250"
    assert layout.payment_date == "1/4/2024"
    assert layout.generated_on == "2/4/2024"
    assert "No signature required" in layout.disclaimer


def test_layout_trusts_stored_totals():
    # stored totals are rendered as they are, even when they disagree with the components
    layout = build_payslip_layout(make_payroll(net_salary=Decimal("1")))
    assert layout.net_salary == "Rs. 1"


def test_negative_net_is_rendered_as_is():
    layout = build_payslip_layout(make_payroll(net_salary=Decimal("-1500")))
    assert layout.net_salary == "-Rs. 1,500"


def test_missing_department_and_bank_use_placeholders():
    employee = SimpleNamespace(
        full_name="Asha Rao", employee_code="EMP002", designation="Analyst",
        department=None, pan_number=None, pf_number=None,
        bank_name=None, bank_account_number=None,
    )
    layout = build_payslip_layout(make_payroll(employee=employee, payment_date=None))

    assert layout.details[1] == ("Designation", "Analyst", "Department", "Not Assigned")
    assert layout.details[2] == ("PAN Number", "N/A", "PF Number", "N/A")
    assert layout.details[3] == ("Bank Name", "Not provided", "Account Number", "Not provided")
    assert layout.payment_date is None


def test_missing_employee_renders_with_na_everywhere():
    payroll = make_payroll(employee=None)
    layout = build_payslip_layout(payroll)
    for row in layout.details:
        assert row[1] == "N/A" and row[3] == "N/A"
    assert layout.filename == "Payslip_N_A_March_2024.pdf"
    assert render_payslip_pdf(payroll).startswith(b"%PDF")


def test_rendering_is_repeatable_apart_from_timestamp():
    payroll = make_payroll()
    first = build_payslip_layout(payroll, generated_at=datetime(2024, 4, 2))
    second = build_payslip_layout(payroll, generated_at=datetime(2025, 1, 1))
    assert first.model_dump(exclude={"generated_on"}) == second.model_dump(exclude={"generated_on"})
    assert first.generated_on != second.generated_on


def test_dict_records_are_accepted():
    payroll = vars(make_payroll()).copy()
    payroll["employee"] = None
    assert build_payslip_layout(payroll).period == "March 2024"


def test_missing_payroll_is_a_programming_error():
    with pytest.raises(ValueError):
        build_payslip_layout(None)


def test_render_returns_single_page_pdf():
    content = render_payslip_pdf(make_payroll())
    assert content.startswith(b"%PDF")
    assert b"/Count 1" in content


def test_generate_and_save_pdf_writes_named_file(tmp_path):
    path = generate_and_save_pdf(make_payroll(), directory=tmp_path)
    assert path == tmp_path / "Payslip_EMP001_March_2024.pdf"
    assert path.read_bytes().startswith(b"%PDF")


def test_generate_and_save_pdf_defaults_to_salary_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(pdf_generator, "SALARY_SLIP_DIR", tmp_path / "slips")
    path = generate_and_save_pdf(make_payroll())
    assert path.parent == tmp_path / "slips"
    assert path.exists()


def test_summary_amounts_are_placed_like_the_web_payslip(monkeypatch):
    drawn = []
    original = pdf_generator.canvas.Canvas.drawString

    def recording_draw_string(self, x, y, text, *args, **kwargs):
        drawn.append((x, text))
        return original(self, x, y, text, *args, **kwargs)

    monkeypatch.setattr(pdf_generator.canvas.Canvas, "drawString", recording_draw_string)
    render_payslip_pdf(make_payroll())

    net = format_currency(Decimal("44250"), symbol="Rs. ")
    assert (155 * pdf_generator.mm, net) in drawn
