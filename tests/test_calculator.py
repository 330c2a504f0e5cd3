import math
from decimal import Decimal
from types import SimpleNamespace

import pytest

from payrollpro.payroll.calculator import (
    SalaryDraft,
    default_pf_deduction,
    gross_salary,
    net_salary,
    to_amount,
    total_deductions,
)


def test_gross_is_sum_of_seven_earnings():
    assert gross_salary(30000, 12000, 1600, 1250, 5000, 0, 0) == 49850
    assert gross_salary(1, 2, 3, 4, 5, 6, 7) == 28


def test_gross_order_does_not_matter():
    values = [Decimal("100.25"), Decimal("0.5"), Decimal("7"), Decimal("3.25"), Decimal("0"), Decimal("10"), Decimal("1")]
    assert gross_salary(*values) == gross_salary(*reversed(values)) == sum(values)


def test_total_deductions_is_sum_of_three():
    assert total_deductions(3600, 2000, 0) == 5600
    assert total_deductions(Decimal("1.10"), Decimal("2.20"), Decimal("3.30")) == Decimal("6.60")


def test_net_salary_can_be_negative():
    assert net_salary(49850, 5600) == 44250
    assert net_salary(1000, 2500) == -1500


def test_default_pf_is_twelve_percent():
    assert default_pf_deduction(30000) == pytest.approx(3600)
    assert default_pf_deduction(0) == 0
    assert default_pf_deduction(Decimal("30000")) == Decimal("3600.00")
    assert default_pf_deduction(Decimal("12345.67")) == Decimal("1481.48")


def test_nan_propagates_without_sanitizing():
    assert math.isnan(gross_salary(float("nan"), 1, 1, 1, 1, 1, 1))


@pytest.mark.parametrize("raw,expected", [
    (None, Decimal("0")),
    ("", Decimal("0")),
    ("abc", Decimal("0")),
    ("1,250", Decimal("1250")),
    (" 42.5 ", Decimal("42.5")),
    (7, Decimal("7")),
    ("NaN", Decimal("0")),
    ("0.005", Decimal("0.01")),
    (Decimal("1499.994"), Decimal("1499.99")),
    ("1e40", Decimal("0")),
])
def test_to_amount_sanitizes_form_text(raw, expected):
    assert to_amount(raw) == expected


def test_end_to_end_scenario():
    draft = SalaryDraft(
        basic_salary=30000, hra=12000, conveyance_allowance=1600, medical_allowance=1250,
        special_allowance=5000, overtime_amount=0, bonus=0,
        pf_deduction=3600, income_tax=2000, other_deductions=0,
    )
    assert draft.gross_salary == Decimal("49850")
    assert draft.total_deductions == Decimal("5600")
    assert draft.net_salary == Decimal("44250")


def test_draft_from_employee_prefills_pf():
    emp = SimpleNamespace(
        basic_salary=Decimal("30000"), hra=Decimal("12000"), conveyance_allowance=Decimal("1600"),
        medical_allowance=Decimal("1250"), special_allowance=Decimal("5000"),
    )
    draft = SalaryDraft.from_employee(emp)
    assert draft.pf_deduction == Decimal("3600.00")
    assert draft.bonus == 0 and draft.income_tax == 0
    assert draft.net_salary == Decimal("46250")


def test_draft_recalculates_on_every_change():
    draft = SalaryDraft(basic_salary=1000)
    assert draft.gross_salary == 1000

    draft.update(bonus="500", income_tax="not a number")
    assert draft.gross_salary == 1500
    assert draft.income_tax == 0

    draft.pf_deduction = "2000"
    assert draft.net_salary == Decimal("-500")


def test_draft_rejects_unknown_fields():
    with pytest.raises(AttributeError):
        SalaryDraft().update(salary=1)


def test_as_record_contains_components_and_totals():
    record = SalaryDraft(basic_salary=100, pf_deduction=12).as_record()
    assert record["basic_salary"] == 100
    assert record["gross_salary"] == 100
    assert record["total_deductions"] == 12
    assert record["net_salary"] == 88
    assert "overtime_hours" in record


def test_draft_rounds_components_to_paise_before_totalling():
    draft = SalaryDraft(basic_salary="0.005", hra="0.005")
    assert draft.basic_salary == Decimal("0.01")
    assert draft.gross_salary == draft.basic_salary + draft.hra == Decimal("0.02")


def test_draft_from_payroll_reloads_snapshot():
    payroll = SimpleNamespace(
        basic_salary=Decimal("30000.00"), hra=Decimal("12000.00"), conveyance_allowance=Decimal("1600.00"),
        medical_allowance=Decimal("1250.00"), special_allowance=Decimal("5000.00"),
        overtime_hours=Decimal("0"), overtime_amount=Decimal("0"), bonus=Decimal("0"),
        pf_deduction=Decimal("3600.00"), income_tax=Decimal("2000.00"), other_deductions=Decimal("0"),
        gross_salary=Decimal("1"),
    )
    draft = SalaryDraft.from_payroll(payroll)
    assert draft.gross_salary == Decimal("49850")
    assert draft.net_salary == Decimal("44250")
