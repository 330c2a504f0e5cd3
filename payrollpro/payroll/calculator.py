# payrollpro/payroll/calculator.py
"""
Salary arithmetic for payroll entries.

The three aggregation functions and ``default_pf_deduction`` are pure: they add
or multiply whatever numbers they are given (Decimal, int or float) and do no
validation. Text coming from a form goes through ``to_amount`` first; the
``SalaryDraft`` does that on every assignment.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict

from pydantic import BaseModel, field_validator

PF_RATE = Decimal("0.12")
CENTS = Decimal("0.01")


def gross_salary(basic, hra, conveyance, medical, special, overtime_amount, bonus):
    return basic + hra + conveyance + medical + special + overtime_amount + bonus


def total_deductions(pf, income_tax, other_deductions):
    return pf + income_tax + other_deductions


def net_salary(gross, deductions):
    # may go negative; callers render it as-is
    return gross - deductions


def default_pf_deduction(basic_salary):
    """12% of basic. Only a suggestion for a new payroll; admins may override it."""
    if isinstance(basic_salary, Decimal):
        return (basic_salary * PF_RATE).quantize(CENTS, rounding=ROUND_HALF_UP)
    return basic_salary * float(PF_RATE)


def to_amount(value: Any) -> Decimal:
    """
    Sanitize form input: None, blanks and unparsable text become zero.
    Amounts are rounded half-up to paise so the totals match the stored columns.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, bool):
        return Decimal("0")
    try:
        if isinstance(value, Decimal):
            amount = value
        else:
            text = str(value).strip().replace(",", "")
            if not text:
                return Decimal("0")
            amount = Decimal(text)
        if not amount.is_finite():
            return Decimal("0")
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return Decimal("0")


class SalaryDraft(BaseModel):
    """Editable salary figures for one payroll form, recalculated on every change."""

    basic_salary: Decimal = Decimal("0")
    hra: Decimal = Decimal("0")
    conveyance_allowance: Decimal = Decimal("0")
    medical_allowance: Decimal = Decimal("0")
    special_allowance: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    overtime_amount: Decimal = Decimal("0")
    bonus: Decimal = Decimal("0")
    pf_deduction: Decimal = Decimal("0")
    income_tax: Decimal = Decimal("0")
    other_deductions: Decimal = Decimal("0")

    model_config = {"validate_assignment": True}

    @field_validator("*", mode="before")
    @classmethod
    def _sanitize(cls, v):
        return to_amount(v)

    @classmethod
    def from_employee(cls, employee) -> "SalaryDraft":
        basic = to_amount(getattr(employee, "basic_salary", 0))
        return cls(
            basic_salary=basic,
            hra=getattr(employee, "hra", 0),
            conveyance_allowance=getattr(employee, "conveyance_allowance", 0),
            medical_allowance=getattr(employee, "medical_allowance", 0),
            special_allowance=getattr(employee, "special_allowance", 0),
            pf_deduction=default_pf_deduction(basic),
        )

    @classmethod
    def from_payroll(cls, payroll) -> "SalaryDraft":
        return cls(**{name: getattr(payroll, name, 0) for name in cls.model_fields})

    def update(self, **changes) -> "SalaryDraft":
        for name, value in changes.items():
            if name not in type(self).model_fields:
                raise AttributeError(f"Unknown salary field: {name}")
            setattr(self, name, value)
        return self

    @property
    def gross_salary(self) -> Decimal:
        return gross_salary(
            self.basic_salary,
            self.hra,
            self.conveyance_allowance,
            self.medical_allowance,
            self.special_allowance,
            self.overtime_amount,
            self.bonus,
        )

    @property
    def total_deductions(self) -> Decimal:
        return total_deductions(self.pf_deduction, self.income_tax, self.other_deductions)

    @property
    def net_salary(self) -> Decimal:
        return net_salary(self.gross_salary, self.total_deductions)

    def totals(self) -> Dict[str, Decimal]:
        return {
            "gross_salary": self.gross_salary,
            "total_deductions": self.total_deductions,
            "net_salary": self.net_salary,
        }

    def as_record(self) -> Dict[str, Decimal]:
        """Component values plus derived totals, ready to store on a Payroll row."""
        data = self.model_dump()
        data.update(self.totals())
        return data
