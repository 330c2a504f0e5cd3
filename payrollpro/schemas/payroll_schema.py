# payrollpro/schemas/payroll_schema.py
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, computed_field

from payrollpro.schemas.employee_schema import EmployeeOut
from payrollpro.utils.pdf_generator import month_name

PaymentStatus = Literal["pending", "paid", "hold"]


class SalaryComponents(BaseModel):
    """The editable amounts of a payroll form. Totals are always derived server-side."""

    basic_salary: Decimal = Field(Decimal("0"), ge=0)
    hra: Decimal = Field(Decimal("0"), ge=0)
    conveyance_allowance: Decimal = Field(Decimal("0"), ge=0)
    medical_allowance: Decimal = Field(Decimal("0"), ge=0)
    special_allowance: Decimal = Field(Decimal("0"), ge=0)
    overtime_hours: Decimal = Field(Decimal("0"), ge=0)
    overtime_amount: Decimal = Field(Decimal("0"), ge=0)
    bonus: Decimal = Field(Decimal("0"), ge=0)
    pf_deduction: Decimal = Field(Decimal("0"), ge=0)
    income_tax: Decimal = Field(Decimal("0"), ge=0)
    other_deductions: Decimal = Field(Decimal("0"), ge=0)


class SalaryChangesSchema(BaseModel):
    """Edits to some fields of an existing payroll draft; unset fields keep their value."""

    basic_salary: Optional[Decimal] = Field(None, ge=0)
    hra: Optional[Decimal] = Field(None, ge=0)
    conveyance_allowance: Optional[Decimal] = Field(None, ge=0)
    medical_allowance: Optional[Decimal] = Field(None, ge=0)
    special_allowance: Optional[Decimal] = Field(None, ge=0)
    overtime_hours: Optional[Decimal] = Field(None, ge=0)
    overtime_amount: Optional[Decimal] = Field(None, ge=0)
    bonus: Optional[Decimal] = Field(None, ge=0)
    pf_deduction: Optional[Decimal] = Field(None, ge=0)
    income_tax: Optional[Decimal] = Field(None, ge=0)
    other_deductions: Optional[Decimal] = Field(None, ge=0)


class SalaryDraftOut(SalaryComponents):
    employee_id: Optional[int] = None
    gross_salary: Decimal
    total_deductions: Decimal
    net_salary: Decimal


class PayrollCreateSchema(SalaryComponents):
    employee_id: int
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900, le=9999)
    payment_status: PaymentStatus = "pending"
    payment_date: Optional[date] = None
    notes: Optional[str] = None


class PayrollUpdateSchema(PayrollCreateSchema):
    pass


class PayrollStatusSchema(BaseModel):
    payment_status: PaymentStatus
    payment_date: Optional[date] = None


class PeriodSchema(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900, le=9999)


class PayrollOut(SalaryComponents):
    id: int
    employee_id: int
    month: int
    year: int
    gross_salary: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    payment_status: str
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee: Optional[EmployeeOut] = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def period(self) -> str:
        return f"{month_name(self.month)} {self.year}"
