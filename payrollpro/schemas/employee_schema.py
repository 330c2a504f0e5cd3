# payrollpro/schemas/employee_schema.py
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

EmployeeStatus = Literal["active", "inactive", "terminated"]

REQUIRED_EMPLOYEE_FIELDS = frozenset({
    "employee_code", "full_name", "email", "designation", "date_of_joining",
    "basic_salary", "hra", "conveyance_allowance", "medical_allowance", "special_allowance", "status",
})


class DepartmentCreateSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class DepartmentUpdateSchema(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, v):
        if v is None:
            raise ValueError("Department name cannot be null")
        return v


class DepartmentOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EmployeeBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    department_id: Optional[int] = None
    designation: str = Field(..., min_length=1, max_length=100)
    date_of_joining: date
    bank_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    pan_number: Optional[str] = None
    pf_number: Optional[str] = None
    basic_salary: Decimal = Field(Decimal("0"), ge=0)
    hra: Decimal = Field(Decimal("0"), ge=0)
    conveyance_allowance: Decimal = Field(Decimal("0"), ge=0)
    medical_allowance: Decimal = Field(Decimal("0"), ge=0)
    special_allowance: Decimal = Field(Decimal("0"), ge=0)
    status: EmployeeStatus = "active"


class EmployeeCreateSchema(EmployeeBase):
    employee_code: str = Field(..., min_length=1, max_length=30)


class EmployeeUpdateSchema(BaseModel):
    employee_code: Optional[str] = Field(None, min_length=1, max_length=30)
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    department_id: Optional[int] = None
    designation: Optional[str] = Field(None, min_length=1, max_length=100)
    date_of_joining: Optional[date] = None
    bank_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    pan_number: Optional[str] = None
    pf_number: Optional[str] = None
    basic_salary: Optional[Decimal] = Field(None, ge=0)
    hra: Optional[Decimal] = Field(None, ge=0)
    conveyance_allowance: Optional[Decimal] = Field(None, ge=0)
    medical_allowance: Optional[Decimal] = Field(None, ge=0)
    special_allowance: Optional[Decimal] = Field(None, ge=0)
    status: Optional[EmployeeStatus] = None

    @model_validator(mode="after")
    def _required_columns_not_null(self):
        # omitted fields are left alone; an explicit null cannot clear a required column
        cleared = sorted(
            name for name in self.model_fields_set
            if name in REQUIRED_EMPLOYEE_FIELDS and getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


class EmployeeOut(EmployeeCreateSchema):
    id: int
    user_id: Optional[int] = None
    email: str
    department: Optional[DepartmentOut] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
