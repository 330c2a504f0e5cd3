# payrollpro/schemas/auth_schema.py
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class SignupSchema(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)


class ProfileOut(BaseModel):
    id: int
    full_name: str
    email: str
    avatar_url: Optional[str] = None
    role: str
    employee_id: Optional[int] = None


class ProfileUpdateSchema(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar_url: Optional[str] = None
