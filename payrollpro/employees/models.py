# payrollpro/employees/models.py
from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, Text, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from payrollpro.database import Base

EMPLOYEE_STATUSES = ("active", "inactive", "terminated")


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    employees = relationship("Employee", back_populates="department")

    def __repr__(self):
        return f"<Department id={self.id} name={self.name}>"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True)
    employee_code = Column(String(30), nullable=False, unique=True, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(150), nullable=False, unique=True)
    phone = Column(String(20), nullable=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    designation = Column(String(100), nullable=False)
    date_of_joining = Column(Date, nullable=False)

    bank_name = Column(String(100), nullable=True)
    bank_account_number = Column(String(64), nullable=True)
    ifsc_code = Column(String(20), nullable=True)
    pan_number = Column(String(20), nullable=True)
    pf_number = Column(String(50), nullable=True)

    # salary baseline; payroll rows snapshot these at generation time
    basic_salary = Column(Numeric(12, 2), nullable=False, default=0)
    hra = Column(Numeric(12, 2), nullable=False, default=0)
    conveyance_allowance = Column(Numeric(12, 2), nullable=False, default=0)
    medical_allowance = Column(Numeric(12, 2), nullable=False, default=0)
    special_allowance = Column(Numeric(12, 2), nullable=False, default=0)

    status = Column(String(20), nullable=False, default="active")  # active / inactive / terminated
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    department = relationship("Department", back_populates="employees")
    payrolls = relationship("Payroll", back_populates="employee", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Employee id={self.id} code={self.employee_code} name={self.full_name}>"
