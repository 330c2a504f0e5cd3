# payrollpro/payroll/models.py
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Text, Numeric, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from payrollpro.database import Base

PAYMENT_STATUSES = ("pending", "paid", "hold")


class Payroll(Base):
    __tablename__ = "payroll"
    __table_args__ = (
        UniqueConstraint("employee_id", "month", "year", name="uq_payroll_employee_period"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    month = Column(Integer, nullable=False)  # 1..12
    year = Column(Integer, nullable=False)

    basic_salary = Column(Numeric(12, 2), nullable=False, default=0)
    hra = Column(Numeric(12, 2), nullable=False, default=0)
    conveyance_allowance = Column(Numeric(12, 2), nullable=False, default=0)
    medical_allowance = Column(Numeric(12, 2), nullable=False, default=0)
    special_allowance = Column(Numeric(12, 2), nullable=False, default=0)
    overtime_hours = Column(Numeric(8, 2), nullable=False, default=0)
    overtime_amount = Column(Numeric(12, 2), nullable=False, default=0)
    bonus = Column(Numeric(12, 2), nullable=False, default=0)
    gross_salary = Column(Numeric(12, 2), nullable=False, default=0)

    pf_deduction = Column(Numeric(12, 2), nullable=False, default=0)
    income_tax = Column(Numeric(12, 2), nullable=False, default=0)
    other_deductions = Column(Numeric(12, 2), nullable=False, default=0)
    total_deductions = Column(Numeric(12, 2), nullable=False, default=0)

    net_salary = Column(Numeric(12, 2), nullable=False, default=0)

    payment_status = Column(String(20), nullable=False, default="pending")  # pending / paid / hold
    payment_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = relationship("Employee", back_populates="payrolls")

    def __repr__(self):
        return f"<Payroll id={self.id} employee_id={self.employee_id} period={self.year}-{self.month:02d}>"
