# payrollpro/payroll/queries.py
"""
Payroll reads, scoped by the caller's role.

Administrators see every payroll row; employees only the rows of their own
employee record (none at all when their profile has no employee linked). The
caller is always passed in; nothing here looks at the request session.
"""
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import false, func, or_
from sqlalchemy.orm import Query, Session, joinedload

from payrollpro.auth.dependencies import Caller
from payrollpro.employees.models import Employee
from payrollpro.payroll.models import Payroll


def scoped_payrolls(db: Session, caller: Caller) -> Query:
    q = db.query(Payroll).options(
        joinedload(Payroll.employee).joinedload(Employee.department)
    )
    if caller.is_admin:
        return q
    if caller.employee_id is None:
        return q.filter(false())
    return q.filter(Payroll.employee_id == caller.employee_id)


def list_payrolls(
    db: Session,
    caller: Caller,
    month: Optional[int] = None,
    year: Optional[int] = None,
    status: Optional[str] = None,
    employee_id: Optional[int] = None,
    search: Optional[str] = None,
) -> List[Payroll]:
    q = scoped_payrolls(db, caller)
    if month is not None:
        q = q.filter(Payroll.month == month)
    if year is not None:
        q = q.filter(Payroll.year == year)
    if status:
        q = q.filter(Payroll.payment_status == status)
    if employee_id is not None:
        q = q.filter(Payroll.employee_id == employee_id)
    if search:
        like = f"%{search.strip().lower()}%"
        q = q.join(Payroll.employee).filter(
            or_(Employee.full_name.ilike(like), Employee.employee_code.ilike(like))
        )
    return q.order_by(Payroll.year.desc(), Payroll.month.desc(), Payroll.id.desc()).all()


def get_payroll(db: Session, caller: Caller, payroll_id: int) -> Optional[Payroll]:
    return scoped_payrolls(db, caller).filter(Payroll.id == payroll_id).first()


def find_period_duplicate(
    db: Session, employee_id: int, month: int, year: int, exclude_id: Optional[int] = None
) -> Optional[Payroll]:
    q = db.query(Payroll).filter(
        Payroll.employee_id == employee_id,
        Payroll.month == month,
        Payroll.year == year,
    )
    if exclude_id is not None:
        q = q.filter(Payroll.id != exclude_id)
    return q.first()


def admin_stats(db: Session) -> dict:
    active = db.query(Employee).filter(Employee.status == "active").count()
    total_payroll = db.query(func.coalesce(func.sum(Payroll.net_salary), 0)).scalar()
    pending = db.query(Payroll).filter(Payroll.payment_status == "pending").count()
    paid = db.query(Payroll).filter(Payroll.payment_status == "paid").count()
    return {
        "total_employees": active,
        "total_payroll": Decimal(str(total_payroll or 0)),
        "pending_payslips": pending,
        "paid_payslips": paid,
    }


def employee_summary(db: Session, caller: Caller, year: Optional[int] = None) -> dict:
    """Totals over the caller's own paid payslips, optionally for one year."""
    rows = []
    if caller.employee_id is not None:
        rows = list_payrolls(db, caller, year=year, status="paid", employee_id=caller.employee_id)
    return {
        "total_earnings": sum((Decimal(str(p.net_salary or 0)) for p in rows), Decimal("0")),
        "total_deductions": sum((Decimal(str(p.total_deductions or 0)) for p in rows), Decimal("0")),
        "paid_payslips": len(rows),
    }
