# payrollpro/dashboard_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from payrollpro.auth.dependencies import Caller, admin_required, get_current_user
from payrollpro.database import get_db
from payrollpro.payroll import queries

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


# -----------------------------
# Admin overview
# -----------------------------
@router.get("/stats")
def admin_stats(db: Session = Depends(get_db), _: Caller = Depends(admin_required)):
    return queries.admin_stats(db)


# -----------------------------
# Employee payslip summary
# -----------------------------
@router.get("/my-summary")
def my_summary(
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    return queries.employee_summary(db, caller, year=year)
