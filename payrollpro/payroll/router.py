# payrollpro/payroll/router.py
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from payrollpro.auth.dependencies import Caller, admin_required, get_current_user
from payrollpro.database import get_db
from payrollpro.employees.models import Employee
from payrollpro.payroll import queries
from payrollpro.payroll.calculator import SalaryDraft
from payrollpro.payroll.models import Payroll, PAYMENT_STATUSES
from payrollpro.schemas.payroll_schema import (
    PayrollCreateSchema,
    PayrollOut,
    PayrollStatusSchema,
    PayrollUpdateSchema,
    PeriodSchema,
    SalaryChangesSchema,
    SalaryComponents,
    SalaryDraftOut,
)
from payrollpro.utils.pdf_generator import generate_and_save_pdf, payslip_filename, render_payslip_pdf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payroll", tags=["payroll"])

SALARY_FIELDS = set(SalaryComponents.model_fields)


# -------------------- helpers --------------------
def _draft_out(draft: SalaryDraft, employee_id: Optional[int] = None) -> SalaryDraftOut:
    return SalaryDraftOut(employee_id=employee_id, **draft.as_record())


def _get_employee_or_404(db: Session, employee_id: int) -> Employee:
    employee = db.get(Employee, employee_id)
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee


def _get_payroll_or_404(db: Session, caller: Caller, payroll_id: int) -> Payroll:
    payroll = queries.get_payroll(db, caller, payroll_id)
    if not payroll:
        raise HTTPException(status_code=404, detail="Payroll not found")
    return payroll


def _ensure_free_period(db: Session, employee_id: int, month: int, year: int, exclude_id: Optional[int] = None):
    if queries.find_period_duplicate(db, employee_id, month, year, exclude_id=exclude_id):
        raise HTTPException(
            status_code=409,
            detail=f"Payroll already exists for this employee for {month:02d}/{year}",
        )


def _commit(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Payroll already exists for this employee and period")


def _apply(payroll: Payroll, payload: PayrollCreateSchema):
    # totals are always derived from the submitted components, never taken from the client
    draft = SalaryDraft(**payload.model_dump(include=SALARY_FIELDS))
    for field, value in draft.as_record().items():
        setattr(payroll, field, value)
    payroll.employee_id = payload.employee_id
    payroll.month = payload.month
    payroll.year = payload.year
    payroll.payment_status = payload.payment_status
    payroll.payment_date = payload.payment_date
    payroll.notes = payload.notes or None


# -------------------- listing --------------------
@router.get("", response_model=List[PayrollOut])
def list_payroll(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    employee_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    if status and status not in PAYMENT_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status: {status}")
    return queries.list_payrolls(
        db, caller, month=month, year=year, status=status, employee_id=employee_id, search=search
    )


# -------------------- drafts / calculation --------------------
@router.get("/draft/{employee_id}", response_model=SalaryDraftOut)
def payroll_draft(employee_id: int, db: Session = Depends(get_db), _: Caller = Depends(admin_required)):
    """Prefilled salary form for an employee: baseline components plus 12% PF."""
    employee = _get_employee_or_404(db, employee_id)
    return _draft_out(SalaryDraft.from_employee(employee), employee_id=employee.id)


@router.post("/calculate", response_model=SalaryDraftOut)
def calculate(payload: SalaryComponents, _: Caller = Depends(admin_required)):
    return _draft_out(SalaryDraft(**payload.model_dump()))


@router.get("/{payroll_id}/draft", response_model=SalaryDraftOut)
def payroll_edit_draft(payroll_id: int, db: Session = Depends(get_db), caller: Caller = Depends(admin_required)):
    """The stored figures of an existing payroll, loaded back into the salary form."""
    payroll = _get_payroll_or_404(db, caller, payroll_id)
    return _draft_out(SalaryDraft.from_payroll(payroll), employee_id=payroll.employee_id)


@router.post("/{payroll_id}/draft", response_model=SalaryDraftOut)
def recalculate_edit_draft(
    payroll_id: int,
    payload: SalaryChangesSchema,
    db: Session = Depends(get_db),
    caller: Caller = Depends(admin_required),
):
    """Totals for an existing payroll with some fields changed. Nothing is saved."""
    payroll = _get_payroll_or_404(db, caller, payroll_id)
    draft = SalaryDraft.from_payroll(payroll).update(**payload.model_dump(exclude_unset=True))
    return _draft_out(draft, employee_id=payroll.employee_id)


# -------------------- writes --------------------
@router.post("", response_model=PayrollOut, status_code=201)
def create_payroll(
    payload: PayrollCreateSchema,
    db: Session = Depends(get_db),
    caller: Caller = Depends(admin_required),
):
    _get_employee_or_404(db, payload.employee_id)
    _ensure_free_period(db, payload.employee_id, payload.month, payload.year)

    payroll = Payroll()
    _apply(payroll, payload)
    db.add(payroll)
    _commit(db)
    logger.info(
        "Payroll created: id=%s employee_id=%s period=%s-%02d net=%s",
        payroll.id, payroll.employee_id, payroll.year, payroll.month, payroll.net_salary,
    )
    return _get_payroll_or_404(db, caller, payroll.id)


@router.put("/{payroll_id}", response_model=PayrollOut)
def update_payroll(
    payroll_id: int,
    payload: PayrollUpdateSchema,
    db: Session = Depends(get_db),
    caller: Caller = Depends(admin_required),
):
    payroll = _get_payroll_or_404(db, caller, payroll_id)
    _get_employee_or_404(db, payload.employee_id)
    _ensure_free_period(db, payload.employee_id, payload.month, payload.year, exclude_id=payroll_id)

    _apply(payroll, payload)
    _commit(db)
    logger.info("Payroll updated: id=%s net=%s", payroll_id, payroll.net_salary)
    return _get_payroll_or_404(db, caller, payroll_id)


@router.patch("/{payroll_id}/status", response_model=PayrollOut)
def change_status(
    payroll_id: int,
    payload: PayrollStatusSchema,
    db: Session = Depends(get_db),
    caller: Caller = Depends(admin_required),
):
    payroll = _get_payroll_or_404(db, caller, payroll_id)
    payroll.payment_status = payload.payment_status
    if payload.payment_date is not None:
        payroll.payment_date = payload.payment_date
    elif payload.payment_status == "paid":
        payroll.payment_date = date.today()
    db.commit()
    logger.info("Payroll status: id=%s -> %s", payroll_id, payload.payment_status)
    return _get_payroll_or_404(db, caller, payroll_id)


@router.delete("/{payroll_id}")
def delete_payroll(payroll_id: int, db: Session = Depends(get_db), caller: Caller = Depends(admin_required)):
    payroll = _get_payroll_or_404(db, caller, payroll_id)
    db.delete(payroll)
    db.commit()
    logger.info("Payroll deleted: id=%s", payroll_id)
    return {"status": "deleted"}


@router.post("/generate")
def generate_for_month(
    payload: PeriodSchema,
    db: Session = Depends(get_db),
    _: Caller = Depends(admin_required),
):
    """
    Create pending payroll rows for every active employee from their current
    baseline (default PF, no overtime/bonus/tax). Employees that already have a
    payroll for the period are skipped.
    """
    employees = db.query(Employee).filter(Employee.status == "active").order_by(Employee.id).all()
    created, skipped = [], []
    for emp in employees:
        if queries.find_period_duplicate(db, emp.id, payload.month, payload.year):
            skipped.append(emp.id)
            continue
        draft = SalaryDraft.from_employee(emp)
        payroll = Payroll(
            employee_id=emp.id,
            month=payload.month,
            year=payload.year,
            payment_status="pending",
            **draft.as_record(),
        )
        db.add(payroll)
        db.flush()
        created.append(payroll.id)
    _commit(db)
    logger.info(
        "Generated payroll for %s-%02d: created=%d skipped=%d",
        payload.year, payload.month, len(created), len(skipped),
    )
    return {"created": created, "skipped_employee_ids": skipped}


# -------------------- payslips --------------------
@router.get("/{payroll_id}/payslip")
def download_payslip(
    payroll_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    # employees only reach their own rows; anything else is a 404
    payroll = _get_payroll_or_404(db, caller, payroll_id)
    if payroll.payment_status != "paid":
        raise HTTPException(status_code=409, detail="Payslip is available only once the payroll is paid")
    content = render_payslip_pdf(payroll)
    filename = payslip_filename(payroll)
    logger.info("Payslip download: payroll_id=%s by user_id=%s", payroll_id, caller.user_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/payslips/archive")
def archive_payslips(
    payload: PeriodSchema,
    db: Session = Depends(get_db),
    caller: Caller = Depends(admin_required),
):
    """Write the payslip PDF of every paid payroll in the period to the salary slip directory."""
    rows = queries.list_payrolls(db, caller, month=payload.month, year=payload.year, status="paid")
    saved = []
    for payroll in rows:
        try:
            path = generate_and_save_pdf(payroll)
        except RuntimeError as e:
            logger.exception("Archiving payslip failed for payroll_id=%s", payroll.id)
            raise HTTPException(status_code=500, detail=str(e))
        saved.append(path.name)
    logger.info("Archived %d payslips for %s-%02d", len(saved), payload.year, payload.month)
    return {"files": saved}
