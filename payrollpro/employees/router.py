# payrollpro/employees/router.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from payrollpro.auth.dependencies import Caller, admin_required
from payrollpro.database import get_db
from payrollpro.employees.models import Department, Employee, EMPLOYEE_STATUSES
from payrollpro.schemas.employee_schema import (
    DepartmentCreateSchema,
    DepartmentOut,
    DepartmentUpdateSchema,
    EmployeeCreateSchema,
    EmployeeOut,
    EmployeeUpdateSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["employees"])


def _commit_or_conflict(db: Session, detail: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=detail)


def _get_employee_or_404(db: Session, emp_id: int) -> Employee:
    emp = (
        db.query(Employee)
        .options(joinedload(Employee.department))
        .filter(Employee.id == emp_id)
        .first()
    )
    if not emp:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


def _check_department(db: Session, department_id: Optional[int]):
    if department_id is not None and db.get(Department, department_id) is None:
        raise HTTPException(status_code=404, detail="Department not found")


# ----------------- Departments -----------------

@router.get("/departments", response_model=List[DepartmentOut])
def list_departments(db: Session = Depends(get_db), _: Caller = Depends(admin_required)):
    return db.query(Department).order_by(Department.name).all()


@router.post("/departments", response_model=DepartmentOut, status_code=201)
def create_department(
    payload: DepartmentCreateSchema,
    db: Session = Depends(get_db),
    _: Caller = Depends(admin_required),
):
    dept = Department(name=payload.name.strip(), description=payload.description)
    db.add(dept)
    _commit_or_conflict(db, "Department name already exists")
    db.refresh(dept)
    logger.info("Department created: id=%s name=%s", dept.id, dept.name)
    return dept


@router.put("/departments/{dept_id}", response_model=DepartmentOut)
def update_department(
    dept_id: int,
    payload: DepartmentUpdateSchema,
    db: Session = Depends(get_db),
    _: Caller = Depends(admin_required),
):
    dept = db.get(Department, dept_id)
    if not dept:
        raise HTTPException(status_code=404, detail="Department not found")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(dept, field, value)
    _commit_or_conflict(db, "Department name already exists")
    db.refresh(dept)
    return dept


@router.delete("/departments/{dept_id}")
def delete_department(dept_id: int, db: Session = Depends(get_db), _: Caller = Depends(admin_required)):
    dept = db.get(Department, dept_id)
    if not dept:
        raise HTTPException(status_code=404, detail="Department not found")
    # employees stay, just unassigned
    db.query(Employee).filter(Employee.department_id == dept_id).update({Employee.department_id: None})
    db.delete(dept)
    db.commit()
    logger.info("Department deleted: id=%s", dept_id)
    return {"status": "deleted"}


# ----------------- Employees -----------------

@router.get("/employees", response_model=List[EmployeeOut])
def list_employees(
    status: Optional[str] = Query(None),
    department_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    _: Caller = Depends(admin_required),
):
    q = db.query(Employee).options(joinedload(Employee.department))
    if status:
        if status not in EMPLOYEE_STATUSES:
            raise HTTPException(status_code=400, detail=f"Invalid status: {status}")
        q = q.filter(Employee.status == status)
    if department_id is not None:
        q = q.filter(Employee.department_id == department_id)
    if search:
        like = f"%{search.strip().lower()}%"
        q = q.filter(or_(Employee.full_name.ilike(like), Employee.employee_code.ilike(like)))
    return q.order_by(Employee.created_at.desc(), Employee.id.desc()).all()


@router.post("/employees", response_model=EmployeeOut, status_code=201)
def create_employee(
    payload: EmployeeCreateSchema,
    db: Session = Depends(get_db),
    _: Caller = Depends(admin_required),
):
    _check_department(db, payload.department_id)
    data = payload.model_dump()
    data["email"] = data["email"].lower()
    emp = Employee(**data)
    db.add(emp)
    _commit_or_conflict(db, "Employee code or email already exists")
    logger.info("Employee created: id=%s code=%s", emp.id, emp.employee_code)
    return _get_employee_or_404(db, emp.id)


@router.get("/employees/{emp_id}", response_model=EmployeeOut)
def get_employee(emp_id: int, db: Session = Depends(get_db), _: Caller = Depends(admin_required)):
    return _get_employee_or_404(db, emp_id)


@router.put("/employees/{emp_id}", response_model=EmployeeOut)
def update_employee(
    emp_id: int,
    payload: EmployeeUpdateSchema,
    db: Session = Depends(get_db),
    _: Caller = Depends(admin_required),
):
    emp = _get_employee_or_404(db, emp_id)
    changes = payload.model_dump(exclude_unset=True)
    if "department_id" in changes:
        _check_department(db, changes["department_id"])
    if changes.get("email"):
        changes["email"] = changes["email"].lower()
    for field, value in changes.items():
        setattr(emp, field, value)
    _commit_or_conflict(db, "Employee code or email already exists")
    logger.info("Employee updated: id=%s fields=%s", emp_id, sorted(changes))
    return _get_employee_or_404(db, emp_id)


@router.delete("/employees/{emp_id}")
def delete_employee(emp_id: int, db: Session = Depends(get_db), _: Caller = Depends(admin_required)):
    emp = _get_employee_or_404(db, emp_id)
    db.delete(emp)
    db.commit()
    logger.info("Employee deleted: id=%s", emp_id)
    return {"status": "deleted"}
