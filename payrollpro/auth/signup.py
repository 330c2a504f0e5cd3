# payrollpro/auth/signup.py
import logging

from fastapi import APIRouter, Request, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash

from payrollpro.auth.login import start_session
from payrollpro.database import get_db
from payrollpro.employees.models import Employee
from payrollpro.profiles.models import Profile, UserRole
from payrollpro.schemas.auth_schema import SignupSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=201)
def signup_post(request: Request, payload: SignupSchema, db: Session = Depends(get_db)):
    """
    Register a profile with the employee role and log it in.
    Admin rights are granted with the create_admin script, never through signup.
    """
    email = payload.email.strip().lower()
    if db.query(Profile).filter(func.lower(Profile.email) == email).first():
        raise HTTPException(status_code=409, detail="An account with this email already exists")

    profile = Profile(
        full_name=payload.full_name.strip(),
        email=email,
        password_hash=generate_password_hash(payload.password),
    )
    profile.roles.append(UserRole(role="employee"))
    db.add(profile)
    db.flush()

    # link an existing employee record with the same e-mail
    employee = db.query(Employee).filter(
        func.lower(Employee.email) == email, Employee.user_id.is_(None)
    ).first()
    if employee:
        employee.user_id = profile.id

    db.commit()
    db.refresh(profile)
    logger.info("Signup: user_id=%s linked_employee=%s", profile.id, employee.id if employee else None)

    resp = start_session(request, profile)
    resp.status_code = 201
    return resp
