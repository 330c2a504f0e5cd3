# payrollpro/auth/dependencies.py
import logging
from typing import Dict, Any, Optional, Callable, Iterable

from fastapi import Header, HTTPException, Depends, Request
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from payrollpro.auth.jwt_handler import decode_jwt
from payrollpro.database import get_db
from payrollpro.employees.models import Employee
from payrollpro.profiles.models import Profile

logger = logging.getLogger(__name__)


class Caller(BaseModel):
    """Who is asking: passed explicitly into queries that depend on role."""

    user_id: int
    role: str = "employee"
    full_name: str = ""
    email: str = ""
    employee_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


# -------------------------------------------
# Helper: Extract Bearer token safely
# -------------------------------------------
def _extract_bearer(auth_header: Optional[str]) -> Optional[str]:
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


# -------------------------------------------
# JWT OR Session fallback login
# -------------------------------------------
def get_current_user_payload_or_session(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Dict[str, Any]:
    """
    Tries, in order:
      1) Authorization: Bearer <token>
      2) Cookie named 'session_token' (JWT set by login)
      3) Server-side request.session (SessionMiddleware)
    Returns payload dict or raises 401 if none valid.
    """
    token = _extract_bearer(authorization)
    if token:
        payload = decode_jwt(token)
        if payload:
            logger.debug("Authenticated via JWT header: user_id=%s", payload.get("user_id"))
            return payload
        logger.warning("Invalid/expired header token, falling back to cookie/session...")

    cookie_token = request.cookies.get("session_token")
    if cookie_token:
        payload = decode_jwt(cookie_token)
        if payload:
            logger.debug("Authenticated via JWT cookie: user_id=%s", payload.get("user_id"))
            return payload
        logger.warning("Invalid/expired cookie token, falling back to server session...")

    session_data = request.scope.get("session")
    if session_data and session_data.get("user_id"):
        logger.debug("Authenticated via SERVER SESSION: user_id=%s", session_data["user_id"])
        return {
            "user_id": int(session_data["user_id"]),
            "name": session_data.get("name", ""),
            "role": session_data.get("role", "employee"),
        }

    raise HTTPException(status_code=401, detail="Not authenticated. Please login.")


# -------------------------------------------
# Resolve payload -> real DB profile (single source of truth)
# -------------------------------------------
def get_current_profile(
    payload: Dict[str, Any] = Depends(get_current_user_payload_or_session),
    db: Session = Depends(get_db),
) -> Profile:
    user_id = payload.get("user_id") or payload.get("sub")
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid auth payload: missing user id")
    try:
        uid = int(user_id)
    except (ValueError, TypeError):
        raise HTTPException(status_code=401, detail="Invalid user id in payload")

    profile = db.query(Profile).filter(Profile.id == uid).first()
    if not profile:
        raise HTTPException(status_code=401, detail="User not found")
    return profile


def linked_employee(db: Session, profile: Profile) -> Optional[Employee]:
    """The employee record of a profile: by user_id, else by matching e-mail."""
    employee = db.query(Employee).filter(Employee.user_id == profile.id).first()
    if employee is None:
        employee = db.query(Employee).filter(
            func.lower(Employee.email) == (profile.email or "").lower()
        ).first()
    return employee


def get_current_user(
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
) -> Caller:
    """
    Resolve the caller from the database rather than trusting role/id in the token.
    """
    employee = linked_employee(db, profile)
    caller = Caller(
        user_id=profile.id,
        role=profile.role,
        full_name=profile.full_name or "",
        email=profile.email or "",
        employee_id=employee.id if employee else None,
    )
    logger.debug("get_current_user -> id=%s role=%s employee_id=%s", caller.user_id, caller.role, caller.employee_id)
    return caller


# -------------------------------------------
# Role check that returns the caller
# Usage: Depends(require_role(["admin"]))
# -------------------------------------------
def require_role(allowed_roles: Iterable[str]) -> Callable:
    allowed = [str(r).lower() for r in allowed_roles]

    def dependency(caller: Caller = Depends(get_current_user)) -> Caller:
        if caller.role.lower() not in allowed:
            raise HTTPException(status_code=403, detail="Insufficient role")
        return caller

    return dependency


admin_required = require_role(["admin"])
