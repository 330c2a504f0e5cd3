# payrollpro/auth/login.py
import logging

from fastapi import APIRouter, Form, Request, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy import func
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash

from payrollpro.auth.jwt_handler import create_access_token
from payrollpro.config import ACCESS_TOKEN_EXPIRE_MINUTES
from payrollpro.database import get_db
from payrollpro.profiles.models import Profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def start_session(request: Request, profile: Profile) -> JSONResponse:
    """Issue a JWT for the profile, store it in the server session and a cookie."""
    role = profile.role
    token = create_access_token({"sub": str(profile.id), "user_id": profile.id, "role": role})

    request.session["user_id"] = profile.id
    request.session["role"] = role
    request.session["name"] = profile.full_name

    resp = JSONResponse({
        "access_token": token,
        "token_type": "bearer",
        "expires_in": ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "role": role,
        "name": profile.full_name,
    })
    resp.set_cookie(
        "session_token",
        token,
        httponly=True,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return resp


@router.post("/login")
def login_post(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    email = (email or "").strip().lower()
    profile = db.query(Profile).filter(func.lower(Profile.email) == email).first()

    if not profile or not profile.password_hash or not check_password_hash(profile.password_hash, password):
        logger.warning("Failed login for %s", email)
        raise HTTPException(status_code=401, detail="Invalid email or password.")

    logger.info("Login ok: user_id=%s role=%s", profile.id, profile.role)
    return start_session(request, profile)
