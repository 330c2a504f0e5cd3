# payrollpro/profiles/router.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from payrollpro.auth.dependencies import get_current_profile, linked_employee
from payrollpro.database import get_db
from payrollpro.profiles.models import Profile
from payrollpro.schemas.auth_schema import ProfileOut, ProfileUpdateSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


def _profile_out(db: Session, profile: Profile) -> ProfileOut:
    employee = linked_employee(db, profile)
    return ProfileOut(
        id=profile.id,
        full_name=profile.full_name,
        email=profile.email,
        avatar_url=profile.avatar_url,
        role=profile.role,
        employee_id=employee.id if employee else None,
    )


@router.get("", response_model=ProfileOut)
def read_profile(profile: Profile = Depends(get_current_profile), db: Session = Depends(get_db)):
    return _profile_out(db, profile)


@router.put("", response_model=ProfileOut)
def update_profile(
    payload: ProfileUpdateSchema,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True)
    if "full_name" in changes:
        if not changes["full_name"]:
            raise HTTPException(status_code=422, detail="Full name cannot be empty")
        profile.full_name = changes["full_name"].strip()
    if "avatar_url" in changes:
        profile.avatar_url = changes["avatar_url"]
    db.commit()
    db.refresh(profile)
    logger.info("Profile updated: user_id=%s", profile.id)
    return _profile_out(db, profile)
