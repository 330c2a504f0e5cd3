# payrollpro/auth/me.py
from fastapi import APIRouter, Depends

from payrollpro.auth.dependencies import Caller, get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
def read_me(caller: Caller = Depends(get_current_user)):
    return {
        "id": caller.user_id,
        "full_name": caller.full_name,
        "email": caller.email,
        "role": caller.role,
        "employee_id": caller.employee_id,
    }
