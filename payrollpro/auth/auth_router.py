# payrollpro/auth/auth_router.py
from fastapi import APIRouter

from payrollpro.auth.login import router as login_router
from payrollpro.auth.signup import router as signup_router
from payrollpro.auth.logout import router as logout_router
from payrollpro.auth.me import router as me_router

# All auth routes live under /auth (prefix set on each router)
auth_router = APIRouter()

auth_router.include_router(login_router)
auth_router.include_router(signup_router)
auth_router.include_router(logout_router)
auth_router.include_router(me_router)
