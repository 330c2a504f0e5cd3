# payrollpro/auth/logout.py
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/logout")
def logout_post(request: Request):
    # clear server-side session and the JWT cookie set by login
    request.session.clear()
    resp = JSONResponse({"status": "logged_out"})
    resp.delete_cookie("session_token", path="/")
    return resp
