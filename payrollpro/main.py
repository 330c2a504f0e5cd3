# payrollpro/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from payrollpro.config import CORS_ORIGINS, LOG_LEVEL, SESSION_SECRET
from payrollpro.database import init_db

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s:%(name)s:%(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database ready; %d routes registered", len(app.routes))
    yield


# Create app first, routers are imported after (avoids circular imports)
app = FastAPI(title="PayrollPro", lifespan=lifespan)

from payrollpro.auth.auth_router import auth_router  # noqa: E402
from payrollpro.dashboard_router import router as dashboard_router  # noqa: E402
from payrollpro.employees.router import router as employee_router  # noqa: E402
from payrollpro.payroll.router import router as payroll_router  # noqa: E402
from payrollpro.profiles.router import router as profile_router  # noqa: E402

# -------------------- Middleware --------------------
app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET,
    https_only=False,
    same_site="lax",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/")
def home():
    return {
        "message": "PayrollPro running!",
        "endpoints": {
            "login": "/auth/login",
            "signup": "/auth/signup",
            "profile": "/profile",
            "employees": "/api/employees",
            "departments": "/api/departments",
            "payroll": "/api/payroll",
            "dashboard": "/api/dashboard/stats",
        },
    }


# ------------------- Routers -------------------
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(employee_router, prefix="/api")
app.include_router(payroll_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")
