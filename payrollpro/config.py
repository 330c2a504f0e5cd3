# payrollpro/config.py
import os
import pathlib

from dotenv import load_dotenv, find_dotenv

ROOT = pathlib.Path(__file__).resolve().parent.parent

# .env in the project root wins; otherwise search upwards from cwd
env_path = ROOT / ".env"
if not env_path.exists():
    env_path = find_dotenv()
load_dotenv(env_path)

BASE_DIR = pathlib.Path(__file__).resolve().parent

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./payrollpro.db")
SQL_ECHO = os.getenv("SQL_ECHO", "0") in ("1", "true", "True")

SESSION_SECRET = os.getenv("SESSION_SECRET", "replace_with_a_strong_secret_here")
JWT_SECRET = os.getenv("JWT_SECRET", SESSION_SECRET)
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES") or 120)

COMPANY_NAME = os.getenv("COMPANY_NAME", "PayrollPro")
COMPANY_TAGLINE = os.getenv("COMPANY_TAGLINE", "Web-Based Payroll Management System")
PAYSLIP_CURRENCY_SYMBOL = os.getenv("PAYSLIP_CURRENCY_SYMBOL", "Rs. ")

SALARY_SLIP_DIR = pathlib.Path(
    os.getenv("SALARY_SLIP_DIR") or BASE_DIR / "static" / "uploads" / "salary_slips"
)

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if o.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
