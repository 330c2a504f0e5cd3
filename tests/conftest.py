import os
from datetime import date
from decimal import Decimal

# must be set before payrollpro is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["PAYSLIP_CURRENCY_SYMBOL"] = "Rs. "
os.environ["COMPANY_NAME"] = "PayrollPro"

import pytest
from fastapi.testclient import TestClient
from werkzeug.security import generate_password_hash

from payrollpro.database import Base, SessionLocal, engine, init_db
from payrollpro.employees.models import Department, Employee
from payrollpro.main import app
from payrollpro.profiles.models import Profile, UserRole

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "adminpass"
EMP_EMAIL = "ravi@example.com"
EMP_PASSWORD = "emppass"


@pytest.fixture(autouse=True)
def _fresh_database():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def make_profile(db, email, password, full_name, role="employee"):
    profile = Profile(full_name=full_name, email=email, password_hash=generate_password_hash(password))
    profile.roles.append(UserRole(role=role))
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def make_employee(db, code="EMP001", email=EMP_EMAIL, department=None, **overrides):
    data = dict(
        employee_code=code,
        full_name="Ravi Kumar",
        email=email,
        designation="Software Engineer",
        date_of_joining=date(2022, 4, 1),
        basic_salary=Decimal("30000"),
        hra=Decimal("12000"),
        conveyance_allowance=Decimal("1600"),
        medical_allowance=Decimal("1250"),
        special_allowance=Decimal("5000"),
        status="active",
    )
    data.update(overrides)
    emp = Employee(**data)
    if department is not None:
        emp.department = department
    db.add(emp)
    db.commit()
    db.refresh(emp)
    return emp


def make_department(db, name="Engineering"):
    dept = Department(name=name, description=f"{name} team")
    db.add(dept)
    db.commit()
    db.refresh(dept)
    return dept


def login(client, email, password):
    res = client.post("/auth/login", data={"email": email, "password": password})
    assert res.status_code == 200, res.text
    client.headers.update({"Authorization": f"Bearer {res.json()['access_token']}"})
    return client


@pytest.fixture
def admin_client(db):
    make_profile(db, ADMIN_EMAIL, ADMIN_PASSWORD, "Alice Admin", role="admin")
    return login(TestClient(app), ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def employee(db):
    return make_employee(db, department=make_department(db))


@pytest.fixture
def employee_client(db, employee):
    make_profile(db, EMP_EMAIL, EMP_PASSWORD, "Ravi Kumar")
    return login(TestClient(app), EMP_EMAIL, EMP_PASSWORD)
