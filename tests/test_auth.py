from fastapi.testclient import TestClient

from payrollpro.main import app
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD, make_employee, make_profile

client = TestClient(app)


def test_read_root():
    res = client.get("/")
    assert res.status_code == 200
    assert res.json()["message"] == "PayrollPro running!"


def test_signup_creates_employee_role_and_links_employee(db):
    emp = make_employee(db, email="new.hire@example.com")
    c = TestClient(app)
    res = c.post("/auth/signup", json={
        "full_name": "New Hire", "email": "New.Hire@example.com", "password": "secret1",
    })
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["role"] == "employee"

    me = c.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}).json()
    assert me["email"] == "new.hire@example.com"
    assert me["role"] == "employee"
    assert me["employee_id"] == emp.id


def test_duplicate_signup_is_rejected():
    payload = {"full_name": "A", "email": "a@example.com", "password": "secret1"}
    assert client.post("/auth/signup", json=payload).status_code == 201
    assert client.post("/auth/signup", json=payload).status_code == 409


def test_login_with_wrong_password(db):
    make_profile(db, ADMIN_EMAIL, ADMIN_PASSWORD, "Alice Admin", role="admin")
    res = TestClient(app).post("/auth/login", data={"email": ADMIN_EMAIL, "password": "nope"})
    assert res.status_code == 401


def test_session_cookie_login_and_logout(db):
    make_profile(db, ADMIN_EMAIL, ADMIN_PASSWORD, "Alice Admin", role="admin")
    c = TestClient(app)
    res = c.post("/auth/login", data={"email": ADMIN_EMAIL.upper(), "password": ADMIN_PASSWORD})
    assert res.status_code == 200
    assert res.json()["role"] == "admin"

    # no Authorization header: the cookies carry the login
    assert c.get("/auth/me").json()["role"] == "admin"

    assert c.post("/auth/logout").status_code == 200
    assert c.get("/auth/me").status_code == 401


def test_invalid_bearer_token_is_unauthorized():
    res = TestClient(app).get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


def test_profile_update(employee_client):
    res = employee_client.put("/profile", json={"full_name": "Ravi K."})
    assert res.status_code == 200
    assert res.json()["full_name"] == "Ravi K."
    assert employee_client.get("/profile").json()["full_name"] == "Ravi K."


def test_employee_cannot_reach_admin_routes(employee_client):
    assert employee_client.get("/api/employees").status_code == 403
    assert employee_client.get("/api/dashboard/stats").status_code == 403
    assert employee_client.post("/api/payroll/generate", json={"month": 1, "year": 2024}).status_code == 403


def test_create_admin_script_grants_admin_role(db):
    from payrollpro.create_admin import create_admin

    make_profile(db, "boss@example.com", "oldpass", "Boss")
    create_admin("boss@example.com", "Boss", "bosspass")

    c = TestClient(app)
    res = c.post("/auth/login", data={"email": "boss@example.com", "password": "bosspass"})
    assert res.status_code == 200
    assert res.json()["role"] == "admin"
