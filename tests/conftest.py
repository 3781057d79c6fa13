import pytest
from fastapi.testclient import TestClient

from salon_scheduler.main import app
from salon_scheduler.core.database import Base, SessionLocal, engine, get_db, redis_client, init_db
from salon_scheduler.core.security import UserRole, create_access_token
from salon_scheduler.services.auth_service import AuthService

def override_get_db():
    try:
        db = SessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

ADMIN = {"name": "Marta", "email": "marta@example.com", "password": "AdminPass123", "role": UserRole.ADMIN}
EMPLOYEE = {"name": "Ariela", "email": "ariela@example.com", "password": "StaffPass123", "role": UserRole.EMPLOYEE}

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    init_db(engine)
    redis_client.flushall()
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(test_db):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

@pytest.fixture
def users(db_session):
    service = AuthService(db_session)
    return {
        "admin": service.create_user(ADMIN["name"], ADMIN["email"], ADMIN["password"], ADMIN["role"]),
        "employee": service.create_user(EMPLOYEE["name"], EMPLOYEE["email"], EMPLOYEE["password"], EMPLOYEE["role"]),
    }

@pytest.fixture
def admin_headers(users):
    admin = users["admin"]
    token = create_access_token(admin.id, admin.role, email=admin.email)
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def employee_headers(users):
    employee = users["employee"]
    token = create_access_token(employee.id, employee.role, email=employee.email)
    return {"Authorization": f"Bearer {token}"}

def make_draft(**overrides):
    draft = {
        "client": "Lucia Fernandez",
        "phone": "555-0101",
        "service": "Haircut",
        "date": "2025-11-03",
        "time": "14:00",
        "employee": "Ariela",
        "notes": None,
        "price": 25.0,
    }
    draft.update(overrides)
    return draft
