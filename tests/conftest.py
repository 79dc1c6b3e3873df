import pytest

from app import create_app
from auth_utils import AuthService, SessionStore, generate_jwt_token
from cases import CaseStore, AdminStore, ConfirmationManager
from services import StudentService, AdminService, SuperAdminService


STUDENT = {"id": "U-1001", "name": "Demo Student", "email": "student@demo.com", "role": "student"}
ADMIN = {"id": "U-2001", "name": "Warden Smith", "email": "admin@demo.com", "role": "admin", "department": "Hostel"}
SUPERADMIN = {"id": "U-3001", "name": "Dr. A. Sharma", "email": "super@demo.com", "role": "superadmin"}


@pytest.fixture
def store():
    """Case store seeded with the demo cases"""
    return CaseStore(seed=True)


@pytest.fixture
def empty_store():
    return CaseStore()


@pytest.fixture
def admin_store(auth):
    return AdminStore(auth)


@pytest.fixture
def confirmations():
    return ConfirmationManager(timeout_minutes=10)


@pytest.fixture
def student_service(store):
    return StudentService(store)


@pytest.fixture
def admin_service(store, confirmations):
    return AdminService(store, confirmations, default_department='Hostel')


@pytest.fixture
def superadmin_service(store, admin_store, confirmations):
    return SuperAdminService(store, admin_store, confirmations)


@pytest.fixture
def auth():
    return AuthService(session=SessionStore(), delay_seconds=0)


@pytest.fixture
def app(store, auth):
    flask_app = create_app(case_store=store, auth_service=auth)
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


def bearer(user):
    token = generate_jwt_token(user['id'], user['email'], user['role'])
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def student_headers():
    return bearer(STUDENT)


@pytest.fixture
def admin_headers():
    return bearer(ADMIN)


@pytest.fixture
def superadmin_headers():
    return bearer(SUPERADMIN)
