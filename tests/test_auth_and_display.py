"""
Tests for the session store, mock auth directory and display helpers
"""
import asyncio

import pytest

from auth_utils import (
    SessionStore,
    SESSION_KEY,
    validate_password_change,
    resolve_page_redirect,
    role_home,
    generate_jwt_token,
    decode_jwt_token,
)
from cases.display import (
    priority_weight,
    priority_color,
    status_color,
    sort_by_severity,
    render_thread,
    render_case_detail,
)
from tests.conftest import STUDENT, ADMIN


# =============================================================================
# Session & auth
# =============================================================================

def test_session_store_roundtrip():
    backend = {}
    session = SessionStore(backend)
    session.save({**STUDENT, 'password_hash': 'secret'})
    assert session.get()['id'] == 'U-1001'
    assert 'password_hash' not in backend[SESSION_KEY]
    session.clear()
    assert session.get() is None


def test_login_success(auth):
    result = asyncio.run(auth.login('student@demo.com', 'demo'))
    assert result['success']
    assert result['user']['role'] == 'student'
    assert 'password_hash' not in result['user']
    assert auth.get_current_user()['id'] == 'U-1001'


def test_login_invalid(auth):
    result = asyncio.run(auth.login('student@demo.com', 'wrong'))
    assert not result['success']
    assert result['message'] == 'Invalid credentials'
    assert auth.get_current_user() is None


def test_register_defaults_to_student(auth):
    result = asyncio.run(auth.register({'name': 'New', 'email': 'new@demo.com', 'password': 'secret1'}))
    assert result['success']
    assert result['user']['role'] == 'student'
    assert result['user']['id'].startswith('U-')
    assert auth.get_current_user()['email'] == 'new@demo.com'
    assert asyncio.run(auth.login('new@demo.com', 'secret1'))['success']


@pytest.mark.parametrize("role", ['superadmin', 'admin'])
def test_register_cannot_choose_role(auth, role):
    result = asyncio.run(auth.register({
        'name': 'Sneaky', 'email': 'sneaky@demo.com', 'password': 'secret1', 'role': role
    }))
    assert result['success']
    assert result['user']['role'] == 'student'
    assert auth.find_by_email('sneaky@demo.com')['role'] == 'student'


def test_add_user_creates_staff(auth):
    user, error = auth.add_user(
        {'name': 'Exam Cell', 'email': 'exams@demo.com', 'department': 'Examinations'},
        'secret1', 'admin'
    )
    assert error is None
    assert user['role'] == 'admin'
    assert 'password_hash' in user
    assert asyncio.run(auth.login('exams@demo.com', 'secret1'))['user']['department'] == 'Examinations'


def test_add_user_rejects_unknown_role(auth):
    user, error = auth.add_user({'name': 'X', 'email': 'x@demo.com'}, 'secret1', 'janitor')
    assert user is None
    assert error == 'Invalid role: janitor'


def test_register_duplicate_email(auth):
    result = asyncio.run(auth.register({'name': 'Dup', 'email': 'student@demo.com', 'password': 'secret1'}))
    assert not result['success']
    assert result['message'] == 'Email already exists'
    assert auth.get_current_user() is None


def test_register_short_password(auth):
    result = asyncio.run(auth.register({'name': 'New', 'email': 'x@demo.com', 'password': '123'}))
    assert not result['success']
    assert auth.find_by_email('x@demo.com') is None


def test_logout(auth):
    asyncio.run(auth.login('admin@demo.com', 'demo'))
    auth.logout()
    assert auth.get_current_user() is None


@pytest.mark.parametrize("current,new,confirm,ok", [
    ('', 'abcdef', 'abcdef', False),
    ('demo', 'abcdef', 'abcdeg', False),
    ('demo', 'abc', 'abc', False),
    ('demo', 'abcdef', 'abcdef', True),
])
def test_validate_password_change(current, new, confirm, ok):
    assert validate_password_change(current, new, confirm)[0] is ok


def test_change_password(auth):
    ok, _ = auth.change_password('U-2001', 'demo', 'newpass', 'newpass')
    assert ok
    assert asyncio.run(auth.login('admin@demo.com', 'newpass'))['success']


def test_change_password_wrong_current(auth):
    ok, message = auth.change_password('U-2001', 'nope', 'newpass', 'newpass')
    assert not ok
    assert 'incorrect' in message


def test_page_redirects():
    assert resolve_page_redirect(None, 'student') == 'auth'
    assert resolve_page_redirect(STUDENT, 'student') is None
    assert resolve_page_redirect(STUDENT, 'admin') == 'student_dashboard'
    assert resolve_page_redirect(ADMIN, 'superadmin') == 'normal_admin'
    assert role_home('superadmin') == 'superadmin'


def test_jwt_roundtrip():
    token = generate_jwt_token('U-1001', 'student@demo.com', 'student')
    assert decode_jwt_token(token)['role'] == 'student'
    assert decode_jwt_token(token + 'x') is None


# =============================================================================
# Display helpers
# =============================================================================

def test_priority_weight_order():
    assert priority_weight('Critical') > priority_weight('High') > priority_weight('Medium')
    assert priority_weight('Bogus') == 0


def test_colors():
    assert priority_color('Critical') == 'red'
    assert priority_color('Medium') == 'blue'
    assert status_color('Resolved') == 'green'
    assert status_color('Open') == 'gray'


def test_sort_by_severity(store):
    ordered = sort_by_severity(store.list_all())
    assert [c.priority for c in ordered] == ['Critical', 'Critical', 'High']


def test_render_thread_alignment(store):
    thread = render_thread(store.get_by_id('G-1024').messages, 'Admin')
    assert [m['align'] for m in thread] == ['left', 'right']
    assert [m['initial'] for m in thread] == ['S', 'A']


def test_render_case_detail_placeholder_description(store):
    case = store.create({'subject': 'No details'})
    assert render_case_detail(case, 'Student')['description'] == 'No description provided.'
