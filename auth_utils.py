"""
Authentication utilities for the grievance portal
Handles the session store, mock credential directory, JWT tokens,
password hashing and role-based page redirects
"""
import asyncio
import copy
import jwt
import logging
from datetime import datetime, timedelta
from functools import wraps, lru_cache
from typing import Dict, MutableMapping, Optional, Tuple
from flask import request, jsonify
from werkzeug.security import generate_password_hash, check_password_hash

import config
from cases.case_config import UserRole

logger = logging.getLogger('auth')

SESSION_KEY = 'grievance_session'

# Page each role lands on, and the login page
ROLE_PAGES = {
    UserRole.STUDENT: 'student_dashboard',
    UserRole.ADMIN: 'normal_admin',
    UserRole.SUPERADMIN: 'superadmin',
}
LOGIN_PAGE = 'auth'

DEMO_USERS = [
    {
        "id": "U-1001",
        "name": "Demo Student",
        "email": "student@demo.com",
        "password": "demo",
        "role": UserRole.STUDENT,
        "department": "Computer Science",
        "phone": "+91 98765 43210"
    },
    {
        "id": "U-2001",
        "name": "Warden Smith",
        "email": "admin@demo.com",
        "password": "demo",
        "role": UserRole.ADMIN,
        "department": "Hostel"
    },
    {
        "id": "U-2002",
        "name": "Finance Officer",
        "email": "finance@demo.com",
        "password": "demo",
        "role": UserRole.ADMIN,
        "department": "Finance"
    },
    {
        "id": "U-3001",
        "name": "Dr. A. Sharma",
        "email": "super@demo.com",
        "password": "demo",
        "role": UserRole.SUPERADMIN
    }
]


def hash_password(password):
    """Hash a password using werkzeug's security features"""
    return generate_password_hash(password, method='pbkdf2:sha256')


def verify_password(password_hash, password):
    """Verify a password against its hash"""
    return check_password_hash(password_hash, password)


def generate_jwt_token(user_id, email, role):
    """Generate a JWT token for authenticated users"""
    payload = {
        'user_id': user_id,
        'email': email,
        'role': role,
        'exp': datetime.utcnow() + timedelta(hours=config.JWT_EXPIRY_HOURS),
        'iat': datetime.utcnow()
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_jwt_token(token):
    """Decode and validate a JWT token"""
    try:
        return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def validate_password_change(current, new_password, confirm) -> Tuple[bool, Optional[str]]:
    """Check a password change form before applying it"""
    if not current or not new_password or not confirm:
        return False, "Please fill all fields."
    if new_password != confirm:
        return False, "Passwords do not match."
    if len(new_password) < config.MIN_PASSWORD_LENGTH:
        return False, f"Min {config.MIN_PASSWORD_LENGTH} characters."
    return True, None


def public_identity(user: Dict) -> Dict:
    """Identity record without credentials"""
    return {k: v for k, v in user.items() if k != 'password_hash'}


class SessionStore:
    """Holds the current user identity in any mutable mapping"""

    def __init__(self, backend: Optional[MutableMapping] = None):
        self.backend = backend if backend is not None else {}

    def save(self, user: Dict):
        self.backend[SESSION_KEY] = public_identity(user)

    def get(self) -> Optional[Dict]:
        return self.backend.get(SESSION_KEY)

    def clear(self):
        self.backend.pop(SESSION_KEY, None)


@lru_cache(maxsize=1)
def _demo_directory() -> Tuple[Dict, ...]:
    users = []
    for user in DEMO_USERS:
        record = {k: v for k, v in user.items() if k != 'password'}
        record['password_hash'] = hash_password(user['password'])
        users.append(record)
    return tuple(users)


class AuthService:
    """Mock credential directory with simulated network latency"""

    def __init__(self, session: Optional[SessionStore] = None, delay_seconds: Optional[float] = None):
        self.session = session or SessionStore()
        self.delay_seconds = config.AUTH_DELAY_SECONDS if delay_seconds is None else delay_seconds
        self.users = [copy.deepcopy(u) for u in _demo_directory()]
        self._next_number = 10000

    def find_by_email(self, email: str) -> Optional[Dict]:
        email = (email or '').strip().lower()
        for user in self.users:
            if user['email'].lower() == email:
                return user
        return None

    def find_by_id(self, user_id: str) -> Optional[Dict]:
        for user in self.users:
            if user['id'] == user_id:
                return user
        return None

    async def login(self, email: str, password: str, session: Optional[SessionStore] = None) -> Dict:
        """
        Simulates a login request

        Returns:
            {success: bool, user?: dict, message?: str}
        """
        await asyncio.sleep(self.delay_seconds)
        session = session or self.session

        user = self.find_by_email(email)
        if user is None or not verify_password(user['password_hash'], password or ''):
            logger.info(f"LOGIN_FAILED | {email}")
            return {"success": False, "message": "Invalid credentials"}

        session.save(user)
        logger.info(f"LOGIN | {user['id']} | {user['role']}")
        return {"success": True, "user": public_identity(user)}

    def _new_user_id(self) -> str:
        while self.find_by_id(f"U-{self._next_number}"):
            self._next_number += 1
        user_id = f"U-{self._next_number}"
        self._next_number += 1
        return user_id

    def add_user(self, user_data: Dict, password: str, role: str) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Add an identity with credentials to the directory.

        Returns:
            (stored user, None) or (None, error message)
        """
        name = (user_data.get('name') or '').strip()
        email = (user_data.get('email') or '').strip().lower()
        password = password or ''
        if not name or not email or not password:
            return None, "All fields are required"
        if len(password) < config.MIN_PASSWORD_LENGTH:
            return None, f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters"
        if role not in UserRole.ALL:
            return None, f"Invalid role: {role}"
        if self.find_by_email(email):
            logger.info(f"DUPLICATE_EMAIL | {email}")
            return None, "Email already exists"

        extra = ('password', 'confirm_password', 'password_hash', 'id', 'role')
        user = {
            **{k: v for k, v in user_data.items() if k not in extra},
            "id": self._new_user_id(),
            "name": name,
            "email": email,
            "role": role,
            "password_hash": hash_password(password),
        }
        self.users.append(user)
        logger.info(f"USER_ADDED | {user['id']} | {role}")
        return user, None

    def update_user(self, user_id: str, changes: Dict) -> Tuple[bool, str]:
        """Edit name, email or department of an identity"""
        user = self.find_by_id(user_id)
        if user is None:
            return False, f"User {user_id} not found"

        email = (changes.get('email') or '').strip().lower()
        if email and email != user['email'].lower():
            if self.find_by_email(email):
                return False, "Email already exists"
            user['email'] = email
        for key in ('name', 'department'):
            value = (changes.get(key) or '').strip()
            if value:
                user[key] = value

        logger.info(f"USER_UPDATED | {user_id}")
        return True, f"{user['name']}'s profile updated."

    def remove_user(self, user_id: str) -> Optional[Dict]:
        """Drop an identity; it can no longer log in or act"""
        user = self.find_by_id(user_id)
        if user is None:
            return None
        self.users.remove(user)
        logger.info(f"USER_REMOVED | {user_id}")
        return user

    async def register(self, user_data: Dict, session: Optional[SessionStore] = None) -> Dict:
        """
        Simulates a registration request. Self-registration always creates students;
        staff accounts are added through add_user.

        Returns:
            {success: bool, user?: dict, message?: str}
        """
        await asyncio.sleep(self.delay_seconds)
        session = session or self.session

        user, error = self.add_user(user_data, user_data.get('password'), UserRole.STUDENT)
        if user is None:
            return {"success": False, "message": error}

        session.save(user)
        logger.info(f"REGISTERED | {user['id']} | {user['role']}")
        return {"success": True, "user": public_identity(user)}

    def change_password(self, user_id: str, current: str, new_password: str, confirm: str) -> Tuple[bool, str]:
        """Validate and apply a password change for a known user"""
        ok, error = validate_password_change(current, new_password, confirm)
        if not ok:
            return False, error

        user = self.find_by_id(user_id)
        if user is None:
            return False, "User not found"
        if not verify_password(user['password_hash'], current):
            return False, "Current password is incorrect."

        user['password_hash'] = hash_password(new_password)
        logger.info(f"PASSWORD_CHANGED | {user_id}")
        return True, "Updated successfully."

    def logout(self, session: Optional[SessionStore] = None):
        """logout the current user"""
        (session or self.session).clear()

    def get_current_user(self, session: Optional[SessionStore] = None) -> Optional[Dict]:
        return (session or self.session).get()


def role_home(role: str) -> str:
    """Page a role belongs on"""
    return ROLE_PAGES.get(role, LOGIN_PAGE)


def resolve_page_redirect(user: Optional[Dict], page_role: str) -> Optional[str]:
    """
    Page to redirect to when a user opens the page for page_role,
    None when they may stay.
    """
    if not user:
        return LOGIN_PAGE
    if user.get('role') != page_role:
        return role_home(user.get('role'))
    return None


def require_auth(allowed_roles=None):
    """Decorator to protect routes with JWT authentication"""
    if allowed_roles is None:
        allowed_roles = list(UserRole.ALL)

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            auth_header = request.headers.get('Authorization')

            if not auth_header or not auth_header.startswith('Bearer '):
                return jsonify({'error': 'Missing or invalid authorization header'}), 401

            token = auth_header.split(' ')[1]
            payload = decode_jwt_token(token)

            if not payload:
                return jsonify({'error': 'Invalid or expired token'}), 401

            user_role = payload.get('role')
            if user_role not in allowed_roles:
                return jsonify({'error': 'Insufficient permissions'}), 403

            request.current_user = payload
            return f(*args, **kwargs)

        return decorated_function
    return decorator
