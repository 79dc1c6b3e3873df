"""
Admin Account Store
Department admin accounts managed by the superadmin.
Accounts are the admin-role identities of the login directory, so creating,
editing or deleting one changes who can log in and which cases they see.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import pytz

from cases.case_config import UserRole
from cases.models import AdminAccount, CaseValidationError

logger = logging.getLogger('admin_store')


class AdminStore:
    """Handles create/edit/delete of admin accounts over the identity directory"""

    def __init__(self, directory, timezone: str = 'Asia/Kolkata'):
        # directory: AuthService (users, find_by_id, add_user, update_user, remove_user)
        self.directory = directory
        self.tz = pytz.timezone(timezone)

    @staticmethod
    def _to_account(user: Dict) -> AdminAccount:
        return AdminAccount(
            id=user['id'],
            name=user['name'],
            email=user['email'],
            department=user.get('department') or 'General',
            created_at=user.get('created_at'),
        )

    def _admin_identity(self, admin_id: str) -> Optional[Dict]:
        user = self.directory.find_by_id(admin_id)
        if user is None or user.get('role') != UserRole.ADMIN:
            logger.warning(f"ADMIN_NOT_FOUND | {admin_id}")
            return None
        return user

    def list_admins(self, department: Optional[str] = None) -> List[AdminAccount]:
        admins = [self._to_account(u) for u in self.directory.users if u.get('role') == UserRole.ADMIN]
        if department:
            admins = [a for a in admins if a.department == department]
        return admins

    def get(self, admin_id: str) -> Optional[AdminAccount]:
        user = self._admin_identity(admin_id)
        return self._to_account(user) if user else None

    def create(self, name: str, email: str, department: str, password: str) -> AdminAccount:
        """
        Create an admin account that can log in with the given password.

        Raises:
            CaseValidationError: missing fields, short password or email already used
        """
        user, error = self.directory.add_user({
            'name': name,
            'email': email,
            'department': (department or '').strip() or 'General',
            'created_at': datetime.now(self.tz).isoformat(timespec='seconds'),
        }, password, UserRole.ADMIN)
        if user is None:
            raise CaseValidationError(error)

        logger.info(f"ADMIN_CREATED | {user['id']} | {user['department']}")
        return self._to_account(user)

    def update(self, admin_id: str, changes: Dict) -> Tuple[bool, str]:
        """
        Edit name, email or department of an admin.

        Returns:
            (success: bool, message: str)
        """
        if self._admin_identity(admin_id) is None:
            return False, f"Admin {admin_id} not found"

        ok, message = self.directory.update_user(admin_id, changes)
        if ok:
            logger.info(f"ADMIN_UPDATED | {admin_id}")
        return ok, message

    def delete(self, admin_id: str) -> Tuple[bool, str]:
        if self._admin_identity(admin_id) is None:
            return False, f"Admin {admin_id} not found"

        user = self.directory.remove_user(admin_id)
        logger.info(f"ADMIN_DELETED | {admin_id}")
        return True, f'"{user["name"]}" has been deleted.'
