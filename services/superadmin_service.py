"""
SuperAdmin Service
Oversight of escalated cases and management of department admin accounts.
"""

import logging
from typing import Dict, List, Optional

from cases.admin_store import AdminStore
from cases.case_config import SenderRole
from cases.case_store import CaseStore
from cases.confirmations import ConfirmationManager
from cases.models import AdminAccount, Case, CaseValidationError
from services.common import post_message, request_resolution

logger = logging.getLogger('superadmin_service')


class SuperAdminService:
    """Case and admin-account workflow available to the superadmin"""

    def __init__(self, store: CaseStore, admins: AdminStore, confirmations: ConfirmationManager):
        self.store = store
        self.admins = admins
        self.confirmations = confirmations

    # -- Cases --

    def escalated_cases(self) -> List[Case]:
        return self.store.list_escalated()

    def all_cases(self) -> List[Case]:
        return self.store.list_all()

    def open_case(self, case_id: str) -> Optional[Case]:
        return self.store.get_by_id(case_id)

    def send_message(self, user: Dict, case_id: str, text: str) -> Dict:
        return post_message(self.store, case_id, SenderRole.SUPERADMIN, text)

    def request_resolution(self, user: Dict, case_id: str) -> Dict:
        return request_resolution(self.store, self.confirmations, user['id'], case_id)

    # -- Admin accounts --

    def list_admins(self, department: Optional[str] = None) -> List[AdminAccount]:
        return self.admins.list_admins(department)

    def create_admin(self, name: str, email: str, department: str, password: str) -> Dict:
        """Create a department admin who can log in with the given password"""
        try:
            admin = self.admins.create(name, email, department, password)
        except CaseValidationError as e:
            return {"success": False, "error": str(e)}
        return {
            "success": True,
            "admin": admin,
            "message": f'"{admin.name}" added to {admin.department} department.',
        }

    def update_admin(self, admin_id: str, changes: Dict) -> Dict:
        if self.admins.get(admin_id) is None:
            return {"success": False, "error": f"Admin {admin_id} not found", "not_found": True}

        ok, message = self.admins.update(admin_id, changes)
        if not ok:
            return {"success": False, "error": message}
        return {"success": True, "admin": self.admins.get(admin_id), "message": message}

    def request_admin_deletion(self, user: Dict, admin_id: str) -> Dict:
        """Deleting an admin goes through the confirm dialog"""
        admin = self.admins.get(admin_id)
        if admin is None:
            return {"success": False, "error": f"Admin {admin_id} not found", "not_found": True}

        def delete():
            ok, message = self.admins.delete(admin_id)
            if not ok:
                return {"success": False, "error": message}
            return {"success": True, "message": message}

        prompt = self.confirmations.request(
            user['id'], 'Delete Admin?',
            f'Are you sure you want to remove "{admin.name}"?', delete
        )
        return {"success": True, "needs_confirmation": True, "confirmation": prompt}
