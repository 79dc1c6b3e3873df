"""
Admin Service
Department triage: replies, remarked status changes, escalation and resolution.
"""

import logging
from typing import Dict, List, Optional

from cases.case_config import CaseStatus, SenderRole
from cases.case_store import CaseStore
from cases.confirmations import ConfirmationManager
from cases.models import Case
from services.common import post_message, request_resolution

logger = logging.getLogger('admin_service')


class AdminService:
    """Case workflow available to department admins"""

    def __init__(self, store: CaseStore, confirmations: ConfirmationManager,
                 default_department: str = 'Hostel'):
        self.store = store
        self.confirmations = confirmations
        self.default_department = default_department

    def department_for(self, user: Dict) -> str:
        return user.get('department') or self.default_department

    def department_cases(self, user: Dict, department: Optional[str] = None) -> List[Case]:
        return self.store.list_by_department(department or self.department_for(user))

    def open_case(self, user: Dict, case_id: str) -> Optional[Case]:
        """Case by id, limited to the admin's department"""
        case = self.store.get_by_id(case_id)
        if case is None or case.department != self.department_for(user):
            return None
        return case

    def _not_found(self, case_id: str) -> Dict:
        return {"success": False, "error": f"Case {case_id} not found", "not_found": True}

    def send_message(self, user: Dict, case_id: str, text: str) -> Dict:
        if self.open_case(user, case_id) is None:
            return self._not_found(case_id)
        return post_message(self.store, case_id, SenderRole.ADMIN, text)

    def change_status(self, user: Dict, case_id: str, status: str, remark: str) -> Dict:
        """
        Change status with a mandatory remark recorded on the thread.
        Nothing changes unless both the status and the remark are accepted.
        """
        remark = (remark or '').strip()
        if not remark:
            return {"success": False, "error": "Please add a remark."}

        if status not in CaseStatus.ALL:
            return {"success": False, "error": f"Invalid status. Must be one of: {', '.join(CaseStatus.ALL)}"}

        if self.open_case(user, case_id) is None:
            return self._not_found(case_id)

        ok, message = self.store.set_status(case_id, status)
        if not ok:
            return {"success": False, "error": message}

        self.store.append_message(case_id, SenderRole.ADMIN, f"[Status: {status}] {remark}")
        logger.info(f"STATUS_REMARK | {user['id']} | {case_id} | {status}")
        return {"success": True, "message": f'Changed to "{status}".'}

    def escalate(self, user: Dict, case_id: str) -> Dict:
        if self.open_case(user, case_id) is None:
            return self._not_found(case_id)

        ok, message = self.store.escalate(case_id)
        if not ok:
            return {"success": False, "error": message}
        return {"success": True, "message": "Forwarded to higher authority."}

    def request_resolution(self, user: Dict, case_id: str) -> Dict:
        if self.open_case(user, case_id) is None:
            return self._not_found(case_id)
        return request_resolution(self.store, self.confirmations, user['id'], case_id)
