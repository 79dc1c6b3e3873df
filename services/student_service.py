"""
Student Service
Filing grievances, listing own cases and replying on own threads.
"""

import logging
from typing import Dict, List, Optional

from cases.case_config import CasePriority, SenderRole, DEFAULT_CATEGORY
from cases.case_store import CaseStore
from cases.models import Case, CaseValidationError
from services.common import post_message

logger = logging.getLogger('student_service')


def normalize_priority(label: Optional[str]) -> str:
    """Map a form priority label to a case priority, Medium by default"""
    label = (label or '').strip().lower()
    if label == 'high':
        return CasePriority.HIGH
    if label == 'critical':
        return CasePriority.CRITICAL
    return CasePriority.MEDIUM


class StudentService:
    """Case workflow available to students"""

    def __init__(self, store: CaseStore):
        self.store = store

    def file_case(self, user: Dict, category: str, subject: str,
                  description: str = '', priority: Optional[str] = None) -> Dict:
        """
        File a new grievance for the logged-in student.

        Returns:
            {success, case} or {success: False, error}
        """
        if not (subject or '').strip():
            return {"success": False, "error": "Please enter a subject."}

        try:
            case = self.store.create({
                'category': (category or '').strip() or DEFAULT_CATEGORY,
                'subject': subject,
                'description': description,
                'priority': normalize_priority(priority),
                'student_id': user['id'],
                'student_name': user.get('name'),
            })
        except CaseValidationError as e:
            return {"success": False, "error": str(e)}

        logger.info(f"GRIEVANCE_FILED | {user['id']} | {case.id}")
        return {
            "success": True,
            "case": case,
            "message": f"Grievance Filed Successfully! Case ID: {case.id}",
        }

    def my_cases(self, user: Dict) -> List[Case]:
        return self.store.list_by_student(user['id'])

    def open_case(self, user: Dict, case_id: str) -> Optional[Case]:
        """Own case by id; other students' cases look like missing ones"""
        case = self.store.get_by_id(case_id)
        if case is None or case.student_id != user['id']:
            return None
        return case

    def send_message(self, user: Dict, case_id: str, text: str) -> Dict:
        if self.open_case(user, case_id) is None:
            return {"success": False, "error": f"Case {case_id} not found", "not_found": True}
        return post_message(self.store, case_id, SenderRole.STUDENT, text)
