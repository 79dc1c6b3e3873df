"""
Case Store
Single in-memory source of truth for grievance cases and their threads.

One instance is built at startup and handed to every role service.
Lookups return None for unknown ids; mutators return (success, message).
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import pytz

from cases.case_config import (
    CaseStatus,
    CasePriority,
    STATUS_TRANSITIONS,
    DEFAULT_CATEGORY,
    CASE_ID_PREFIX,
    DEMO_CASES,
)
from cases.models import Case, Message, CaseValidationError

logger = logging.getLogger('case_store')

# First number handed out when the store holds no numbered ids
FIRST_CASE_NUMBER = 1000


def department_for_category(category: str) -> str:
    """Department is the first whitespace-delimited token of the category"""
    tokens = (category or "").split()
    return tokens[0] if tokens else DEFAULT_CATEGORY


class CaseStore:
    """Handles all case operations for the grievance portal"""

    def __init__(self, timezone: str = 'Asia/Kolkata', seed: bool = False):
        self.tz = pytz.timezone(timezone)
        self._cases: List[Case] = []
        self._next_number = FIRST_CASE_NUMBER
        if seed:
            self.load(DEMO_CASES)

    def load(self, records: List[Dict]):
        """Append existing case records, keeping their ids"""
        for record in records:
            case = Case.from_dict(record)
            if self._find(case.id):
                raise CaseValidationError(f"Duplicate case id: {case.id}")
            self._cases.append(case)
            self._bump_counter(case.id)
        logger.info(f"CASES_LOADED | {len(records)} | total={len(self._cases)}")

    def _now(self) -> datetime:
        return datetime.now(self.tz)

    def _bump_counter(self, case_id: str):
        number = case_id[len(CASE_ID_PREFIX):]
        if case_id.startswith(CASE_ID_PREFIX) and number.isdigit():
            self._next_number = max(self._next_number, int(number) + 1)

    def _find(self, case_id: str) -> Optional[Case]:
        for case in self._cases:
            if case.id == case_id:
                return case
        return None

    def generate_case_id(self) -> str:
        """Generate unique case ID in format G-NNNN"""
        existing = {c.id for c in self._cases}
        case_id = f"{CASE_ID_PREFIX}{self._next_number}"
        while case_id in existing:
            self._next_number += 1
            case_id = f"{CASE_ID_PREFIX}{self._next_number}"
        self._next_number += 1
        return case_id

    # -- Queries --

    def list_all(self) -> List[Case]:
        """All cases, newest created first"""
        return list(self._cases)

    def list_by_student(self, student_id: str) -> List[Case]:
        return [c for c in self._cases if c.student_id == student_id]

    def list_by_department(self, department: str) -> List[Case]:
        return [c for c in self._cases if c.department == department]

    def list_escalated(self) -> List[Case]:
        """Cases needing superadmin attention: critical or escalated"""
        return [
            c for c in self._cases
            if c.priority == CasePriority.CRITICAL or c.status == CaseStatus.ESCALATED
        ]

    def get_by_id(self, case_id: str) -> Optional[Case]:
        """Get a case by id, None when it does not exist"""
        case = self._find(case_id)
        if case is None:
            logger.warning(f"CASE_NOT_FOUND | {case_id}")
        return case

    @staticmethod
    def count_by_status(cases: List[Case]) -> Dict[str, int]:
        """Count cases per status, every status present"""
        counts = {status: 0 for status in CaseStatus.ALL}
        for case in cases:
            counts[case.status] += 1
        return counts

    # -- Mutations --

    def create(self, case_data: Dict) -> Case:
        """
        Create a new case and insert it at the front of the store.

        Args:
            case_data: category, subject, description, priority, student_id,
                student_name, assigned_admin, department (all optional but subject)

        Returns:
            The constructed Case

        Raises:
            CaseValidationError: empty subject or unknown priority
        """
        subject = (case_data.get('subject') or '').strip()
        if not subject:
            raise CaseValidationError("Subject is required")

        priority = case_data.get('priority') or CasePriority.MEDIUM
        if priority not in CasePriority.ALL:
            raise CaseValidationError(
                f"Invalid priority. Must be one of: {', '.join(CasePriority.ALL)}"
            )

        category = case_data.get('category') or DEFAULT_CATEGORY
        case = Case(
            id=self.generate_case_id(),
            category=category,
            subject=subject,
            description=case_data.get('description') or '',
            status=CaseStatus.OPEN,
            priority=priority,
            student_id=case_data.get('student_id'),
            student_name=case_data.get('student_name'),
            assigned_admin=case_data.get('assigned_admin'),
            department=case_data.get('department') or department_for_category(category),
            timestamp=self._now().isoformat(timespec='seconds'),
        )
        self._cases.insert(0, case)

        logger.info(f"CASE_CREATED | {case.id} | {case.department} | {case.priority}")
        return case

    def append_message(self, case_id: str, sender: str, text: str) -> bool:
        """Append a message to a case thread. False when the case is unknown."""
        case = self.get_by_id(case_id)
        if case is None:
            return False

        case.messages.append(Message(
            sender=sender,
            text=text,
            time=self._now().strftime('%I:%M %p'),
        ))
        logger.debug(f"MESSAGE_APPENDED | {case_id} | {sender} | thread={len(case.messages)}")
        return True

    def set_status(self, case_id: str, status: str) -> Tuple[bool, str]:
        """
        Update case status. Moving to Escalated also raises priority to Critical.

        Returns:
            (success: bool, message: str)
        """
        if status not in CaseStatus.ALL:
            return False, f"Invalid status. Must be one of: {', '.join(CaseStatus.ALL)}"

        case = self.get_by_id(case_id)
        if case is None:
            return False, f"Case {case_id} not found"

        if status not in STATUS_TRANSITIONS[case.status]:
            return False, f"Case {case_id} cannot move from {case.status} to {status}"

        case.status = status
        # Escalated always carries Critical priority
        if status == CaseStatus.ESCALATED:
            case.priority = CasePriority.CRITICAL
        logger.info(f"STATUS_CHANGED | {case_id} | {status}")
        return True, f"Case {case_id} status updated to {status}"

    def set_priority(self, case_id: str, priority: str) -> Tuple[bool, str]:
        """
        Update case priority.

        Returns:
            (success: bool, message: str)
        """
        if priority not in CasePriority.ALL:
            return False, f"Invalid priority. Must be one of: {', '.join(CasePriority.ALL)}"

        case = self.get_by_id(case_id)
        if case is None:
            return False, f"Case {case_id} not found"

        if case.status == CaseStatus.ESCALATED and priority != CasePriority.CRITICAL:
            return False, f"Case {case_id} is escalated and must stay {CasePriority.CRITICAL}"

        case.priority = priority
        logger.info(f"PRIORITY_CHANGED | {case_id} | {priority}")
        return True, f"Case {case_id} priority updated to {priority}"

    def escalate(self, case_id: str) -> Tuple[bool, str]:
        """Move a case to Escalated with Critical priority, both or neither"""
        case = self.get_by_id(case_id)
        if case is None:
            return False, f"Case {case_id} not found"

        if CaseStatus.ESCALATED not in STATUS_TRANSITIONS[case.status]:
            return False, f"Case {case_id} cannot be escalated from {case.status}"

        case.status = CaseStatus.ESCALATED
        case.priority = CasePriority.CRITICAL
        logger.info(f"CASE_ESCALATED | {case_id}")
        return True, f"Case {case_id} escalated"
