"""
Display helpers
Pure mappings from case fields to presentation categories, plus the
list-row and chat-thread view models each role renders.
"""
from typing import Dict, List

from cases.case_config import CasePriority, CaseStatus, PRIORITY_WEIGHT, SenderRole
from cases.models import Case, Message


def priority_weight(priority: str) -> int:
    """Critical > High > Medium; unknown values weigh nothing"""
    return PRIORITY_WEIGHT.get(priority, 0)


def priority_color(priority: str) -> str:
    if priority == CasePriority.CRITICAL:
        return 'red'
    if priority == CasePriority.HIGH:
        return 'orange'
    return 'blue'


def status_color(status: str) -> str:
    if status == CaseStatus.IN_PROGRESS:
        return 'orange'
    if status == CaseStatus.RESOLVED:
        return 'green'
    if status == CaseStatus.ESCALATED:
        return 'red'
    return 'gray'


def sort_by_severity(cases: List[Case]) -> List[Case]:
    """Most severe first, store order kept within a priority"""
    return sorted(cases, key=lambda c: -priority_weight(c.priority))


def render_case_row(case: Case) -> Dict:
    """Summary row shown in case tables"""
    return {
        "id": case.id,
        "category": case.category,
        "subject": case.subject,
        "status": case.status,
        "statusColor": status_color(case.status),
        "priority": case.priority,
        "priorityColor": priority_color(case.priority),
        "priorityWeight": priority_weight(case.priority),
        "studentName": case.student_name,
        "department": case.department,
        "date": case.timestamp[:10],
    }


def render_case_list(cases: List[Case]) -> List[Dict]:
    return [render_case_row(c) for c in cases]


def render_thread(messages: List[Message], viewer_sender: str) -> List[Dict]:
    """
    Chat bubbles for a thread. Messages written by the viewer's own role
    are aligned right, everything else left.
    """
    return [
        {
            **m.to_dict(),
            "initial": 'S' if m.sender == SenderRole.STUDENT else 'A',
            "align": 'right' if m.sender == viewer_sender else 'left',
        }
        for m in messages
    ]


def render_case_detail(case: Case, viewer_sender: str) -> Dict:
    """Full case view: record plus rendered thread"""
    detail = case.to_dict()
    detail["description"] = case.description or 'No description provided.'
    detail["thread"] = render_thread(case.messages, viewer_sender)
    return detail
