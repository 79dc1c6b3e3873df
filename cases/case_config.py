"""
Case System Configuration
Statuses, priorities, sender labels, transitions and demo seed data
"""


class CaseStatus:
    """Case status values"""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    ESCALATED = "Escalated"
    RESOLVED = "Resolved"

    ALL = [OPEN, IN_PROGRESS, ESCALATED, RESOLVED]


class CasePriority:
    """Case priority values, lowest severity first"""
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    ALL = [MEDIUM, HIGH, CRITICAL]


class SenderRole:
    """Labels written on thread messages"""
    STUDENT = "Student"
    ADMIN = "Admin"
    SUPERADMIN = "SuperAdmin"


class UserRole:
    """Identity roles"""
    STUDENT = "student"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    ALL = [STUDENT, ADMIN, SUPERADMIN]


# Allowed status moves. Resolved is terminal.
STATUS_TRANSITIONS = {
    CaseStatus.OPEN: [CaseStatus.OPEN, CaseStatus.IN_PROGRESS, CaseStatus.ESCALATED, CaseStatus.RESOLVED],
    CaseStatus.IN_PROGRESS: [CaseStatus.IN_PROGRESS, CaseStatus.ESCALATED, CaseStatus.RESOLVED],
    CaseStatus.ESCALATED: [CaseStatus.ESCALATED, CaseStatus.RESOLVED],
    CaseStatus.RESOLVED: [CaseStatus.RESOLVED],
}

# Visual weight used for sort/filter emphasis
PRIORITY_WEIGHT = {
    CasePriority.MEDIUM: 1,
    CasePriority.HIGH: 2,
    CasePriority.CRITICAL: 3,
}

DEFAULT_CATEGORY = "General"
CASE_ID_PREFIX = "G-"

# Demo cases loaded into a fresh store
DEMO_CASES = [
    {
        "id": "G-1024",
        "category": "Hostel",
        "subject": "Water Cooler Leaking on 2nd Floor",
        "description": "The water cooler in Block A, 2nd floor has been leaking for 2 days. It's slippery and dangerous.",
        "status": CaseStatus.IN_PROGRESS,
        "priority": CasePriority.CRITICAL,
        "student_id": "U-1001",
        "student_name": "Demo Student",
        "assigned_admin": "Warden Smith",
        "department": "Hostel",
        "timestamp": "2024-10-24T10:00:00",
        "messages": [
            {"sender": SenderRole.STUDENT, "text": "Is there any update? It's getting worse.", "time": "10:45 AM"},
            {"sender": SenderRole.ADMIN, "text": "Maintenance team dispatched.", "time": "11:00 AM"},
        ],
    },
    {
        "id": "G-1085",
        "category": "Finance",
        "subject": "Exam Fee Discrepancy",
        "description": "I paid the fee but portal shows pending.",
        "status": CaseStatus.OPEN,
        "priority": CasePriority.HIGH,
        "student_id": "U-1001",
        "student_name": "Demo Student",
        "assigned_admin": "Finance Officer",
        "department": "Finance",
        "timestamp": "2024-10-25T09:00:00",
        "messages": [],
    },
    {
        "id": "G-1099",
        "category": "Hostel",
        "subject": "Ragging complaint in Block A",
        "description": "Serious incident reported.",
        "status": CaseStatus.ESCALATED,
        "priority": CasePriority.CRITICAL,
        "student_id": "U-9999",
        "student_name": "Anonymous",
        "assigned_admin": "Chief Warden",
        "department": "Hostel",
        "timestamp": "2024-10-26T12:00:00",
        "messages": [],
    },
]
