"""
Case Data Model
Case, Message and AdminAccount records with their wire (camelCase) form
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from cases.case_config import CaseStatus, CasePriority


class CaseValidationError(ValueError):
    """Raised when case or admin input fails validation"""


@dataclass
class Message:
    """One entry in a case thread"""
    sender: str
    text: str
    time: str

    def to_dict(self) -> Dict[str, str]:
        return {"sender": self.sender, "text": self.text, "time": self.time}


@dataclass
class Case:
    """A filed grievance"""
    id: str
    category: str
    subject: str
    timestamp: str
    description: str = ""
    status: str = CaseStatus.OPEN
    priority: str = CasePriority.MEDIUM
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    assigned_admin: Optional[str] = None
    department: Optional[str] = None
    messages: List[Message] = field(default_factory=list)
    attachments: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "Case":
        messages = [Message(**m) for m in data.get("messages", [])]
        fields = {k: v for k, v in data.items() if k not in ("messages", "attachments")}
        return cls(messages=messages, attachments=list(data.get("attachments", [])), **fields)

    def to_dict(self) -> Dict[str, Any]:
        """Case record as exchanged with the frontend"""
        return {
            "id": self.id,
            "category": self.category,
            "subject": self.subject,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "assignedAdmin": self.assigned_admin,
            "department": self.department,
            "timestamp": self.timestamp,
            "messages": [m.to_dict() for m in self.messages],
            "attachments": list(self.attachments),
        }


@dataclass
class AdminAccount:
    """Department admin managed by the superadmin"""
    id: str
    name: str
    email: str
    department: str
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "createdAt": self.created_at,
        }
