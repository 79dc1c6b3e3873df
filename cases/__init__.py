"""
Grievance Case Package
Case data model, in-memory stores and display helpers.
"""

from cases.case_store import CaseStore
from cases.admin_store import AdminStore
from cases.confirmations import ConfirmationManager
from cases.models import Case, Message, AdminAccount, CaseValidationError

__all__ = [
    'CaseStore',
    'AdminStore',
    'ConfirmationManager',
    'Case', 'Message', 'AdminAccount', 'CaseValidationError',
]
