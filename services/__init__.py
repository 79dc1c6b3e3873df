"""
Role Services Package
Role-scoped case workflows for students, admins and the superadmin.
"""

from services.student_service import StudentService, normalize_priority
from services.admin_service import AdminService
from services.superadmin_service import SuperAdminService

__all__ = [
    'StudentService', 'normalize_priority',
    'AdminService',
    'SuperAdminService',
]
