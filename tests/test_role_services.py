"""
Tests for the role-scoped case workflows
"""
import asyncio

import pytest

from cases.case_config import CaseStatus, CasePriority
from services import normalize_priority
from tests.conftest import STUDENT, ADMIN, SUPERADMIN


# =============================================================================
# Student
# =============================================================================

def test_file_case_scenario(student_service, store):
    result = student_service.file_case(STUDENT, 'Hostel', 'Leaking pipe')

    assert result['success']
    case = result['case']
    assert case.status == CaseStatus.OPEN
    assert case.priority == CasePriority.MEDIUM
    assert case.department == 'Hostel'
    assert case.messages == []
    assert case.student_id == 'U-1001'
    assert case.student_name == 'Demo Student'
    assert store.list_all()[0] is case


def test_file_case_empty_subject(student_service, store):
    before = len(store.list_all())
    result = student_service.file_case(STUDENT, 'Hostel', '   ')
    assert not result['success']
    assert len(store.list_all()) == before


def test_file_case_defaults_category(student_service):
    case = student_service.file_case(STUDENT, '', 'Misc issue')['case']
    assert case.category == 'General'
    assert case.department == 'General'


@pytest.mark.parametrize("label,expected", [
    ('high', CasePriority.HIGH),
    ('Critical', CasePriority.CRITICAL),
    ('medium', CasePriority.MEDIUM),
    ('urgent', CasePriority.MEDIUM),
    (None, CasePriority.MEDIUM),
])
def test_normalize_priority(label, expected):
    assert normalize_priority(label) == expected


def test_student_sees_only_own_cases(student_service):
    assert [c.id for c in student_service.my_cases(STUDENT)] == ['G-1024', 'G-1085']
    assert student_service.open_case(STUDENT, 'G-1099') is None


def test_student_message_scenario(student_service, store):
    case = store.get_by_id('G-1024')
    before = len(case.messages)

    result = student_service.send_message(STUDENT, 'G-1024', 'Update?')

    assert result['success']
    assert len(case.messages) == before + 1
    assert case.messages[-1].sender == 'Student'
    assert case.messages[-1].text == 'Update?'


def test_student_cannot_message_others_case(student_service, store):
    result = student_service.send_message(STUDENT, 'G-1099', 'Hi')
    assert not result['success']
    assert result['not_found']
    assert store.get_by_id('G-1099').messages == []


def test_student_empty_message(student_service, store):
    result = student_service.send_message(STUDENT, 'G-1085', '  ')
    assert not result['success']
    assert store.get_by_id('G-1085').messages == []


# =============================================================================
# Admin
# =============================================================================

def test_admin_department_cases(admin_service):
    assert [c.id for c in admin_service.department_cases(ADMIN)] == ['G-1024', 'G-1099']
    assert [c.id for c in admin_service.department_cases(ADMIN, 'Finance')] == ['G-1085']


def test_admin_without_department_defaults_to_hostel(admin_service):
    user = {"id": "U-2002", "name": "Temp", "role": "admin"}
    assert admin_service.department_for(user) == 'Hostel'


def test_admin_escalate_scenario(admin_service, store):
    result = admin_service.escalate(ADMIN, 'G-1024')
    case = store.get_by_id('G-1024')
    assert result['success']
    assert case.status == 'Escalated'
    assert case.priority == 'Critical'


def test_admin_change_status_scenario(admin_service, store):
    result = admin_service.change_status(ADMIN, 'G-1024', 'Resolved', 'Fixed')
    case = store.get_by_id('G-1024')
    assert result['success']
    assert case.status == 'Resolved'
    assert case.messages[-1].text == '[Status: Resolved] Fixed'
    assert case.messages[-1].sender == 'Admin'


def test_change_status_to_escalated_sets_critical(admin_service, student_service):
    case = student_service.file_case(STUDENT, 'Hostel', 'Leaking pipe')['case']
    assert case.priority == CasePriority.MEDIUM

    result = admin_service.change_status(ADMIN, case.id, 'Escalated', 'Needs the warden')

    assert result['success']
    assert case.status == CaseStatus.ESCALATED
    assert case.priority == CasePriority.CRITICAL
    assert case.messages[-1].text == '[Status: Escalated] Needs the warden'


@pytest.mark.parametrize("remark", ["", "   ", None])
def test_status_change_requires_remark(admin_service, store, remark):
    case = store.get_by_id('G-1024')
    before = len(case.messages)

    result = admin_service.change_status(ADMIN, 'G-1024', 'Resolved', remark)

    assert not result['success']
    assert case.status == CaseStatus.IN_PROGRESS
    assert len(case.messages) == before


def test_status_change_invalid_status_appends_nothing(admin_service, store):
    case = store.get_by_id('G-1024')
    before = len(case.messages)
    result = admin_service.change_status(ADMIN, 'G-1024', 'Closed', 'Done')
    assert not result['success']
    assert case.status == CaseStatus.IN_PROGRESS
    assert len(case.messages) == before


def test_status_change_rejected_transition_appends_nothing(admin_service, store):
    case = store.get_by_id('G-1099')
    result = admin_service.change_status(ADMIN, 'G-1099', 'Open', 'Reopen')
    assert not result['success']
    assert case.status == CaseStatus.ESCALATED
    assert case.messages == []


def test_admin_cannot_touch_other_department(admin_service, store):
    result = admin_service.escalate(ADMIN, 'G-1085')
    assert result['not_found']
    assert store.get_by_id('G-1085').status == CaseStatus.OPEN


def test_admin_resolve_requires_confirmation(admin_service, confirmations, store):
    result = admin_service.request_resolution(ADMIN, 'G-1024')
    assert result['needs_confirmation']
    assert store.get_by_id('G-1024').status == CaseStatus.IN_PROGRESS

    token = result['confirmation']['token']
    confirmed = confirmations.confirm(token, ADMIN['id'])
    assert confirmed['success']
    assert store.get_by_id('G-1024').status == CaseStatus.RESOLVED


def test_admin_resolve_cancelled(admin_service, confirmations, store):
    token = admin_service.request_resolution(ADMIN, 'G-1024')['confirmation']['token']
    assert confirmations.cancel(token, ADMIN['id'])['success']
    assert store.get_by_id('G-1024').status == CaseStatus.IN_PROGRESS
    assert not confirmations.confirm(token, ADMIN['id'])['success']


def test_confirmation_runs_once(admin_service, confirmations, store):
    token = admin_service.request_resolution(ADMIN, 'G-1024')['confirmation']['token']
    assert confirmations.confirm(token, ADMIN['id'])['success']
    assert not confirmations.confirm(token, ADMIN['id'])['success']


def test_confirmation_belongs_to_requester(admin_service, confirmations, store):
    token = admin_service.request_resolution(ADMIN, 'G-1024')['confirmation']['token']
    assert not confirmations.confirm(token, SUPERADMIN['id'])['success']
    assert store.get_by_id('G-1024').status == CaseStatus.IN_PROGRESS
    assert confirmations.has_pending(token)


def test_resolve_unknown_case(admin_service):
    result = admin_service.request_resolution(ADMIN, 'G-9999')
    assert result['not_found']


# =============================================================================
# SuperAdmin
# =============================================================================

def test_superadmin_views(superadmin_service, admin_service, store):
    admin_service.escalate(ADMIN, 'G-1024')
    assert [c.id for c in superadmin_service.escalated_cases()] == ['G-1024', 'G-1099']
    assert len(superadmin_service.all_cases()) == 3


def test_superadmin_reply(superadmin_service, store):
    result = superadmin_service.send_message(SUPERADMIN, 'G-1099', 'Looking into it')
    assert result['success']
    assert store.get_by_id('G-1099').messages[-1].sender == 'SuperAdmin'


def test_superadmin_reply_unknown_case(superadmin_service):
    assert superadmin_service.send_message(SUPERADMIN, 'G-9999', 'Hi')['not_found']


def test_superadmin_resolve(superadmin_service, confirmations, store):
    token = superadmin_service.request_resolution(SUPERADMIN, 'G-1099')['confirmation']['token']
    assert confirmations.confirm(token, SUPERADMIN['id'])['success']
    assert store.get_by_id('G-1099').status == CaseStatus.RESOLVED


def test_admin_account_crud(superadmin_service, confirmations):
    created = superadmin_service.create_admin('Lib Admin', 'lib@demo.com', 'Library', 'secret1')
    assert created['success']
    admin = created['admin']
    assert admin in superadmin_service.list_admins('Library')

    updated = superadmin_service.update_admin(admin.id, {'department': 'Examinations'})
    assert updated['success']
    assert superadmin_service.list_admins('Library') == []

    prompt = superadmin_service.request_admin_deletion(SUPERADMIN, admin.id)
    assert admin.id in [a.id for a in superadmin_service.list_admins()]
    assert confirmations.confirm(prompt['confirmation']['token'], SUPERADMIN['id'])['success']
    assert admin.id not in [a.id for a in superadmin_service.list_admins()]


def test_list_admins_reads_login_directory(superadmin_service):
    assert [a.id for a in superadmin_service.list_admins()] == ['U-2001', 'U-2002']
    assert [a.name for a in superadmin_service.list_admins('Finance')] == ['Finance Officer']


def test_created_admin_can_log_in(superadmin_service, auth):
    superadmin_service.create_admin('Lib Admin', 'lib@demo.com', 'Library', 'secret1')

    result = asyncio.run(auth.login('lib@demo.com', 'secret1'))

    assert result['success']
    assert result['user']['role'] == 'admin'
    assert result['user']['department'] == 'Library'


def test_deleted_admin_cannot_log_in(superadmin_service, confirmations, auth):
    prompt = superadmin_service.request_admin_deletion(SUPERADMIN, 'U-2001')
    assert asyncio.run(auth.login('admin@demo.com', 'demo'))['success']

    assert confirmations.confirm(prompt['confirmation']['token'], SUPERADMIN['id'])['success']

    assert not asyncio.run(auth.login('admin@demo.com', 'demo'))['success']
    assert auth.find_by_id('U-2001') is None


def test_admin_department_edit_moves_identity(superadmin_service, auth):
    superadmin_service.update_admin('U-2001', {'department': 'Finance'})
    assert auth.find_by_id('U-2001')['department'] == 'Finance'


def test_create_admin_validation(superadmin_service):
    before = len(superadmin_service.list_admins())
    assert not superadmin_service.create_admin('', 'x@demo.com', 'Hostel', 'secret1')['success']
    assert not superadmin_service.create_admin('Dup', 'ADMIN@demo.com', 'Hostel', 'secret1')['success']
    assert not superadmin_service.create_admin('Short', 'short@demo.com', 'Hostel', '123')['success']
    assert len(superadmin_service.list_admins()) == before


@pytest.mark.parametrize("admin_id", ['A-99', 'U-1001', 'U-3001'])
def test_update_unknown_admin(superadmin_service, auth, admin_id):
    result = superadmin_service.update_admin(admin_id, {'name': 'Ghost'})
    assert not result['success']
    assert result['not_found']
    if auth.find_by_id(admin_id):
        assert auth.find_by_id(admin_id)['name'] != 'Ghost'
