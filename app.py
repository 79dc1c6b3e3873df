"""
Flask Web Application for the Grievance Portal
Provides API endpoints for the student, admin and superadmin dashboards
All state lives in one in-memory CaseStore built at startup
"""
import asyncio
import logging
import os
from datetime import timedelta

from flask import Flask, request, jsonify, session, redirect, abort
from flask_cors import CORS

import config
from auth_utils import (
    AuthService,
    SessionStore,
    require_auth,
    generate_jwt_token,
    public_identity,
    resolve_page_redirect,
    role_home,
    LOGIN_PAGE,
)
from cases import CaseStore, AdminStore, ConfirmationManager
from cases.case_config import UserRole, SenderRole
from cases.display import render_case_list, render_case_detail, render_case_row
from services import StudentService, AdminService, SuperAdminService

logger = logging.getLogger('app')


def _status_for(result):
    """HTTP status for a service result dict"""
    if result.get('success'):
        return 200
    if result.get('not_found'):
        return 404
    return 400


def _serialize(result):
    """Turn model objects inside a service result into JSON-safe dicts"""
    out = dict(result)
    if 'case' in out:
        out['case'] = out['case'].to_dict()
    if 'admin' in out and out['admin'] is not None:
        out['admin'] = out['admin'].to_dict()
    return out


def create_app(case_store=None, auth_service=None):
    """Build the Flask app around a single set of stores"""
    app = Flask(__name__)
    app.secret_key = os.getenv('FLASK_SECRET_KEY') or os.urandom(24)
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(hours=1)

    # Configure CORS for the frontend
    CORS(app,
         resources={r"/api/*": {"origins": [config.FRONTEND_URL, "http://localhost:5173"]}},
         supports_credentials=True,
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"])

    store = case_store if case_store is not None else CaseStore(config.TIMEZONE, seed=config.SEED_DEMO_DATA)
    auth = auth_service or AuthService()
    admins = AdminStore(auth, config.TIMEZONE)
    confirmations = ConfirmationManager(config.CONFIRMATION_TIMEOUT_MINUTES)

    students = StudentService(store)
    department_admins = AdminService(store, confirmations, config.DEFAULT_ADMIN_DEPARTMENT)
    superadmin = SuperAdminService(store, admins, confirmations)

    app.extensions['grievance'] = {
        'case_store': store,
        'admin_store': admins,
        'auth': auth,
        'confirmations': confirmations,
    }

    def browser_session():
        return SessionStore(session)

    def current_user():
        """Identity behind the bearer token"""
        user = auth.find_by_id(request.current_user.get('user_id'))
        if user is None:
            abort(401)
        return public_identity(user)

    def body():
        return request.get_json(silent=True) or {}

    # ============================================
    # Authentication Endpoints
    # ============================================

    @app.route('/api/auth/login', methods=['POST'])
    def login():
        """Login with email and password"""
        try:
            data = body()
            email = (data.get('email') or '').strip()
            password = data.get('password') or ''

            if not email or not password:
                return jsonify({'success': False, 'message': 'Email and password are required'}), 400

            result = asyncio.run(auth.login(email, password, session=browser_session()))
            if not result['success']:
                return jsonify(result), 401

            user = result['user']
            result['token'] = generate_jwt_token(user['id'], user['email'], user['role'])
            result['redirect'] = role_home(user['role'])
            return jsonify(result)

        except Exception as e:
            logger.exception("Login failed")
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/api/auth/register', methods=['POST'])
    def register():
        """Register a new student account"""
        try:
            data = body()
            if data.get('password') != data.get('confirm_password', data.get('password')):
                return jsonify({'success': False, 'message': 'Passwords do not match'}), 400

            result = asyncio.run(auth.register(data, session=browser_session()))
            if not result['success']:
                code = 409 if result['message'] == 'Email already exists' else 400
                return jsonify(result), code

            user = result['user']
            result['token'] = generate_jwt_token(user['id'], user['email'], user['role'])
            result['redirect'] = role_home(user['role'])
            return jsonify(result), 201

        except Exception as e:
            logger.exception("Registration failed")
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/api/auth/logout', methods=['POST'])
    def logout():
        auth.logout(session=browser_session())
        return jsonify({'success': True, 'redirect': 'index'})

    @app.route('/api/auth/me', methods=['GET'])
    @require_auth()
    def me():
        """Get current authenticated user info"""
        return jsonify({'success': True, 'user': current_user()})

    @app.route('/api/account/password', methods=['POST'])
    @require_auth()
    def change_password():
        data = body()
        ok, message = auth.change_password(
            request.current_user['user_id'],
            data.get('current_password'),
            data.get('new_password'),
            data.get('confirm_password'),
        )
        if not ok:
            return jsonify({'success': False, 'error': message}), 400
        return jsonify({'success': True, 'message': message})

    # ============================================
    # Student Endpoints
    # ============================================

    @app.route('/api/student/cases', methods=['GET'])
    @require_auth([UserRole.STUDENT])
    def student_cases():
        cases = students.my_cases(current_user())
        return jsonify({
            'success': True,
            'cases': render_case_list(cases),
            'stats': store.count_by_status(cases),
        })

    @app.route('/api/student/cases', methods=['POST'])
    @require_auth([UserRole.STUDENT])
    def file_case():
        """File a new grievance"""
        user = current_user()
        try:
            data = body()
            result = students.file_case(
                user,
                category=data.get('category'),
                subject=data.get('subject'),
                description=data.get('description', ''),
                priority=data.get('priority'),
            )
            code = 201 if result['success'] else 400
            return jsonify(_serialize(result)), code
        except Exception as e:
            logger.exception("Filing grievance failed")
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/api/student/cases/<case_id>', methods=['GET'])
    @require_auth([UserRole.STUDENT])
    def student_case_detail(case_id):
        case = students.open_case(current_user(), case_id)
        if case is None:
            return jsonify({'success': False, 'error': f'Case {case_id} not found'}), 404
        return jsonify({'success': True, 'case': render_case_detail(case, SenderRole.STUDENT)})

    @app.route('/api/student/cases/<case_id>/messages', methods=['POST'])
    @require_auth([UserRole.STUDENT])
    def student_message(case_id):
        result = students.send_message(current_user(), case_id, body().get('text'))
        return jsonify(result), _status_for(result)

    # ============================================
    # Admin Endpoints
    # ============================================

    @app.route('/api/admin/cases', methods=['GET'])
    @require_auth([UserRole.ADMIN])
    def admin_cases():
        user = current_user()
        department = department_admins.department_for(user)
        cases = department_admins.department_cases(user)
        return jsonify({
            'success': True,
            'department': department,
            'cases': render_case_list(cases),
            'stats': store.count_by_status(cases),
        })

    @app.route('/api/admin/cases/<case_id>', methods=['GET'])
    @require_auth([UserRole.ADMIN])
    def admin_case_detail(case_id):
        case = department_admins.open_case(current_user(), case_id)
        if case is None:
            return jsonify({'success': False, 'error': f'Case {case_id} not found'}), 404
        return jsonify({'success': True, 'case': render_case_detail(case, SenderRole.ADMIN)})

    @app.route('/api/admin/cases/<case_id>/messages', methods=['POST'])
    @require_auth([UserRole.ADMIN])
    def admin_message(case_id):
        result = department_admins.send_message(current_user(), case_id, body().get('text'))
        return jsonify(result), _status_for(result)

    @app.route('/api/admin/cases/<case_id>/status', methods=['POST'])
    @require_auth([UserRole.ADMIN])
    def admin_change_status(case_id):
        data = body()
        result = department_admins.change_status(
            current_user(), case_id, data.get('status'), data.get('remark')
        )
        return jsonify(result), _status_for(result)

    @app.route('/api/admin/cases/<case_id>/escalate', methods=['POST'])
    @require_auth([UserRole.ADMIN])
    def admin_escalate(case_id):
        result = department_admins.escalate(current_user(), case_id)
        return jsonify(result), _status_for(result)

    @app.route('/api/admin/cases/<case_id>/resolve', methods=['POST'])
    @require_auth([UserRole.ADMIN])
    def admin_resolve(case_id):
        result = department_admins.request_resolution(current_user(), case_id)
        return jsonify(result), _status_for(result)

    # ============================================
    # SuperAdmin Endpoints
    # ============================================

    @app.route('/api/superadmin/escalated', methods=['GET'])
    @require_auth([UserRole.SUPERADMIN])
    def superadmin_escalated():
        return jsonify({'success': True, 'cases': render_case_list(superadmin.escalated_cases())})

    @app.route('/api/superadmin/cases', methods=['GET'])
    @require_auth([UserRole.SUPERADMIN])
    def superadmin_all_cases():
        cases = superadmin.all_cases()
        return jsonify({
            'success': True,
            'cases': render_case_list(cases),
            'stats': store.count_by_status(cases),
        })

    @app.route('/api/superadmin/cases/<case_id>', methods=['GET'])
    @require_auth([UserRole.SUPERADMIN])
    def superadmin_case_detail(case_id):
        case = superadmin.open_case(case_id)
        if case is None:
            return jsonify({'success': False, 'error': f'Case {case_id} not found'}), 404
        return jsonify({'success': True, 'case': render_case_detail(case, SenderRole.SUPERADMIN)})

    @app.route('/api/superadmin/cases/<case_id>/messages', methods=['POST'])
    @require_auth([UserRole.SUPERADMIN])
    def superadmin_message(case_id):
        result = superadmin.send_message(current_user(), case_id, body().get('text'))
        return jsonify(result), _status_for(result)

    @app.route('/api/superadmin/cases/<case_id>/resolve', methods=['POST'])
    @require_auth([UserRole.SUPERADMIN])
    def superadmin_resolve(case_id):
        result = superadmin.request_resolution(current_user(), case_id)
        return jsonify(result), _status_for(result)

    @app.route('/api/superadmin/admins', methods=['GET'])
    @require_auth([UserRole.SUPERADMIN])
    def list_admins():
        admins_list = superadmin.list_admins(request.args.get('department'))
        return jsonify({'success': True, 'admins': [a.to_dict() for a in admins_list]})

    @app.route('/api/superadmin/admins', methods=['POST'])
    @require_auth([UserRole.SUPERADMIN])
    def create_admin():
        data = body()
        result = superadmin.create_admin(
            data.get('name'), data.get('email'), data.get('department'), data.get('password')
        )
        code = 201 if result['success'] else 400
        return jsonify(_serialize(result)), code

    @app.route('/api/superadmin/admins/<admin_id>', methods=['PUT'])
    @require_auth([UserRole.SUPERADMIN])
    def update_admin(admin_id):
        result = superadmin.update_admin(admin_id, body())
        return jsonify(_serialize(result)), _status_for(result)

    @app.route('/api/superadmin/admins/<admin_id>', methods=['DELETE'])
    @require_auth([UserRole.SUPERADMIN])
    def delete_admin(admin_id):
        result = superadmin.request_admin_deletion(current_user(), admin_id)
        return jsonify(result), _status_for(result)

    # ============================================
    # Confirm dialog
    # ============================================

    @app.route('/api/confirmations/<token>/confirm', methods=['POST'])
    @require_auth()
    def confirm_action(token):
        result = confirmations.confirm(token, request.current_user['user_id'])
        return jsonify(result), _status_for(result)

    @app.route('/api/confirmations/<token>/cancel', methods=['POST'])
    @require_auth()
    def cancel_action(token):
        result = confirmations.cancel(token, request.current_user['user_id'])
        return jsonify(result), _status_for(result)

    # ============================================
    # Dashboard pages
    # ============================================

    def guarded_page(page_role):
        session_store = browser_session()
        user = session_store.get()
        if user:
            # Accounts removed or edited since login
            stored = auth.find_by_id(user['id'])
            if stored is None:
                session_store.clear()
                user = None
            else:
                user = public_identity(stored)
        target = resolve_page_redirect(user, page_role)
        if target:
            return user, redirect(f'/{target}')
        return user, None

    @app.route('/auth')
    def auth_page():
        return jsonify({'page': LOGIN_PAGE})

    @app.route('/student_dashboard')
    def student_dashboard():
        user, response = guarded_page(UserRole.STUDENT)
        if response:
            return response
        cases = students.my_cases(user)
        return jsonify({
            'page': 'student_dashboard',
            'user': user,
            'cases': render_case_list(cases),
            'stats': store.count_by_status(cases),
        })

    @app.route('/normal_admin')
    def admin_dashboard():
        user, response = guarded_page(UserRole.ADMIN)
        if response:
            return response
        return jsonify({
            'page': 'normal_admin',
            'user': user,
            'department': department_admins.department_for(user),
            'cases': render_case_list(department_admins.department_cases(user)),
        })

    @app.route('/superadmin')
    def superadmin_dashboard():
        user, response = guarded_page(UserRole.SUPERADMIN)
        if response:
            return response
        return jsonify({
            'page': 'superadmin',
            'user': user,
            'escalated': [render_case_row(c) for c in superadmin.escalated_cases()],
            'cases': render_case_list(superadmin.all_cases()),
            'admins': [a.to_dict() for a in superadmin.list_admins()],
        })

    return app


if __name__ == '__main__':
    config.configure_logging()
    print("=" * 60)
    print("  Grievance Portal")
    print("=" * 60)
    print("\n🌐 Starting server at: http://localhost:5000")
    print("📝 Press Ctrl+C to stop the server\n")
    print("=" * 60)

    create_app().run(debug=config.DEBUG, use_reloader=False, host='0.0.0.0', port=5000)
