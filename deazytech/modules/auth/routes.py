from flask import current_app, flash, g, jsonify, redirect, render_template, request, url_for

from deazytech.core.errors import AuthError, ValidationError
from deazytech.core.gate import LANDING_PATH, LOGIN_PATH, is_protected
from deazytech.core.logging_service import LoggingService
from . import auth_bp
from .session import IdentityClient, PendingNavigation, ResponseCookies, SessionProvider


def _extension():
    return current_app.extensions['deazytech']


def _cookie_name():
    return current_app.config['SESSION_TOKEN_COOKIE']


def get_response_cookies():
    """Cookie changes for the current response"""
    if 'response_cookies' not in g:
        g.response_cookies = ResponseCookies(
            request.cookies,
            secure=current_app.config.get('SESSION_TOKEN_SECURE', False)
        )
    return g.response_cookies


def get_session_provider():
    """The started SessionProvider for the current request"""
    if 'session_provider' not in g:
        ext = _extension()
        identity = IdentityClient(ext.accounts, ext.signer, request.cookies.get(_cookie_name()))
        provider = SessionProvider(
            identity,
            get_response_cookies(),
            PendingNavigation(),
            request.path,
            cookie_name=_cookie_name(),
            cookie_days=current_app.config['SESSION_TOKEN_DAYS'],
        )
        g.session_provider = provider.start()
    return g.session_provider


def has_session():
    """Session lookup for the gate: a valid token for an admin that still exists"""
    ext = _extension()
    claims = ext.signer.claims(request.cookies.get(_cookie_name()))
    if claims is None:
        return False
    return ext.accounts.get(claims['id']) is not None


@auth_bp.after_app_request
def _apply_session_cookies(response):
    cookies = g.pop('response_cookies', None)
    if cookies is not None:
        cookies.apply(response)
    return response


@auth_bp.teardown_app_request
def _close_session_provider(exc):
    provider = g.pop('session_provider', None)
    if provider is not None:
        provider.close()


def _form_data():
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form


def _safe_next(target):
    """Only follow ?next= back into the admin area"""
    if not target or target.startswith('//') or target == LOGIN_PATH:
        return None
    return target if is_protected(target) else None


def _login_failed(message, status):
    if request.is_json:
        return jsonify({'error': message}), status
    flash(message, 'error')
    return render_template('auth/login.html'), status


@auth_bp.route('/admin/login', methods=['GET', 'POST'])
def login():
    """Admin login"""
    if request.method == 'POST':
        data = _form_data()
        email = (data.get('email') or '').strip().lower()
        password = data.get('password') or ''

        if not email or not password:
            return _login_failed('Please enter both email and password', 400)

        provider = get_session_provider()
        try:
            provider.login(email, password)
        except AuthError as e:
            return _login_failed(e.message, 401)

        target = _safe_next(request.args.get('next')) or provider.navigate.location or LANDING_PATH
        if request.is_json:
            return jsonify({'success': True, 'redirect': target})
        return redirect(target)

    return render_template('auth/login.html')


@auth_bp.route('/admin/logout', methods=['GET', 'POST'])
def logout():
    """Admin logout"""
    provider = get_session_provider()
    provider.logout()
    flash('You have been logged out', 'info')
    return redirect(provider.navigate.location or LOGIN_PATH)


@auth_bp.route('/setup/admin', methods=['GET', 'POST'])
def create_admin():
    """Create an admin account (open only while no admin exists)"""
    accounts = _extension().accounts

    if accounts.count() > 0 and not has_session():
        return redirect(url_for('auth.login'))

    if request.method == 'POST':
        data = _form_data()
        email = data.get('email', '')
        password = data.get('password', '')
        confirm_password = data.get('confirm_password', '')

        if password != confirm_password:
            flash('Passwords do not match', 'error')
            return render_template('auth/create_admin.html'), 400

        try:
            admin_id = accounts.create(email, password)
        except ValidationError as e:
            flash(e.message, 'error')
            return render_template('auth/create_admin.html'), e.status_code

        LoggingService.log_user_action('auth', 'create admin', user_id=admin_id, details={'email': email})
        flash('Admin account created', 'success')
        return redirect(url_for('auth.login'))

    return render_template('auth/create_admin.html')
