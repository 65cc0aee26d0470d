"""
Authorization Gate
==================

Decides, per navigable request, whether it may proceed or must be
redirected. ``evaluate`` is a pure function of the path and a session
lookup; ``install_gate`` wires it into a Flask app and stamps no-cache
headers on every response that passes through it.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from flask import jsonify, redirect, request

from .logging_service import LoggingService

PROTECTED_PREFIX = '/admin'
LOGIN_PATH = '/admin/login'
LANDING_PATH = '/admin'

NO_CACHE_HEADERS = {
    'Cache-Control': 'no-store, no-cache, must-revalidate, proxy-revalidate',
    'Pragma': 'no-cache',
    'Expires': '0',
}

# Endpoints served without gating (assets carry their own caching)
UNGATED_ENDPOINTS = {'static', 'uploads.serve_upload'}


@dataclass(frozen=True)
class GateDecision:
    action: str
    location: Optional[str] = None

    @property
    def is_redirect(self):
        return self.action == 'redirect'


ALLOW = GateDecision('allow')


def is_protected(path):
    return path == PROTECTED_PREFIX or path.startswith(PROTECTED_PREFIX + '/')


def login_redirect(path):
    return GateDecision('redirect', f"{LOGIN_PATH}?next={quote(path)}")


def evaluate(path, session_lookup):
    """Gate decision for ``path``.

    ``session_lookup`` is called once; if it raises, protected paths fail
    closed (redirect to login) and every other path is let through.
    """
    protected = is_protected(path) and path != LOGIN_PATH

    try:
        has_session = bool(session_lookup())
    except Exception as e:
        LoggingService.log_security_event('Session lookup failed', {
            'path': path,
            'error': str(e),
        })
        return login_redirect(path) if protected else ALLOW

    if protected and not has_session:
        return login_redirect(path)

    if path == LOGIN_PATH and has_session:
        return GateDecision('redirect', LANDING_PATH)

    return ALLOW


def _is_api_path(path):
    return '/api/' in path or path.endswith('/api')


def install_gate(app, session_lookup):
    """Register the gate as before/after request hooks on ``app``"""

    @app.before_request
    def _run_gate():
        if request.endpoint in UNGATED_ENDPOINTS:
            return None

        decision = evaluate(request.path, session_lookup)
        if not decision.is_redirect:
            return None

        # JSON callers get a status code rather than a login page
        if decision.location.startswith(LOGIN_PATH) and _is_api_path(request.path):
            return jsonify({'error': 'Authentication required'}), 401
        return redirect(decision.location)

    @app.after_request
    def _stamp_no_cache(response):
        if request.endpoint not in UNGATED_ENDPOINTS:
            for header, value in NO_CACHE_HEADERS.items():
                response.headers[header] = value
        return response
