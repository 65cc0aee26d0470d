"""
Deazytech Auth Module

Admin authentication:
- Email/password sign-in against the admins table
- Signed bearer token mirrored into the session cookie (7-day expiry)
- Per-request session provider with login/logout
- First-admin setup
"""

from flask import Blueprint

auth_bp = Blueprint(
    'auth',
    __name__,
    template_folder='templates'
)

from . import routes
from .database import AdminAccounts
from .session import AuthState, IdentityClient, SessionProvider, TokenSigner
from .routes import get_response_cookies, get_session_provider, has_session

__all__ = [
    'auth_bp', 'AdminAccounts', 'AuthState', 'IdentityClient', 'SessionProvider',
    'TokenSigner', 'get_response_cookies', 'get_session_provider', 'has_session',
]
