"""
Session Provider
================

Admin session state for one client, mirrored into the ``token`` cookie.

``IdentityClient`` is the upstream: it signs admins in and out against
``AdminAccounts`` and notifies subscribers whenever the signed-in user
changes. ``SessionProvider`` subscribes to it, keeps the current user and
state, and writes or clears the session cookie to match.

Both are built per request from the incoming cookie, so no state is shared
between requests.
"""

import enum
from dataclasses import dataclass

from itsdangerous import BadData, URLSafeTimedSerializer

from deazytech.core.errors import AuthError
from deazytech.core.gate import LANDING_PATH, LOGIN_PATH
from deazytech.core.logging_service import LoggingService

SECONDS_PER_DAY = 24 * 60 * 60


class AuthState(enum.Enum):
    UNINITIALIZED = 'uninitialized'
    INITIALIZING = 'initializing'
    AUTHENTICATED = 'authenticated'
    UNAUTHENTICATED = 'unauthenticated'


@dataclass(frozen=True)
class AuthUser:
    id: int
    email: str
    token: str


class TokenSigner:
    """Mints and verifies the bearer token carried by the session cookie"""

    def __init__(self, secret_key, max_age_days=7, salt='deazytech-session'):
        self.serializer = URLSafeTimedSerializer(secret_key, salt=salt)
        self.max_age = max_age_days * SECONDS_PER_DAY

    def mint(self, admin):
        return self.serializer.dumps({'id': admin['id'], 'email': admin['email']})

    def verify(self, token):
        """Claims for a valid token; raises itsdangerous.BadData otherwise"""
        return self.serializer.loads(token, max_age=self.max_age)

    def claims(self, token):
        """Claims for a valid token, else None"""
        if not token:
            return None
        try:
            return self.verify(token)
        except BadData:
            return None

    def is_valid(self, token):
        return self.claims(token) is not None


class IdentityClient:

    def __init__(self, accounts, signer, persisted_token=None):
        self.accounts = accounts
        self.signer = signer
        self.persisted_token = persisted_token
        self.current_user = None
        self._listeners = []

    def on_auth_state_changed(self, listener):
        """Subscribe to user changes; returns the unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self):
        return len(self._listeners)

    def _notify(self):
        for listener in list(self._listeners):
            listener(self.current_user)

    def set_persistence(self):
        """Restore the signed-in user from the persisted token, then notify"""
        user = None
        claims = self.signer.claims(self.persisted_token)
        # Tokens outlive deleted accounts; only restore admins that still exist
        if claims and self.accounts.get(claims['id']) is not None:
            user = AuthUser(claims['id'], claims['email'], self.persisted_token)
        self.current_user = user
        self._notify()

    def sign_in(self, email, password):
        admin = self.accounts.verify(email, password)
        if not admin:
            raise AuthError()
        self.current_user = AuthUser(admin['id'], admin['email'], self.signer.mint(admin))
        self._notify()
        return self.current_user

    def sign_out(self):
        self.current_user = None
        self._notify()


class ResponseCookies:
    """Cookie changes queued during a request, applied to the response"""

    def __init__(self, incoming=None, secure=False):
        self.incoming = dict(incoming or {})
        self.secure = secure
        self.pending = []

    def get(self, name):
        for op, pending_name, value, _ in reversed(self.pending):
            if pending_name == name:
                return value if op == 'set' else None
        return self.incoming.get(name)

    def _drop_pending(self, name):
        self.pending = [op for op in self.pending if op[1] != name]

    def set(self, name, value, max_age=None):
        self._drop_pending(name)
        self.pending.append(('set', name, value, max_age))

    def delete(self, name):
        if self.get(name) is None:
            return
        self._drop_pending(name)
        if name in self.incoming:
            self.pending.append(('delete', name, None, None))

    def apply(self, response):
        for op, name, value, max_age in self.pending:
            if op == 'set':
                response.set_cookie(name, value, max_age=max_age, httponly=True,
                                    samesite='Lax', secure=self.secure)
            else:
                response.delete_cookie(name)
        self.pending = []
        return response


class PendingNavigation:
    """Records where the provider wants the client to go next"""

    def __init__(self):
        self.location = None

    def __call__(self, path):
        self.location = path


class SessionProvider:

    def __init__(self, identity, cookies, navigate, current_path, cookie_name='token', cookie_days=7):
        self.identity = identity
        self.cookies = cookies
        self.navigate = navigate
        self.current_path = current_path
        self.cookie_name = cookie_name
        self.cookie_max_age = cookie_days * SECONDS_PER_DAY

        self.state = AuthState.UNINITIALIZED
        self.user = None
        self.loading = False
        self.initialized = False
        self._unsubscribe = None

    @property
    def is_authenticated(self):
        return self.state is AuthState.AUTHENTICATED

    def start(self):
        self.state = AuthState.INITIALIZING
        self._unsubscribe = self.identity.on_auth_state_changed(self._handle_auth_state)
        try:
            self.identity.set_persistence()
        except Exception as e:
            LoggingService.error('auth', 'Error setting up auth persistence', {'error': str(e)})
        finally:
            # A restored user already moved us to AUTHENTICATED
            if self.state is AuthState.INITIALIZING:
                self.state = AuthState.UNAUTHENTICATED
            self.initialized = True
        return self

    def _handle_auth_state(self, user):
        try:
            if user:
                self.cookies.set(self.cookie_name, user.token, max_age=self.cookie_max_age)
            else:
                self.cookies.delete(self.cookie_name)
            self.user = user
        except Exception as e:
            LoggingService.error('auth', 'Error in auth state change', {'error': str(e)})
        finally:
            self.state = AuthState.AUTHENTICATED if user else AuthState.UNAUTHENTICATED

    def login(self, email, password):
        self.loading = True
        try:
            user = self.identity.sign_in(email, password)
            self.cookies.set(self.cookie_name, user.token, max_age=self.cookie_max_age)
            if self.current_path != LANDING_PATH:
                self.navigate(LANDING_PATH)
            LoggingService.log_user_action('auth', 'login', user_id=user.id)
            return user
        except Exception as e:
            LoggingService.warning('auth', 'Login error', {'email': email, 'error': str(e)})
            raise
        finally:
            self.loading = False

    def logout(self):
        self.loading = True
        try:
            user_id = self.user.id if self.user else None
            self.identity.sign_out()
            self.cookies.delete(self.cookie_name)
            if self.current_path != LOGIN_PATH:
                self.navigate(LOGIN_PATH)
            LoggingService.log_user_action('auth', 'logout', user_id=user_id)
        except Exception as e:
            LoggingService.error('auth', 'Logout error', {'error': str(e)})
            raise
        finally:
            self.loading = False

    def close(self):
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
