"""
Deazytech - Company Site and Admin Dashboard
============================================

Flask extension that wires the public marketing site, the admin area and
their shared services:
- Relational content (experts, services, industries, testimonials, clients) behind one repository
- Projects proxied to the REST backend
- Admin sign-in with a signed session cookie and a request gate on /admin

Usage:
    from flask import Flask
    from deazytech import Deazytech

    app = Flask(__name__)
    Deazytech(app, {'brand_name': 'Deazytech'})

or simply ``deazytech.create_app()``.
"""

import os
import time

import requests
from flask import Flask, jsonify, redirect, request
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import MethodNotAllowed, NotFound, RequestEntityTooLarge

__version__ = '0.1.0'

from .core.api_client import BackendClient, ProjectsApi
from .core.config import Config
from .core.database import Database
from .core.errors import DeazyError, UnauthorizedError
from .core.gate import LOGIN_PATH, install_gate, is_protected, login_redirect
from .core.logging_service import LoggingService

DEFAULT_FEATURES = {
    'dashboard': True,
    'auth': True,
    'experts': True,
    'services': True,
    'industries': True,
    'testimonials': True,
    'clients': True,
    'projects': True,
    'uploads': True,
    'site': True,
}

# Resources stored in the relational database, one module each
RESOURCE_MODULES = ('experts', 'services', 'industries', 'testimonials', 'clients')


class Deazytech:
    """Owns the database, repositories, identity store and backend client factory"""

    def __init__(self, app=None, config=None):
        self._config = dict(config or {})
        self._registered_modules = []
        self.app = None
        self.db = None
        self.accounts = None
        self.signer = None
        self.repositories = {}
        # Tests swap this for a session with a stub transport adapter
        self.backend_session_factory = requests.Session
        self.started_at = time.time()

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        from .modules.auth import AdminAccounts, TokenSigner
        from .modules.auth.database import SCHEMA as ADMIN_SCHEMA

        self.app = app
        self._set_config_defaults(app)

        self.db = Database(app.config['DATABASE_URL'])
        self.db.init_schema(ADMIN_SCHEMA)
        self.accounts = AdminAccounts(self.db)
        self.signer = TokenSigner(app.config['SECRET_KEY'], max_age_days=app.config['SESSION_TOKEN_DAYS'])

        features = self.features
        for name in RESOURCE_MODULES:
            if features.get(name):
                module = _resource_module(name)
                self.db.init_schema(module.SCHEMA)
                self.repositories[name] = module.make_repository(self.db)

        CORS(app, resources={r'/api/*': {'origins': app.config['CORS_ORIGINS']}})

        self._register_blueprints(app)
        self._register_error_handlers(app)
        self._register_health(app)

        from .modules.auth import has_session
        install_gate(app, has_session)

        @app.context_processor
        def inject_deazytech_config():
            return {
                'deazytech_config': self._config,
                'deazytech_modules': self._registered_modules,
                'brand_name': app.config['BRAND_NAME'],
            }

        app.extensions['deazytech'] = self
        LoggingService.info('deazytech', 'Initialised', {'modules': self._registered_modules})

    @property
    def features(self):
        features = dict(DEFAULT_FEATURES)
        features.update(self._config.get('features', {}))
        return features

    def _set_config_defaults(self, app):
        """Fill app.config from Config (env) for keys the app did not set"""
        for key in ('SECRET_KEY', 'DB_DIR', 'UPLOAD_FOLDER', 'MAX_UPLOAD_SIZE', 'STORAGE_TYPE',
                    'BACKEND_API_URL', 'BACKEND_TIMEOUT', 'SESSION_TOKEN_COOKIE',
                    'SESSION_TOKEN_DAYS', 'CORS_ORIGINS', 'BRAND_NAME'):
            if app.config.get(key) is None:
                app.config[key] = getattr(Config, key)

        if 'brand_name' in self._config:
            app.config['BRAND_NAME'] = self._config['brand_name']

        if not app.config.get('DATABASE_URL'):
            if os.getenv('DATABASE_URL'):
                app.config['DATABASE_URL'] = os.getenv('DATABASE_URL')
            else:
                app.config['DATABASE_URL'] = f"sqlite:///{os.path.join(app.config['DB_DIR'], 'deazytech.db')}"

        if app.config.get('SESSION_TOKEN_SECURE') is None:
            app.config['SESSION_TOKEN_SECURE'] = not (app.debug or app.testing)
        if app.config.get('MAX_CONTENT_LENGTH') is None:
            # Leave room for form fields around the largest allowed image
            app.config['MAX_CONTENT_LENGTH'] = app.config['MAX_UPLOAD_SIZE'] + 1024 * 1024

    def _register_blueprints(self, app):
        from .modules.dashboard import dashboard_bp
        from .modules.auth import auth_bp
        from .modules.projects import projects_bp
        from .modules.uploads import uploads_bp
        from .modules.site import site_bp

        blueprints = {
            'dashboard': dashboard_bp,
            'auth': auth_bp,
            'projects': projects_bp,
            'uploads': uploads_bp,
            'site': site_bp,
        }
        for name in RESOURCE_MODULES:
            blueprints[name] = getattr(_resource_module(name), f'{name}_bp')

        features = self.features
        for name, blueprint in blueprints.items():
            if features.get(name):
                app.register_blueprint(blueprint)
                self._registered_modules.append(name)

    def _register_error_handlers(self, app):

        @app.errorhandler(DeazyError)
        def handle_deazy_error(error):
            if isinstance(error, UnauthorizedError) and not _wants_json():
                response = redirect(login_redirect(request.path).location
                                    if is_protected(request.path) else LOGIN_PATH)
                response.delete_cookie(app.config['SESSION_TOKEN_COOKIE'])
                return response
            if error.status_code >= 500:
                LoggingService.log_error_with_traceback('deazytech', error, {'path': request.path})
            return jsonify(error.to_dict()), error.status_code

        @app.errorhandler(NotFound)
        def handle_not_found(error):
            if _wants_json():
                return jsonify({'error': 'Not found'}), 404
            return error.get_response()

        @app.errorhandler(MethodNotAllowed)
        def handle_method_not_allowed(error):
            if _wants_json():
                return jsonify({'error': 'Method not allowed'}), 405
            return error.get_response()

        @app.errorhandler(RequestEntityTooLarge)
        def handle_request_too_large(error):
            # Bodies over MAX_CONTENT_LENGTH get the same answer as an oversized image
            LoggingService.warning('uploads', 'Request body too large', {'limit': app.config.get('MAX_CONTENT_LENGTH')})
            if _wants_json():
                return jsonify({'error': 'File too large'}), 400
            return error.get_response()

    def _register_health(self, app):

        @app.route('/health')
        def health():
            checks = {'uptime': int(time.time() - self.started_at)}
            try:
                self.db.run_one('SELECT 1 AS ok')
                checks['database'] = 'ok'
                status, code = 'ok', 200
            except SQLAlchemyError as e:
                LoggingService.error('health', 'Database check failed', {'error': str(e)})
                checks['database'] = 'error'
                status, code = 'critical', 503
            return jsonify({'status': status, 'checks': checks}), code

    def projects_api(self, token_getter=None, on_unauthorized=None):
        """A ProjectsApi over a fresh backend session; the caller closes it"""
        app = self.app
        client = BackendClient(
            app.config['BACKEND_API_URL'],
            token_getter=token_getter,
            on_unauthorized=on_unauthorized,
            session=self.backend_session_factory(),
            timeout=app.config['BACKEND_TIMEOUT'],
        )
        return ProjectsApi(client, storage_url=app.config.get('BACKEND_STORAGE_URL'))

    def get_registered_modules(self):
        return list(self._registered_modules)

    def close(self):
        """Dispose of the connection pool"""
        if self.db is not None:
            self.db.dispose()


def _resource_module(name):
    from .modules import clients, experts, industries, services, testimonials
    return {
        'experts': experts,
        'services': services,
        'industries': industries,
        'testimonials': testimonials,
        'clients': clients,
    }[name]


def _wants_json():
    path = request.path
    return path.startswith('/api/') or '/api/' in path or path.endswith('/api') or request.is_json


def create_app(config=None):
    """Application factory"""
    app = Flask(__name__)
    app.config.from_object(Config)
    app.config.update((config or {}).get('flask', {}))
    Deazytech(app, config)
    return app


__all__ = ['Deazytech', 'create_app', '__version__']
