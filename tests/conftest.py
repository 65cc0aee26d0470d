"""
Shared fixtures: an app over a temporary SQLite file, an admin account,
and a stub transport for the projects backend.

NOTE: pytest and pytest-flask are listed under extras_require["dev"].
Install with: pip install -e ".[dev]"
"""

import json
import os
import shutil
import tempfile
from urllib.parse import urlparse

import pytest
import requests
from flask import Flask
from requests.adapters import BaseAdapter
from requests.models import Response

from deazytech import Deazytech
from deazytech.core.database import Database
from deazytech.modules.auth.database import SCHEMA as ADMIN_SCHEMA
from deazytech.modules.clients.database import SCHEMA as CLIENTS_SCHEMA
from deazytech.modules.experts.database import SCHEMA as EXPERTS_SCHEMA
from deazytech.modules.industries.database import SCHEMA as INDUSTRIES_SCHEMA
from deazytech.modules.services.database import SCHEMA as SERVICES_SCHEMA
from deazytech.modules.testimonials.database import SCHEMA as TESTIMONIALS_SCHEMA

ADMIN_EMAIL = 'admin@deazytech.test'
ADMIN_PASSWORD = 'correct-horse'
BACKEND_URL = 'http://backend.test/api'


class StubBackend(BaseAdapter):
    """Transport adapter answering canned JSON per (method, path)"""

    def __init__(self):
        super().__init__()
        self.routes = {}
        self.requests = []

    def add(self, method, path, status=200, body=None):
        self.routes[(method, path)] = (status, body)

    def send(self, request, **kwargs):
        self.requests.append(request)
        path = urlparse(request.url).path
        status, body = self.routes.get((request.method, path), (404, {'message': 'Not found'}))

        response = Response()
        response.status_code = status
        response.reason = 'OK' if status < 400 else 'Error'
        response.url = request.url
        response.request = request
        response.headers['Content-Type'] = 'application/json'
        response._content = json.dumps(body).encode('utf-8') if body is not None else b''
        return response

    def close(self):
        pass

    @property
    def last_request(self):
        return self.requests[-1] if self.requests else None


def make_session(adapter):
    session = requests.Session()
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    return session


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_dir():
    """Temporary directory for databases and uploads, cleaned up after."""
    d = tempfile.mkdtemp(prefix="deazytech-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def db(tmp_dir):
    """Bare executor with every resource schema created."""
    database = Database(f"sqlite:///{os.path.join(tmp_dir, 'repo.db')}")
    for schema in (ADMIN_SCHEMA, EXPERTS_SCHEMA, SERVICES_SCHEMA, INDUSTRIES_SCHEMA,
                   TESTIMONIALS_SCHEMA, CLIENTS_SCHEMA):
        database.init_schema(schema)
    yield database
    database.dispose()


@pytest.fixture
def backend():
    return StubBackend()


@pytest.fixture
def app(tmp_dir, backend):
    """Fully initialised Flask app with all Deazytech modules registered."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_dir
    app.config["DATABASE_URL"] = f"sqlite:///{os.path.join(tmp_dir, 'deazytech.db')}"
    app.config["UPLOAD_FOLDER"] = os.path.join(tmp_dir, "uploads")
    app.config["STORAGE_TYPE"] = "local"
    app.config["BACKEND_API_URL"] = BACKEND_URL

    deazytech = Deazytech(app)
    deazytech.backend_session_factory = lambda: make_session(backend)

    yield app
    deazytech.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    """An admin account; returns (email, password)."""
    app.extensions['deazytech'].accounts.create(ADMIN_EMAIL, ADMIN_PASSWORD)
    return ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.fixture
def auth_client(client, admin):
    """Test client carrying a valid session cookie."""
    email, password = admin
    response = client.post('/admin/login', data={'email': email, 'password': password})
    assert response.status_code == 302
    return client
