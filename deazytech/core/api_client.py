"""
Backend API Client
==================

Outbound client for the separate REST backend that owns the project
resource. One ``requests.Session`` per client with:

- a bearer-token auth hook reading the caller's session token
- a response hook that turns a 401 into ``UnauthorizedError`` after letting
  the owner clear the token cookie (``on_unauthorized``)

Form submissions always travel as multipart, and updates spoof PUT with a
``_method`` field because the backend only parses multipart on POST.
"""

import base64
import json
from dataclasses import dataclass, field, asdict
from typing import Any, List, Optional

import requests
from requests.auth import AuthBase

from .errors import BackendError, NotFoundError, UnauthorizedError, ValidationError
from .logging_service import LoggingService


class BearerTokenAuth(AuthBase):
    """Attach ``Authorization: Bearer <token>`` when a token is available"""

    def __init__(self, token_getter):
        self.token_getter = token_getter

    def __call__(self, r):
        token = self.token_getter()
        if token:
            r.headers['Authorization'] = f'Bearer {token}'
        return r


def decode_list(payload):
    """Normalize a list response: bare array or a paginator's {"data": [...]}"""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get('data'), list):
        return payload['data']
    return []


def decode_item(payload):
    """Normalize a single-item response: bare object or {"data": {...}}"""
    if isinstance(payload, dict) and isinstance(payload.get('data'), dict):
        return payload['data']
    return payload


def _error_message(response):
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason
    if isinstance(body, dict):
        return body.get('error') or body.get('message') or json.dumps(body.get('errors', body))
    return str(body)


class BackendClient:

    def __init__(self, base_url, token_getter=None, on_unauthorized=None, session=None, timeout=15):
        self.base_url = base_url.rstrip('/')
        self.on_unauthorized = on_unauthorized
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'X-Requested-With': 'XMLHttpRequest',
        })
        self.session.auth = BearerTokenAuth(token_getter or (lambda: None))
        self.session.hooks['response'].append(self._check_unauthorized)

    def _check_unauthorized(self, response, *args, **kwargs):
        if response.status_code == 401:
            LoggingService.log_security_event('Backend rejected session token', {
                'url': response.url,
            })
            if self.on_unauthorized:
                self.on_unauthorized()
            raise UnauthorizedError('Session expired, please sign in again')
        return response

    def request(self, method, path, json_body=None, form=None, files=None):
        """Send a request and return the decoded JSON body (None if empty).

        ``form`` and ``files`` are sent as multipart/form-data; otherwise
        ``json_body`` (if any) is sent as JSON.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        kwargs = {'timeout': self.timeout}

        if form is not None or files:
            parts = [(key, (None, str(value))) for key, value in (form or {}).items()]
            parts.extend(files or [])
            kwargs['files'] = parts
        elif json_body is not None:
            kwargs['json'] = json_body

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            LoggingService.error('api_client', f"{method} {url} failed", {'error': str(e)})
            raise BackendError(f'Backend unreachable: {e}') from e

        LoggingService.log_api_call('api_client', url, method, response.status_code)

        if response.status_code == 404:
            raise NotFoundError(_error_message(response))
        if response.status_code in (400, 422):
            raise ValidationError(_error_message(response), status_code=400)
        if not response.ok:
            raise BackendError(_error_message(response),
                               status_code=502 if response.status_code >= 500 else response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError('Backend returned invalid JSON') from e

    def get(self, path):
        return self.request('GET', path)

    def post(self, path, json_body=None, form=None, files=None):
        return self.request('POST', path, json_body=json_body, form=form, files=files)

    def delete(self, path):
        return self.request('DELETE', path)

    def close(self):
        self.session.close()


# ===== Project resource =====

def parse_string_list(value):
    """Tags/features may arrive as a list, a JSON string, or comma text"""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return []
        try:
            parsed = json.loads(value)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return [str(v) for v in parsed]
        return [part.strip() for part in value.split(',') if part.strip()]
    return []


def _image_bytes(data):
    """Embedded image data as serialized by the backend (Buffer JSON, list or base64)"""
    if isinstance(data, dict) and 'data' in data:
        data = data['data']
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, list):
        return bytes(data)
    if isinstance(data, str):
        return base64.b64decode(data)
    return None


@dataclass
class Project:
    id: Any = None
    title: str = ''
    description: str = ''
    link: str = ''
    gradient: str = ''
    tags: List[str] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    image: Any = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    storage_url: str = field(default='', repr=False)

    @classmethod
    def from_payload(cls, payload, storage_url=''):
        payload = decode_item(payload) or {}
        return cls(
            id=payload.get('id', payload.get('_id')),
            title=payload.get('title') or '',
            description=payload.get('description') or '',
            link=payload.get('link') or '',
            gradient=payload.get('gradient') or '',
            tags=parse_string_list(payload.get('tags')),
            features=parse_string_list(payload.get('features')),
            image_url=payload.get('imageUrl') or payload.get('image_url'),
            image=payload.get('image'),
            created_at=payload.get('created_at') or payload.get('createdAt'),
            updated_at=payload.get('updated_at') or payload.get('updatedAt'),
            storage_url=storage_url,
        )

    @property
    def display_image(self):
        """External URL, else embedded binary as a data URI, else a stored path"""
        if self.image_url:
            return self.image_url

        if isinstance(self.image, dict) and self.image.get('data'):
            raw = _image_bytes(self.image['data'])
            if raw:
                content_type = self.image.get('contentType') or 'image/jpeg'
                return f"data:{content_type};base64,{base64.b64encode(raw).decode('ascii')}"

        if isinstance(self.image, str) and self.image:
            if self.image.startswith(('http://', 'https://', 'data:', '/')):
                return self.image
            return f"{self.storage_url.rstrip('/')}/{self.image}"

        return None

    def to_dict(self):
        d = asdict(self)
        d.pop('storage_url', None)
        d.pop('image', None)
        d['display_image'] = self.display_image
        return d


class ProjectsApi:
    """The backend's project endpoints"""

    LIST_FIELDS = ('tags', 'features')
    SCALAR_FIELDS = ('title', 'description', 'link', 'gradient', 'image_url')

    def __init__(self, client, storage_url=None):
        self.client = client
        if storage_url is None:
            root = client.base_url[:-len('/api')] if client.base_url.endswith('/api') else client.base_url
            storage_url = f"{root}/storage"
        self.storage_url = storage_url

    def _project(self, payload):
        return Project.from_payload(payload, self.storage_url)

    def _form(self, fields):
        form = {}
        for key in self.SCALAR_FIELDS:
            if fields.get(key) is not None:
                form[key] = fields[key]
        for key in self.LIST_FIELDS:
            if fields.get(key) is not None:
                form[key] = json.dumps(list(fields[key]))
        return form

    @staticmethod
    def _files(image):
        # image: (filename, bytes, content_type)
        return [('image', image)] if image else None

    def get_all(self):
        return [self._project(item) for item in decode_list(self.client.get('/projects'))]

    def get(self, project_id):
        return self._project(self.client.get(f'/projects/{project_id}'))

    def create(self, fields, image=None):
        payload = self.client.post('/admin/projects', form=self._form(fields), files=self._files(image))
        return self._project(payload)

    def update(self, project_id, fields, image=None):
        form = self._form(fields)
        form['_method'] = 'PUT'
        payload = self.client.post(f'/admin/projects/{project_id}', form=form, files=self._files(image))
        return self._project(payload) if payload else None

    def delete(self, project_id):
        self.client.delete(f'/admin/projects/{project_id}')
