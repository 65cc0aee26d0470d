"""
Backend client and projects API over a stub transport adapter.
"""

import base64

import pytest
import requests

from deazytech.core.api_client import BackendClient, Project, ProjectsApi, decode_list, decode_item
from deazytech.core.errors import BackendError, NotFoundError, UnauthorizedError, ValidationError

BASE = 'http://backend.test/api'


@pytest.fixture
def stub(backend):
    return backend


def client_for(stub, token='tok-123', on_unauthorized=None):
    session = requests.Session()
    session.mount('http://', stub)
    return BackendClient(BASE, token_getter=lambda: token, on_unauthorized=on_unauthorized,
                         session=session)


# ---------------------------------------------------------------------------
# decoding
# ---------------------------------------------------------------------------

def test_decode_list_accepts_both_shapes():
    assert decode_list([{'id': 1}]) == [{'id': 1}]
    assert decode_list({'data': [{'id': 2}], 'current_page': 1}) == [{'id': 2}]
    assert decode_list({'message': 'nope'}) == []
    assert decode_list(None) == []


def test_decode_item_unwraps_data():
    assert decode_item({'data': {'id': 3}}) == {'id': 3}
    assert decode_item({'id': 4}) == {'id': 4}


# ---------------------------------------------------------------------------
# interceptors
# ---------------------------------------------------------------------------

def test_bearer_token_and_default_headers(stub):
    stub.add('GET', '/api/projects', body=[])
    client_for(stub).get('/projects')

    sent = stub.last_request
    assert sent.headers['Authorization'] == 'Bearer tok-123'
    assert sent.headers['Accept'] == 'application/json'
    assert sent.headers['X-Requested-With'] == 'XMLHttpRequest'


def test_no_token_means_no_authorization_header(stub):
    stub.add('GET', '/api/projects', body=[])
    client_for(stub, token=None).get('/projects')

    assert 'Authorization' not in stub.last_request.headers


def test_401_runs_callback_then_raises(stub):
    stub.add('GET', '/api/projects', status=401, body={'message': 'Unauthenticated.'})
    calls = []

    with pytest.raises(UnauthorizedError):
        client_for(stub, on_unauthorized=lambda: calls.append('cleared')).get('/projects')

    assert calls == ['cleared']


@pytest.mark.parametrize('status, error', [
    (404, NotFoundError),
    (422, ValidationError),
    (500, BackendError),
])
def test_error_statuses_are_typed(stub, status, error):
    stub.add('GET', '/api/projects/9', status=status, body={'message': 'broken'})

    with pytest.raises(error) as excinfo:
        client_for(stub).get('/projects/9')

    assert excinfo.value.message == 'broken'


def test_server_errors_surface_as_bad_gateway(stub):
    stub.add('GET', '/api/projects', status=503, body={'error': 'down'})

    with pytest.raises(BackendError) as excinfo:
        client_for(stub).get('/projects')

    assert excinfo.value.status_code == 502


def test_connection_failure_is_backend_error():
    client = BackendClient('http://127.0.0.1:9/api', timeout=0.5)

    with pytest.raises(BackendError) as excinfo:
        client.get('/projects')

    assert excinfo.value.status_code == 502


# ---------------------------------------------------------------------------
# ProjectsApi
# ---------------------------------------------------------------------------

def test_get_all_handles_paginated_payload(stub):
    stub.add('GET', '/api/projects', body={'data': [
        {'id': 1, 'title': 'Shop', 'tags': '["web", "shop"]', 'features': 'cart, checkout'},
    ]})

    projects = ProjectsApi(client_for(stub)).get_all()

    assert len(projects) == 1
    assert projects[0].title == 'Shop'
    assert projects[0].tags == ['web', 'shop']
    assert projects[0].features == ['cart', 'checkout']


def test_create_sends_multipart_with_json_lists(stub):
    stub.add('POST', '/api/admin/projects', status=201, body={'data': {'id': 7, 'title': 'New'}})

    project = ProjectsApi(client_for(stub)).create(
        {'title': 'New', 'description': 'd', 'tags': ['a', 'b']},
        image=('shot.png', b'\x89PNG', 'image/png'),
    )

    sent = stub.last_request
    assert project.id == 7
    assert sent.headers['Content-Type'].startswith('multipart/form-data')
    assert b'name="tags"' in sent.body
    assert b'["a", "b"]' in sent.body
    assert b'filename="shot.png"' in sent.body


def test_update_spoofs_put_over_post(stub):
    stub.add('POST', '/api/admin/projects/7', body={'id': 7, 'title': 'Renamed'})

    project = ProjectsApi(client_for(stub)).update(7, {'title': 'Renamed'})

    sent = stub.last_request
    assert sent.method == 'POST'
    assert sent.headers['Content-Type'].startswith('multipart/form-data')
    assert b'name="_method"' in sent.body
    assert b'PUT' in sent.body
    assert project.title == 'Renamed'


def test_delete_uses_admin_path(stub):
    stub.add('DELETE', '/api/admin/projects/7', status=204)

    ProjectsApi(client_for(stub)).delete(7)

    assert stub.last_request.method == 'DELETE'


# ---------------------------------------------------------------------------
# display image
# ---------------------------------------------------------------------------

def test_display_image_prefers_external_url():
    project = Project.from_payload({'imageUrl': 'https://cdn.test/a.png',
                                    'image': {'data': [1, 2], 'contentType': 'image/png'}})
    assert project.display_image == 'https://cdn.test/a.png'


def test_display_image_falls_back_to_embedded_binary():
    project = Project.from_payload({'image': {'data': {'type': 'Buffer', 'data': [104, 105]},
                                              'contentType': 'image/png'}})
    assert project.display_image == 'data:image/png;base64,' + base64.b64encode(b'hi').decode()


def test_display_image_joins_stored_path_to_storage_url():
    project = Project.from_payload({'image': 'projects/a.jpg'}, storage_url='http://backend.test/storage')
    assert project.display_image == 'http://backend.test/storage/projects/a.jpg'


def test_display_image_absent():
    assert Project.from_payload({'title': 'bare'}).display_image is None


def test_default_storage_url_derives_from_base(stub):
    assert ProjectsApi(client_for(stub)).storage_url == 'http://backend.test/storage'
