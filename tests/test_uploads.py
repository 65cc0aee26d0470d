import io
import os

import pytest

from deazytech.core.storage import sanitize_folder, unique_filename

PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 64


def _upload(client, field='image', data=PNG_BYTES, filename='logo.png', mimetype='image/png', **form):
    form[field] = (io.BytesIO(data), filename, mimetype)
    return client.post('/api/upload', data=form, content_type='multipart/form-data')


def test_png_is_stored_under_requested_folder(auth_client, app):
    response = _upload(auth_client, folder='services')

    assert response.status_code == 200
    body = response.get_json()
    assert set(body) == {'filename', 'path', 'url'}
    assert '/services/' in body['url']
    assert body['path'] == f"services/{body['filename']}"
    assert body['filename'].endswith('-logo.png')

    stored = os.path.join(app.config['UPLOAD_FOLDER'], 'services', body['filename'])
    with open(stored, 'rb') as f:
        assert f.read() == PNG_BYTES


def test_file_field_is_accepted_and_folder_defaults(auth_client):
    response = _upload(auth_client, field='file')

    assert response.status_code == 200
    assert response.get_json()['url'].startswith('/uploads/images/')


def test_plain_text_is_rejected(auth_client):
    response = _upload(auth_client, data=b'hello', filename='notes.txt', mimetype='text/plain')

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Invalid file type'}


def test_missing_file_is_rejected(auth_client):
    response = auth_client.post('/api/upload', data={'folder': 'x'}, content_type='multipart/form-data')

    assert response.status_code == 400
    assert response.get_json() == {'error': 'No file uploaded'}


def test_oversized_file_is_rejected(auth_client, app):
    app.config['MAX_UPLOAD_SIZE'] = 32

    response = _upload(auth_client)

    assert response.status_code == 400
    assert response.get_json() == {'error': 'File too large'}


def test_body_over_content_limit_is_rejected_as_json(auth_client, app):
    app.config['MAX_UPLOAD_SIZE'] = 32
    app.config['MAX_CONTENT_LENGTH'] = 1024

    response = _upload(auth_client, data=PNG_BYTES + b'\x00' * 4096)

    assert response.status_code == 400
    assert response.is_json
    assert response.get_json() == {'error': 'File too large'}


def test_get_is_method_not_allowed(client):
    response = client.get('/api/upload')

    assert response.status_code == 405
    assert response.get_json() == {'error': 'Method not allowed'}


def test_upload_requires_session(client):
    response = _upload(client)

    assert response.status_code == 401


def test_uploaded_file_is_served(auth_client):
    url = _upload(auth_client).get_json()['url']

    response = auth_client.get(url)

    assert response.status_code == 200
    assert response.data == PNG_BYTES


@pytest.mark.parametrize('requested, expected', [
    (None, 'images'),
    ('', 'images'),
    ('../../etc', 'etc'),
    ('team-photos_2', 'team-photos_2'),
])
def test_sanitize_folder(requested, expected):
    assert sanitize_folder(requested) == expected


def test_unique_filename_strips_unsafe_characters():
    name = unique_filename('my photo (1).PNG')

    prefix, _, rest = name.partition('-')
    assert prefix.isdigit()
    assert rest == 'myphoto1.PNG'
