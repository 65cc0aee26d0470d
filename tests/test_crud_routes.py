"""
Admin CRUD endpoints and the public read-only API.
"""

import io
import os


def _create_expert(client, **overrides):
    payload = {
        'name': 'A. Dev',
        'role': 'Engineer',
        'bio': 'x',
        'experience': '3y',
        'expertise': ['Go', 'SQL'],
    }
    payload.update(overrides)
    return client.post('/admin/experts/api', json=payload)


# ---------------------------------------------------------------------------
# gate in front of the admin API
# ---------------------------------------------------------------------------

def test_admin_api_requires_session(client):
    response = client.get('/admin/experts/api')

    assert response.status_code == 401
    assert response.get_json()['error']


def test_admin_page_redirects_to_login(client):
    response = client.get('/admin/experts/')

    assert response.status_code == 302
    assert response.headers['Location'] == '/admin/login?next=/admin/experts/'


# ---------------------------------------------------------------------------
# experts
# ---------------------------------------------------------------------------

def test_create_expert_returns_201_with_children(auth_client):
    response = _create_expert(auth_client)

    assert response.status_code == 201
    body = response.get_json()
    assert body['id']
    assert body['name'] == 'A. Dev'
    assert sorted(body['expertise']) == ['Go', 'SQL']


def test_create_expert_missing_required_fields(auth_client):
    response = auth_client.post('/admin/experts/api', json={'bio': 'no name'})

    assert response.status_code == 400
    assert 'name' in response.get_json()['error']
    assert auth_client.get('/admin/experts/api').get_json() == []


def test_create_expert_from_form_with_comma_list(auth_client):
    response = auth_client.post('/admin/experts/api', data={
        'name': 'Form Person',
        'role': 'Designer',
        'expertise': 'Figma, CSS',
    })

    assert response.status_code == 201
    assert response.get_json()['expertise'] == ['Figma', 'CSS']


def test_create_expert_with_image_upload(auth_client):
    response = auth_client.post('/admin/experts/api', data={
        'name': 'Pictured',
        'role': 'Lead',
        'image': (io.BytesIO(b'\x89PNG\r\n\x1a\n'), 'face.png', 'image/png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 201
    assert response.get_json()['image_url'].startswith('/uploads/experts/')


def test_rejected_create_stores_no_image(auth_client, app):
    response = auth_client.post('/admin/experts/api', data={
        'bio': 'no name or role',
        'image': (io.BytesIO(b'\x89PNG\r\n\x1a\n'), 'face.png', 'image/png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 400
    experts_dir = os.path.join(app.config['UPLOAD_FOLDER'], 'experts')
    assert not os.path.isdir(experts_dir) or os.listdir(experts_dir) == []


def test_non_scalar_json_value_is_rejected(auth_client):
    response = auth_client.post('/admin/experts/api', json={'name': {'x': 1}, 'role': 'Eng'})

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Invalid value for name'}
    assert auth_client.get('/admin/experts/api').get_json() == []


def test_update_replaces_expertise_only(auth_client):
    expert = _create_expert(auth_client).get_json()

    response = auth_client.put(f"/admin/experts/api/{expert['id']}", json={'expertise': ['Rust']})

    assert response.status_code == 200
    updated = response.get_json()
    assert updated['expertise'] == ['Rust']
    assert updated['name'] == 'A. Dev'


def test_update_missing_expert_is_404(auth_client):
    response = auth_client.put('/admin/experts/api/999', json={'name': 'Ghost'})

    assert response.status_code == 404
    assert response.get_json() == {'error': 'Expert not found'}


def test_get_and_delete_expert(auth_client):
    expert = _create_expert(auth_client).get_json()
    url = f"/admin/experts/api/{expert['id']}"

    assert auth_client.get(url).status_code == 200

    deleted = auth_client.delete(url)
    assert deleted.status_code == 200
    assert deleted.get_json() == {'message': 'Expert deleted successfully'}

    assert auth_client.get(url).status_code == 404
    assert auth_client.delete(url).status_code == 404


def test_non_json_body_rejected(auth_client):
    response = auth_client.post('/admin/experts/api', data='[1, 2]', content_type='application/json')

    assert response.status_code == 400


def test_unsupported_method_is_405_json(auth_client):
    response = auth_client.patch('/admin/experts/api/1', json={})

    assert response.status_code == 405
    assert response.get_json() == {'error': 'Method not allowed'}


# ---------------------------------------------------------------------------
# services and industries
# ---------------------------------------------------------------------------

def test_service_lists_are_independent(auth_client):
    service = auth_client.post('/admin/services/api', json={
        'title': 'Web',
        'description': 'Sites',
        'features': ['SSR'],
        'benefits': ['Fast'],
    }).get_json()

    auth_client.put(f"/admin/services/api/{service['id']}", json={'benefits': []})
    fetched = auth_client.get(f"/admin/services/api/{service['id']}").get_json()

    assert fetched['features'] == ['SSR']
    assert fetched['benefits'] == []


def test_industry_crud(auth_client):
    created = auth_client.post('/admin/industries/api', json={'name': 'Health', 'description': 'Care'})
    assert created.status_code == 201

    industry_id = created.get_json()['id']
    auth_client.put(f'/admin/industries/api/{industry_id}', json={'description': 'Clinics'})

    fetched = auth_client.get(f'/admin/industries/api/{industry_id}').get_json()
    assert fetched['name'] == 'Health'
    assert fetched['description'] == 'Clinics'


def test_admin_list_page_renders(auth_client):
    _create_expert(auth_client)

    response = auth_client.get('/admin/experts/')

    assert response.status_code == 200
    assert b'A. Dev' in response.data


# ---------------------------------------------------------------------------
# public API
# ---------------------------------------------------------------------------

def test_public_api_lists_without_session(auth_client, app):
    _create_expert(auth_client)
    public = app.test_client()

    response = public.get('/api/experts')

    assert response.status_code == 200
    assert [e['name'] for e in response.get_json()] == ['A. Dev']


def test_public_api_detail_and_404(auth_client, app):
    expert = _create_expert(auth_client).get_json()
    public = app.test_client()

    assert public.get(f"/api/experts/{expert['id']}").get_json()['role'] == 'Engineer'

    missing = public.get('/api/industries/42')
    assert missing.status_code == 404
    assert missing.get_json() == {'error': 'Industry not found'}


def test_public_api_is_read_only(app):
    response = app.test_client().post('/api/experts', json={'name': 'x'})

    assert response.status_code == 405


def test_public_api_allows_cross_origin(app):
    response = app.test_client().get('/api/services', headers={'Origin': 'https://example.com'})

    assert response.headers.get('Access-Control-Allow-Origin') in ('*', 'https://example.com')


# ---------------------------------------------------------------------------
# testimonials and clients
# ---------------------------------------------------------------------------

def _create_testimonial(client, **overrides):
    payload = {
        'name': 'Jane Roe',
        'role': 'CTO',
        'company': 'Acme',
        'content': 'They shipped on time.',
    }
    payload.update(overrides)
    return client.post('/admin/testimonials/api', json=payload)


def test_testimonial_crud(auth_client):
    created = _create_testimonial(auth_client)
    assert created.status_code == 201

    url = f"/admin/testimonials/api/{created.get_json()['id']}"
    auth_client.put(url, json={'content': 'Great team.'})

    fetched = auth_client.get(url).get_json()
    assert fetched['company'] == 'Acme'
    assert fetched['content'] == 'Great team.'
    assert auth_client.delete(url).get_json() == {'message': 'Testimonial deleted successfully'}


def test_testimonial_requires_company_and_content(auth_client):
    response = auth_client.post('/admin/testimonials/api', json={'name': 'Jane Roe', 'role': 'CTO'})

    assert response.status_code == 400
    assert 'company' in response.get_json()['error']


def test_testimonial_photo_goes_to_its_folder(auth_client):
    response = auth_client.post('/admin/testimonials/api', data={
        'name': 'Jane Roe',
        'role': 'CTO',
        'company': 'Acme',
        'content': 'Solid work.',
        'image': (io.BytesIO(b'\x89PNG\r\n\x1a\n'), 'jane.png', 'image/png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 201
    assert response.get_json()['image_url'].startswith('/uploads/testimonials/')


def test_public_testimonials_newest_first(auth_client, app):
    _create_testimonial(auth_client, name='First')
    _create_testimonial(auth_client, name='Second')
    public = app.test_client()

    response = public.get('/api/testimonials')

    assert response.status_code == 200
    assert [t['name'] for t in response.get_json()] == ['Second', 'First']
    assert public.get('/api/testimonials/99').get_json() == {'error': 'Testimonial not found'}


def test_home_page_shows_testimonials_and_clients(auth_client, app):
    _create_testimonial(auth_client, content='Would hire again.')
    auth_client.post('/admin/clients/api', json={'name': 'Globex'})
    public = app.test_client()

    home = public.get('/').data
    assert b'Would hire again.' in home
    assert b'Globex' in home
    assert b'Would hire again.' in public.get('/about').data
    assert [c['name'] for c in public.get('/api/clients').get_json()] == ['Globex']


def test_client_requires_name(auth_client):
    response = auth_client.post('/admin/clients/api', json={'website': 'https://globex.test'})

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Missing required fields: name'}
