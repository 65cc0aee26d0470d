"""
Projects Admin Routes
=====================

Every call goes through a per-request ``ProjectsApi``. A 401 from the
backend clears the session cookie and raises ``UnauthorizedError``, which
the app turns into a login redirect (pages) or a 401 (JSON).
"""

from flask import current_app, g, jsonify, render_template, request

from deazytech.core.api_client import ProjectsApi
from deazytech.core.crud_routes import ResourceForm
from deazytech.core.errors import BackendError
from deazytech.core.logging_service import LoggingService
from deazytech.core.storage import validate_image
from deazytech.modules.auth import get_response_cookies
from . import projects_bp

project_form = ResourceForm(
    ProjectsApi.SCALAR_FIELDS,
    list_fields=ProjectsApi.LIST_FIELDS,
    required=('title', 'description'),
)


def get_projects_api():
    """Backend projects client bound to the current request's token"""
    if 'projects_api' not in g:
        cookie_name = current_app.config['SESSION_TOKEN_COOKIE']
        cookies = get_response_cookies()

        g.projects_api = current_app.extensions['deazytech'].projects_api(
            token_getter=lambda: request.cookies.get(cookie_name),
            on_unauthorized=lambda: cookies.delete(cookie_name),
        )
    return g.projects_api


@projects_bp.teardown_app_request
def _close_projects_api(exc):
    api = g.pop('projects_api', None)
    if api is not None:
        api.client.close()


def _image_upload():
    """(filename, bytes, content_type) for a submitted image, else None"""
    image = request.files.get('image')
    if image is None or not image.filename:
        return None
    return image.filename, validate_image(image), image.mimetype


@projects_bp.route('/')
def manage():
    """Projects list page"""
    error = None
    try:
        projects = get_projects_api().get_all()
    except BackendError as e:
        LoggingService.error('projects', 'Error loading projects', {'error': e.message})
        projects, error = [], e.message
    return render_template('projects/manage.html', projects=projects, error=error)


@projects_bp.route('/api', methods=['GET'])
def list_projects():
    return jsonify([project.to_dict() for project in get_projects_api().get_all()])


@projects_bp.route('/api', methods=['POST'])
def create_project():
    """Create a project in the backend"""
    data = project_form.parse()
    project = get_projects_api().create(data, image=_image_upload())
    LoggingService.log_user_action('projects', 'created project', details={'id': project.id})
    return jsonify(project.to_dict()), 201


@projects_bp.route('/api/<project_id>', methods=['GET'])
def get_project(project_id):
    return jsonify(get_projects_api().get(project_id).to_dict())


@projects_bp.route('/api/<project_id>', methods=['PUT'])
def update_project(project_id):
    """Update a project; the backend receives POST with _method=PUT"""
    api = get_projects_api()
    data = project_form.parse(partial=True)
    project = api.update(project_id, data, image=_image_upload())
    LoggingService.log_user_action('projects', 'updated project', details={'id': project_id})
    if project is None:
        project = api.get(project_id)
    return jsonify(project.to_dict())


@projects_bp.route('/api/<project_id>', methods=['DELETE'])
def delete_project(project_id):
    get_projects_api().delete(project_id)
    LoggingService.log_user_action('projects', 'deleted project', details={'id': project_id})
    return jsonify({'message': 'Project deleted successfully'})
