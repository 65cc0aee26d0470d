"""
Public Site Routes
==================

Pages read straight from the repositories. The portfolio page asks the
REST backend for projects and shows an empty state when it is unavailable.
"""

from flask import current_app, jsonify, render_template

from deazytech.core.errors import BackendError, NotFoundError
from deazytech.core.logging_service import LoggingService
from . import site_bp

PUBLIC_RESOURCES = {
    'experts': 'Expert',
    'services': 'Service',
    'industries': 'Industry',
    'testimonials': 'Testimonial',
    'clients': 'Client',
}


def _repository(name):
    repo = current_app.extensions['deazytech'].repositories.get(name)
    if repo is None:
        raise NotFoundError(f'{PUBLIC_RESOURCES[name]} not found')
    return repo


def _items(name):
    """All stored items of a resource; empty when the module is turned off"""
    repo = current_app.extensions['deazytech'].repositories.get(name)
    return repo.get_all() if repo is not None else []


def _load_projects():
    api = current_app.extensions['deazytech'].projects_api()
    try:
        return api.get_all(), None
    except BackendError as e:
        LoggingService.error('site', 'Error loading portfolio projects', {'error': e.message})
        return [], 'Projects are unavailable right now.'
    finally:
        api.client.close()


# ===== Pages =====

@site_bp.route('/')
def index():
    return render_template('site/index.html',
                           services=_items('services')[:3],
                           experts=_items('experts')[:4],
                           testimonials=_items('testimonials')[:3],
                           clients=_items('clients'))


@site_bp.route('/services')
def services():
    return render_template('site/services.html', services=_items('services'))


@site_bp.route('/about')
def about():
    return render_template('site/about.html',
                           experts=_items('experts'),
                           testimonials=_items('testimonials'))


@site_bp.route('/portfolio')
def portfolio():
    projects, error = _load_projects()
    return render_template('site/portfolio.html', projects=projects, error=error)


@site_bp.route('/industries')
def industries():
    return render_template('site/industries.html', industries=_items('industries'))


# ===== Public JSON API =====

@site_bp.route('/api/<any(experts, services, industries, testimonials, clients):resource>')
def list_resource(resource):
    return jsonify(_repository(resource).get_all())


@site_bp.route('/api/<any(experts, services, industries, testimonials, clients):resource>/<int:entity_id>')
def get_resource(resource, entity_id):
    entity = _repository(resource).get_by_id(entity_id)
    if entity is None:
        raise NotFoundError(f'{PUBLIC_RESOURCES[resource]} not found')
    return jsonify(entity)
