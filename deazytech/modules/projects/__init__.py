"""
Projects Admin Module
=====================

Project portfolio management. Projects live in the separate REST backend;
this module proxies admin requests to it with the caller's bearer token.

Provides:
- Project list page under /admin/projects
- JSON create/read/update/delete forwarded to the backend
- Image upload passed through to the backend as multipart
"""

from flask import Blueprint

projects_bp = Blueprint(
    'projects_admin',
    __name__,
    url_prefix='/admin/projects',
    template_folder='templates'
)

from . import routes
from .routes import get_projects_api

__all__ = ['projects_bp', 'get_projects_api']
