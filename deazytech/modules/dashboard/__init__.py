"""
Dashboard Module
================

Admin landing page and the statistics feed behind it.

The blueprint is named 'admin' so other modules can link to
``admin.dashboard`` without knowing which module provides it.
"""

from flask import Blueprint

dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin',
    template_folder='templates'
)

from . import routes
from .routes import format_time_ago

__all__ = ['dashboard_bp', 'format_time_ago']
