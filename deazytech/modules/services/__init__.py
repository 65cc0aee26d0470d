"""
Services Admin Module
=====================

Service offerings with their feature and benefit lists.
"""

from flask import Blueprint

services_bp = Blueprint(
    'services_admin',
    __name__,
    url_prefix='/admin/services'
)

from . import routes
from .database import SCHEMA, make_repository

__all__ = ['services_bp', 'SCHEMA', 'make_repository']
