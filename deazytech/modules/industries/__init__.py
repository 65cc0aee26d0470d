"""
Industries Admin Module
=======================

Industries served, shown on the public industries page.
"""

from flask import Blueprint

industries_bp = Blueprint(
    'industries_admin',
    __name__,
    url_prefix='/admin/industries'
)

from . import routes
from .database import SCHEMA, make_repository

__all__ = ['industries_bp', 'SCHEMA', 'make_repository']
