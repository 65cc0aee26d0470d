"""
Clients Admin Module
====================

Logos for the "trusted by" strip on the home page.
"""

from flask import Blueprint

clients_bp = Blueprint(
    'clients_admin',
    __name__,
    url_prefix='/admin/clients'
)

from . import routes
from .database import SCHEMA, make_repository

__all__ = ['clients_bp', 'SCHEMA', 'make_repository']
