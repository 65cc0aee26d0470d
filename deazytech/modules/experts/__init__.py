"""
Experts Admin Module
====================

Team expert profiles for the about page.

Provides:
- Expert CRUD under /admin/experts
- Expertise tags stored one per row in expert_expertise
"""

from flask import Blueprint

experts_bp = Blueprint(
    'experts_admin',
    __name__,
    url_prefix='/admin/experts'
)

from . import routes
from .database import SCHEMA, make_repository

__all__ = ['experts_bp', 'SCHEMA', 'make_repository']
