"""
Testimonials Admin Module
=========================

Client quotes shown on the home and about pages.

Provides:
- Testimonial CRUD under /admin/testimonials
- Author photo upload into the testimonials folder
"""

from flask import Blueprint

testimonials_bp = Blueprint(
    'testimonials_admin',
    __name__,
    url_prefix='/admin/testimonials'
)

from . import routes
from .database import SCHEMA, make_repository

__all__ = ['testimonials_bp', 'SCHEMA', 'make_repository']
