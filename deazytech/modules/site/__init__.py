"""
Site Module
===========

Public marketing pages and the read-only JSON API behind them.

Provides:
- Home, services, about, portfolio and industries pages
- /api/experts, /api/services, /api/industries, /api/testimonials,
  /api/clients (list and detail)
- Testimonials and client logos on the home page
"""

from flask import Blueprint

site_bp = Blueprint(
    'site',
    __name__,
    template_folder='templates'
)

from . import routes

__all__ = ['site_bp']
