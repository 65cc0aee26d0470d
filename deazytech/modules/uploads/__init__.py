"""
Uploads Module
==============

Image upload API (/api/upload) and serving of locally stored uploads
(/uploads/<path>).
"""

from flask import Blueprint

uploads_bp = Blueprint('uploads', __name__)

from . import routes

__all__ = ['uploads_bp']
