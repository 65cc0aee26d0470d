"""
Deazytech Modules
=================

Flask blueprint modules for the public site and the admin area.
"""

__all__ = ['auth', 'dashboard', 'experts', 'services', 'industries', 'testimonials', 'clients', 'projects', 'uploads', 'site']
