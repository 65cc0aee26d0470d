"""
Deazytech Core
==============

Shared services behind the site and admin modules: configuration, the
query executor and resource repository, typed errors, logging, image
storage, the backend client and the authorization gate.
"""

from .config import Config
from .database import Database
from .errors import (
    AuthError, BackendError, DeazyError, NotFoundError, StorageError,
    UnauthorizedError, ValidationError,
)
from .logging_service import LoggingService
from .repository import ChildCollection, ResourceRepository

__all__ = [
    'Config', 'Database', 'LoggingService',
    'ChildCollection', 'ResourceRepository',
    'DeazyError', 'ValidationError', 'NotFoundError', 'UnauthorizedError',
    'AuthError', 'StorageError', 'BackendError',
]
