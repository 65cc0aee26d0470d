"""
Error Types
===========

Typed failures shared by repositories, the backend client and the HTTP layer.
Each carries the HTTP status it maps to so handlers never inspect messages.
"""


class DeazyError(Exception):
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ValidationError(DeazyError):
    """Bad input rejected before any storage call"""
    status_code = 400
    default_message = 'Invalid request'


class NotFoundError(DeazyError):
    status_code = 404
    default_message = 'Not found'


class UnauthorizedError(DeazyError):
    status_code = 401
    default_message = 'Authentication required'


class AuthError(UnauthorizedError):
    """Sign-in rejected by the identity store"""
    default_message = 'Invalid email or password'


class StorageError(DeazyError):
    """A database statement failed; the driver error is chained as __cause__"""
    default_message = 'Storage error'


class BackendError(DeazyError):
    """The projects backend answered with an error or could not be reached"""
    status_code = 502
    default_message = 'Backend request failed'
