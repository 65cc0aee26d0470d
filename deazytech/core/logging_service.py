"""
Logging Service
===============

Application-wide logging for Deazytech. Every entry goes to the
``deazytech`` logger with the source component and, inside a request, the
client ip, method and path attached as ``extra`` fields, so handlers and
formatters configured by the host app can pick them up.
"""

import json
import logging
import traceback
from flask import request, has_request_context

_logger = logging.getLogger('deazytech')

LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
}


def _client_ip():
    forwarded = request.headers.get('X-Forwarded-For')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr


class LoggingService:
    """Static logging helpers shared by every module"""

    @staticmethod
    def request_context():
        """ip/method/path/user agent of the active request, or an empty dict"""
        if not has_request_context():
            return {}
        return {
            'ip_address': _client_ip(),
            'method': request.method,
            'request_path': request.path,
            'user_agent': request.headers.get('User-Agent', ''),
        }

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Emit one log entry

        Args:
            level (str): DEBUG, INFO, WARNING or ERROR
            source (str): Component name (experts, auth, uploads, api_client, ...)
            message (str): Human-readable message
            details (str/dict): Extra data; dicts are serialized as JSON
            user_id: Admin id when the entry concerns a signed-in admin
        """
        context = LoggingService.request_context()

        if isinstance(details, dict):
            details = json.dumps(details, default=str)

        parts = [f"[{source}] {message}"]
        if context:
            parts.append(f"({context['method']} {context['request_path']} from {context['ip_address']})")
        if user_id is not None:
            parts.append(f"admin={user_id}")
        if details:
            parts.append(f"details={details}")

        extra = dict(context, source=source, user_id=user_id)
        _logger.log(LEVELS.get(level.upper(), logging.INFO), ' '.join(parts), extra=extra)

    @staticmethod
    def debug(source, message, details=None, user_id=None):
        LoggingService.log('DEBUG', source, message, details, user_id)

    @staticmethod
    def info(source, message, details=None, user_id=None):
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def warning(source, message, details=None, user_id=None):
        LoggingService.log('WARNING', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def log_user_action(source, action, user_id=None, details=None):
        """Admin actions: login, logout, content changes, uploads"""
        LoggingService.info(source, f"Admin action: {action}", details, user_id)

    @staticmethod
    def log_api_call(source, endpoint, method='GET', status_code=200, details=None):
        """Outbound backend call; level follows the status class"""
        if status_code >= 500:
            level = 'ERROR'
        elif status_code >= 400:
            level = 'WARNING'
        else:
            level = 'INFO'
        LoggingService.log(level, source, f"{method} {endpoint} -> {status_code}", details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Unexpected exception, with the traceback currently being handled"""
        LoggingService.error(source, f"Unhandled {type(error).__name__}: {error}", {
            'error_type': type(error).__name__,
            'traceback': traceback.format_exc(),
            'context': details,
        })

    @staticmethod
    def log_security_event(message, details=None):
        """Authentication failures, rejected tokens and gate errors"""
        LoggingService.warning('security', message, details)
