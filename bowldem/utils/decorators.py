"""
Request Decorators

Contains decorators for identity resolution and debug-only endpoints.
"""

from functools import wraps
from flask import current_app, g, request

from ..errors import IdentityError
from .helpers import error_response


def require_identity(f):
    """
    Decorator resolving the current username for HTTP endpoints.
    The username is placed on flask.g.username.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.identity_service import get_identity_service

        identity_service = get_identity_service()
        if not identity_service:
            return error_response('Identity service unavailable', 500)

        try:
            g.username = identity_service.resolve_username(request.headers.get('Authorization'))
        except IdentityError as e:
            return error_response(e.message, e.status_code)

        return f(*args, **kwargs)

    return decorated_function


def debug_only(f):
    """Hide an endpoint unless ENABLE_DEBUG_ROUTES is set."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_app.config.get('ENABLE_DEBUG_ROUTES', False):
            return error_response('Not found', 404)
        return f(*args, **kwargs)

    return decorated_function
