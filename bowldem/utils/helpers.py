"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Dict
from flask import g, has_app_context, jsonify, request


def get_user_identity(request_obj=None) -> Dict[str, str]:
    """Extract user identity information from request."""
    if request_obj is None:
        request_obj = request

    user_ip = getattr(request_obj, 'remote_addr', None) or 'unknown'

    return {
        'user_ip': user_ip,
        'username': g.get('username') if has_app_context() else None
    }


def error_response(message: str, status_code: int):
    """JSON error body in the API's standard shape."""
    return jsonify({
        'success': False,
        'error': message
    }), status_code
