"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_identity, debug_only
from .helpers import get_user_identity, error_response
from .game_logger import game_logger

__all__ = ['require_identity', 'debug_only', 'get_user_identity', 'error_response', 'game_logger']
