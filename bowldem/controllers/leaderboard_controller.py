"""
Leaderboard Controller

Handles the daily leaderboard endpoint.
"""

from flask import Blueprint, g, request, jsonify
from ..errors import GameError
from ..services.game_service import get_game_service
from ..utils.decorators import require_identity
from ..utils.game_logger import game_logger
from ..utils.helpers import error_response
from .game_controller import handle_game_error, handle_unexpected_error

leaderboard_bp = Blueprint('leaderboard', __name__)


@leaderboard_bp.route('/leaderboard', methods=['GET'])
@require_identity
def get_leaderboard():
    """Top winners for today plus the requesting user's own entry."""
    game_service = get_game_service()
    if not game_service:
        return error_response('Game service unavailable', 500)

    size = request.args.get('limit', type=int)
    if size is not None and size <= 0:
        game_logger.log_rejection(request, 'leaderboard', 'limit must be positive')
        return error_response('limit must be positive', 400)

    try:
        game_logger.log_user_action(request, 'leaderboard', limit=size)

        leaderboard = game_service.get_leaderboard(g.username, size)
        response_data = {
            'success': True,
            **leaderboard
        }

        game_logger.log_server_response(
            request, 'leaderboard', True, response_data, leaderboard['puzzle_date'],
            entry_count=len(leaderboard['entries'])
        )
        return jsonify(response_data)

    except GameError as e:
        return handle_game_error(e, 'leaderboard')
    except Exception as e:
        return handle_unexpected_error(e, 'leaderboard')
