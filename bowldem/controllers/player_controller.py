"""
Player Controller

Serves the player directory for client-side autocomplete.
"""

from flask import Blueprint, request, jsonify
from ..services.game_service import get_game_service
from ..utils.game_logger import game_logger
from ..utils.helpers import error_response
from .game_controller import handle_unexpected_error

player_bp = Blueprint('players', __name__)


@player_bp.route('/players', methods=['GET'])
def list_players():
    """All guessable players, flagged active when they appear in a puzzle."""
    game_service = get_game_service()
    if not game_service:
        return error_response('Game service unavailable', 500)

    try:
        players = game_service.get_players()
        response_data = {
            'success': True,
            'players': players
        }

        game_logger.log_server_response(request, 'players', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        return handle_unexpected_error(e, 'players')
