"""
Game Controller

Handles the daily puzzle endpoints: init, guess, debug reset and health.
"""

from dataclasses import asdict
from flask import Blueprint, current_app, g, request, jsonify
from ..errors import GameError
from ..services.game_service import get_game_service
from ..services.identity_service import get_identity_service
from ..utils.decorators import debug_only, require_identity
from ..utils.game_logger import game_logger
from ..utils.helpers import error_response
from ..websocket.handlers import broadcast_leaderboard_update

game_bp = Blueprint('game', __name__)


def handle_game_error(error: GameError, action: str, puzzle_date=None):
    """Answer a GameError; refusals are logged as such, failures as errors."""
    if error.expected:
        game_logger.log_rejection(request, action, error.message, puzzle_date)
    else:
        game_logger.log_error(request, error, action, puzzle_date)
        game_logger.log_server_response(request, action, False, {'error': error.message}, puzzle_date)
    return error_response(error.message, error.status_code)


def handle_unexpected_error(error: Exception, action: str, puzzle_date=None):
    game_logger.log_error(request, error, action, puzzle_date)
    game_logger.log_server_response(request, action, False, {'error': 'Internal server error'}, puzzle_date)
    return error_response('Internal server error', 500)


@game_bp.route('/init', methods=['GET'])
@require_identity
def init():
    """Today's puzzle with the user's saved state and stats."""
    game_service = get_game_service()
    if not game_service:
        return error_response('Game service unavailable', 500)

    try:
        game_logger.log_user_action(request, 'init')

        state = game_service.get_init_state(g.username)
        response_data = {
            'success': True,
            **state
        }

        game_logger.log_server_response(
            request, 'init', True, response_data, state['puzzle_date'],
            puzzle_number=state['puzzle_number']
        )
        return jsonify(response_data)

    except GameError as e:
        return handle_game_error(e, 'init')
    except Exception as e:
        return handle_unexpected_error(e, 'init')


@game_bp.route('/guess', methods=['POST'])
@require_identity
def make_guess():
    """Submit a guess for today's puzzle."""
    game_service = get_game_service()
    if not game_service:
        return error_response('Game service unavailable', 500)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    player_id = data.get('player_id') or data.get('candidate_id')
    if not player_id:
        game_logger.log_rejection(request, 'submit_guess', 'player_id is required')
        return error_response('player_id is required', 400)

    if not isinstance(player_id, str):
        game_logger.log_rejection(request, 'submit_guess', 'player_id must be a string')
        return error_response('player_id must be a string', 400)

    try:
        game_logger.log_user_action(request, 'submit_guess', guess=player_id)

        result = game_service.make_guess(g.username, player_id)
        state = result.game_state

        response_data = {
            'success': True,
            'feedback': asdict(result.feedback),
            'game_state': asdict(state),
            'stats': asdict(result.stats),
        }
        if result.match_summary:
            response_data['match_summary'] = asdict(result.match_summary)
        if result.share_text:
            response_data['share_text'] = result.share_text

        game_logger.log_server_response(
            request, 'submit_guess', True, response_data, state.puzzle_date,
            guess=player_id, guesses_used=len(state.guesses), game_status=state.game_status
        )

        # Log special game events
        if result.completed:
            event = 'game_won' if result.won else 'game_lost'
            game_logger.log_game_event(
                state.puzzle_date, event, g.username,
                puzzle_number=state.puzzle_number, guesses_used=len(state.guesses),
                final_guess=player_id
            )

        if result.won:
            entries = game_service.leaderboard_service.get_top(state.puzzle_date)
            broadcast_leaderboard_update(
                getattr(current_app, 'socketio', None),
                state.puzzle_date,
                {
                    'puzzle_number': state.puzzle_number,
                    'puzzle_date': state.puzzle_date,
                    'entries': [asdict(entry) for entry in entries],
                }
            )

        return jsonify(response_data)

    except GameError as e:
        return handle_game_error(e, 'submit_guess')
    except Exception as e:
        return handle_unexpected_error(e, 'submit_guess')


@game_bp.route('/reset', methods=['POST'])
@debug_only
@require_identity
def reset_game():
    """Delete the current user's game for today. Development only."""
    game_service = get_game_service()
    if not game_service:
        return error_response('Game service unavailable', 500)

    try:
        puzzle_date = game_service.today()
        game_logger.log_user_action(request, 'reset_game', puzzle_date)

        deleted = game_service.reset_game(g.username, puzzle_date)
        response_data = {
            'success': True,
            'deleted': deleted,
            'puzzle_date': puzzle_date
        }

        game_logger.log_server_response(request, 'reset_game', True, response_data, puzzle_date)
        if deleted:
            game_logger.log_game_event(puzzle_date, 'game_reset', g.username)

        return jsonify(response_data)

    except GameError as e:
        return handle_game_error(e, 'reset_game')
    except Exception as e:
        return handle_unexpected_error(e, 'reset_game')


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        game_service = get_game_service()

        game_logger.log_user_action(request, 'health_check')

        response_data = {
            'status': 'healthy' if game_service else 'degraded',
            'game_service': game_service is not None,
            'identity_service': get_identity_service() is not None,
            'storage': type(game_service.store).__name__ if game_service else None,
            'total_puzzles': len(game_service.puzzles) if game_service else 0,
            'log_stats': game_logger.get_log_stats(),
        }

        game_logger.log_server_response(request, 'health_check', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        return handle_unexpected_error(e, 'health_check')
