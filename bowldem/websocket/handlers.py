"""
WebSocket Event Handlers

Lets clients subscribe to a puzzle date's leaderboard and receive a push
whenever someone wins.
"""

from typing import Dict, Optional
from flask_socketio import SocketIO, emit, join_room, leave_room
from ..services.game_service import get_game_service
from ..utils.game_logger import game_logger


def leaderboard_room(puzzle_date: str) -> str:
    return f"leaderboard:{puzzle_date}"


def _resolve_date(data: Optional[Dict]) -> Optional[str]:
    if isinstance(data, dict) and data.get('puzzle_date'):
        return str(data['puzzle_date'])

    game_service = get_game_service()
    return game_service.today() if game_service else None


def broadcast_leaderboard_update(socketio: Optional[SocketIO], puzzle_date: str, payload: Dict) -> None:
    """Push the fresh leaderboard to everyone watching that date."""
    if socketio is None:
        return
    socketio.emit('leaderboard_updated', payload, to=leaderboard_room(puzzle_date))


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        pass

    @socketio.on('join_leaderboard')
    def handle_join_leaderboard(data=None):
        puzzle_date = _resolve_date(data)
        if not puzzle_date:
            emit('error', {'error': 'Game service unavailable'})
            return

        join_room(leaderboard_room(puzzle_date))
        game_logger.logger.info(f"Socket joined leaderboard room for {puzzle_date}")
        emit('leaderboard_joined', {'puzzle_date': puzzle_date})

    @socketio.on('leave_leaderboard')
    def handle_leave_leaderboard(data=None):
        puzzle_date = _resolve_date(data)
        if puzzle_date:
            leave_room(leaderboard_room(puzzle_date))
        emit('leaderboard_left', {'puzzle_date': puzzle_date})
