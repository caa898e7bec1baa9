"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import GameState, GameStatus, GuessFeedback, MatchSummary
from .leaderboard import LeaderboardEntry
from .player import Player, PlayerRole, Puzzle, Scorecard
from .user import UserStats

__all__ = [
    'GameState', 'GameStatus', 'GuessFeedback', 'MatchSummary',
    'LeaderboardEntry',
    'Player', 'PlayerRole', 'Puzzle', 'Scorecard',
    'UserStats'
]
