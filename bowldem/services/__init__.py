"""
Services Package

Contains all business logic and service classes.
"""

from .game_service import GameService, get_game_service, initialize_game_service
from .identity_service import IdentityService, get_identity_service, initialize_identity_service
from .leaderboard_service import LeaderboardService
from .stats_service import StatsService, apply_result
from .storage_service import (
    KeySpace, KeyValueStore, MemoryStore, MongoStore,
    get_storage_service, initialize_storage_service
)

__all__ = [
    'GameService', 'get_game_service', 'initialize_game_service',
    'IdentityService', 'get_identity_service', 'initialize_identity_service',
    'LeaderboardService',
    'StatsService', 'apply_result',
    'KeySpace', 'KeyValueStore', 'MemoryStore', 'MongoStore',
    'get_storage_service', 'initialize_storage_service'
]
