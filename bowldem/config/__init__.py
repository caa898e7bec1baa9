"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules, constants and reference data (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    EPOCH_DATE, MAX_GUESSES, PLAYERS, PUZZLES,
    load_players, load_puzzles, validate_puzzle_integrity, get_puzzle_statistics
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'EPOCH_DATE', 'MAX_GUESSES', 'PLAYERS', 'PUZZLES',
    'load_players', 'load_puzzles', 'validate_puzzle_integrity', 'get_puzzle_statistics'
]
