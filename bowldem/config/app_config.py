"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))

    # Storage Settings
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'mongo')  # "mongo" or "memory"
    MONGO_URI = os.getenv('MONGO_URI')
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'bowldem')
    KEY_PREFIX = os.getenv('KEY_PREFIX', 'bowldem')

    # Identity Settings
    JWT_SECRET = os.getenv('JWT_SECRET')
    JWT_EXPIRATION_DAYS = int(os.getenv('JWT_EXPIRATION_DAYS', 7))
    ALLOW_ANONYMOUS = os.getenv('ALLOW_ANONYMOUS', 'True').lower() == 'true'

    # Game Settings
    MAX_GUESSES = int(os.getenv('MAX_GUESSES', 5))
    EPOCH_DATE = os.getenv('EPOCH_DATE', '2026-01-15')
    LEADERBOARD_SIZE = int(os.getenv('LEADERBOARD_SIZE', 20))
    SHARE_FOOTER = os.getenv('SHARE_FOOTER', '')
    ENABLE_DEBUG_ROUTES = os.getenv('ENABLE_DEBUG_ROUTES', 'False').lower() == 'true'

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    ENABLE_DEBUG_ROUTES = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    ENABLE_DEBUG_ROUTES = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    STORAGE_BACKEND = 'memory'
    JWT_SECRET = 'testing-secret'
    ENABLE_DEBUG_ROUTES = True


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
