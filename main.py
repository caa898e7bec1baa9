"""
Bowldem Game Server - Main Entry Point

This is the main entry point for the Bowldem game server.
It validates the reference data, initializes all services and starts the
Flask-SocketIO application.
"""

import os
from bowldem import create_app
from bowldem.config import config, validate_puzzle_integrity, get_puzzle_statistics, PLAYERS, PUZZLES
from bowldem.services.game_service import initialize_game_service
from bowldem.services.identity_service import initialize_identity_service
from bowldem.services.storage_service import KeySpace, initialize_storage_service
from bowldem.utils.game_logger import game_logger


def initialize_services(config_class):
    """Initialize storage, identity and game services from a config class."""
    store = initialize_storage_service(
        config_class.STORAGE_BACKEND,
        mongo_uri=config_class.MONGO_URI,
        db_name=config_class.MONGO_DB_NAME
    )
    print(f"✓ Storage initialized ({type(store).__name__})")

    if not config_class.JWT_SECRET and not config_class.ALLOW_ANONYMOUS:
        raise ValueError("JWT_SECRET must be set when anonymous play is disabled")
    initialize_identity_service(config_class.JWT_SECRET, config_class.ALLOW_ANONYMOUS)
    print(f"✓ Identity service initialized (anonymous play: {config_class.ALLOW_ANONYMOUS})")

    game_service = initialize_game_service(
        store,
        keys=KeySpace(config_class.KEY_PREFIX),
        players=PLAYERS,
        puzzles=PUZZLES,
        max_guesses=config_class.MAX_GUESSES,
        epoch_date=config_class.EPOCH_DATE,
        leaderboard_size=config_class.LEADERBOARD_SIZE,
        share_footer=config_class.SHARE_FOOTER or None
    )
    print("✓ Game service initialized successfully")
    return game_service


def main():
    """Main function to initialize services and start the server."""
    config_class = config[os.getenv('FLASK_ENV', 'default')]

    try:
        print("Validating reference data...")
        validate_puzzle_integrity()
        stats = get_puzzle_statistics()
        print(f"✓ {stats['total_puzzles']} puzzles, {stats['total_players']} players")

        print("Initializing services...")
        initialize_services(config_class)

        print("Creating Flask application...")
        app, socketio = create_app(config_class)
        print("✓ Flask application created successfully")

        game_logger.logger.info("Bowldem Server Starting")

        print(f"\nStarting Bowldem Game Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print(f"Debug routes: {config_class.ENABLE_DEBUG_ROUTES}")
        print("=" * 50)

        socketio.run(app, host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG,
                     allow_unsafe_werkzeug=True)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Bowldem Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
