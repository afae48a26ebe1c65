"""
Spyfall Party - A Social Deduction Game Backend

Flask-SocketIO server around the in-memory game core. One player is
secretly the spy; everyone else knows the location. App.py is purely
server setup and handler registration.
"""

import logging
from flask import Flask
from flask_socketio import SocketIO
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from config import settings
from game.manager import GameManager
from lobby import SessionRegistry, ConnectionManager
from handlers import register_socket_handlers, register_api_handlers, start_expiry_sweep

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

def create_app(overrides=None, game_manager=None):
    """
    Application factory that creates and configures the Flask app.

    Args:
        overrides: Optional Flask config values (e.g. {'TESTING': True})
        game_manager: Optional pre-built game core, mostly for tests

    Returns:
        Configured Flask app with SocketIO
    """

    # Flask configuration
    app = Flask(__name__)
    app.config['SECRET_KEY'] = settings.SECRET_KEY
    app.config['SUMMARY_AUTO_CONTINUE_SECONDS'] = settings.SUMMARY_AUTO_CONTINUE_SECONDS
    app.config['SESSION_TTL_SECONDS'] = settings.SESSION_TTL_SECONDS
    app.config['SWEEP_INTERVAL_SECONDS'] = settings.SWEEP_INTERVAL_SECONDS
    app.config.update(overrides or {})

    cors_origins = settings.CORS_ORIGINS.split(',')

    # CORS configuration for the web frontend
    CORS(app, origins=cors_origins)

    # ProxyFix for deployment behind reverse proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    # SocketIO configuration
    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=settings.SOCKETIO_ASYNC_MODE,
        ping_timeout=60,
        ping_interval=25
    )

    # Game core
    logger.info("Initializing game core...")
    game_manager = game_manager or GameManager(SessionRegistry())
    connection_manager = ConnectionManager()
    app.extensions['game_manager'] = game_manager

    # Register handlers (pure routing layer)
    logger.info("Registering handlers...")
    register_socket_handlers(
        socketio, game_manager, connection_manager,
        summary_delay_seconds=app.config['SUMMARY_AUTO_CONTINUE_SECONDS']
    )
    register_api_handlers(app, game_manager)

    if not app.config.get('TESTING'):
        start_expiry_sweep(
            socketio, game_manager, connection_manager,
            ttl_seconds=app.config['SESSION_TTL_SECONDS'],
            interval_seconds=app.config['SWEEP_INTERVAL_SECONDS']
        )

    logger.info("Application initialization complete")

    return app, socketio

def main():
    """Main entry point for development server."""

    # Create the application
    app, socketio = create_app()

    logger.info(f"Starting Spyfall Party server on port {settings.PORT}")

    socketio.run(
        app,
        host='0.0.0.0',
        port=settings.PORT,
        debug=settings.DEBUG and not settings.IS_RENDER,
        allow_unsafe_werkzeug=True
    )

if __name__ == '__main__':
    main()
