"""
Background lifecycle tasks for Spyfall Party.

Periodic expiry of idle sessions, run as a Socket.IO background task.
"""

import logging

logger = logging.getLogger(__name__)

def sweep_expired_sessions(game_manager, connection_manager, ttl_seconds):
    """
    Expire idle sessions once and forget their sockets.

    Returns:
        Number of sessions removed
    """
    expired = game_manager.registry.expire_inactive(ttl_seconds)
    if expired:
        live_codes = set(game_manager.registry.list_codes())
        for code in connection_manager.session_codes() - live_codes:
            connection_manager.drop_session(code)
        logger.info(f"Cleaned up {expired} expired games")
    return expired

def start_expiry_sweep(socketio, game_manager, connection_manager, ttl_seconds, interval_seconds):
    """
    Run sweep_expired_sessions every `interval_seconds` for the life of the server.

    Args:
        socketio: SocketIO instance providing sleep/background tasks
        game_manager: Game core instance
        connection_manager: Socket <-> player bookkeeping
        ttl_seconds: Inactivity threshold
        interval_seconds: Time between sweeps
    """
    def sweep_forever():
        while True:
            socketio.sleep(interval_seconds)
            try:
                sweep_expired_sessions(game_manager, connection_manager, ttl_seconds)
            except Exception as e:
                logger.error(f"Error during session cleanup: {e}")

    logger.info(f"Session expiry sweep every {interval_seconds}s, TTL {ttl_seconds}s")
    return socketio.start_background_task(sweep_forever)
