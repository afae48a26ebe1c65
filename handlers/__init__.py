"""
Handlers Module for Spyfall Party.

Contains all web layer handlers (Socket.IO and API) with no business logic.
Handlers coordinate between the web layer and the game core.
"""

from .socket_handlers import register_socket_handlers
from .api_handlers import register_api_handlers
from .lifecycle import start_expiry_sweep, sweep_expired_sessions

__all__ = [
    'register_socket_handlers',
    'register_api_handlers',
    'start_expiry_sweep',
    'sweep_expired_sessions'
]
