"""
Utilities module for Spyfall Party.

This module contains constants, helper functions, and utility classes
used throughout the application.
"""

from .constants import LOCATIONS, GAME_CONFIG, WINNER_TYPES, ROUND_END_REASONS
from .helpers import (
    generate_session_code, normalize_session_code, generate_token,
    sanitize_player_name, validate_player_name
)
from .randomizer import Randomizer

__all__ = [
    'LOCATIONS',
    'GAME_CONFIG',
    'WINNER_TYPES',
    'ROUND_END_REASONS',
    'generate_session_code',
    'normalize_session_code',
    'generate_token',
    'sanitize_player_name',
    'validate_player_name',
    'Randomizer'
]
