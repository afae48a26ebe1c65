"""
Helper utilities for Spyfall Party.

This module contains utility functions used throughout the application
for validation, generation, and data manipulation.
"""

import random
import re
import uuid
from typing import Optional, Tuple
from .constants import SESSION_CODE_ALPHABET, GAME_CONFIG

def generate_session_code(length: int = GAME_CONFIG['SESSION_CODE_LENGTH']) -> str:
    """Generate a random session code."""
    return ''.join(random.choices(SESSION_CODE_ALPHABET, k=length))

def normalize_session_code(code: Optional[str]) -> str:
    """Upper-case a session code and drop anything outside the alphabet."""
    if not code:
        return ""
    return ''.join(ch for ch in code.strip().upper() if ch in SESSION_CODE_ALPHABET)

def generate_token() -> str:
    """Generate an opaque identifier for player ids and secrets."""
    return uuid.uuid4().hex

def names_match(first: str, second: str) -> bool:
    """Case-insensitive name comparison used for roster uniqueness."""
    return first.strip().casefold() == second.strip().casefold()

def sanitize_player_name(name: str) -> str:
    """
    Sanitize a display name before it reaches the game core.

    Args:
        name: Raw name as typed by the player

    Returns:
        Name without markup, collapsed whitespace, length-limited
    """
    name = re.sub(r'<[^>]*>', '', name or '')
    name = re.sub(r'[<>"\'&]', '', name)
    name = re.sub(r'\s+', ' ', name.strip())
    return name[:GAME_CONFIG['MAX_NAME_LENGTH']]

def validate_player_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a display name for the game.

    Returns:
        tuple: (is_valid, error_message)
    """
    if not name:
        return False, "Name cannot be empty"

    if len(name) > GAME_CONFIG['MAX_NAME_LENGTH']:
        return False, f"Name must be {GAME_CONFIG['MAX_NAME_LENGTH']} characters or less"

    if not re.match(r'^[\w\s\-\.\']+$', name):
        return False, "Name contains invalid characters"

    return True, None
