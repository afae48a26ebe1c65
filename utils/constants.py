"""
Game constants for Spyfall Party.

This module contains all constant values used throughout the game,
including the location catalog, session code alphabet and scoring values.
"""

# Candidate secret locations
LOCATIONS = [
    "Airplane", "Bank", "Beach", "Casino", "Circus", "Party",
    "Cruise Ship", "Day Spa", "Hospital", "Hotel", "Military Base",
    "Movie Studio", "Train", "Pirate Ship", "Science Lab", "Police Station",
    "Restaurant", "School", "Petrol Station", "Space Station", "Submarine",
    "Supermarket", "Theater", "Wedding", "Zoo"
]

# No 0/O or 1/I so codes can be read off a TV screen
SESSION_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

# Session constants
MAX_PLAYERS_PER_SESSION = 12

# Game configuration
GAME_CONFIG = {
    'MAX_PLAYERS': MAX_PLAYERS_PER_SESSION,
    'MIN_PLAYERS': 1,
    'SESSION_CODE_LENGTH': 6,
    'SPY_WIN_POINTS': 3,
    'CORRECT_VOTE_POINTS': 1,
    'MAX_NAME_LENGTH': 20
}

# Winner types
WINNER_TYPES = {
    'SPY': 'spy',
    'CIVILIANS': 'civilians'
}

# Reasons attached to round_ended notifications
ROUND_END_REASONS = {
    'HOST': 'ended_by_host',
    'SPY_LEFT': 'spy_left',
    'NO_PARTICIPANTS': 'no_participants'
}
