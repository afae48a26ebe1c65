"""
API Route Handlers for Spyfall Party.

Pure routing layer that delegates to the game core.
Contains no business logic - only request/response handling.
"""

import logging
from datetime import datetime, timezone
from flask import jsonify, request

logger = logging.getLogger(__name__)

def register_api_handlers(app, game_manager):
    """
    Register all API route handlers.

    Args:
        app: Flask application instance
        game_manager: Game core instance
    """

    @app.route('/api/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'ok',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'active_games': len(game_manager.registry)
        })

    @app.route('/api/games', methods=['POST'])
    def create_game():
        """Create a new game session."""
        try:
            result = game_manager.create_session()
            return jsonify({'gameId': result.code}), 201

        except Exception as e:
            logger.error(f"Error creating game: {e}")
            return jsonify({'error': 'Failed to create game'}), 500

    @app.route('/api/games/<code>')
    def get_game(code):
        """
        Inspect a game.

        Optional `player_id` and `secret` query parameters identify the
        viewer so their own role is included.
        """
        try:
            player_id = request.args.get('player_id')
            secret = request.args.get('secret')

            if player_id and not game_manager.registry.authenticate(code, player_id, secret):
                if game_manager.registry.get_session(code) is None:
                    return jsonify({'error': 'Game not found'}), 404
                return jsonify({'error': 'Invalid player credentials'}), 403

            result = game_manager.view(code, viewer_id=player_id)
            if not result.success:
                return jsonify({'error': result.message, 'kind': result.failure.value}), 404

            return jsonify(result.data['session'])

        except Exception as e:
            logger.error(f"Error getting game {code}: {e}")
            return jsonify({'error': 'Failed to get game'}), 500

    # Error handlers
    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        return jsonify({'error': 'Internal server error'}), 500

    logger.info("API handlers registered successfully")
