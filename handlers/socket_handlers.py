"""
Socket.IO Event Handlers for Spyfall Party.

Pure routing layer that delegates to the game core.
Contains no game rules - only authentication, event routing and relaying
the core's notifications to the session room and private role payloads to
single sockets.
"""

import logging
from flask import request
from flask_socketio import emit, join_room, leave_room

from game.commands import (
    StartRound, AcknowledgeRole, AdvanceTurn, SubmitSpyGuess, SubmitPlayerVote,
    EndRound, LeaveSession, KickPlayer
)
from game.models import Phase
from game.notifications import RoundSummary
from game.results import FailureKind
from utils.helpers import normalize_session_code, sanitize_player_name, validate_player_name

logger = logging.getLogger(__name__)

def register_socket_handlers(socketio, game_manager, connection_manager, summary_delay_seconds=0):
    """
    Register all Socket.IO event handlers.

    Args:
        socketio: SocketIO instance
        game_manager: Game core instance
        connection_manager: Socket <-> player bookkeeping
        summary_delay_seconds: Delay before the next round starts on its own
            after a summary; 0 disables it
    """

    def relay(result, reply_errors=True):
        """Broadcast a result's notifications, or report its failure to the caller."""
        if not result.success:
            logger.warning(f"Rejected command in {result.code}: {result.failure.value} - {result.message}")
            if reply_errors:
                emit('error', {'message': result.message, 'kind': result.failure.value})
            return False

        for notification in result.notifications:
            socketio.emit('game_update', notification.to_dict(), to=result.code)

        for assignment in result.private:
            socket_id = connection_manager.socket_for(result.code, assignment.player_id)
            if socket_id:
                socketio.emit('role_assignment', assignment.to_dict(), to=socket_id)

        for notification in result.notifications:
            if isinstance(notification, RoundSummary) and summary_delay_seconds > 0:
                schedule_next_round(result.code, notification.result.round_number)

        return True

    def schedule_next_round(code, round_number):
        """Start the next round after the summary delay unless someone already moved on."""
        def continue_round():
            socketio.sleep(summary_delay_seconds)
            session = game_manager.registry.get_session(code)
            if session is None or session.phase != Phase.SUMMARY or session.round_number != round_number:
                return
            try:
                relay(game_manager.start_round(code), reply_errors=False)
            except Exception as e:
                logger.error(f"Error auto-starting round in {code}: {e}")

        socketio.start_background_task(continue_round)

    def current_connection():
        connection = connection_manager.get(request.sid)
        if not connection:
            emit('error', {'message': 'Not in a game', 'kind': FailureKind.PLAYER_NOT_FOUND.value})
        return connection

    def run(command_factory, action):
        """Build a command for the caller's player and relay its result."""
        try:
            connection = current_connection()
            if not connection:
                return
            command = command_factory(connection)
            relay(game_manager.execute(command))
        except Exception as e:
            logger.error(f"Error handling {action}: {e}")
            emit('error', {'message': f'Failed to {action}'})

    def bind_player(code, player_id):
        """Bind the caller's socket to a player, releasing any other player it held."""
        previous = connection_manager.get(request.sid)
        if previous and (previous.session_code, previous.player_id) != (code, player_id):
            connection_manager.unbind(request.sid)
            leave_room(previous.session_code)
            relay(game_manager.disconnect(previous.session_code, previous.player_id), reply_errors=False)

        connection_manager.bind(request.sid, code, player_id)
        join_room(code)

    @socketio.on('connect')
    def handle_connect():
        """Handle client connection."""
        logger.info(f"Client connected: {request.sid}")

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Handle client disconnection; the player keeps their seat."""
        logger.info(f"Client disconnected: {request.sid}")

        try:
            connection = connection_manager.unbind(request.sid)
            if connection:
                relay(game_manager.disconnect(connection.session_code, connection.player_id), reply_errors=False)
        except Exception as e:
            logger.error(f"Error handling disconnect: {e}")

    @socketio.on('join_game')
    def handle_join_game(data):
        """Handle a player joining or rejoining a game."""
        try:
            data = data or {}
            code = normalize_session_code(data.get('gameId'))
            player_id = data.get('playerId')
            secret = data.get('secret')

            if not code:
                emit('error', {'message': 'Missing game code'})
                return

            if player_id and secret:
                result = game_manager.reconnect(code, player_id, secret)
                if result.success:
                    bind_player(result.code, player_id)
                    emit('joined_game', {
                        'gameId': result.code,
                        'playerId': player_id,
                        'isHost': result.data['is_host'],
                        'reconnected': True
                    })
                    relay(result)
                    return
                if result.failure != FailureKind.PLAYER_NOT_FOUND:
                    relay(result)
                    return

            name = sanitize_player_name(data.get('playerName', ''))
            is_valid, error = validate_player_name(name)
            if not is_valid:
                emit('error', {'message': error})
                return

            result = game_manager.join(code, name, observer=bool(data.get('observer', False)))
            if not result.success:
                relay(result)
                return

            bind_player(result.code, result.data['player_id'])
            emit('joined_game', {
                'gameId': result.code,
                'playerId': result.data['player_id'],
                'secret': result.data['secret'],
                'isHost': result.data['is_host'],
                'reconnected': False
            })
            relay(result)

        except Exception as e:
            logger.error(f"Error joining game: {e}")
            emit('error', {'message': 'Failed to join game'})

    @socketio.on('leave_game')
    def handle_leave_game(data=None):
        """Handle a player leaving for good."""
        try:
            connection = current_connection()
            if not connection:
                return

            result = game_manager.execute(LeaveSession(connection.session_code, connection.player_id))
            if result.success:
                leave_room(connection.session_code)
                connection_manager.unbind(request.sid)
                emit('left_game', {'gameId': connection.session_code})
            relay(result)

            if result.data.get('session_closed'):
                connection_manager.drop_session(connection.session_code)

        except Exception as e:
            logger.error(f"Error leaving game: {e}")
            emit('error', {'message': 'Failed to leave game'})

    @socketio.on('kick_player')
    def handle_kick_player(data):
        """Handle the host removing a player."""
        try:
            connection = current_connection()
            if not connection:
                return

            target_id = (data or {}).get('playerId')
            result = game_manager.execute(KickPlayer(connection.session_code, connection.player_id, target_id))
            if result.success:
                target_sid = connection_manager.socket_for(connection.session_code, target_id)
                if target_sid:
                    connection_manager.unbind(target_sid)
                    leave_room(connection.session_code, sid=target_sid)
                    socketio.emit('kicked', {'gameId': connection.session_code}, to=target_sid)
            relay(result)

        except Exception as e:
            logger.error(f"Error kicking player: {e}")
            emit('error', {'message': 'Failed to remove player'})

    @socketio.on('start_round')
    def handle_start_round(data=None):
        run(lambda c: StartRound(c.session_code, c.player_id), 'start round')

    @socketio.on('acknowledge_role_info')
    def handle_acknowledge_role(data=None):
        run(lambda c: AcknowledgeRole(c.session_code, c.player_id), 'acknowledge role')

    @socketio.on('next_turn')
    def handle_next_turn(data=None):
        run(lambda c: AdvanceTurn(c.session_code, c.player_id), 'advance turn')

    @socketio.on('submit_spy_guess')
    def handle_spy_guess(data):
        location = (data or {}).get('locationGuess', '')
        run(lambda c: SubmitSpyGuess(c.session_code, c.player_id, location), 'submit guess')

    @socketio.on('submit_player_vote')
    def handle_player_vote(data):
        accused_id = (data or {}).get('accusedPlayerId', '')
        run(lambda c: SubmitPlayerVote(c.session_code, c.player_id, accused_id), 'submit vote')

    @socketio.on('end_round')
    def handle_end_round(data=None):
        run(lambda c: EndRound(c.session_code, c.player_id), 'end round')

    logger.info("Socket handlers registered successfully")
