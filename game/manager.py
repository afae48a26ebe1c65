"""
Game Manager - Session state machine.

Provides a unified interface for game operations by coordinating between
the SessionRegistry, TurnManager, VoteManager and the location catalog.
Every operation resolves the session code, holds that session's lock for
its whole duration and either fully applies or changes nothing.
"""

import logging
from typing import Callable, Dict, List, Optional

from lobby.models import Player, Session
from lobby.registry import SessionRegistry
from utils.constants import GAME_CONFIG, ROUND_END_REASONS
from utils.randomizer import Randomizer
from .catalog import LocationCatalog
from .commands import (
    Command, JoinSession, ReconnectPlayer, DisconnectPlayer, LeaveSession, KickPlayer,
    StartRound, AcknowledgeRole, AdvanceTurn, SubmitSpyGuess, SubmitPlayerVote, EndRound
)
from .models import Phase, Role, AccusationState
from .notifications import (
    Notification, RoleAssignment, PlayerJoined, PlayerLeft, PlayerDisconnected,
    PlayerReconnected, RoundStarted, PlayerAcknowledged, PlayingStarted, TurnAdvanced,
    AccuseModeStarted, SpyGuessSubmitted, VoteCast, RoundSummary, SubRoundStarted, RoundEnded
)
from .results import CommandResult, FailureKind
from .turn_manager import TurnManager
from .vote_manager import VoteManager

logger = logging.getLogger(__name__)

class GameManager:
    """Runs game commands against sessions held by a SessionRegistry."""

    def __init__(self, registry: SessionRegistry,
                 randomizer: Optional[Randomizer] = None,
                 catalog: Optional[LocationCatalog] = None,
                 vote_manager: Optional[VoteManager] = None):
        """
        Initialize the game manager.

        Args:
            registry: Where sessions live
            randomizer: Source of spy, location and starting-player picks
            catalog: Candidate locations
            vote_manager: Vote counting and resolution rules
        """
        self.registry = registry
        self.randomizer = randomizer or Randomizer()
        self.catalog = catalog or LocationCatalog()
        self.turn_manager = TurnManager(self.randomizer)
        self.vote_manager = vote_manager or VoteManager()

        self._handlers: Dict[type, Callable[[Command], CommandResult]] = {
            JoinSession: lambda c: self.join(c.code, c.name, observer=c.observer),
            ReconnectPlayer: lambda c: self.reconnect(c.code, c.player_id, c.secret),
            DisconnectPlayer: lambda c: self.disconnect(c.code, c.player_id),
            LeaveSession: lambda c: self.leave(c.code, c.player_id),
            KickPlayer: lambda c: self.kick(c.code, c.player_id, c.target_id),
            StartRound: lambda c: self.start_round(c.code, c.player_id),
            AcknowledgeRole: lambda c: self.acknowledge_role(c.code, c.player_id),
            AdvanceTurn: lambda c: self.advance_turn(c.code, c.player_id),
            SubmitSpyGuess: lambda c: self.submit_spy_guess(c.code, c.player_id, c.location),
            SubmitPlayerVote: lambda c: self.submit_player_vote(c.code, c.player_id, c.accused_id),
            EndRound: lambda c: self.end_round(c.code, c.player_id),
        }

    def execute(self, command: Command) -> CommandResult:
        """Dispatch a command to the matching operation."""
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported command: {type(command).__name__}")
        return handler(command)

    # Session lifecycle

    def create_session(self) -> CommandResult:
        code = self.registry.create_session()
        return CommandResult.ok("Game created", code)

    def view(self, code: str, viewer_id: Optional[str] = None) -> CommandResult:
        """
        Read-only projection of a session.

        Args:
            code: Session code
            viewer_id: Player asking; their own role and location are included

        Returns:
            CommandResult with the projection under data['session']
        """
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)
            return CommandResult.ok("Game state", session.code, session=session.to_dict(viewer_id))

    # Roster

    def join(self, code: str, name: str, observer: bool = False) -> CommandResult:
        """
        Add a player to a session.

        A participant joining during an active round is dealt in as a civilian.

        Returns:
            CommandResult whose data holds player_id, secret and is_host
        """
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)

            player, failure, message = self.registry.add_player(session, name, is_observer=observer)
            if player is None:
                return CommandResult.fail(failure, message, session.code)

            private = []
            if player.is_participant and session.phase.is_round_active:
                player.role = Role.CIVILIAN
                player.location = session.secret_location
                private.append(self._role_assignment(player))

            notification = PlayerJoined(
                player_id=player.id,
                player_name=player.name,
                is_host=player.is_host,
                is_observer=player.is_observer,
                total_players=len(session.players)
            )
            return CommandResult.ok(
                message, session.code, [notification], private,
                player_id=player.id, secret=player.secret, is_host=player.is_host
            )

    def reconnect(self, code: str, player_id: str, secret: str) -> CommandResult:
        """Mark a returning player connected again and re-send their role."""
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)
            if session.get_player(player_id) is None:
                return self._player_not_found(session)

            player = self.registry.player_manager.reconnect_player(session, player_id, secret)
            if player is None:
                return CommandResult.fail(FailureKind.NOT_AUTHORIZED, "Invalid player credentials", session.code)

            private = []
            if session.phase.is_round_active and player.role is not None:
                private.append(self._role_assignment(player))

            session.touch(self.registry.clock())
            return CommandResult.ok(
                "Player reconnected", session.code,
                [PlayerReconnected(player_id=player.id, player_name=player.name)], private,
                player_id=player.id, is_host=player.is_host
            )

    def disconnect(self, code: str, player_id: str) -> CommandResult:
        """
        Mark a player as disconnected.

        The player keeps their seat and score. A disconnected active player
        hands the turn to the next eligible player.
        """
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)

            active = session.active_player
            player = self.registry.player_manager.disconnect_player(session, player_id)
            if player is None:
                return self._player_not_found(session)

            notifications: List[Notification] = [
                PlayerDisconnected(player_id=player.id, player_name=player.name)
            ]
            if session.phase == Phase.INFORMING:
                notifications.extend(self._check_all_acknowledged(session))
            elif session.phase == Phase.PLAYING:
                notifications.extend(self._settle_turn(session, active.id if active else None))

            session.touch(self.registry.clock())
            return CommandResult.ok("Player disconnected", session.code, notifications)

    def leave(self, code: str, player_id: str) -> CommandResult:
        """Remove a player for good."""
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)

            player = session.get_player(player_id)
            if player is None:
                return self._player_not_found(session)

            return self._remove_player(session, player)

    def kick(self, code: str, host_id: str, target_id: str) -> CommandResult:
        """Host removes another player."""
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)

            host = session.get_player(host_id)
            target = session.get_player(target_id)
            if host is None or target is None:
                return self._player_not_found(session)
            if not host.is_host:
                return CommandResult.fail(FailureKind.NOT_AUTHORIZED, "Only the host can remove players", session.code)

            return self._remove_player(session, target)

    # Round flow

    def start_round(self, code: str, player_id: Optional[str] = None) -> CommandResult:
        """
        Deal a new round: location, spy and starting player.

        Args:
            code: Session code
            player_id: Acting player, who must be the host; None for the
                summary auto-continue timer

        Returns:
            CommandResult with a private RoleAssignment per participant
        """
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)

            if player_id is not None:
                actor = session.get_player(player_id)
                if actor is None:
                    return self._player_not_found(session)
                if not actor.is_host:
                    return CommandResult.fail(FailureKind.NOT_AUTHORIZED, "Only the host can start a round", session.code)

            if session.phase not in (Phase.WAITING, Phase.SUMMARY):
                return self._phase_mismatch(session, "start a round")

            participants = session.participants
            if len(participants) < GAME_CONFIG['MIN_PLAYERS'] or not any(p.is_connected for p in participants):
                return CommandResult.fail(FailureKind.NOT_ENOUGH_PLAYERS, "Need at least one connected player", session.code)

            location = self.catalog.pick(self.randomizer)
            spy = participants[self.randomizer.pick_index(len(participants))]

            for player in session.players:
                player.clear_round_state()
            for player in participants:
                if player is spy:
                    player.role = Role.SPY
                else:
                    player.role = Role.CIVILIAN
                    player.location = location

            session.active_player_index = self.turn_manager.choose_starting_index(session.players)
            session.round_number += 1
            session.secret_location = location
            session.accusation = None
            session.last_round_result = None
            session.phase = Phase.INFORMING
            session.touch(self.registry.clock())

            logger.info(f"Started round {session.round_number} in session {session.code} with {len(participants)} players")
            return CommandResult.ok(
                "Round started", session.code,
                [RoundStarted(round_number=session.round_number)],
                [self._role_assignment(p) for p in participants]
            )

    def acknowledge_role(self, code: str, player_id: str) -> CommandResult:
        """Record that a player has seen their role; start play when everyone has."""
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)

            player = session.get_player(player_id)
            if player is None:
                return self._player_not_found(session)
            if session.phase != Phase.INFORMING:
                return self._phase_mismatch(session, "acknowledge a role")
            if player.role is None:
                return CommandResult.fail(FailureKind.NOT_AUTHORIZED, "Observers have no role to acknowledge", session.code)
            if player.has_acknowledged_role:
                return CommandResult.fail(FailureKind.NOT_AUTHORIZED, "Role already acknowledged", session.code)

            player.has_acknowledged_role = True
            participants = session.participants
            acknowledged = sum(1 for p in participants if p.has_acknowledged_role)

            notifications: List[Notification] = [PlayerAcknowledged(
                player_id=player.id,
                acknowledged_count=acknowledged,
                pending_count=len(participants) - acknowledged
            )]
            notifications.extend(self._check_all_acknowledged(session))

            session.touch(self.registry.clock())
            return CommandResult.ok("Role acknowledged", session.code, notifications)

    def advance_turn(self, code: str, player_id: str) -> CommandResult:
        """
        End the active player's turn.

        Only the active player may advance. Once every participant has asked,
        the accusation phase begins.
        """
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)

            if session.get_player(player_id) is None:
                return self._player_not_found(session)
            if session.phase != Phase.PLAYING:
                return self._phase_mismatch(session, "advance the turn")

            active = session.active_player
            if active is None or active.id != player_id:
                return CommandResult.fail(FailureKind.NOT_AUTHORIZED, "Not your turn", session.code)

            active.has_asked_question = True

            if self.turn_manager.everyone_has_asked(session.players):
                notifications = self._begin_accusation(session)
            else:
                notifications = self._settle_turn(session, active.id)

            session.touch(self.registry.clock())
            return CommandResult.ok("Turn advanced", session.code, notifications)

    def submit_spy_guess(self, code: str, player_id: str, location: str) -> CommandResult:
        """
        Record the spy's location guess.

        A later guess replaces an earlier one until the round resolves.
        """
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)

            player = session.get_player(player_id)
            if player is None:
                return self._player_not_found(session)
            if session.phase != Phase.ACCUSING:
                return self._phase_mismatch(session, "guess the location")
            if not player.is_spy:
                return CommandResult.fail(FailureKind.NOT_AUTHORIZED, "Only the spy can guess the location", session.code)
            if location not in self.catalog:
                return CommandResult.fail(FailureKind.INVALID_GUESS_TARGET, f"Unknown location '{location}'", session.code)

            session.accusation.spy_guess = location
            logger.info(f"Spy submitted a guess in session {session.code}")

            notifications: List[Notification] = [SpyGuessSubmitted(round_number=session.round_number)]
            notifications.extend(self._try_resolve(session))

            session.touch(self.registry.clock())
            return CommandResult.ok("Guess submitted", session.code, notifications)

    def submit_player_vote(self, code: str, player_id: str, accused_id: str) -> CommandResult:
        """
        Record a civilian's accusation.

        A later vote replaces an earlier one until the round resolves.
        """
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)

            player = session.get_player(player_id)
            if player is None:
                return self._player_not_found(session)
            if session.phase != Phase.ACCUSING:
                return self._phase_mismatch(session, "vote")
            if not player.is_civilian:
                return CommandResult.fail(FailureKind.NOT_AUTHORIZED, "Only civilians can vote", session.code)

            accused = session.get_player(accused_id)
            if accused is None or accused.role is None or accused.id == player.id:
                return CommandResult.fail(FailureKind.INVALID_VOTE_TARGET, "Invalid vote target", session.code)

            session.accusation.votes[player.id] = accused.id
            logger.info(f"Recorded vote in session {session.code}: {player.name} -> {accused.name}")

            notifications: List[Notification] = [VoteCast(
                voter_id=player.id,
                votes_cast=len(session.accusation.votes),
                votes_needed=self.vote_manager.votes_needed(session)
            )]
            notifications.extend(self._try_resolve(session))

            session.touch(self.registry.clock())
            return CommandResult.ok("Vote recorded", session.code, notifications)

    def end_round(self, code: str, player_id: str) -> CommandResult:
        """Host returns the session to waiting; scores are kept."""
        with self.registry.locked(code) as session:
            if session is None:
                return self._session_not_found(code)

            player = session.get_player(player_id)
            if player is None:
                return self._player_not_found(session)
            if not player.is_host:
                return CommandResult.fail(FailureKind.NOT_AUTHORIZED, "Only the host can end rounds", session.code)
            if session.phase == Phase.WAITING:
                return self._phase_mismatch(session, "end the round")

            notifications = self._reset_to_waiting(session, ROUND_END_REASONS['HOST'])
            session.touch(self.registry.clock())
            return CommandResult.ok("Round ended", session.code, notifications)

    # Transitions

    def _check_all_acknowledged(self, session: Session) -> List[Notification]:
        """Move informing -> playing once every connected participant has acknowledged."""
        connected = [p for p in session.participants if p.is_connected]
        if not connected or any(not p.has_acknowledged_role for p in connected):
            return []

        session.phase = Phase.PLAYING
        settled = self._settle_turn(session, None)
        if session.phase != Phase.PLAYING:
            return settled

        logger.info(f"Session {session.code} round {session.round_number}: all roles acknowledged, play begins")
        return [PlayingStarted(round_number=session.round_number, active_player_id=session.active_player.id)]

    def _settle_turn(self, session: Session, previous_player_id: Optional[str]) -> List[Notification]:
        """
        Make sure the active index names an eligible player.

        Moves on from the current slot when its player has asked, left or
        disconnected; starts the accusation when nobody eligible remains.
        """
        current = session.active_player
        if current is not None and self.turn_manager.is_eligible(current):
            if current.id == previous_player_id:
                return []
            return [TurnAdvanced(previous_player_id, current.id, session.active_player_index)]

        next_index = self.turn_manager.find_next_eligible(
            session.players, session.active_player_index, include_current=True
        )
        if next_index is None:
            return self._begin_accusation(session)

        session.active_player_index = next_index
        return [TurnAdvanced(previous_player_id, session.players[next_index].id, next_index)]

    def _begin_accusation(self, session: Session) -> List[Notification]:
        session.phase = Phase.ACCUSING
        session.accusation = AccusationState()
        logger.info(f"Session {session.code} round {session.round_number}: accusation phase")
        return [AccuseModeStarted(round_number=session.round_number)]

    def _try_resolve(self, session: Session) -> List[Notification]:
        """Resolve the accusation once the guess and every civilian vote are in."""
        if not self.vote_manager.is_ready_to_resolve(session):
            return []

        outcome = self.vote_manager.resolve(session)

        if not outcome.has_winner:
            self.turn_manager.reset_questions(session.players)
            session.accusation = None
            session.last_round_result = None
            start = self.turn_manager.choose_starting_index(session.players)
            if start is None:
                return self._begin_accusation(session)

            session.active_player_index = start
            session.phase = Phase.PLAYING
            logger.info(f"Session {session.code} round {session.round_number}: nobody won, questioning resumes")
            return [SubRoundStarted(round_number=session.round_number, active_player_id=session.active_player.id)]

        for player_id, points in outcome.result.points_awarded.items():
            session.get_player(player_id).score += points

        session.last_round_result = outcome.result
        session.accusation = None
        session.secret_location = None
        session.phase = Phase.SUMMARY
        return [RoundSummary(result=outcome.result)]

    def _reset_to_waiting(self, session: Session, reason: str) -> List[Notification]:
        session.phase = Phase.WAITING
        session.secret_location = None
        session.accusation = None
        session.last_round_result = None
        session.active_player_index = 0
        for player in session.players:
            player.clear_round_state()

        logger.info(f"Session {session.code} round {session.round_number} ended: {reason}")
        return [RoundEnded(round_number=session.round_number, reason=reason)]

    def _remove_player(self, session: Session, player: Player) -> CommandResult:
        """Take a player off the roster and repair the round around the gap."""
        active = session.active_player
        previous_active_id = active.id if active else None
        was_spy = player.is_spy
        was_host = player.is_host

        self.registry.remove_player(session, player.id)

        new_host = session.host if was_host else None
        notifications: List[Notification] = [PlayerLeft(
            player_id=player.id,
            player_name=player.name,
            new_host_id=new_host.id if new_host else None,
            total_players=len(session.players)
        )]

        if not session.players:
            return CommandResult.ok("Player removed, game closed", session.code, notifications, session_closed=True)

        if session.phase.is_round_active:
            if was_spy:
                notifications.extend(self._reset_to_waiting(session, ROUND_END_REASONS['SPY_LEFT']))
            elif not session.participants:
                notifications.extend(self._reset_to_waiting(session, ROUND_END_REASONS['NO_PARTICIPANTS']))
            elif session.phase == Phase.INFORMING:
                notifications.extend(self._check_all_acknowledged(session))
            elif session.phase == Phase.PLAYING:
                notifications.extend(self._settle_turn(session, previous_active_id))
            elif session.phase == Phase.ACCUSING:
                votes = session.accusation.votes
                votes.pop(player.id, None)
                for voter_id in [v for v, accused in votes.items() if accused == player.id]:
                    del votes[voter_id]
                notifications.extend(self._try_resolve(session))

        return CommandResult.ok("Player removed", session.code, notifications, session_closed=False)

    # Helpers

    @staticmethod
    def _role_assignment(player: Player) -> RoleAssignment:
        return RoleAssignment(player_id=player.id, role=player.role.value, location=player.location)

    @staticmethod
    def _session_not_found(code: str) -> CommandResult:
        return CommandResult.fail(FailureKind.SESSION_NOT_FOUND, "Game not found", code)

    @staticmethod
    def _player_not_found(session: Session) -> CommandResult:
        return CommandResult.fail(FailureKind.PLAYER_NOT_FOUND, "Player not found", session.code)

    @staticmethod
    def _phase_mismatch(session: Session, action: str) -> CommandResult:
        return CommandResult.fail(
            FailureKind.PHASE_MISMATCH,
            f"Cannot {action} while the game is {session.phase.value}",
            session.code
        )
