from game.commands import DisconnectPlayer, KickPlayer, LeaveSession, ReconnectPlayer
from game.models import Phase, Role
from game.notifications import (
    PlayerLeft, PlayerReconnected, PlayingStarted, RoundEnded, RoundSummary, TurnAdvanced
)
from game.results import FailureKind

WRONG_GUESS = "Bank"


def secret_of(manager, code, player_id):
    return manager.registry.get_session(code).get_player(player_id).secret


def test_spy_leaving_aborts_round(manager, make_game, start_round):
    code, ids = make_game("Alice", "Bob", "Cara")
    session = start_round(code, spy_index=1)

    result = manager.leave(code, ids["Bob"])

    assert session.phase == Phase.WAITING
    ended = result.notifications[-1]
    assert isinstance(ended, RoundEnded)
    assert ended.reason == "spy_left"
    assert session.secret_location is None
    assert all(p.role is None for p in session.players)


def test_active_player_leaving_passes_turn(manager, make_game, start_round):
    code, ids = make_game("Alice", "Bob", "Cara", "Dan")
    session = start_round(code, spy_index=3, start_index=0)

    result = manager.execute(LeaveSession(code, ids["Alice"]))

    assert session.phase == Phase.PLAYING
    assert session.active_player.id == ids["Bob"]
    left, turn = result.notifications
    assert isinstance(left, PlayerLeft)
    assert left.new_host_id == ids["Bob"]
    assert isinstance(turn, TurnAdvanced)
    assert turn.previous_player_id == ids["Alice"]


def test_inactive_player_leaving_keeps_turn(manager, make_game, start_round):
    code, ids = make_game("Alice", "Bob", "Cara", "Dan")
    session = start_round(code, spy_index=3, start_index=2)

    result = manager.leave(code, ids["Alice"])

    assert session.active_player.id == ids["Cara"]
    assert [type(n) for n in result.notifications] == [PlayerLeft]


def test_last_pending_player_leaving_starts_play(manager, make_game, start_round):
    code, ids = make_game("Alice", "Bob", "Cara")
    session = start_round(code, spy_index=2, acknowledge=False)
    manager.acknowledge_role(code, ids["Alice"])
    manager.acknowledge_role(code, ids["Cara"])

    result = manager.leave(code, ids["Bob"])

    assert session.phase == Phase.PLAYING
    assert isinstance(result.notifications[-1], PlayingStarted)


def test_leaving_voter_unblocks_resolution(manager, make_game, play_to_accusation):
    code, ids = make_game("Alice", "Bob", "Cara", "Dan")
    session = play_to_accusation(code, spy_index=3)
    manager.submit_spy_guess(code, ids["Dan"], WRONG_GUESS)
    manager.submit_player_vote(code, ids["Alice"], ids["Dan"])
    manager.submit_player_vote(code, ids["Cara"], ids["Dan"])

    result = manager.leave(code, ids["Bob"])

    assert isinstance(result.notifications[-1], RoundSummary)
    assert session.phase == Phase.SUMMARY
    assert session.last_round_result.total_civilians_count == 2
    assert session.get_player(ids["Alice"]).score == 1


def test_votes_against_leaver_are_discarded(manager, make_game, play_to_accusation):
    code, ids = make_game("Alice", "Bob", "Cara", "Dan")
    session = play_to_accusation(code, spy_index=3)
    manager.submit_spy_guess(code, ids["Dan"], WRONG_GUESS)
    manager.submit_player_vote(code, ids["Alice"], ids["Bob"])
    manager.submit_player_vote(code, ids["Cara"], ids["Dan"])

    manager.leave(code, ids["Bob"])

    assert session.phase == Phase.ACCUSING
    assert session.accusation.votes == {ids["Cara"]: ids["Dan"]}

    manager.submit_player_vote(code, ids["Alice"], ids["Dan"])
    assert session.phase == Phase.SUMMARY


def test_only_host_kicks(manager, make_game):
    code, ids = make_game("Alice", "Bob", "Cara")

    result = manager.kick(code, ids["Bob"], ids["Cara"])

    assert result.failure == FailureKind.NOT_AUTHORIZED
    assert len(manager.registry.get_session(code).players) == 3


def test_host_kicks_player(manager, make_game):
    code, ids = make_game("Alice", "Bob", "Cara")

    result = manager.execute(KickPlayer(code, ids["Alice"], ids["Cara"]))

    assert result.success
    session = manager.registry.get_session(code)
    assert [p.name for p in session.players] == ["Alice", "Bob"]
    assert result.notifications[0].player_id == ids["Cara"]
    assert result.notifications[0].new_host_id is None


def test_kick_unknown_target(manager, make_game):
    code, ids = make_game("Alice")
    assert manager.kick(code, ids["Alice"], "nobody").failure == FailureKind.PLAYER_NOT_FOUND


def test_late_joiner_is_dealt_in_as_civilian(manager, make_game, start_round):
    code, ids = make_game("Alice", "Bob")
    session = start_round(code, spy_index=0)

    result = manager.join(code, "Dave")

    dave = session.get_player(result.data['player_id'])
    assert dave.role == Role.CIVILIAN
    assert dave.location == session.secret_location
    assert [p.player_id for p in result.private] == [dave.id]
    assert result.private[0].location == session.secret_location

    order = []
    while session.phase == Phase.PLAYING:
        order.append(session.active_player.name)
        manager.advance_turn(code, session.active_player.id)
    assert order == ["Alice", "Bob", "Dave"]


def test_late_observer_is_not_dealt_in(manager, make_game, start_round):
    code, _ = make_game("Alice", "Bob")
    start_round(code)

    result = manager.join(code, "Olly", observer=True)

    assert result.private == []
    assert result.notifications[0].is_observer


def test_join_in_waiting_sends_no_role(manager, make_game):
    code, _ = make_game("Alice")
    assert manager.join(code, "Bob").private == []


def test_reconnect_resends_role(manager, make_game, start_round):
    code, ids = make_game("Alice", "Bob")
    session = start_round(code, spy_index=1)
    manager.execute(DisconnectPlayer(code, ids["Bob"]))
    assert not session.get_player(ids["Bob"]).is_connected

    result = manager.execute(ReconnectPlayer(code, ids["Bob"], secret_of(manager, code, ids["Bob"])))

    assert result.success
    assert session.get_player(ids["Bob"]).is_connected
    assert isinstance(result.notifications[0], PlayerReconnected)
    assert result.private[0].role == "spy"


def test_reconnect_in_waiting_sends_no_role(manager, make_game):
    code, ids = make_game("Alice")
    manager.disconnect(code, ids["Alice"])
    result = manager.reconnect(code, ids["Alice"], secret_of(manager, code, ids["Alice"]))
    assert result.success
    assert result.private == []


def test_reconnect_with_wrong_secret(manager, make_game):
    code, ids = make_game("Alice")
    manager.disconnect(code, ids["Alice"])

    result = manager.reconnect(code, ids["Alice"], "guess")

    assert result.failure == FailureKind.NOT_AUTHORIZED
    assert not manager.registry.get_session(code).get_player(ids["Alice"]).is_connected


def test_reconnect_unknown_player(manager, make_game):
    code, _ = make_game("Alice")
    assert manager.reconnect(code, "nobody", "x").failure == FailureKind.PLAYER_NOT_FOUND


def test_reconnected_player_rejoins_turn_order(manager, make_game, start_round):
    code, ids = make_game("Alice", "Bob", "Cara")
    session = start_round(code, spy_index=2, start_index=0)
    manager.disconnect(code, ids["Bob"])
    manager.reconnect(code, ids["Bob"], secret_of(manager, code, ids["Bob"]))

    manager.advance_turn(code, ids["Alice"])

    assert session.active_player.id == ids["Bob"]


def test_disconnect_of_last_pending_player_starts_play(manager, make_game, start_round):
    code, ids = make_game("Alice", "Bob", "Cara")
    session = start_round(code, spy_index=2, acknowledge=False)
    manager.acknowledge_role(code, ids["Alice"])
    manager.acknowledge_role(code, ids["Cara"])

    result = manager.disconnect(code, ids["Bob"])

    assert session.phase == Phase.PLAYING
    assert isinstance(result.notifications[-1], PlayingStarted)
    assert len(session.players) == 3


def test_disconnect_keeps_seat_and_score(manager, make_game):
    code, ids = make_game("Alice", "Bob")
    session = manager.registry.get_session(code)
    session.get_player(ids["Bob"]).score = 4

    manager.disconnect(code, ids["Bob"])

    bob = session.get_player(ids["Bob"])
    assert bob is not None
    assert bob.score == 4
    assert session.host.id == ids["Alice"]


def test_observer_leaving_does_not_disturb_round(manager, make_game, start_round):
    code, ids = make_game("Alice", "Bob")
    observer_id = manager.join(code, "Olly", observer=True).data['player_id']
    session = start_round(code)

    result = manager.leave(code, observer_id)

    assert session.phase == Phase.PLAYING
    assert [type(n) for n in result.notifications] == [PlayerLeft]
