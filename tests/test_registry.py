import re
import threading

import pytest

from game.models import Phase
from game.results import FailureKind
from lobby.registry import SessionRegistry
from utils.constants import SESSION_CODE_ALPHABET


def test_create_session_code_format(registry):
    code = registry.create_session()
    assert re.fullmatch(f"[{SESSION_CODE_ALPHABET}]{{6}}", code)
    session = registry.get_session(code)
    assert session.phase == Phase.WAITING
    assert session.players == []
    assert session.round_number == 0


def test_create_session_codes_are_unique(registry):
    codes = {registry.create_session() for _ in range(200)}
    assert len(codes) == 200
    assert len(registry) == 200


def test_create_session_retries_on_collision(clock):
    candidates = iter(["AAAAAA", "AAAAAA", "BBBBBB"])
    registry = SessionRegistry(clock=clock, code_generator=lambda: next(candidates))
    assert registry.create_session() == "AAAAAA"
    assert registry.create_session() == "BBBBBB"


def test_get_session_unknown_and_case_insensitive(registry):
    code = registry.create_session()
    assert registry.get_session("ZZZZZZ") is None
    assert registry.get_session(None) is None
    assert registry.get_session(code.lower()) is registry.get_session(code)


def test_first_player_is_host(manager):
    code = manager.create_session().code
    first = manager.join(code, "Alice")
    second = manager.join(code, "Bob")
    assert first.data['is_host'] is True
    assert second.data['is_host'] is False
    session = manager.registry.get_session(code)
    assert [p.is_host for p in session.players] == [True, False]


def test_join_generates_distinct_id_and_secret(manager):
    code = manager.create_session().code
    result = manager.join(code, "Alice")
    assert result.data['player_id']
    assert result.data['secret']
    assert result.data['player_id'] != result.data['secret']


def test_duplicate_name_is_rejected_case_insensitively(manager):
    code = manager.create_session().code
    assert manager.join(code, "Alice").success

    result = manager.join(code, "aLICE")

    assert not result.success
    assert result.failure == FailureKind.DUPLICATE_NAME
    assert len(manager.registry.get_session(code).players) == 1


def test_capacity_is_twelve(manager):
    code = manager.create_session().code
    for i in range(12):
        assert manager.join(code, f"Player{i}").success

    result = manager.join(code, "Player13")

    assert result.failure == FailureKind.CAPACITY
    assert len(manager.registry.get_session(code).players) == 12


def test_join_unknown_session(manager):
    result = manager.join("ZZZZZZ", "Alice")
    assert result.failure == FailureKind.SESSION_NOT_FOUND


def test_join_bumps_last_activity(manager, clock):
    code = manager.create_session().code
    clock.advance(30)
    manager.join(code, "Alice")
    assert manager.registry.get_session(code).last_activity_at == clock.now


def test_removing_sole_player_deletes_session(manager, make_game):
    code, ids = make_game("Alice")

    result = manager.leave(code, ids["Alice"])

    assert result.success
    assert result.data['session_closed'] is True
    assert manager.registry.get_session(code) is None
    assert manager.view(code).failure == FailureKind.SESSION_NOT_FOUND


def test_host_transfers_to_new_first_player(manager, make_game):
    code, ids = make_game("Alice", "Bob", "Carol")

    result = manager.leave(code, ids["Alice"])

    session = manager.registry.get_session(code)
    assert [p.name for p in session.players] == ["Bob", "Carol"]
    assert session.players[0].is_host
    assert result.notifications[0].new_host_id == ids["Bob"]


def test_remove_before_active_index_keeps_active_player(manager, make_game):
    code, ids = make_game("Alice", "Bob", "Carol")
    session = manager.registry.get_session(code)
    session.active_player_index = 2

    manager.registry.remove_player(session, ids["Alice"])

    assert session.players[session.active_player_index].name == "Carol"


def test_remove_active_last_player_wraps_index(manager, make_game):
    code, ids = make_game("Alice", "Bob", "Carol")
    session = manager.registry.get_session(code)
    session.active_player_index = 2

    manager.registry.remove_player(session, ids["Carol"])

    assert session.active_player_index == 0


def test_remove_unknown_player(manager, make_game):
    code, _ = make_game("Alice")
    assert manager.leave(code, "nobody").failure == FailureKind.PLAYER_NOT_FOUND


def test_expire_inactive(registry, clock):
    old = registry.create_session()
    clock.advance(3600)
    fresh = registry.create_session()
    clock.advance(60)

    removed = registry.expire_inactive(max_age_seconds=1800)

    assert removed == 1
    assert registry.get_session(old) is None
    assert registry.get_session(fresh) is not None


def test_idle_for(registry, clock):
    code = registry.create_session()
    clock.advance(90)
    assert registry.idle_for(code).total_seconds() == 90
    assert registry.idle_for("ZZZZZZ") is None


def test_expire_skips_session_with_command_in_flight(registry, clock):
    code = registry.create_session()
    clock.advance(3600)
    session = registry.get_session(code)

    holding = threading.Event()
    release = threading.Event()

    def hold_lock():
        with registry.locked(code):
            holding.set()
            release.wait(timeout=5)

    worker = threading.Thread(target=hold_lock)
    worker.start()
    try:
        assert holding.wait(timeout=5)
        assert registry.expire_inactive(max_age_seconds=60) == 0
        assert registry.get_session(code) is session
    finally:
        release.set()
        worker.join(timeout=5)

    assert registry.expire_inactive(max_age_seconds=60) == 1


def test_locked_yields_none_after_deletion(registry):
    code = registry.create_session()
    registry.delete_session(code)
    with registry.locked(code) as session:
        assert session is None


def test_authenticate(manager, make_game):
    code, ids = make_game("Alice")
    secret = manager.registry.get_session(code).players[0].secret
    assert manager.registry.authenticate(code, ids["Alice"], secret)
    assert not manager.registry.authenticate(code, ids["Alice"], "wrong")
    assert not manager.registry.authenticate("ZZZZZZ", ids["Alice"], secret)


@pytest.mark.parametrize("name", ["Bob", " bob ", "BOB"])
def test_name_collisions_ignore_case_and_padding(manager, make_game, name):
    code, _ = make_game("Bob")
    assert manager.join(code, name).failure == FailureKind.DUPLICATE_NAME
