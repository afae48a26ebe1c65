from datetime import datetime, timedelta, timezone

import pytest

from game.manager import GameManager
from game.models import Phase
from lobby.registry import SessionRegistry
from utils.constants import LOCATIONS
from utils.randomizer import Randomizer


class ScriptedRandomizer(Randomizer):
    """Hands out queued indices in order; 0 once the queue runs dry."""

    def __init__(self, picks=None):
        super().__init__(seed=0)
        self.picks = list(picks or [])
        self.sizes = []

    def queue(self, *picks):
        self.picks.extend(picks)

    def pick_index(self, size):
        self.sizes.append(size)
        if not self.picks:
            return 0
        value = self.picks.pop(0)
        assert 0 <= value < size, f"scripted pick {value} out of range({size})"
        return value


class FakeClock:
    def __init__(self):
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return SessionRegistry(clock=clock)


@pytest.fixture
def randomizer():
    return ScriptedRandomizer()


@pytest.fixture
def manager(registry, randomizer):
    return GameManager(registry, randomizer=randomizer)


@pytest.fixture
def make_game(manager):
    """Create a session and join the given names; returns (code, {name: id})."""
    def _make(*names):
        code = manager.create_session().code
        ids = {}
        for name in names:
            result = manager.join(code, name)
            assert result.success, result.message
            ids[name] = result.data['player_id']
        return code, ids
    return _make


@pytest.fixture
def start_round(manager, randomizer):
    """Start a round with a chosen location, spy and starting player, then acknowledge everyone."""
    def _start(code, location_index=0, spy_index=0, start_index=0, acknowledge=True):
        randomizer.queue(location_index, spy_index, start_index)
        result = manager.start_round(code)
        assert result.success, result.message
        session = manager.registry.get_session(code)
        if acknowledge:
            for player in list(session.participants):
                if player.is_connected:
                    assert manager.acknowledge_role(code, player.id).success
        return session
    return _start


@pytest.fixture
def play_to_accusation(manager, start_round):
    """Start a round and let every player ask in turn until accusing."""
    def _play(code, location_index=0, spy_index=0, start_index=0):
        session = start_round(code, location_index, spy_index, start_index)
        while session.phase == Phase.PLAYING:
            assert manager.advance_turn(code, session.active_player.id).success
        assert session.phase == Phase.ACCUSING
        return session
    return _play


@pytest.fixture
def first_location():
    return LOCATIONS[0]
