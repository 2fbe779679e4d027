"""
Pytest fixtures for room tests.
"""

import random

import pytest

from office_saboteur.config.game_config import GameConfig
from office_saboteur.core import GameRoom, GamePhase, RoleType, RoomRegistry


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = 1_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def game_config():
    """Test configuration."""
    return GameConfig(log_events=False)


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(game_config, clock, rng):
    return RoomRegistry(game_config, clock=clock, rng=rng)


@pytest.fixture
def room(game_config, clock, rng):
    """Lobby with five players; p1 is the host."""
    room = GameRoom("1234", "p1", config=game_config, clock=clock, rng=rng)
    for number in range(1, 6):
        room.add_player(f"p{number}", f"Player {number}")
    return room


@pytest.fixture
def playing_room(room):
    """Five players in play with fixed roles: p5 is the only saboteur."""
    room.start_game("p1")
    for player in room.get_players():
        player.role = RoleType.SABOTEUR if player.player_id == "p5" else RoleType.EMPLOYEE
    assert room.phase == GamePhase.PLAYING
    return room


@pytest.fixture
def meeting_room(playing_room):
    """Same room as playing_room with a meeting open."""
    playing_room.call_meeting("p1", "Emergency")
    return playing_room
