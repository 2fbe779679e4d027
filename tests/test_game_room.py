"""
Tests for the room state machine: membership, game start, tasks and win checks.
"""

from unittest.mock import patch

import pytest

from office_saboteur.core import (
    GameRoom, GamePhase, NotHost, NotReadyToStart, RoleType, Task, Team,
)
from office_saboteur.config.game_config import GameConfig


def test_room_setup(room, clock):
    """Test that a room starts in the lobby with the host flagged."""
    assert room.phase == GamePhase.LOBBY
    assert room.created_at == clock.now
    assert room.current_voting is None
    assert [p.player_id for p in room.get_players()] == ["p1", "p2", "p3", "p4", "p5"]
    assert [p.player_id for p in room.get_players() if p.is_host] == ["p1"]
    assert all(p.role is None for p in room.get_players())


def test_add_player_respects_capacity(game_config, clock, rng):
    room = GameRoom("9999", "h", config=game_config, clock=clock, rng=rng)
    for number in range(8):
        assert room.add_player(f"x{number}", "X")

    assert not room.add_player("late", "Late")
    assert len(room.players) == 8
    assert "late" not in room.players


def test_remove_host_promotes_next_player(game_config, clock, rng):
    room = GameRoom("4321", "a", config=game_config, clock=clock, rng=rng)
    for player_id in ["a", "b", "c"]:
        room.add_player(player_id, player_id.upper())

    room.remove_player("a")

    assert room.host_id == "b"
    assert room.get_player("b").is_host
    assert not room.get_player("c").is_host


def test_remove_non_host_keeps_host(room):
    room.remove_player("p3")
    assert room.host_id == "p1"
    assert [p.player_id for p in room.get_players() if p.is_host] == ["p1"]


def test_remove_unknown_player_is_noop(room):
    assert room.remove_player("ghost") is None
    assert len(room.players) == 5


def test_remove_last_player_empties_room(game_config, clock, rng):
    room = GameRoom("4321", "a", config=game_config, clock=clock, rng=rng)
    room.add_player("a", "A")
    room.remove_player("a")
    assert room.is_empty


def test_start_game(room):
    room.start_game("p1")

    assert room.phase == GamePhase.PLAYING
    assert room.tasks_per_player in (3, 4)
    counts = [len(p.tasks) for p in room.get_players()]
    assert counts == [room.tasks_per_player] * 5
    assert sum(counts) == 5 * room.tasks_per_player
    assert all(p.role is not None for p in room.get_players())
    assert [p.role for p in room.get_players()].count(RoleType.SABOTEUR) == 1


@pytest.mark.parametrize("player_count", [4, 5, 6, 7, 8])
@pytest.mark.parametrize("tasks_per_player", [3, 4])
def test_tasks_dealt_in_contiguous_chunks(game_config, clock, rng, player_count, tasks_per_player):
    """One draw per game decides the chunk size; chunks follow join order."""
    room = GameRoom("1234", "p1", config=game_config, clock=clock, rng=rng)
    for number in range(1, player_count + 1):
        room.add_player(f"p{number}", f"Player {number}")
    dealt = [Task(f"t{i}", f"Task {i}", "") for i in range(player_count * tasks_per_player)]

    with patch.object(room.rng, "randint", return_value=tasks_per_player) as randint, \
            patch.object(room.task_catalog, "sample", return_value=dealt) as sample:
        room.start_game("p1")

    randint.assert_called_once_with(3, 4)
    sample.assert_called_once_with(player_count * tasks_per_player)
    assert sum(len(p.tasks) for p in room.get_players()) == player_count * tasks_per_player
    for index, player in enumerate(room.get_players()):
        expected = dealt[index * tasks_per_player:(index + 1) * tasks_per_player]
        assert player.tasks == expected


def test_roles_follow_join_order(room):
    roles = [RoleType.EMPLOYEE, RoleType.EMPLOYEE, RoleType.SABOTEUR, RoleType.EMPLOYEE, RoleType.EMPLOYEE]
    with patch.object(room.role_assigner, "assign", return_value=roles):
        room.start_game("p1")

    assert room.get_player("p3").role == RoleType.SABOTEUR
    assert [p.role for p in room.get_players()] == roles


def test_start_game_requires_host(room):
    with pytest.raises(NotHost):
        room.start_game("p2")

    assert room.phase == GamePhase.LOBBY
    assert all(p.role is None and not p.tasks for p in room.get_players())


def test_start_game_requires_min_players(game_config, clock, rng):
    room = GameRoom("1111", "a", config=game_config, clock=clock, rng=rng)
    for player_id in ["a", "b", "c"]:
        room.add_player(player_id, player_id)

    assert not room.is_ready_to_start()
    with pytest.raises(NotReadyToStart) as excinfo:
        room.start_game("a")
    assert excinfo.value.code == "not_ready"
    assert room.phase == GamePhase.LOBBY


def test_start_game_only_from_lobby(playing_room):
    with pytest.raises(NotReadyToStart):
        playing_room.start_game("p1")


def test_min_players_configurable(clock, rng):
    room = GameRoom("2222", "a", config=GameConfig(min_players=2), clock=clock, rng=rng)
    room.add_player("a", "A")
    room.add_player("b", "B")
    room.start_game("a")
    assert room.phase == GamePhase.PLAYING


def test_complete_task(playing_room):
    player = playing_room.get_player("p2")
    task_id = player.tasks[0].id

    result = playing_room.complete_task("p2", task_id)

    assert result is player
    assert player.tasks[0].completed
    assert player.tasks_completed == 1
    stats = player.get_stats()
    assert stats["totalTasks"] == len(player.tasks)
    assert stats["progress"] == pytest.approx(100 / len(player.tasks))


def test_complete_same_task_twice_counts_twice(playing_room):
    """Duplicate completions are not deduplicated."""
    player = playing_room.get_player("p2")
    task_id = player.tasks[0].id

    playing_room.complete_task("p2", task_id)
    playing_room.complete_task("p2", task_id)

    assert player.tasks_completed == 2


def test_complete_unknown_task_silently_rejected(playing_room):
    assert playing_room.complete_task("p2", "no-such-task") is None
    assert playing_room.get_player("p2").tasks_completed == 0


def test_complete_task_rejected_during_meeting(meeting_room):
    player = meeting_room.get_player("p2")
    assert meeting_room.complete_task("p2", player.tasks[0].id) is None
    assert player.tasks_completed == 0


def test_complete_task_rejected_for_dead_or_unknown_player(playing_room):
    player = playing_room.get_player("p2")
    player.eliminate()

    assert playing_room.complete_task("p2", player.tasks[0].id) is None
    assert playing_room.complete_task("ghost", "task1") is None
    assert player.tasks_completed == 0


def test_send_chat(room):
    chat = room.send_chat("p2", "hello")
    assert chat.player_name == "Player 2"
    assert chat.to_dict()["message"] == "hello"
    assert room.send_chat("ghost", "hi") is None


def _set_roles(room, saboteurs):
    for player in room.get_players():
        player.role = RoleType.SABOTEUR if player.player_id in saboteurs else RoleType.EMPLOYEE


def test_win_condition_saboteur_majority(room):
    """Two saboteurs among three living players win."""
    _set_roles(room, {"p1", "p2"})
    room.get_player("p3").eliminate()
    room.get_player("p4").eliminate()

    assert room.check_win_condition() == Team.SABOTEURS


def test_win_condition_saboteur_parity(room):
    """One saboteur among two living players is enough."""
    _set_roles(room, {"p1"})
    for player_id in ["p3", "p4", "p5"]:
        room.get_player(player_id).eliminate()

    assert room.check_win_condition() == Team.SABOTEURS


def test_win_condition_employees(room):
    _set_roles(room, {"p1"})
    room.get_player("p1").eliminate()

    assert room.check_win_condition() == Team.EMPLOYEES


def test_win_condition_game_continues(room):
    _set_roles(room, {"p1"})
    room.get_player("p2").eliminate()
    room.get_player("p3").eliminate()

    # One saboteur among three living players
    assert room.check_win_condition() is None


def test_saboteurs_win_after_meeting(playing_room):
    """Ejecting employees until parity ends the game for the saboteur."""
    for target in ["p1", "p2"]:
        playing_room.call_meeting("p5", "vote")
        voters = [p.player_id for p in playing_room.get_alive_players()]
        outcome = None
        for voter in voters:
            outcome = playing_room.cast_vote(voter, target if voter != target else None)

    assert outcome.eliminated.player_id == "p2"
    assert outcome.winner is None

    playing_room.call_meeting("p5", "vote")
    for voter in ["p3", "p4"]:
        playing_room.cast_vote(voter, "p4" if voter == "p3" else None)
    outcome = playing_room.cast_vote("p5", "p4")

    assert outcome.winner == Team.SABOTEURS
    assert playing_room.phase == GamePhase.ENDED


def test_expiry(room, clock):
    assert not room.is_expired(clock.now, 3600000)
    clock.advance(3600001)
    assert room.is_expired(clock.now, 3600000)


def test_summary(room):
    assert room.get_summary() == {"code": "1234", "players": 5, "state": "lobby", "maxPlayers": 8}
