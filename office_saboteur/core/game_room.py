"""
Room state machine: players, roles, tasks and meetings for one session.
"""

import random
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Dict, Any, TYPE_CHECKING

from .clock import monotonic_ms, wall_clock_ms
from .exceptions import InvalidVote, NotHost, NotReadyToStart, UnknownTask
from .player import Player
from .roles import RoleAssigner, Team
from .tasks import TaskCatalog
from .voting import VotingResult, VotingSession
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


BODY_REPORTED_REASON = "Body reported"


class GamePhase(Enum):
    """Current room phase."""
    LOBBY = "lobby"
    PLAYING = "playing"
    MEETING = "meeting"
    ENDED = "ended"


@dataclass
class ChatMessage:
    """A chat line relayed to the whole room."""
    player_id: str
    player_name: str
    message: str
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "playerId": self.player_id,
            "playerName": self.player_name,
            "message": self.message,
            "timestamp": self.timestamp,
        }


@dataclass
class MeetingOutcome:
    """What happened when a meeting reached quorum."""
    result: VotingResult
    eliminated: Optional[Player] = None
    winner: Optional[Team] = None

    @property
    def game_over(self) -> bool:
        return self.winner is not None


class GameRoom:
    """
    One game session.

    Phases go lobby -> playing -> meeting -> playing (loop) until a meeting
    resolves with a winner, which ends the room. Mutating operations hold the
    room lock for the whole transition.
    """

    def __init__(
        self,
        room_code: str,
        host_id: str,
        config: GameConfig = default_config,
        clock: Callable[[], int] = monotonic_ms,
        rng: Optional[random.Random] = None,
        role_assigner: Optional[RoleAssigner] = None,
        task_catalog: Optional[TaskCatalog] = None,
        event_emitter: Optional['EventEmitter'] = None,
    ):
        self.room_code = room_code
        self.host_id = host_id
        self.config = config
        self.clock = clock
        self.rng = rng or random.Random()
        self.role_assigner = role_assigner or RoleAssigner(self.rng)
        self.task_catalog = task_catalog or TaskCatalog(rng=self.rng)
        self.event_emitter = event_emitter

        self.players: Dict[str, Player] = {}
        self.phase = GamePhase.LOBBY
        self.max_players = config.max_players
        self.current_voting: Optional[VotingSession] = None
        self.winner: Optional[Team] = None
        self.tasks_per_player = 0
        self.created_at = clock()
        self.action_log: List[Dict[str, Any]] = []
        self.lock = threading.RLock()

    def __repr__(self) -> str:
        return f"GameRoom({self.room_code!r}, phase={self.phase.value}, players={len(self.players)})"

    # Membership

    @property
    def is_empty(self) -> bool:
        return not self.players

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    def get_player(self, player_id: str) -> Optional[Player]:
        return self.players.get(player_id)

    def get_players(self) -> List[Player]:
        """Players in join order."""
        return list(self.players.values())

    def get_alive_players(self) -> List[Player]:
        return [p for p in self.players.values() if p.is_alive]

    def add_player(self, player_id: str, player_name: str) -> bool:
        """Add a player. Returns False if the room is full."""
        with self.lock:
            if self.is_full:
                return False

            self.players[player_id] = Player(
                player_id=player_id,
                name=player_name,
                is_host=player_id == self.host_id,
            )
            self._log_action("player_joined", {"player": player_id})
            if self.event_emitter:
                self.event_emitter.emit_player_joined(self.room_code, player_id, player_name)
            return True

    def remove_player(self, player_id: str) -> Optional[Player]:
        """
        Remove a player, handing the host role to the first remaining player
        if needed. Votes already cast by the player stay in the ballot box.
        """
        with self.lock:
            player = self.players.pop(player_id, None)
            if player is None:
                return None

            new_host_id = None
            if player.is_host and self.players:
                new_host = next(iter(self.players.values()))
                new_host.is_host = True
                self.host_id = new_host.player_id
                new_host_id = new_host.player_id

            self._log_action("player_left", {"player": player_id, "new_host": new_host_id})
            if self.event_emitter:
                self.event_emitter.emit_player_left(self.room_code, player_id, new_host_id)
            return player

    # Game start

    def is_ready_to_start(self) -> bool:
        return self.phase == GamePhase.LOBBY and len(self.players) >= self.config.min_players

    def start_game(self, requester_id: str) -> None:
        """
        Start the game: assign roles and deal tasks.

        One tasks-per-player value is drawn for the whole room; the sampled
        tasks are dealt out as contiguous chunks in join order.

        Raises:
            NotReadyToStart: room is not in the lobby or has too few players
            NotHost: requester is not the host
        """
        with self.lock:
            if not self.is_ready_to_start():
                raise NotReadyToStart(
                    "Cannot start game",
                    phase=self.phase.value,
                    players=len(self.players),
                )

            requester = self.players.get(requester_id)
            if not requester or not requester.is_host:
                raise NotHost("Only host can start the game", requester=requester_id)

            players = self.get_players()
            roles = self.role_assigner.assign(len(players))
            tasks_per_player = self.rng.randint(
                self.config.min_tasks_per_player,
                self.config.max_tasks_per_player,
            )
            tasks = self.task_catalog.sample(len(players) * tasks_per_player)

            for index, (player, role) in enumerate(zip(players, roles)):
                player.role = role
                player.tasks = tasks[index * tasks_per_player:(index + 1) * tasks_per_player]

            self.tasks_per_player = tasks_per_player
            self.phase = GamePhase.PLAYING
            self._log_action("game_start", {"players": len(players), "tasks_per_player": tasks_per_player})
            if self.event_emitter:
                self.event_emitter.emit_game_start(
                    self.room_code,
                    {p.player_id: p.role.value for p in players},
                    tasks_per_player,
                )

    # Meetings

    def start_voting(self, reason: str) -> VotingSession:
        """Open a fresh ballot box, replacing any previous one."""
        self.current_voting = VotingSession(
            reason=reason,
            start_time=self.clock(),
            duration=self.config.meeting_duration_ms,
        )
        return self.current_voting

    def call_meeting(self, player_id: str, reason: str) -> Optional[VotingSession]:
        """
        Call a meeting. Ignored (returns None) unless the room is playing and
        the caller is a living member.
        """
        with self.lock:
            if self.phase != GamePhase.PLAYING:
                return None

            player = self.players.get(player_id)
            if not player or not player.is_alive:
                return None

            session = self.start_voting(reason)
            self.phase = GamePhase.MEETING
            self._log_action("meeting_called", {"caller": player_id, "reason": reason})
            if self.event_emitter:
                self.event_emitter.emit_meeting_called(self.room_code, player_id, reason)
            return session

    def report_body(self, player_id: str) -> Optional[VotingSession]:
        return self.call_meeting(player_id, BODY_REPORTED_REASON)

    def validate_vote(self, voter_id: str, target_id: Optional[str]) -> None:
        """Raise InvalidVote unless the vote may be recorded. A None target is a skip."""
        if self.phase != GamePhase.MEETING or self.current_voting is None:
            raise InvalidVote("Invalid vote: no meeting in progress", phase=self.phase.value)

        voter = self.players.get(voter_id)
        if voter is None:
            raise InvalidVote("Invalid vote: unknown voter", voter=voter_id)
        if target_id is not None and not isinstance(target_id, str):
            raise InvalidVote("Invalid vote: unknown target", target=repr(target_id))
        if target_id is not None and target_id not in self.players:
            raise InvalidVote("Invalid vote: unknown target", target=target_id)
        if not voter.is_alive:
            raise InvalidVote("Invalid vote: eliminated players cannot vote", voter=voter_id)
        if voter_id == target_id:
            raise InvalidVote("Invalid vote: cannot vote for yourself", voter=voter_id)

    def cast_vote(self, voter_id: str, target_id: Optional[str]) -> Optional[MeetingOutcome]:
        """
        Record a vote and resolve the meeting once every living player has voted.

        Returns the MeetingOutcome when this vote completed the quorum, else None.

        Raises:
            InvalidVote: wrong phase, unknown voter or target, dead voter, or self-vote
        """
        with self.lock:
            self.validate_vote(voter_id, target_id)

            self.current_voting.record_vote(voter_id, target_id)
            self._log_action("vote", {"voter": voter_id, "target": target_id})
            if self.event_emitter:
                self.event_emitter.emit_vote(self.room_code, voter_id, target_id)

            if not self.current_voting.has_quorum(len(self.get_alive_players())):
                return None

            return self._resolve_meeting()

    def _resolve_meeting(self) -> MeetingOutcome:
        """Tally the ballot box, apply the elimination and leave the meeting."""
        session = self.current_voting
        result = session.tally()

        eliminated = None
        if result.eliminated is not None:
            # The leader may have left the room since receiving votes
            eliminated = self.players.get(result.eliminated)

        if self.event_emitter:
            self.event_emitter.emit_vote_results(
                self.room_code, result.vote_count, result.eliminated, result.skipped
            )

        if eliminated:
            eliminated.eliminate()
            voters = [voter for voter, target in session.votes.items() if target == eliminated.player_id]
            self._log_action("player_eliminated", {"player": eliminated.player_id, "voters": voters})
            if self.event_emitter:
                self.event_emitter.emit_elimination(
                    self.room_code,
                    eliminated.player_id,
                    eliminated.role.value if eliminated.role else None,
                    voters,
                )

        winner = self.check_win_condition()
        self.current_voting = None

        if winner:
            self.end_game(winner)
        else:
            self.phase = GamePhase.PLAYING
            self._log_action("meeting_ended", {"eliminated": result.eliminated})

        return MeetingOutcome(result=result, eliminated=eliminated, winner=winner)

    def check_win_condition(self) -> Optional[Team]:
        """
        Check if the game has ended and return the winning team.

        Saboteurs win once they make up at least half of the living players;
        employees win once no saboteur is alive. Returns None if play continues.
        """
        alive_players = self.get_alive_players()
        alive_saboteurs = [p for p in alive_players if p.is_saboteur]

        if len(alive_saboteurs) >= len(alive_players) / 2:
            return Team.SABOTEURS

        if not alive_saboteurs:
            return Team.EMPLOYEES

        return None

    def end_game(self, winner: Team) -> None:
        self.phase = GamePhase.ENDED
        self.winner = winner
        self._log_action("game_over", {"winner": winner.value})
        if self.event_emitter:
            self.event_emitter.emit_game_over(self.room_code, winner.value)

    # Tasks and chat

    def complete_task(self, player_id: str, task_id: str) -> Optional[Player]:
        """
        Mark a task as done for a living player while the game is playing.

        Unknown players, dead players and task ids the player was not dealt
        are rejected silently by returning None.
        """
        with self.lock:
            if self.phase != GamePhase.PLAYING:
                return None

            player = self.players.get(player_id)
            if not player or not player.is_alive:
                return None

            try:
                player.complete_task(task_id)
            except UnknownTask:
                return None

            self._log_action("task_completed", {"player": player_id, "task": task_id})
            if self.event_emitter:
                self.event_emitter.emit_task_completed(
                    self.room_code, player_id, task_id, player.tasks_completed
                )
            return player

    def send_chat(self, player_id: str, message: str) -> Optional[ChatMessage]:
        """Build the chat payload for a member's message. No state changes."""
        player = self.players.get(player_id)
        if not player:
            return None

        return ChatMessage(
            player_id=player_id,
            player_name=player.name,
            message=message,
            timestamp=wall_clock_ms(),
        )

    # Expiry and reporting

    def age_ms(self, now: Optional[int] = None) -> int:
        if now is None:
            now = self.clock()
        return now - self.created_at

    def is_expired(self, now: int, ttl_ms: int) -> bool:
        """Expired rooms are empty or older than the TTL, whatever their phase."""
        return self.is_empty or self.age_ms(now) > ttl_ms

    def get_players_array(self, include_tasks: bool = False) -> List[Dict[str, Any]]:
        return [p.to_dict(include_tasks=include_tasks) for p in self.players.values()]

    def get_summary(self) -> Dict[str, Any]:
        """Summary used by the registry statistics."""
        return {
            "code": self.room_code,
            "players": len(self.players),
            "state": self.phase.value,
            "maxPlayers": self.max_players,
        }

    def _log_action(self, action_type: str, data: Dict[str, Any]) -> None:
        """Log a room action."""
        self.action_log.append({
            "type": action_type,
            "phase": self.phase.value,
            "time": self.clock(),
            "data": data
        })
