"""
Registry owning every active room.
"""

import random
import threading
from typing import Callable, Dict, List, Optional, Tuple, Any, TYPE_CHECKING

from .clock import monotonic_ms
from .exceptions import RoomFull, RoomNotFound
from .game_room import GamePhase, GameRoom
from .tasks import TaskCatalog
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


ROOM_CODE_MIN = 1000
ROOM_CODE_MAX = 9999


class RoomRegistry:
    """Creates, looks up and expires rooms. Rooms are only reachable through here."""

    def __init__(
        self,
        config: GameConfig = default_config,
        clock: Callable[[], int] = monotonic_ms,
        rng: Optional[random.Random] = None,
        task_catalog: Optional[TaskCatalog] = None,
        event_emitter: Optional['EventEmitter'] = None,
    ):
        self.config = config
        self.clock = clock
        self.rng = rng or random.Random(config.random_seed)
        self.task_catalog = task_catalog or TaskCatalog(rng=self.rng)
        self.event_emitter = event_emitter
        self.rooms: Dict[str, GameRoom] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self.rooms)

    def __contains__(self, room_code: str) -> bool:
        return room_code in self.rooms

    def generate_room_code(self) -> str:
        """Pick a random 4-digit code not used by any active room."""
        with self._lock:
            if len(self.rooms) > ROOM_CODE_MAX - ROOM_CODE_MIN:
                raise RuntimeError("No free room codes")
            while True:
                code = str(self.rng.randint(ROOM_CODE_MIN, ROOM_CODE_MAX))
                if code not in self.rooms:
                    return code

    def create_room(self, host_id: str, host_name: str) -> GameRoom:
        """Create a room with the host as its first player."""
        with self._lock:
            room_code = self.generate_room_code()
            room = GameRoom(
                room_code,
                host_id,
                config=self.config,
                clock=self.clock,
                rng=self.rng,
                task_catalog=self.task_catalog,
                event_emitter=self.event_emitter,
            )
            if self.event_emitter:
                self.event_emitter.emit_room_created(room_code, host_id)
            room.add_player(host_id, host_name)
            self.rooms[room_code] = room
            return room

    def get_room(self, room_code: str) -> Optional[GameRoom]:
        return self.rooms.get(room_code)

    def join_room(self, room_code: str, player_id: str, player_name: str) -> GameRoom:
        """
        Add a player to a room waiting in the lobby.

        Raises:
            RoomNotFound: no such room, or its game already started
            RoomFull: room is at capacity
        """
        with self._lock:
            room = self.rooms.get(room_code)
            if not room:
                raise RoomNotFound("Room not found or game already started", room_code=room_code)

            # Phase check and insert must not straddle a concurrent start_game
            with room.lock:
                if room.phase != GamePhase.LOBBY:
                    raise RoomNotFound("Room not found or game already started", room_code=room_code)

                if not room.add_player(player_id, player_name):
                    raise RoomFull("Room is full", room_code=room_code)

            return room

    def leave_room(self, room_code: str, player_id: str) -> Optional[GameRoom]:
        """Remove a player; the room is deleted once empty. Returns the room, if any."""
        with self._lock:
            room = self.rooms.get(room_code)
            if not room:
                return None

            with room.lock:
                room.remove_player(player_id)
                if room.is_empty:
                    del self.rooms[room_code]

            return room

    def find_room_by_player(self, player_id: str) -> Optional[GameRoom]:
        with self._lock:
            for room in self.rooms.values():
                if player_id in room.players:
                    return room
        return None

    def disconnect(self, player_id: str) -> Optional[Tuple[str, GameRoom]]:
        """Take a disconnected player out of its room. Returns (room_code, room) or None."""
        with self._lock:
            room = self.find_room_by_player(player_id)
            if room is None:
                return None

            self.leave_room(room.room_code, player_id)
            return room.room_code, room

    def cleanup_rooms(self) -> List[str]:
        """
        Delete rooms that are empty or older than the TTL, in any phase.

        Returns the removed room codes.
        """
        removed = []
        now = self.clock()
        with self._lock:
            for room_code, room in list(self.rooms.items()):
                with room.lock:
                    if not room.is_expired(now, self.config.room_ttl_ms):
                        continue
                    del self.rooms[room_code]
                    removed.append(room_code)
                    if self.event_emitter:
                        self.event_emitter.emit_room_expired(room_code, len(room.players), room.age_ms(now))
        return removed

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            rooms = list(self.rooms.values())
        return {
            "activeRooms": len(rooms),
            "totalPlayers": sum(len(room.players) for room in rooms),
            "rooms": [room.get_summary() for room in rooms],
        }
