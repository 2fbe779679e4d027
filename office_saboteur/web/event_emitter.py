"""
Event emitter for recording room events.
"""

import queue
import threading
from datetime import datetime
from typing import Dict, Any, Optional, List

from .run_recorder import RecordedEvent, RunRecorder


class EventEmitter:
    """
    Queues room events for a RunRecorder.

    Rooms emit while holding their lock, so emitting only enqueues. The file
    writes happen in flush(), which the server runs from a background task
    outside any room or registry lock.
    """

    def __init__(self, run_recorder: Optional[RunRecorder] = None):
        self.run_recorder = run_recorder
        self._pending = queue.Queue()
        self._flush_lock = threading.Lock()

    @property
    def pending(self) -> int:
        return self._pending.qsize()

    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        self._pending.put(RecordedEvent(datetime.now().isoformat(), event_type, data))

    def flush(self) -> int:
        """Hand every queued event to the recorder in emit order. Returns how many were taken."""
        with self._flush_lock:
            batch: List[RecordedEvent] = []
            while True:
                try:
                    batch.append(self._pending.get_nowait())
                except queue.Empty:
                    break

            if batch and self.run_recorder:
                try:
                    self.run_recorder.record_batch(batch)
                except OSError as e:
                    # Don't let recording errors break the game
                    print(f"Error recording event: {e}")
            return len(batch)

    def emit_room_created(self, room_code: str, host_id: str) -> None:
        self._emit("room_created", {
            "room_code": room_code,
            "host_id": host_id
        })

    def emit_player_joined(self, room_code: str, player_id: str, player_name: str) -> None:
        self._emit("player_joined", {
            "room_code": room_code,
            "player_id": player_id,
            "player_name": player_name
        })

    def emit_player_left(self, room_code: str, player_id: str, new_host_id: Optional[str] = None) -> None:
        self._emit("player_left", {
            "room_code": room_code,
            "player_id": player_id,
            "new_host_id": new_host_id
        })

    def emit_game_start(self, room_code: str, roles: Dict[str, str], tasks_per_player: int) -> None:
        """Emit game start event with the (private) role assignment."""
        self._emit("game_start", {
            "room_code": room_code,
            "roles": roles,
            "tasks_per_player": tasks_per_player
        })

    def emit_meeting_called(self, room_code: str, caller_id: str, reason: str) -> None:
        self._emit("meeting_called", {
            "room_code": room_code,
            "caller_id": caller_id,
            "reason": reason
        })

    def emit_vote(self, room_code: str, voter_id: str, target_id: Optional[str]) -> None:
        self._emit("vote", {
            "room_code": room_code,
            "voter": voter_id,
            "target": target_id
        })

    def emit_vote_results(self, room_code: str, vote_count: Dict[str, int], eliminated: Optional[str], skipped: int) -> None:
        self._emit("vote_results", {
            "room_code": room_code,
            "vote_count": vote_count,
            "eliminated": eliminated,
            "skipped": skipped
        })

    def emit_elimination(self, room_code: str, player_id: str, role: Optional[str], voters: Optional[List[str]] = None) -> None:
        self._emit("elimination", {
            "room_code": room_code,
            "player_id": player_id,
            "role": role,
            "voters": voters or []
        })

    def emit_game_over(self, room_code: str, winner: str) -> None:
        self._emit("game_over", {
            "room_code": room_code,
            "winner": winner
        })

    def emit_task_completed(self, room_code: str, player_id: str, task_id: str, tasks_completed: int) -> None:
        self._emit("task_completed", {
            "room_code": room_code,
            "player_id": player_id,
            "task_id": task_id,
            "tasks_completed": tasks_completed
        })

    def emit_room_expired(self, room_code: str, player_count: int, age_ms: int) -> None:
        self._emit("room_expired", {
            "room_code": room_code,
            "player_count": player_count,
            "age_ms": age_ms
        })
