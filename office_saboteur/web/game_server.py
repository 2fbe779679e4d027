"""
Socket server mapping player actions onto room operations.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any

from flask import Flask, jsonify, request
from flask_socketio import SocketIO, emit, join_room, leave_room

from ..config.game_config import GameConfig, default_config
from ..core import GameError, GameRoom, RoomNotFound, RoomRegistry
from .event_emitter import EventEmitter


class GameServer:
    """
    Flask-SocketIO server for game rooms.

    Every handler resolves the sender's room through the registry, runs one
    room operation and broadcasts the result. Errors go back to the sender only.
    """

    def __init__(
        self,
        config: GameConfig = default_config,
        registry: Optional[RoomRegistry] = None,
        event_emitter: Optional[EventEmitter] = None,
    ):
        self.config = config
        self.registry = registry or RoomRegistry(config, event_emitter=event_emitter)
        self.event_emitter = event_emitter or self.registry.event_emitter

        self.app = Flask(__name__)
        self.socketio = SocketIO(
            self.app,
            cors_allowed_origins=config.cors_allowed_origins,
            async_mode='threading',
        )
        self.clients_connected = 0
        self._cleanup_task = None
        self._record_task = None

        self._setup_routes()
        self._setup_socketio()

    def _log(self, message: str) -> None:
        if self.config.log_events:
            print(message)

    def _setup_routes(self):
        """Setup HTTP status routes."""
        @self.app.route('/')
        def index():
            return jsonify({
                "status": "Office Saboteur server running",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                **self.registry.get_stats(),
            })

        @self.app.route('/stats')
        def stats():
            return jsonify(self.registry.get_stats())

    def _require_room(self, data: Dict[str, Any]) -> GameRoom:
        room_code = str(data.get('roomCode', ''))
        room = self.registry.get_room(room_code)
        if room is None:
            raise RoomNotFound("Room not found", room_code=room_code)
        return room

    def _setup_socketio(self):
        """Setup SocketIO event handlers."""
        @self.socketio.on('connect')
        def handle_connect():
            self.clients_connected += 1
            self._log(f"Player connected: {request.sid}. Total clients: {self.clients_connected}")

        @self.socketio.on('disconnect')
        def handle_disconnect(reason=None):
            self.clients_connected -= 1
            self._log(f"Player disconnected: {request.sid}")

            left = self.registry.disconnect(request.sid)
            if left:
                room_code, room = left
                emit('playerLeft', {
                    'playerId': request.sid,
                    'players': room.get_players_array()
                }, to=room_code)

        @self.socketio.on('createGame')
        def handle_create_game(data=None):
            data = data or {}
            room = self.registry.create_room(request.sid, data.get('playerName', ''))
            join_room(room.room_code)
            self._log(f"[ROOM {room.room_code}] Created by {request.sid}")

            emit('gameCreated', {
                'roomCode': room.room_code,
                'players': room.get_players_array()
            })

        @self.socketio.on('joinGame')
        def handle_join_game(data=None):
            data = data or {}
            room_code = str(data.get('roomCode', ''))
            try:
                room = self.registry.join_room(room_code, request.sid, data.get('playerName', ''))
            except GameError as e:
                emit('joinError', e.to_dict())
                return

            join_room(room_code)
            emit('joinedGame', {
                'roomCode': room_code,
                'players': room.get_players_array()
            })
            emit('playerJoined', {
                'players': room.get_players_array()
            }, to=room_code, include_self=False)

        @self.socketio.on('startGame')
        def handle_start_game(data=None):
            try:
                room = self._require_room(data or {})
                room.start_game(request.sid)
            except GameError as e:
                emit('error', {'message': e.message, 'code': e.code})
                return

            self._log(f"[ROOM {room.room_code}] Game started with {len(room.players)} players")
            emit('gameStarted', {
                'players': [
                    {
                        'id': player.player_id,
                        'name': player.name,
                        'role': player.role.value,
                        'tasks': [task.to_dict() for task in player.tasks],
                    }
                    for player in room.get_players()
                ]
            }, to=room.room_code)

        @self.socketio.on('sendMessage')
        def handle_send_message(data=None):
            data = data or {}
            room = self.registry.get_room(str(data.get('roomCode', '')))
            if not room:
                return

            chat = room.send_chat(request.sid, data.get('message', ''))
            if chat:
                emit('newMessage', chat.to_dict(), to=room.room_code)

        @self.socketio.on('callMeeting')
        def handle_call_meeting(data=None):
            data = data or {}
            room = self.registry.get_room(str(data.get('roomCode', '')))
            if not room:
                return

            session = room.call_meeting(request.sid, data.get('reason', ''))
            if session:
                self._broadcast_meeting(room, session.reason)

        @self.socketio.on('reportBody')
        def handle_report_body(data=None):
            data = data or {}
            room = self.registry.get_room(str(data.get('roomCode', '')))
            if not room:
                return

            session = room.report_body(request.sid)
            if session:
                self._broadcast_meeting(room, session.reason)

        @self.socketio.on('castVote')
        def handle_cast_vote(data=None):
            data = data or {}
            room = self.registry.get_room(str(data.get('roomCode', '')))
            if not room:
                return

            try:
                outcome = room.cast_vote(request.sid, data.get('targetId'))
            except GameError as e:
                emit('error', {'message': e.message, 'code': e.code})
                return

            if outcome is None:
                return

            emit('votingResults', {
                'results': outcome.result.to_dict(),
                'eliminated': outcome.eliminated.to_dict() if outcome.eliminated else None
            }, to=room.room_code)

            if outcome.game_over:
                self._log(f"[ROOM {room.room_code}] Game over. Winner: {outcome.winner.value}")
                emit('gameEnded', {
                    'winner': outcome.winner.value,
                    'players': room.get_players_array()
                }, to=room.room_code)
            else:
                emit('meetingEnded', {
                    'players': room.get_players_array()
                }, to=room.room_code)

        @self.socketio.on('completeTask')
        def handle_complete_task(data=None):
            data = data or {}
            room = self.registry.get_room(str(data.get('roomCode', '')))
            if not room:
                return

            task_id = data.get('taskId')
            player = room.complete_task(request.sid, task_id)
            if player:
                emit('taskCompleted', {
                    'playerId': request.sid,
                    'taskId': task_id,
                    'progress': player.get_stats()
                }, to=room.room_code)

        @self.socketio.on('leaveGame')
        def handle_leave_game(data=None):
            data = data or {}
            room_code = str(data.get('roomCode', ''))
            room = self.registry.get_room(room_code)
            if not room or request.sid not in room.players:
                return

            self.registry.leave_room(room_code, request.sid)
            leave_room(room_code)
            emit('playerLeft', {
                'playerId': request.sid,
                'players': room.get_players_array()
            }, to=room_code)

    def _broadcast_meeting(self, room: GameRoom, reason: str) -> None:
        caller = room.get_player(request.sid)
        emit('meetingCalled', {
            'calledBy': {
                'id': request.sid,
                'name': caller.name if caller else None
            },
            'reason': reason,
            'players': room.get_players_array()
        }, to=room.room_code)

    def _cleanup_loop(self) -> None:
        """Sweep expired rooms forever."""
        while True:
            self.socketio.sleep(self.config.cleanup_interval_seconds)
            removed = self.registry.cleanup_rooms()
            if removed:
                self._log(f"Removed {len(removed)} expired rooms: {removed}")

    def start_cleanup_task(self) -> None:
        if self._cleanup_task is None:
            self._cleanup_task = self.socketio.start_background_task(self._cleanup_loop)

    def _record_loop(self) -> None:
        """Write queued room events to disk, never under a room lock."""
        while True:
            self.socketio.sleep(self.config.record_flush_interval_seconds)
            self.event_emitter.flush()

    def start_record_task(self) -> None:
        if self.event_emitter and self._record_task is None:
            self._record_task = self.socketio.start_background_task(self._record_loop)

    def start(self) -> None:
        """Start the web server."""
        self.start_cleanup_task()
        self.start_record_task()
        print(f"\n{'='*60}")
        print(f"Starting game server on http://{self.config.host}:{self.config.port}")
        print(f"{'='*60}\n")
        try:
            self.socketio.run(
                self.app,
                host=self.config.host,
                port=self.config.port,
                debug=False,
                allow_unsafe_werkzeug=True,
            )
        finally:
            if self.event_emitter:
                self.event_emitter.flush()
