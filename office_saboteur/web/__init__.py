"""
Transport and event recording for game rooms.
"""

from .event_emitter import EventEmitter
from .run_recorder import RecordedEvent, RunRecorder
from .game_server import GameServer

__all__ = ['EventEmitter', 'RecordedEvent', 'RunRecorder', 'GameServer']
