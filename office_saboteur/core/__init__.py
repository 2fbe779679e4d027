"""
Core game components: rooms, players, roles, tasks and voting.
"""

from .exceptions import (
    GameError, RoomNotFound, RoomFull, NotHost, NotReadyToStart,
    InvalidVote, InvalidPlayerCount, UnknownTask, EmptyCatalogError,
)
from .tasks import Task, TaskCategory, TaskCatalog, TASKS
from .roles import RoleType, Team, RoleAssigner, get_role_distribution
from .player import Player
from .voting import VotingSession, VotingResult, MEETING_DURATION_MS
from .game_room import GameRoom, GamePhase, MeetingOutcome, ChatMessage, BODY_REPORTED_REASON
from .room_registry import RoomRegistry

__all__ = [
    'GameError',
    'RoomNotFound',
    'RoomFull',
    'NotHost',
    'NotReadyToStart',
    'InvalidVote',
    'InvalidPlayerCount',
    'UnknownTask',
    'EmptyCatalogError',
    'Task',
    'TaskCategory',
    'TaskCatalog',
    'TASKS',
    'RoleType',
    'Team',
    'RoleAssigner',
    'get_role_distribution',
    'Player',
    'VotingSession',
    'VotingResult',
    'MEETING_DURATION_MS',
    'GameRoom',
    'GamePhase',
    'MeetingOutcome',
    'ChatMessage',
    'BODY_REPORTED_REASON',
    'RoomRegistry',
]
