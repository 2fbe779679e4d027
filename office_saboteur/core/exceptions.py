"""
Exceptions for recoverable game errors.

Every error is reported back to the player that caused it and never ends the
room or the process.
"""


class GameError(Exception):
    """Base class for errors raised by room operations."""

    code = "game_error"

    def __init__(self, message: str = "", **details):
        self.message = message or self.__class__.__doc__
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict:
        """Payload sent back to the originating socket."""
        return {"error": self.message, "code": self.code}


class RoomNotFound(GameError):
    """Room not found or game already started."""

    code = "not_found"


class RoomFull(GameError):
    """Room is full."""

    code = "full"


class NotHost(GameError):
    """Only host can start the game."""

    code = "not_host"


class NotReadyToStart(GameError):
    """Cannot start game."""

    code = "not_ready"


class InvalidVote(GameError):
    """Invalid vote."""

    code = "invalid_vote"


class InvalidPlayerCount(GameError):
    """Player count must be at least 1."""

    code = "invalid_player_count"


class UnknownTask(GameError):
    """Task is not assigned to this player."""

    code = "unknown_task"


class EmptyCatalogError(GameError):
    """Task catalog is empty."""

    code = "empty_catalog"
