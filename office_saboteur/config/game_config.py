"""
Game configuration and constants.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class GameConfig:
    """Configuration for room and server parameters."""

    # Room settings
    max_players: int = 8
    min_players: int = 4  # Minimum players needed to start

    # Task settings (tasks per player is drawn once per game from this range)
    min_tasks_per_player: int = 3
    max_tasks_per_player: int = 4

    # Time limits
    meeting_duration_ms: int = 120000  # 2 minutes, advisory
    room_ttl_ms: int = 3600000  # 1 hour, hard limit regardless of game state
    cleanup_interval_seconds: int = 300  # 5 minutes between sweeps

    # Server settings
    host: str = "0.0.0.0"
    port: int = 3000
    cors_allowed_origins: List[str] = field(default_factory=lambda: [
        "https://pandita08.github.io",
        "http://localhost:3000",
        "http://127.0.0.1:5500",
    ])

    # Event recording
    record_events: bool = False
    runs_dir: str = "runs"
    record_flush_interval_seconds: float = 1.0  # How often queued events are written
    log_events: bool = True  # Print connection and room events to stdout

    random_seed: Optional[int] = None  # Seed for reproducible roles, tasks and room codes


# Default configuration instance
default_config = GameConfig()
