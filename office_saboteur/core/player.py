"""
Player class representing a room member.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from .roles import RoleType
from .tasks import Task
from .exceptions import UnknownTask


@dataclass
class Player:
    """Represents a player in a room."""
    player_id: str
    name: str
    role: Optional[RoleType] = None
    is_alive: bool = True
    is_host: bool = False
    tasks_completed: int = 0
    tasks: List[Task] = field(default_factory=list)

    def __str__(self) -> str:
        role = self.role.value if self.role else "unassigned"
        return f"{self.name} ({role})"

    @property
    def is_saboteur(self) -> bool:
        """Check if player is a saboteur."""
        return self.role == RoleType.SABOTEUR

    def eliminate(self) -> None:
        """Mark player as eliminated."""
        self.is_alive = False

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def complete_task(self, task_id: str) -> Task:
        """
        Mark one of the player's tasks as completed.

        The counter is incremented on every call, including repeats of an
        already completed task.
        """
        task = self.get_task(task_id)
        if task is None:
            raise UnknownTask(f"Unknown task: {task_id}", player_id=self.player_id, task_id=task_id)

        task.completed = True
        self.tasks_completed += 1
        return task

    @property
    def task_progress(self) -> float:
        """Task completion percentage."""
        if not self.tasks:
            return 0.0
        return self.tasks_completed / len(self.tasks) * 100

    def get_stats(self) -> Dict[str, Any]:
        """Progress snapshot broadcast after a task completion."""
        return {
            "id": self.player_id,
            "name": self.name,
            "role": self.role.value if self.role else None,
            "isAlive": self.is_alive,
            "tasksCompleted": self.tasks_completed,
            "totalTasks": len(self.tasks),
            "progress": self.task_progress,
        }

    def to_dict(self, include_tasks: bool = False) -> Dict[str, Any]:
        """Wire representation of the player."""
        data = {
            "id": self.player_id,
            "name": self.name,
            "role": self.role.value if self.role else None,
            "isAlive": self.is_alive,
            "isHost": self.is_host,
            "tasksCompleted": self.tasks_completed,
        }
        if include_tasks:
            data["tasks"] = [task.to_dict() for task in self.tasks]
        return data
