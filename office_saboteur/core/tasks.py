"""
Task definitions and sampling for the task phase.
"""

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Any, List, Optional, Sequence

from .exceptions import EmptyCatalogError


class TaskCategory(Enum):
    """Task category."""
    NORMAL = "normal"


@dataclass
class Task:
    """A unit of busywork. Catalog entries are templates; players get copies."""
    id: str
    name: str
    description: str
    category: TaskCategory = TaskCategory.NORMAL
    duration: int = 30000  # ms
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.category.value,
            "duration": self.duration,
            "completed": self.completed,
        }


TASKS: List[Task] = [
    Task("task1", "Complete report", "Fill in the monthly sales report", duration=30000),
    Task("task2", "Check inventory", "Verify the warehouse inventory", duration=45000),
    Task("task3", "Update database", "Sync the database with the server", duration=60000),
    Task("task4", "Configure module", "Set up the new accounting module", duration=40000),
    Task("task5", "Review errors", "Review and fix errors in the system", duration=35000),
]


class TaskCatalog:
    """Fixed pool of tasks with draw-without-replacement sampling."""

    def __init__(self, tasks: Optional[Sequence[Task]] = None, rng: Optional[random.Random] = None):
        self.tasks = list(TASKS if tasks is None else tasks)
        if not self.tasks:
            raise EmptyCatalogError()
        self.rng = rng or random.Random()

    def sample(self, count: int) -> List[Task]:
        """
        Draw `count` fresh task copies.

        Tasks are drawn without replacement from a working pool; once the pool
        is empty it is refilled with the whole catalog, so a task only repeats
        after every other task has been handed out. Two consecutive tasks are
        never the same unless the catalog has a single distinct task.
        """
        available: List[Task] = []
        selected: List[Task] = []

        while len(selected) < count:
            if not available:
                available = list(self.tasks)

            last_id = selected[-1].id if selected else None
            choices = [i for i, task in enumerate(available) if task.id != last_id]
            if not choices:
                choices = list(range(len(available)))

            index = choices[self.rng.randrange(len(choices))]
            selected.append(replace(available.pop(index), completed=False))

        return selected
