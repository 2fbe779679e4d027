"""
Role definitions and the role assignment algorithm.
"""

import random
from enum import Enum
from typing import List, Optional

from .exceptions import InvalidPlayerCount


class Team(Enum):
    """Winning side."""
    EMPLOYEES = "employees"
    SABOTEURS = "saboteurs"


class RoleType(Enum):
    """Player role types."""
    EMPLOYEE = "employee"
    SABOTEUR = "saboteur"
    ANALYST = "analyst"
    TECHNICIAN = "technician"

    @property
    def team(self) -> Team:
        return Team.SABOTEURS if self is RoleType.SABOTEUR else Team.EMPLOYEES


# Player counts above this get a second saboteur
SINGLE_SABOTEUR_LIMIT = 6
# Player counts from this up get the analyst and the technician
SPECIAL_ROLES_THRESHOLD = 6


def get_saboteur_count(player_count: int) -> int:
    """Number of saboteurs for a room of `player_count` players."""
    return 1 if player_count <= SINGLE_SABOTEUR_LIMIT else 2


def get_role_distribution(player_count: int) -> List[RoleType]:
    """
    Get the unshuffled role list for a room.

    Returns saboteurs first, then analyst and technician (6+ players), then
    employees up to `player_count`.
    """
    if player_count < 1:
        raise InvalidPlayerCount(f"Invalid player count: {player_count}", player_count=player_count)

    roles = [RoleType.SABOTEUR] * get_saboteur_count(player_count)

    if player_count >= SPECIAL_ROLES_THRESHOLD:
        roles.append(RoleType.ANALYST)
        roles.append(RoleType.TECHNICIAN)

    while len(roles) < player_count:
        roles.append(RoleType.EMPLOYEE)

    return roles


class RoleAssigner:
    """Turns a player count into a shuffled role list."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def assign(self, player_count: int) -> List[RoleType]:
        """Shuffled role list of length `player_count`."""
        roles = get_role_distribution(player_count)
        self.rng.shuffle(roles)
        return roles
