"""
Tests for role distribution and assignment.
"""

import random
from collections import Counter

import pytest

from office_saboteur.core import RoleAssigner, RoleType, Team, InvalidPlayerCount, get_role_distribution


@pytest.mark.parametrize("player_count", [4, 5, 6, 7, 8])
def test_role_distribution(player_count):
    """Test role counts for every supported room size."""
    roles = RoleAssigner(random.Random(player_count)).assign(player_count)
    counts = Counter(roles)

    assert len(roles) == player_count
    assert counts[RoleType.SABOTEUR] == (1 if player_count <= 6 else 2)

    if player_count >= 6:
        assert counts[RoleType.ANALYST] == 1
        assert counts[RoleType.TECHNICIAN] == 1
    else:
        assert RoleType.ANALYST not in counts
        assert RoleType.TECHNICIAN not in counts

    specials = counts[RoleType.SABOTEUR] + counts[RoleType.ANALYST] + counts[RoleType.TECHNICIAN]
    assert counts[RoleType.EMPLOYEE] == player_count - specials


def test_unshuffled_order():
    assert get_role_distribution(7) == [
        RoleType.SABOTEUR,
        RoleType.SABOTEUR,
        RoleType.ANALYST,
        RoleType.TECHNICIAN,
        RoleType.EMPLOYEE,
        RoleType.EMPLOYEE,
        RoleType.EMPLOYEE,
    ]


def test_single_player():
    assert RoleAssigner(random.Random(0)).assign(1) == [RoleType.SABOTEUR]


@pytest.mark.parametrize("player_count", [0, -3])
def test_invalid_player_count(player_count):
    with pytest.raises(InvalidPlayerCount):
        RoleAssigner().assign(player_count)


def test_assign_is_a_permutation():
    roles = RoleAssigner(random.Random(99)).assign(8)
    assert sorted(roles, key=lambda r: r.value) == sorted(get_role_distribution(8), key=lambda r: r.value)


def test_assign_is_reproducible_with_seed():
    assert RoleAssigner(random.Random(5)).assign(8) == RoleAssigner(random.Random(5)).assign(8)


def test_shuffle_moves_saboteur():
    """Over many shuffles the saboteur lands in every seat."""
    assigner = RoleAssigner(random.Random(11))
    seats = {assigner.assign(4).index(RoleType.SABOTEUR) for _ in range(200)}
    assert seats == {0, 1, 2, 3}


def test_role_teams():
    assert RoleType.SABOTEUR.team == Team.SABOTEURS
    assert RoleType.ANALYST.team == Team.EMPLOYEES
    assert RoleType.TECHNICIAN.team == Team.EMPLOYEES
    assert RoleType.EMPLOYEE.team == Team.EMPLOYEES
