"""User trust tiers and the tables derived from them.

Every role check in the codebase goes through ``is_privileged`` and
``ROLE_WEIGHTS`` so there is exactly one place that lists roles.
"""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    """Trust tier, ordered from least to most trusted."""

    USER = "USER"
    TRUSTED = "TRUSTED"
    MOD = "MOD"
    BIOLOGIST = "BIOLOGIST"
    ADMIN = "ADMIN"


ROLE_WEIGHTS: dict[Role, int] = {
    Role.USER: 1,
    Role.TRUSTED: 2,
    Role.MOD: 3,
    Role.BIOLOGIST: 5,
    Role.ADMIN: 5,
}

DEFAULT_ROLE_WEIGHT: int = 1

# Roles that bypass the sensitive-species location override and may
# resolve consensus directly.
PRIVILEGED_ROLES: frozenset[Role] = frozenset({Role.MOD, Role.BIOLOGIST, Role.ADMIN})

# Reputation bonus: +1 weight per 100 points, at most +2.
REPUTATION_PER_BONUS: int = 100
MAX_REPUTATION_BONUS: int = 2

# Reputation awarded when an identification is confirmed / rejected.
EXPERT_CORRECT_REWARD: int = 5
CORRECT_REWARD: int = 3
INCORRECT_PENALTY: int = -1


def parse_role(role: Role | str | None) -> Role | None:
    """Coerce a role name to ``Role``; unknown names and None give None."""
    if role is None or isinstance(role, Role):
        return role
    try:
        return Role(role.upper())
    except ValueError:
        return None


def is_privileged(role: Role | str | None) -> bool:
    """True for moderators, biologists and admins."""
    return parse_role(role) in PRIVILEGED_ROLES
