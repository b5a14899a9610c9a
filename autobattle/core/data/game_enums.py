"""Centralized battle enums and constants.

This module contains the enums that are shared across the core and game
packages, providing a single source of truth for sides, phases and
targeting policies.
"""

from enum import Enum, auto


class Side(Enum):
    """Affiliation of a combatant."""
    PLAYER = 0
    ENEMY = 1

    @property
    def opponent(self) -> "Side":
        """Get the opposing side."""
        return Side.ENEMY if self is Side.PLAYER else Side.PLAYER


class BattlePhase(Enum):
    """States of the simulation driver."""
    IDLE = auto()      # Placement allowed, no timers running
    RUNNING = auto()   # Frame loop active
    RESOLVED = auto()  # Terminal display state, waiting for reset


class TargetingPolicy(Enum):
    """Selectable target acquisition rules."""
    COLUMN_ONLY = "column_only"
    COLUMN_OR_ROW = "column_or_row"

    @classmethod
    def from_name(cls, name: str) -> "TargetingPolicy":
        """Parse a policy from its configuration name.

        Raises:
            ValueError: If the name does not match any policy
        """
        normalized = name.strip().lower().replace("-", "_")
        for policy in cls:
            if policy.value == normalized:
                return policy
        valid = ", ".join(p.value for p in cls)
        raise ValueError(f"Unknown targeting policy '{name}' (expected one of: {valid})")


class TargetAxis(Enum):
    """Axis along which a defender was reached."""
    COLUMN = 0
    ROW = 1


# Board defaults
DEFAULT_COLUMNS = 5
DEFAULT_ROWS = 2

# Attack intervals below this floor are clamped up (milliseconds)
DEFAULT_MIN_ATTACK_INTERVAL_MS = 100

# Health bars switch to the danger style at or below this fraction
DANGER_HEALTH_THRESHOLD = 0.3

SIDE_ID_PREFIXES = {
    Side.PLAYER: "P",
    Side.ENEMY: "E",
}
