"""Combatant entity with mutable combat state.

A Combatant is one placed unit or monster. Identity, side, placement and
stats are fixed at construction; only health, liveness and the attack timer
change during a battle.
"""

import itertools
from typing import Optional

from ...core.data.data_structures import BoardSize, GridPosition
from ...core.data.game_enums import (
    DANGER_HEALTH_THRESHOLD,
    DEFAULT_MIN_ATTACK_INTERVAL_MS,
    SIDE_ID_PREFIXES,
    Side,
)
from .definitions import UnitDefinition


class IdAllocator:
    """Allocates unique combatant identifiers like ``P_1`` and ``E_2``."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next_id(self, side: Side) -> str:
        return f"{SIDE_ID_PREFIXES[side]}_{next(self._counter)}"


class Combatant:
    """One unit or monster on the board.

    Property Access Patterns:
    1. **Fixed properties**: combatant.combatant_id, combatant.position, combatant.attack
    2. **Combat state**: combatant.health, combatant.alive, combatant.time_since_attack_ms

    Combat state is changed through take_damage(), accumulate_time(),
    reset_attack_timer() and revive() so that health and liveness never
    disagree.
    """

    def __init__(
        self,
        combatant_id: str,
        side: Side,
        name: str,
        attack: int,
        attack_interval_ms: float,
        max_health: int,
        armor: int,
        position: GridPosition,
        definition_index: Optional[int] = None,
        min_attack_interval_ms: float = DEFAULT_MIN_ATTACK_INTERVAL_MS,
    ):
        """Initialize a combatant at full health.

        Args:
            combatant_id: Unique identifier
            side: PLAYER or ENEMY affiliation
            name: Display name
            attack: Attack power
            attack_interval_ms: Time between attacks, raised to min_attack_interval_ms
            max_health: Maximum (and starting) health
            armor: Flat damage reduction
            position: Board cell, already clamped to the board
            definition_index: Index of the definition this combatant came from
            min_attack_interval_ms: Floor applied to attack_interval_ms
        """
        if max_health <= 0:
            raise ValueError(f"Maximum health must be positive, got {max_health}")
        if min_attack_interval_ms <= 0:
            raise ValueError(f"Attack interval floor must be positive, got {min_attack_interval_ms}")

        self._combatant_id = combatant_id
        self._side = side
        self._name = name
        self._attack = max(0, attack)
        self._attack_interval_ms = max(min_attack_interval_ms, attack_interval_ms)
        self._max_health = max_health
        self._armor = max(0, armor)
        self._position = position
        self._definition_index = definition_index

        self._health = max_health
        self._alive = True
        self._time_since_attack_ms = 0.0

    @classmethod
    def from_definition(
        cls,
        definition: UnitDefinition,
        side: Side,
        column: int,
        row: int,
        combatant_id: str,
        board: Optional[BoardSize] = None,
        min_attack_interval_ms: float = DEFAULT_MIN_ATTACK_INTERVAL_MS,
    ) -> "Combatant":
        """Create a combatant from a unit or monster definition.

        The attack interval is raised to min_attack_interval_ms and the cell is
        clamped into the board. Non-positive health definitions are raised to 1
        so that a malformed table row still yields a valid combatant.
        """
        board = board or BoardSize()
        return cls(
            combatant_id=combatant_id,
            side=side,
            name=definition.name,
            attack=definition.attack,
            attack_interval_ms=definition.attack_interval_ms,
            max_health=max(1, definition.health),
            armor=definition.armor,
            position=board.clamp(column, row),
            definition_index=definition.index,
            min_attack_interval_ms=min_attack_interval_ms,
        )

    def __repr__(self) -> str:
        return (
            f"Combatant({self._combatant_id!r}, {self._name!r}, {self._side.name}, "
            f"({self.column}, {self.row}), hp={self._health}/{self._max_health})"
        )

    # ============== Fixed Properties ==============

    @property
    def combatant_id(self) -> str:
        return self._combatant_id

    @property
    def side(self) -> Side:
        return self._side

    @property
    def name(self) -> str:
        return self._name

    @property
    def definition_index(self) -> Optional[int]:
        return self._definition_index

    @property
    def attack(self) -> int:
        return self._attack

    @property
    def attack_interval_ms(self) -> float:
        return self._attack_interval_ms

    @property
    def max_health(self) -> int:
        return self._max_health

    @property
    def armor(self) -> int:
        return self._armor

    @property
    def position(self) -> GridPosition:
        return self._position

    @property
    def column(self) -> int:
        return self._position.column

    @property
    def row(self) -> int:
        return self._position.row

    # ============== Combat State ==============

    @property
    def health(self) -> int:
        return self._health

    @property
    def alive(self) -> bool:
        return self._alive

    @property
    def time_since_attack_ms(self) -> float:
        return self._time_since_attack_ms

    @property
    def health_percent(self) -> float:
        """Current health as a fraction of maximum, from 0.0 to 1.0."""
        return max(0.0, min(1.0, self._health / self._max_health))

    @property
    def is_in_danger(self) -> bool:
        """Whether the health bar should be drawn in the danger style."""
        return self.health_percent <= DANGER_HEALTH_THRESHOLD

    @property
    def is_ready_to_attack(self) -> bool:
        return self._alive and self._time_since_attack_ms >= self._attack_interval_ms

    def accumulate_time(self, elapsed_ms: float) -> None:
        """Add elapsed frame time to the attack timer."""
        self._time_since_attack_ms += max(0.0, elapsed_ms)

    def reset_attack_timer(self) -> None:
        self._time_since_attack_ms = 0.0

    def take_damage(self, amount: int) -> int:
        """Apply damage, flooring health at zero.

        Args:
            amount: Amount of damage to apply

        Returns:
            Actual damage dealt (less than amount on overkill)
        """
        if amount < 0:
            raise ValueError("Damage amount cannot be negative")

        old_health = self._health
        self._health = max(0, self._health - amount)
        if self._health == 0:
            self._alive = False
        return old_health - self._health

    def revive(self) -> None:
        """Restore full health, liveness and a fresh attack timer."""
        self._health = self._max_health
        self._alive = True
        self._time_since_attack_ms = 0.0
