"""
Target acquisition strategies.

This module decides which defender an attacker hits, separate from damage
resolution. Strategies are pure: they read the attacker and the defender
roster and never mutate either, so identical inputs always produce the same
target.
"""
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ...core.data.game_enums import Side, TargetAxis, TargetingPolicy
from ..entities.combatant import Combatant


class TargetingStrategy(ABC):
    """Picks at most one live defender for an attacker."""

    policy: TargetingPolicy

    @abstractmethod
    def select_target(
        self,
        attacker: Combatant,
        defenders: Iterable[Combatant]
    ) -> Optional[Combatant]:
        """Select the preferred live defender.

        Args:
            attacker: The combatant whose attack timer elapsed
            defenders: The opposing roster, possibly including non-live combatants

        Returns:
            The chosen defender, or None if no live defender is eligible
        """


class ColumnTargeting(TargetingStrategy):
    """Only defenders in the attacker's column are eligible.

    The two boards are stacked with the enemy board above the player board,
    so the defender nearest across the gap is the one with the smallest row
    when an enemy attacks, and the one with the largest row when a player
    attacks.
    """

    policy = TargetingPolicy.COLUMN_ONLY

    def select_target(self, attacker, defenders):
        same_column = [d for d in defenders if d.alive and d.column == attacker.column]
        if not same_column:
            return None

        if attacker.side == Side.ENEMY:
            return min(same_column, key=lambda d: d.row)
        return max(same_column, key=lambda d: d.row)


class CrossAxisTargeting(TargetingStrategy):
    """Defenders sharing the attacker's column or row are eligible.

    Candidates are ranked, ascending, by:
    1. Distance along the shared axis
    2. Column-axis alignment before row-only alignment
    3. Horizontal offset
    4. Column index, then row index
    """

    policy = TargetingPolicy.COLUMN_OR_ROW

    @staticmethod
    def rank(attacker: Combatant, defender: Combatant) -> Optional[tuple[int, int, int, int, int]]:
        """Ranking key for a defender, or None if it is not eligible."""
        if not defender.alive:
            return None

        here = attacker.position
        there = defender.position
        if here.shares_column(there):
            axis = TargetAxis.COLUMN
            distance = here.row_offset(there)
        elif here.shares_row(there):
            axis = TargetAxis.ROW
            distance = here.column_offset(there)
        else:
            return None

        return (distance, axis.value, here.column_offset(there), there.column, there.row)

    def select_target(self, attacker, defenders):
        best: Optional[Combatant] = None
        best_rank = None
        for defender in defenders:
            rank = self.rank(attacker, defender)
            if rank is None:
                continue
            if best_rank is None or rank < best_rank:
                best, best_rank = defender, rank
        return best


_STRATEGIES: dict[TargetingPolicy, type[TargetingStrategy]] = {
    TargetingPolicy.COLUMN_ONLY: ColumnTargeting,
    TargetingPolicy.COLUMN_OR_ROW: CrossAxisTargeting,
}


def create_targeting_strategy(policy: TargetingPolicy) -> TargetingStrategy:
    """Build the strategy for a configured policy.

    Raises:
        KeyError: If no strategy is registered for the policy
    """
    if policy not in _STRATEGIES:
        raise KeyError(f"No targeting strategy registered for policy: {policy}")
    return _STRATEGIES[policy]()
