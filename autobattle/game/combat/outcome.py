"""Victory and defeat detection plus end-of-run rewards.

The predicates are stateless reads of current liveness. An empty roster is
never considered eliminated, so a battle cannot resolve before both sides
have combatants.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional

import numpy as np

from ..entities.definitions import MonsterDefinition, StageConfiguration
from ..entities.roster import Roster


def _all_down(roster: Roster) -> bool:
    alive = roster.liveness_mask()
    return alive.size > 0 and not bool(np.any(alive))


def is_victory(enemies: Roster) -> bool:
    """True when the enemy roster is non-empty and entirely non-live."""
    return _all_down(enemies)


def is_defeat(players: Roster) -> bool:
    """True when the player roster is non-empty and entirely non-live."""
    return _all_down(players)


def evaluate_outcome(enemies: Roster, players: Roster) -> Optional[bool]:
    """Check both rosters, victory first.

    Returns:
        True on victory, False on defeat, None while the battle continues
    """
    if is_victory(enemies):
        return True
    if is_defeat(players):
        return False
    return None


@dataclass(frozen=True)
class BattleRewards:
    """Aggregated rewards for clearing a stage."""
    gold: int = 0
    items: tuple[str, ...] = field(default_factory=tuple)

    def format_summary(self) -> str:
        items = ", ".join(self.items) if self.items else "-"
        return f"Reward: {self.gold} gold\nItems: {items}"


def calculate_rewards(
    stage: StageConfiguration,
    monster_definitions: Mapping[int, MonsterDefinition]
) -> BattleRewards:
    """Sum gold and collect item drops over the stage's original placements.

    Placements that reference unknown monsters contribute nothing.
    """
    gold = 0
    items: list[str] = []
    for placement in stage.placements:
        definition = monster_definitions.get(placement.monster_index)
        if definition is None:
            continue
        gold += definition.gold
        if definition.item:
            items.append(definition.item)
    return BattleRewards(gold=gold, items=tuple(items))


@dataclass(frozen=True)
class BattleOutcome:
    """Terminal result of a battle."""
    victory: bool
    rewards: BattleRewards = field(default_factory=BattleRewards)
