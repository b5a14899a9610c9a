"""
Per-frame combat update for one side's roster.

tick_roster advances every live attacker's timer by the frame delta, fires
attacks whose interval has elapsed and applies damage to the chosen target.
It touches nothing but attacker timers and target health/liveness, and
reports each hit as a CombatantStateChange for observers.
"""
from dataclasses import dataclass
from typing import Iterable

from ...core.data.game_enums import Side
from ..entities.combatant import Combatant
from .battle_calculator import BattleCalculator
from .targeting import TargetingStrategy


@dataclass(frozen=True)
class CombatantStateChange:
    """Observable state of a combatant right after it was hit."""
    combatant_id: str
    attacker_id: str
    side: Side
    damage: int
    health: int
    max_health: int
    alive: bool

    @property
    def defeated(self) -> bool:
        return not self.alive


def tick_roster(
    attackers: Iterable[Combatant],
    defenders: Iterable[Combatant],
    elapsed_ms: float,
    targeting: TargetingStrategy,
) -> list[CombatantStateChange]:
    """Advance one side's attackers by a frame.

    Args:
        attackers: Roster whose timers advance this call
        defenders: Opposing roster targets are drawn from
        elapsed_ms: Frame delta; negative values count as zero
        targeting: Strategy choosing each attacker's target

    Returns:
        One state change per hit, in the order the hits happened
    """
    elapsed_ms = max(0.0, elapsed_ms)
    # Liveness is re-read on every scan, so kills earlier in the frame count
    defender_list = list(defenders)
    changes: list[CombatantStateChange] = []

    for attacker in attackers:
        if not attacker.alive:
            continue

        attacker.accumulate_time(elapsed_ms)
        if attacker.time_since_attack_ms < attacker.attack_interval_ms:
            continue

        target = targeting.select_target(attacker, defender_list)
        if target is None:
            # An attack with no eligible target is spent
            attacker.reset_attack_timer()
            continue

        damage = BattleCalculator.calculate_damage(attacker, target)
        target.take_damage(damage)
        attacker.reset_attack_timer()

        changes.append(
            CombatantStateChange(
                combatant_id=target.combatant_id,
                attacker_id=attacker.combatant_id,
                side=target.side,
                damage=damage,
                health=target.health,
                max_health=target.max_health,
                alive=target.alive,
            )
        )

    return changes
