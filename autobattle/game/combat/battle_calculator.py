"""
Battle calculation system for damage resolution and forecasting.

The tick engine uses calculate_damage for every hit; the forecast helpers let
renderers and tests predict a matchup without touching combat state.
"""
import math
from dataclasses import dataclass

from ..entities.combatant import Combatant

MINIMUM_DAMAGE = 1


@dataclass(frozen=True)
class AttackForecast:
    """Predicted outcome of one attacker hitting one target repeatedly."""
    damage: int
    hits_to_defeat: int
    time_to_defeat_ms: float


class BattleCalculator:
    """Calculates damage and matchup forecasts."""

    @staticmethod
    def calculate_damage(attacker: Combatant, target: Combatant) -> int:
        """Damage of a single hit: attack minus armor, never below 1.

        The floor guarantees progress even when armor meets or exceeds attack.
        """
        return max(MINIMUM_DAMAGE, attacker.attack - target.armor)

    @staticmethod
    def hits_to_defeat(attacker: Combatant, target: Combatant) -> int:
        """Number of hits needed to bring the target from its current health to zero."""
        if not target.alive:
            return 0
        damage = BattleCalculator.calculate_damage(attacker, target)
        return math.ceil(target.health / damage)

    @staticmethod
    def forecast(attacker: Combatant, target: Combatant) -> AttackForecast:
        """
        Forecast an uninterrupted duel from a fresh attack timer.

        Args:
            attacker: The attacking combatant
            target: The defending combatant

        Returns:
            AttackForecast with per-hit damage, hit count and elapsed time
        """
        damage = BattleCalculator.calculate_damage(attacker, target)
        hits = BattleCalculator.hits_to_defeat(attacker, target)
        return AttackForecast(
            damage=damage,
            hits_to_defeat=hits,
            time_to_defeat_ms=hits * attacker.attack_interval_ms,
        )
