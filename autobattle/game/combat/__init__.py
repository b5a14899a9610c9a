"""Combat system components.

This package contains the combat logic with clear separation of concerns:
- targeting.py: Pure target selection strategies
- tick_engine.py: Per-frame timer advance and damage application
- battle_calculator.py: Damage formula and read-only forecasts
- outcome.py: Victory/defeat detection and rewards
"""

from .battle_calculator import AttackForecast, BattleCalculator, MINIMUM_DAMAGE
from .outcome import (
    BattleOutcome,
    BattleRewards,
    calculate_rewards,
    evaluate_outcome,
    is_defeat,
    is_victory,
)
from .targeting import (
    ColumnTargeting,
    CrossAxisTargeting,
    TargetingStrategy,
    create_targeting_strategy,
)
from .tick_engine import CombatantStateChange, tick_roster

__all__ = [
    "AttackForecast",
    "BattleCalculator",
    "MINIMUM_DAMAGE",
    "BattleOutcome",
    "BattleRewards",
    "calculate_rewards",
    "evaluate_outcome",
    "is_defeat",
    "is_victory",
    "ColumnTargeting",
    "CrossAxisTargeting",
    "TargetingStrategy",
    "create_targeting_strategy",
    "CombatantStateChange",
    "tick_roster",
]
