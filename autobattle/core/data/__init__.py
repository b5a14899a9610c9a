"""Core data structures and definitions.

This package contains fundamental data types shared by the battle engine:
- data_structures.py: GridPosition and BoardSize for board coordinates
- game_enums.py: Centralized enums for sides, battle phases and targeting policies
"""

from .data_structures import GridPosition, BoardSize
from .game_enums import (
    Side,
    BattlePhase,
    TargetingPolicy,
    TargetAxis,
    DEFAULT_COLUMNS,
    DEFAULT_ROWS,
    DEFAULT_MIN_ATTACK_INTERVAL_MS,
    DANGER_HEALTH_THRESHOLD,
    SIDE_ID_PREFIXES,
)

__all__ = [
    "GridPosition",
    "BoardSize",
    "Side",
    "BattlePhase",
    "TargetingPolicy",
    "TargetAxis",
    "DEFAULT_COLUMNS",
    "DEFAULT_ROWS",
    "DEFAULT_MIN_ATTACK_INTERVAL_MS",
    "DANGER_HEALTH_THRESHOLD",
    "SIDE_ID_PREFIXES",
]
