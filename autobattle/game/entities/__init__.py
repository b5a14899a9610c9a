"""Battle entities: definitions, combatants and rosters."""

from .combatant import Combatant, IdAllocator
from .definitions import (
    GameData,
    MonsterDefinition,
    StageConfiguration,
    StagePlacement,
    UnitDefinition,
)
from .roster import Roster, EMPTY_CELL

__all__ = [
    "Combatant",
    "IdAllocator",
    "GameData",
    "MonsterDefinition",
    "StageConfiguration",
    "StagePlacement",
    "UnitDefinition",
    "Roster",
    "EMPTY_CELL",
]
