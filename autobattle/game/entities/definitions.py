"""Immutable combatant and stage definitions.

Definitions are the lookup tables produced by the data loader. The engine
never mutates them; combatants copy the values they need at construction.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UnitDefinition:
    """Template for a player-placeable unit."""
    index: int
    name: str
    attack: int
    attack_interval_ms: int
    health: int
    armor: int

    def describe(self) -> str:
        """Short label used by unit pickers."""
        return f"#{self.index} {self.name} (ATK {self.attack}, HP {self.health})"


@dataclass(frozen=True)
class MonsterDefinition(UnitDefinition):
    """Template for an enemy monster, with its reward on defeat."""
    gold: int = 0
    item: str = ""


@dataclass(frozen=True)
class StagePlacement:
    """One monster placed on the enemy board, in 0-based board coordinates."""
    monster_index: int
    column: int
    row: int


@dataclass(frozen=True)
class StageConfiguration:
    """Fixed enemy composition for a stage."""
    stage_id: int
    placements: tuple[StagePlacement, ...] = ()

    def __len__(self) -> int:
        return len(self.placements)


@dataclass
class GameData:
    """All definition tables for a run, keyed by index."""
    unit_definitions: dict[int, UnitDefinition] = field(default_factory=dict)
    monster_definitions: dict[int, MonsterDefinition] = field(default_factory=dict)
    stages: dict[int, StageConfiguration] = field(default_factory=dict)

    def get_stage(self, stage_id: int) -> StageConfiguration:
        """Get a stage, or an empty configuration if it is not defined."""
        return self.stages.get(stage_id, StageConfiguration(stage_id))

    def sorted_unit_definitions(self) -> list[UnitDefinition]:
        """Unit definitions ordered by index."""
        return [self.unit_definitions[index] for index in sorted(self.unit_definitions)]
