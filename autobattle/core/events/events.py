"""Battle events published on the event bus.

Event Design Principles:
- Events are immutable dataclasses with minimal payloads
- All events include the frame number they were produced on
- Events describe "what happened" using stable identifiers (ids, cells, sides)
- Presentation layers observe events; the engine never calls them directly
"""

from dataclasses import dataclass, field
from abc import ABC
from enum import Enum, auto

from ..data.game_enums import Side


class EventType(Enum):
    """Types of battle events that observers can subscribe to."""
    # Placement Events
    STAGE_LOADED = auto()
    COMBATANT_PLACED = auto()
    COMBATANT_REMOVED = auto()

    # Combat Events
    COMBATANT_DAMAGED = auto()
    COMBATANT_DEFEATED = auto()

    # Battle Lifecycle Events
    BATTLE_STARTED = auto()
    BATTLE_START_REJECTED = auto()
    BATTLE_RESOLVED = auto()
    BATTLE_RESET = auto()

    # Logging Events
    LOG_MESSAGE = auto()
    LOG_SAVE_REQUESTED = auto()


@dataclass(frozen=True)
class BattleEvent(ABC):
    """Base class for all battle events."""
    frame: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class StageLoaded(BattleEvent):
    """Event emitted when the enemy roster is rebuilt from a stage."""
    stage_id: int
    enemy_count: int
    skipped_placements: int

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.STAGE_LOADED)


@dataclass(frozen=True)
class CombatantPlaced(BattleEvent):
    """Event emitted when a combatant is put on a board cell."""
    combatant_id: str
    name: str
    side: Side
    position: tuple[int, int]
    health: int
    max_health: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBATANT_PLACED)


@dataclass(frozen=True)
class CombatantRemoved(BattleEvent):
    """Event emitted when a combatant is taken off a board cell."""
    combatant_id: str
    side: Side
    position: tuple[int, int]

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBATANT_REMOVED)


@dataclass(frozen=True)
class CombatantDamaged(BattleEvent):
    """Event emitted after every successful hit.

    Carries the observable health state renderers need for a health bar.
    """
    combatant_id: str
    attacker_id: str
    side: Side
    damage: int
    health: int
    max_health: int
    alive: bool

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBATANT_DAMAGED)


@dataclass(frozen=True)
class CombatantDefeated(BattleEvent):
    """Event emitted when a combatant's health reaches zero."""
    combatant_id: str
    name: str
    side: Side
    position: tuple[int, int]

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBATANT_DEFEATED)


@dataclass(frozen=True)
class BattleStarted(BattleEvent):
    """Event emitted when the frame loop begins."""
    stage_id: int
    player_count: int
    enemy_count: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_STARTED)


@dataclass(frozen=True)
class BattleStartRejected(BattleEvent):
    """Event emitted when a start request fails its precondition."""
    reason: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_START_REJECTED)


@dataclass(frozen=True)
class BattleResolved(BattleEvent):
    """Event emitted once when the battle reaches a terminal state.

    Rewards are only populated on victory.
    """
    victory: bool
    gold: int = 0
    items: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_RESOLVED)


@dataclass(frozen=True)
class BattleReset(BattleEvent):
    """Event emitted when every combatant is revived in place."""
    revived_count: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_RESET)


# Logging Events
@dataclass(frozen=True)
class LogMessage(BattleEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: str
    source: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class LogSaveRequested(BattleEvent):
    """Event emitted when the log should be written to disk."""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_SAVE_REQUESTED)
