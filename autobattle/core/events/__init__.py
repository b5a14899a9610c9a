"""Event system for decoupled battle observers.

This package contains the event bus and the event types it carries:
- event_manager.py: Queued publish-subscribe bus
- events.py: Immutable battle event dataclasses
"""

from .event_manager import EventManager, EventSubscriber
from .events import (
    EventType,
    BattleEvent,
    StageLoaded,
    CombatantPlaced,
    CombatantRemoved,
    CombatantDamaged,
    CombatantDefeated,
    BattleStarted,
    BattleStartRejected,
    BattleResolved,
    BattleReset,
    LogMessage,
    LogSaveRequested,
)

__all__ = [
    "EventManager",
    "EventSubscriber",
    "EventType",
    "BattleEvent",
    "StageLoaded",
    "CombatantPlaced",
    "CombatantRemoved",
    "CombatantDamaged",
    "CombatantDefeated",
    "BattleStarted",
    "BattleStartRejected",
    "BattleResolved",
    "BattleReset",
    "LogMessage",
    "LogSaveRequested",
]
