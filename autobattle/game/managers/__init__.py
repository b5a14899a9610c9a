"""Battle managers.

- battle_state.py: Rosters, phase and frame clock of one battle
- battle_driver.py: State machine, placement and frame loop for one battle
- log_manager.py: Event-driven categorized log buffer
"""

from .battle_state import BattleState
from .battle_driver import BattleDriver, NO_PLAYER_UNITS_NOTICE
from .log_manager import LogCategory, LogEntry, LogLevel, LogManager

__all__ = [
    "BattleState",
    "BattleDriver",
    "NO_PLAYER_UNITS_NOTICE",
    "LogCategory",
    "LogEntry",
    "LogLevel",
    "LogManager",
]
