"""
Basic test fixtures for the autobattle test suite.

Provides event buses, small definition tables and drivers on a manual clock.
"""

import sys
import os
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from autobattle.core.data.data_structures import BoardSize
from autobattle.core.engine.scheduler import ManualFrameScheduler
from autobattle.core.events.event_manager import EventManager
from autobattle.game.data.settings_loader import BattleSettings
from autobattle.game.entities.definitions import (
    GameData,
    MonsterDefinition,
    StageConfiguration,
    StagePlacement,
    UnitDefinition,
)
from autobattle.game.managers.battle_driver import BattleDriver
from tests.test_utils import EventRecorder


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager(enable_debug_logging=False)


@pytest.fixture
def recorder(event_manager):
    """Record every event delivered by the event manager."""
    return EventRecorder(event_manager)


@pytest.fixture
def board():
    """The default 5x2 board."""
    return BoardSize()


@pytest.fixture
def game_data():
    """Small definition tables with two stages and one broken placement."""
    return GameData(
        unit_definitions={
            1: UnitDefinition(1, "Swordsman", attack=10, attack_interval_ms=1000, health=30, armor=2),
            2: UnitDefinition(2, "Sniper", attack=50, attack_interval_ms=500, health=5, armor=0),
        },
        monster_definitions={
            1: MonsterDefinition(1, "Slime", attack=3, attack_interval_ms=1000, health=10, armor=3, gold=5, item=""),
            2: MonsterDefinition(2, "Goblin", attack=8, attack_interval_ms=800, health=20, armor=1, gold=12, item="Dagger"),
        },
        stages={
            1: StageConfiguration(1, (StagePlacement(1, 2, 1),)),
            2: StageConfiguration(2, (
                StagePlacement(1, 0, 1),
                StagePlacement(2, 2, 1),
                StagePlacement(99, 4, 1),
            )),
        },
    )


@pytest.fixture
def scheduler():
    """A scheduler on a virtual clock starting at zero."""
    return ManualFrameScheduler()


@pytest.fixture
def settings():
    return BattleSettings()


@pytest.fixture
def driver(game_data, event_manager, settings, scheduler):
    """A driver in IDLE with stage 1 loaded."""
    battle_driver = BattleDriver(game_data, event_manager, settings=settings, scheduler=scheduler)
    battle_driver.load_stage(1)
    return battle_driver
