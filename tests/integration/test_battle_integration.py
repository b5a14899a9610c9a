"""
Integration tests running battles from the bundled data tables.
"""

import os

import pytest

from autobattle.core.data.game_enums import BattlePhase, TargetingPolicy
from autobattle.core.engine.scheduler import ManualFrameScheduler
from autobattle.core.events.event_manager import EventManager
from autobattle.game.data.data_loader import GameDataLoader
from autobattle.game.data.settings_loader import SettingsLoader
from autobattle.game.managers.battle_driver import BattleDriver
from autobattle.game.managers.log_manager import LogCategory, LogManager

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DATA_DIRECTORY = os.path.join(PROJECT_ROOT, "assets", "data")
SETTINGS_PATH = os.path.join(PROJECT_ROOT, "assets", "config", "battle.yaml")


@pytest.fixture
def bundled_data():
    return GameDataLoader(DATA_DIRECTORY).load()


def build_driver(game_data, policy=None):
    settings = SettingsLoader(SETTINGS_PATH).load(force_reload=True)
    if policy is not None:
        settings.targeting = policy
    event_manager = EventManager()
    log_manager = LogManager(event_manager)
    driver = BattleDriver(game_data, event_manager, settings=settings, scheduler=ManualFrameScheduler())
    return driver, log_manager


class TestBundledData:
    """Test the shipped tables and settings."""

    def test_tables_load(self, bundled_data):
        assert len(bundled_data.unit_definitions) == 4
        assert len(bundled_data.monster_definitions) == 4
        assert len(bundled_data.get_stage(1)) == 4

    def test_settings_load(self):
        settings = SettingsLoader(SETTINGS_PATH).load(force_reload=True)
        assert settings.board.columns == 5
        assert settings.board.rows == 2
        assert os.path.isdir(settings.data_directory)

    def test_stage_one_layout(self, bundled_data):
        driver, _ = build_driver(bundled_data)
        driver.load_stage(1)
        occupied = {(p.column, p.row) for p in driver.enemies.occupied_positions()}
        assert occupied == {(0, 1), (2, 1), (4, 1), (2, 0)}


class TestFullBattles:
    """Test complete headless battles."""

    @pytest.mark.parametrize("policy", list(TargetingPolicy))
    def test_full_front_line_resolves(self, bundled_data, policy):
        """Test that a full player front line finishes stage 1 under both policies."""
        driver, log_manager = build_driver(bundled_data, policy)
        driver.load_stage(1)
        for column in range(5):
            driver.place_unit(column, 0, 3)
            driver.place_unit(column, 1, 1)

        outcome = driver.run_headless(frame_ms=16)

        assert outcome is not None
        assert driver.phase == BattlePhase.RESOLVED
        battle_lines = [m.text for m in log_manager.get_messages(categories={LogCategory.BATTLE})]
        assert battle_lines[-1] in ("Victory", "Defeat")

    def test_headless_runs_are_reproducible(self, bundled_data):
        """Test that identical setups produce identical outcomes and health."""
        results = []
        for _ in range(2):
            driver, _ = build_driver(bundled_data)
            driver.load_stage(1)
            driver.place_unit(0, 1, 1)
            driver.place_unit(2, 1, 2)
            driver.place_unit(4, 1, 4)
            driver.place_unit(2, 0, 3)
            outcome = driver.run_headless(frame_ms=16)
            results.append((
                outcome.victory if outcome else None,
                [c.health for c in driver.players],
                [c.health for c in driver.enemies],
            ))

        assert results[0] == results[1]

    def test_liveness_matches_health_every_frame(self, bundled_data):
        """Test that zero health and non-liveness always coincide."""
        driver, _ = build_driver(bundled_data)
        driver.load_stage(1)
        for column in range(5):
            driver.place_unit(column, 0, 1)
            driver.place_unit(column, 1, 1)
        driver.start()

        frames = 0
        while driver.phase == BattlePhase.RUNNING and frames < 10_000:
            driver.scheduler.advance(16)
            frames += 1
            for combatant in list(driver.players) + list(driver.enemies):
                assert (combatant.health == 0) == (not combatant.alive)
                assert 0 <= combatant.health <= combatant.max_health

        assert driver.phase == BattlePhase.RESOLVED
