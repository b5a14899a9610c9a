"""
Unit tests for the BattleDriver state machine.

The driver runs on a ManualFrameScheduler so every frame delta is chosen by
the test.
"""

import pytest

from autobattle.core.data.game_enums import BattlePhase, Side, TargetingPolicy
from autobattle.core.engine.scheduler import ManualFrameScheduler, RealtimeFrameScheduler
from autobattle.core.events.events import EventType
from autobattle.game.combat.targeting import ColumnTargeting, CrossAxisTargeting
from autobattle.game.data.settings_loader import BattleSettings
from autobattle.game.entities.definitions import (
    GameData,
    MonsterDefinition,
    StageConfiguration,
    StagePlacement,
    UnitDefinition,
)
from autobattle.game.managers.battle_driver import BattleDriver, NO_PLAYER_UNITS_NOTICE
from autobattle.game.managers.log_manager import LogCategory, LogManager
from tests.test_utils import defeat


class TestStageLoading:
    """Test building the enemy roster."""

    def test_stage_one_loaded(self, driver):
        assert driver.phase == BattlePhase.IDLE
        assert len(driver.enemies) == 1
        slime = driver.enemies.get_at(2, 1)
        assert slime.name == "Slime"
        assert slime.side == Side.ENEMY
        assert slime.combatant_id.startswith("E_")

    def test_unknown_monsters_are_skipped(self, driver, recorder):
        recorder.clear()
        assert driver.load_stage(2)

        assert len(driver.enemies) == 2
        assert driver.enemies.get_at(4, 1) is None
        loaded = recorder.of_type(EventType.STAGE_LOADED)[-1]
        assert loaded.stage_id == 2
        assert loaded.enemy_count == 2
        assert loaded.skipped_placements == 1

    def test_reloading_replaces_enemies(self, driver, recorder):
        recorder.clear()
        driver.load_stage(2)
        removed = recorder.of_type(EventType.COMBATANT_REMOVED)
        assert len(removed) == 1
        assert removed[0].side == Side.ENEMY
        assert driver.enemies.get_at(2, 1).name == "Goblin"

    def test_undefined_stage_gives_empty_roster(self, driver, event_manager):
        log_manager = LogManager(event_manager)
        assert driver.load_stage(7)
        assert driver.enemies.is_empty
        assert any("Stage 7" in entry.text for entry in log_manager.get_messages(categories={LogCategory.WARNING}))


class TestPlacement:
    """Test player placement while IDLE."""

    def test_place_unit(self, driver, recorder):
        recorder.clear()
        assert driver.place_unit(2, 0, 1)

        unit = driver.players.get_at(2, 0)
        assert unit.name == "Swordsman"
        assert unit.combatant_id.startswith("P_")
        placed = recorder.of_type(EventType.COMBATANT_PLACED)
        assert placed[0].position == (2, 0)
        assert placed[0].side == Side.PLAYER

    def test_place_replaces_existing_unit(self, driver, recorder):
        driver.place_unit(1, 1, 1)
        first = driver.players.get_at(1, 1)
        recorder.clear()

        assert driver.place_unit(1, 1, 2)

        assert len(driver.players) == 1
        assert driver.players.get_at(1, 1).name == "Sniper"
        assert recorder.of_type(EventType.COMBATANT_REMOVED)[0].combatant_id == first.combatant_id

    def test_none_clears_cell(self, driver):
        driver.place_unit(3, 0, 1)
        assert driver.place_unit(3, 0, None)
        assert driver.players.is_empty
        assert not driver.clear_cell(3, 0)

    def test_unknown_unit_rejected(self, driver):
        assert not driver.place_unit(0, 0, 42)
        assert driver.players.is_empty

    def test_off_board_cell_rejected(self, driver):
        assert not driver.place_unit(5, 0, 1)
        assert not driver.place_unit(0, -1, 1)
        assert driver.players.is_empty

    def test_ids_are_unique_across_sides(self, driver):
        driver.place_unit(0, 0, 1)
        driver.place_unit(1, 0, 1)
        ids = [c.combatant_id for c in driver.players] + [c.combatant_id for c in driver.enemies]
        assert len(set(ids)) == len(ids)


class TestBattleLifecycle:
    """Test start, frame loop, resolution and reset."""

    def test_start_rejected_without_players(self, driver, recorder, event_manager):
        log_manager = LogManager(event_manager)
        recorder.clear()

        assert not driver.start()

        assert driver.phase == BattlePhase.IDLE
        rejected = recorder.of_type(EventType.BATTLE_START_REJECTED)
        assert rejected[0].reason == NO_PLAYER_UNITS_NOTICE
        assert not driver.scheduler.has_pending
        assert log_manager.get_messages(categories={LogCategory.WARNING})[-1].text == NO_PLAYER_UNITS_NOTICE

    def test_single_lane_battle_to_victory(self, driver, scheduler, recorder):
        """Test a full battle frame by frame."""
        driver.place_unit(2, 0, 1)
        recorder.clear()

        assert driver.start()
        assert driver.phase == BattlePhase.RUNNING
        assert recorder.of_type(EventType.BATTLE_STARTED)[0].player_count == 1

        scheduler.advance(999)
        slime = driver.enemies.get_at(2, 1)
        swordsman = driver.players.get_at(2, 0)
        assert slime.health == 10

        scheduler.advance(1)
        assert slime.health == 3
        assert swordsman.health == 29
        assert driver.phase == BattlePhase.RUNNING

        scheduler.advance(1000)
        assert not slime.alive
        assert driver.phase == BattlePhase.RESOLVED
        assert not scheduler.has_pending

        resolved = recorder.of_type(EventType.BATTLE_RESOLVED)
        assert len(resolved) == 1
        assert resolved[0].victory
        assert resolved[0].gold == 5
        assert resolved[0].items == ()
        assert driver.outcome.victory

        defeated = recorder.of_type(EventType.COMBATANT_DEFEATED)
        assert [event.combatant_id for event in defeated] == [slime.combatant_id]

    def test_enemies_strike_before_players_in_a_frame(self, driver, scheduler, recorder):
        driver.place_unit(2, 0, 1)
        driver.start()
        recorder.clear()

        scheduler.advance(1000)

        damaged = recorder.of_type(EventType.COMBATANT_DAMAGED)
        assert [event.side for event in damaged] == [Side.PLAYER, Side.ENEMY]

    def test_both_sides_eliminated_in_one_frame_is_victory(self, driver, scheduler, recorder):
        """Test that a frame ending with both rosters down resolves as a victory."""
        driver.place_unit(2, 0, 1)
        driver.start()
        recorder.clear()

        defeat(driver.enemies.get_at(2, 1))
        defeat(driver.players.get_at(2, 0))
        scheduler.advance(16)

        assert driver.phase == BattlePhase.RESOLVED
        assert driver.outcome.victory
        resolved = recorder.of_type(EventType.BATTLE_RESOLVED)
        assert len(resolved) == 1
        assert resolved[0].victory
        assert resolved[0].gold == 5

    def test_no_mutation_after_resolution(self, driver, scheduler):
        driver.place_unit(2, 0, 1)
        driver.run_headless(frame_ms=100)
        swordsman = driver.players.get_at(2, 0)
        health = swordsman.health

        scheduler.advance(5000)
        driver.on_frame(scheduler.now())

        assert swordsman.health == health
        assert driver.phase == BattlePhase.RESOLVED

    def test_placement_locked_outside_idle(self, driver):
        driver.place_unit(2, 0, 1)
        driver.start()

        assert not driver.place_unit(0, 0, 1)
        assert not driver.load_stage(2)
        assert not driver.start()
        assert len(driver.players) == 1

    def test_reset_after_resolution(self, driver, recorder):
        """Test that reset revives everyone in place and re-enables placement."""
        driver.place_unit(2, 0, 1)
        driver.run_headless(frame_ms=50)
        assert driver.phase == BattlePhase.RESOLVED
        recorder.clear()

        assert driver.reset() == 2

        assert driver.phase == BattlePhase.IDLE
        assert all(c.alive and c.health == c.max_health for c in driver.enemies)
        assert all(c.time_since_attack_ms == 0 for c in driver.players)
        assert driver.players.get_at(2, 0).name == "Swordsman"
        assert recorder.of_type(EventType.BATTLE_RESET)[0].revived_count == 2
        assert driver.place_unit(0, 0, 2)

    def test_reset_while_running_cancels_frame(self, driver, scheduler):
        driver.place_unit(2, 0, 1)
        driver.start()
        scheduler.advance(1000)

        driver.reset()

        assert driver.phase == BattlePhase.IDLE
        assert not scheduler.has_pending
        assert driver.enemies.get_at(2, 1).health == 10

    def test_battle_can_be_replayed_after_reset(self, driver):
        driver.place_unit(2, 0, 1)
        first = driver.run_headless(frame_ms=250)
        driver.reset()
        second = driver.run_headless(frame_ms=250)

        assert first.victory and second.victory
        assert first.rewards == second.rewards

    def test_defeat(self, event_manager):
        """Test that losing every player unit resolves as a defeat without rewards."""
        game_data = GameData(
            unit_definitions={1: UnitDefinition(1, "Recruit", 1, 1000, 5, 0)},
            monster_definitions={1: MonsterDefinition(1, "Brute", 100, 200, 500, 0, gold=99, item="Club")},
            stages={1: StageConfiguration(1, (StagePlacement(1, 0, 1),))},
        )
        driver = BattleDriver(game_data, event_manager)
        driver.load_stage(1)
        driver.place_unit(0, 0, 1)

        outcome = driver.run_headless(frame_ms=100)

        assert outcome is not None
        assert not outcome.victory
        assert outcome.rewards.gold == 0
        assert outcome.rewards.items == ()

    def test_run_headless_requires_manual_scheduler(self, game_data, event_manager):
        driver = BattleDriver(game_data, event_manager, scheduler=RealtimeFrameScheduler())
        with pytest.raises(RuntimeError):
            driver.run_headless()

    def test_run_headless_without_players(self, driver):
        assert driver.run_headless() is None
        assert driver.phase == BattlePhase.IDLE

    def test_stalemate_stops_at_max_frames(self, driver, scheduler):
        """Test that unreachable rosters keep running until the frame limit."""
        driver.place_unit(0, 0, 1)  # Not aligned with the slime at (2, 1)

        assert driver.run_headless(frame_ms=100, max_frames=50) is None
        assert driver.phase == BattlePhase.RUNNING
        assert scheduler.has_pending


class TestTargetingConfiguration:
    """Test selecting the targeting strategy."""

    def test_default_strategy(self, driver):
        assert isinstance(driver.targeting, CrossAxisTargeting)

    def test_strategy_from_settings(self, game_data, event_manager):
        settings = BattleSettings(targeting=TargetingPolicy.COLUMN_ONLY)
        driver = BattleDriver(game_data, event_manager, settings=settings)
        assert isinstance(driver.targeting, ColumnTargeting)

    def test_explicit_strategy_wins(self, game_data, event_manager):
        strategy = ColumnTargeting()
        driver = BattleDriver(game_data, event_manager, targeting=strategy)
        assert driver.targeting is strategy

    def test_min_attack_interval_from_settings(self, game_data, event_manager):
        settings = BattleSettings(min_attack_interval_ms=800)
        driver = BattleDriver(game_data, event_manager, settings=settings, scheduler=ManualFrameScheduler())
        driver.place_unit(0, 0, 2)
        assert driver.players.get_at(0, 0).attack_interval_ms == 800
