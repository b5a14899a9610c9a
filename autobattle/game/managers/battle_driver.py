"""
Simulation driver owning the battle state machine and frame loop.

The driver is the only component that mutates rosters during a battle. It
handles placement while IDLE, runs the per-frame tick sequence while RUNNING,
and publishes every observable change on the event bus:

    IDLE --start()--> RUNNING --victory/defeat--> RESOLVED --reset()--> IDLE
"""
from typing import Optional

from ...core.data.game_enums import BattlePhase, Side
from ...core.engine.scheduler import FrameScheduler, ManualFrameScheduler
from ...core.events.event_manager import EventManager
from ...core.events.events import (
    BattleReset,
    BattleResolved,
    BattleStarted,
    BattleStartRejected,
    CombatantDamaged,
    CombatantDefeated,
    CombatantPlaced,
    CombatantRemoved,
    LogMessage,
    StageLoaded,
)
from ..combat.outcome import BattleOutcome, BattleRewards, calculate_rewards, evaluate_outcome
from ..combat.targeting import TargetingStrategy, create_targeting_strategy
from ..combat.tick_engine import CombatantStateChange, tick_roster
from ..data.settings_loader import BattleSettings
from ..entities.combatant import Combatant, IdAllocator
from ..entities.definitions import GameData, UnitDefinition
from ..entities.roster import Roster
from .battle_state import BattleState

NO_PLAYER_UNITS_NOTICE = "Place at least one unit before starting the battle."


class BattleDriver:
    """Runs one battle between the player roster and a stage's enemy roster."""

    def __init__(
        self,
        game_data: GameData,
        event_manager: EventManager,
        settings: Optional[BattleSettings] = None,
        scheduler: Optional[FrameScheduler] = None,
        targeting: Optional[TargetingStrategy] = None,
    ):
        """Initialize the driver in the IDLE phase with empty rosters.

        Args:
            game_data: Unit, monster and stage definitions
            event_manager: Bus that receives every battle event
            settings: Board, targeting and pacing settings (defaults if None)
            scheduler: Next-frame primitive (a manual clock if None)
            targeting: Strategy override; built from settings.targeting if None
        """
        self.game_data = game_data
        self.event_manager = event_manager
        self.settings = settings or BattleSettings()
        self.scheduler = scheduler or ManualFrameScheduler()
        self.targeting = targeting or create_targeting_strategy(self.settings.targeting)

        self.state = BattleState(
            enemies=Roster(Side.ENEMY, self.settings.board),
            players=Roster(Side.PLAYER, self.settings.board),
            stage_id=self.settings.stage,
        )
        self._ids = IdAllocator()
        self._frame_handle: Optional[int] = None

    # ============== Read-only Views ==============

    @property
    def phase(self) -> BattlePhase:
        return self.state.phase

    @property
    def enemies(self):
        return self.state.enemies

    @property
    def players(self):
        return self.state.players

    @property
    def outcome(self) -> Optional[BattleOutcome]:
        return self.state.outcome

    # ============== Placement (IDLE only) ==============

    def load_stage(self, stage_id: int) -> bool:
        """Rebuild the enemy roster from a stage configuration.

        Placements that reference unknown monsters are skipped.

        Returns:
            True if the stage was loaded, False if the driver is not IDLE
        """
        if not self._require_idle("load a stage"):
            return False

        stage = self.game_data.get_stage(stage_id)
        if stage_id not in self.game_data.stages:
            self._emit_log(f"Stage {stage_id} has no enemy placements", "WARNING", "WARNING")

        for removed in self.state.enemies.clear():
            self._publish_removed(removed)

        skipped = 0
        for placement in stage.placements:
            definition = self.game_data.monster_definitions.get(placement.monster_index)
            if definition is None:
                skipped += 1
                self._emit_log(
                    f"Stage {stage_id}: unknown monster {placement.monster_index} "
                    f"at ({placement.column}, {placement.row}) skipped",
                    "WARNING",
                    "WARNING",
                )
                continue
            self._place(definition, Side.ENEMY, placement.column, placement.row)

        self.state.stage_id = stage_id
        self.event_manager.publish(
            StageLoaded(
                frame=self.state.frame,
                stage_id=stage_id,
                enemy_count=len(self.state.enemies),
                skipped_placements=skipped,
            ),
            source="BattleDriver",
        )
        self._emit_log(f"Stage {stage_id} loaded with {len(self.state.enemies)} enemies", "PLACEMENT")
        self.event_manager.process_events()
        return True

    def place_unit(self, column: int, row: int, unit_index: Optional[int]) -> bool:
        """Place a player unit, replacing any occupant; None clears the cell.

        Returns:
            True if the board changed as requested
        """
        if unit_index is None:
            return self.clear_cell(column, row)

        if not self._require_idle("place units"):
            return False

        definition = self.game_data.unit_definitions.get(unit_index)
        if definition is None:
            self._emit_log(f"Unknown unit {unit_index}; placement ignored", "WARNING", "WARNING")
            self.event_manager.process_events()
            return False

        if not self.settings.board.contains(column, row):
            self._emit_log(f"Cell ({column}, {row}) is off the board; placement ignored", "WARNING", "WARNING")
            self.event_manager.process_events()
            return False

        combatant = self._place(definition, Side.PLAYER, column, row)
        self._emit_log(f"{combatant.name} placed at ({column}, {row})", "PLACEMENT")
        self.event_manager.process_events()
        return True

    def clear_cell(self, column: int, row: int) -> bool:
        """Remove the player unit on a cell.

        Returns:
            True if a unit was removed
        """
        if not self._require_idle("clear cells"):
            return False

        removed = self.state.players.remove_at(column, row)
        if removed is None:
            return False

        self._publish_removed(removed)
        self._emit_log(f"{removed.name} removed from ({column}, {row})", "PLACEMENT")
        self.event_manager.process_events()
        return True

    def _place(self, definition: UnitDefinition, side: Side, column: int, row: int) -> Combatant:
        combatant = Combatant.from_definition(
            definition,
            side,
            column,
            row,
            combatant_id=self._ids.next_id(side),
            board=self.settings.board,
            min_attack_interval_ms=self.settings.min_attack_interval_ms,
        )
        replaced = self.state.roster_for(side).place(combatant)
        if replaced is not None:
            self._publish_removed(replaced)

        self.event_manager.publish(
            CombatantPlaced(
                frame=self.state.frame,
                combatant_id=combatant.combatant_id,
                name=combatant.name,
                side=side,
                position=combatant.position.to_tuple(),
                health=combatant.health,
                max_health=combatant.max_health,
            ),
            source="BattleDriver",
        )
        return combatant

    def _publish_removed(self, combatant: Combatant) -> None:
        self.event_manager.publish(
            CombatantRemoved(
                frame=self.state.frame,
                combatant_id=combatant.combatant_id,
                side=combatant.side,
                position=combatant.position.to_tuple(),
            ),
            source="BattleDriver",
        )

    # ============== Battle Lifecycle ==============

    def start(self) -> bool:
        """Start the frame loop.

        Requires at least one live player combatant. A rejected start publishes
        a BattleStartRejected notice and leaves the driver IDLE.

        Returns:
            True if the battle is now running
        """
        if not self._require_idle("start a battle"):
            return False

        if not self.state.players.living():
            self.event_manager.publish(
                BattleStartRejected(frame=self.state.frame, reason=NO_PLAYER_UNITS_NOTICE),
                source="BattleDriver",
            )
            self._emit_log(NO_PLAYER_UNITS_NOTICE, "WARNING", "WARNING")
            self.event_manager.process_events()
            return False

        self.state.begin(self.scheduler.now())
        self.event_manager.publish(
            BattleStarted(
                frame=self.state.frame,
                stage_id=self.state.stage_id,
                player_count=len(self.state.players),
                enemy_count=len(self.state.enemies),
            ),
            source="BattleDriver",
        )
        self._emit_log(
            f"Battle started: {len(self.state.players)} units vs {len(self.state.enemies)} enemies",
            "BATTLE",
        )
        self.event_manager.process_events()

        self._frame_handle = self.scheduler.request_frame(self.on_frame)
        return True

    def on_frame(self, timestamp_ms: float) -> None:
        """Advance the battle by one frame.

        Enemies attack first, then players; the outcome is checked after both,
        with victory taking priority over defeat.
        """
        self._frame_handle = None
        if not self.state.is_running:
            return

        elapsed = self.state.advance_clock(timestamp_ms)

        changes = tick_roster(self.state.enemies, self.state.players, elapsed, self.targeting)
        changes += tick_roster(self.state.players, self.state.enemies, elapsed, self.targeting)
        for change in changes:
            self._publish_change(change)

        result = evaluate_outcome(self.state.enemies, self.state.players)
        if result is None:
            self._frame_handle = self.scheduler.request_frame(self.on_frame)
        else:
            self._resolve(result)

        self.event_manager.process_events()

    def _publish_change(self, change: CombatantStateChange) -> None:
        self.event_manager.publish(
            CombatantDamaged(
                frame=self.state.frame,
                combatant_id=change.combatant_id,
                attacker_id=change.attacker_id,
                side=change.side,
                damage=change.damage,
                health=change.health,
                max_health=change.max_health,
                alive=change.alive,
            ),
            source="BattleDriver",
        )

        if change.defeated:
            target = self.state.roster_for(change.side).get(change.combatant_id)
            if target is not None:
                self.event_manager.publish(
                    CombatantDefeated(
                        frame=self.state.frame,
                        combatant_id=target.combatant_id,
                        name=target.name,
                        side=target.side,
                        position=target.position.to_tuple(),
                    ),
                    source="BattleDriver",
                )
                self._emit_log(f"{target.name}: Defeated", "BATTLE")

    def _resolve(self, victory: bool) -> None:
        self._cancel_pending_frame()

        rewards = BattleRewards()
        if victory:
            rewards = calculate_rewards(
                self.game_data.get_stage(self.state.stage_id),
                self.game_data.monster_definitions,
            )

        self.state.resolve(BattleOutcome(victory=victory, rewards=rewards))
        self.event_manager.publish(
            BattleResolved(
                frame=self.state.frame,
                victory=victory,
                gold=rewards.gold,
                items=rewards.items,
            ),
            source="BattleDriver",
        )
        self._emit_log("Victory" if victory else "Defeat", "BATTLE")

    def reset(self) -> int:
        """Revive every combatant in place and return to IDLE.

        Any pending frame is cancelled first, so a reset during a running
        battle also stops it.

        Returns:
            Number of combatants revived
        """
        self._cancel_pending_frame()
        revived = self.state.reset()

        self.event_manager.publish(
            BattleReset(frame=self.state.frame, revived_count=revived),
            source="BattleDriver",
        )
        self._emit_log(f"Battle reset, {revived} combatants revived", "BATTLE")
        self.event_manager.process_events()
        return revived

    def run_headless(self, frame_ms: float = 16.0, max_frames: int = 100_000) -> Optional[BattleOutcome]:
        """Start and run the battle on a virtual clock until it resolves.

        Requires a ManualFrameScheduler.

        Returns:
            The outcome, or None if the battle could not start or did not
            resolve within max_frames
        """
        if not isinstance(self.scheduler, ManualFrameScheduler):
            raise RuntimeError("run_headless() requires a ManualFrameScheduler")

        if not self.state.is_running and not self.start():
            return None

        self.scheduler.run_until_idle(frame_ms, max_frames)
        return self.state.outcome

    # ============== Helpers ==============

    def _cancel_pending_frame(self) -> None:
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None

    def _require_idle(self, action: str) -> bool:
        if self.state.is_idle:
            return True
        self._emit_log(
            f"Cannot {action} while battle is {self.state.phase.name.lower()}",
            "WARNING",
            "WARNING",
        )
        self.event_manager.process_events()
        return False

    def _emit_log(self, message: str, category: str = "BATTLE", level: str = "INFO") -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                frame=self.state.frame,
                message=message,
                category=category,
                level=level,
                source="BattleDriver",
            ),
            source="BattleDriver",
        )
