"""Battle state owned by the simulation driver.

Everything the frame loop mutates lives in one BattleState value instead of
module globals, so several battles can exist side by side and tests can
build a state directly. The driver builds both rosters and hands them in.
"""

from dataclasses import dataclass
from typing import Optional

from ...core.data.game_enums import BattlePhase, Side
from ..combat.outcome import BattleOutcome
from ..entities.roster import Roster


@dataclass
class BattleState:
    """Rosters, phase and frame timing for one battle."""

    enemies: Roster
    players: Roster
    stage_id: int = 1
    phase: BattlePhase = BattlePhase.IDLE
    frame: int = 0
    last_timestamp_ms: Optional[float] = None
    outcome: Optional[BattleOutcome] = None

    def __post_init__(self):
        if self.enemies.side != Side.ENEMY or self.players.side != Side.PLAYER:
            raise ValueError("BattleState needs an ENEMY roster and a PLAYER roster")

    @property
    def is_idle(self) -> bool:
        return self.phase == BattlePhase.IDLE

    @property
    def is_running(self) -> bool:
        return self.phase == BattlePhase.RUNNING

    @property
    def is_resolved(self) -> bool:
        return self.phase == BattlePhase.RESOLVED

    def roster_for(self, side: Side) -> Roster:
        return self.players if side == Side.PLAYER else self.enemies

    def begin(self, timestamp_ms: float) -> None:
        """Enter RUNNING with a fresh frame clock."""
        self.phase = BattlePhase.RUNNING
        self.frame = 0
        self.last_timestamp_ms = timestamp_ms
        self.outcome = None

    def advance_clock(self, timestamp_ms: float) -> float:
        """Record a frame timestamp and return the elapsed time since the last one.

        The first frame after begin() without a seed yields zero.
        """
        if self.last_timestamp_ms is None:
            elapsed = 0.0
        else:
            elapsed = max(0.0, timestamp_ms - self.last_timestamp_ms)
        self.last_timestamp_ms = timestamp_ms
        self.frame += 1
        return elapsed

    def resolve(self, outcome: BattleOutcome) -> None:
        self.phase = BattlePhase.RESOLVED
        self.outcome = outcome

    def reset(self) -> int:
        """Revive both rosters in place and return to IDLE.

        Returns:
            Number of combatants revived
        """
        revived = self.enemies.revive_all() + self.players.revive_all()
        self.phase = BattlePhase.IDLE
        self.frame = 0
        self.last_timestamp_ms = None
        self.outcome = None
        return revived
