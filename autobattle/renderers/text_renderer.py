"""Plain-text presentation of a battle.

The renderer observes the event bus: it redraws both boards when health
changes and prints the result summary when the battle resolves. It only
reads roster state and never mutates it.
"""

from typing import Callable, Optional, TextIO
import sys

from ..core.events.event_manager import EventManager
from ..core.events.events import (
    BattleResolved,
    BattleStartRejected,
    EventType,
)
from ..game.combat.battle_calculator import BattleCalculator
from ..game.combat.targeting import TargetingStrategy
from ..game.entities.combatant import Combatant
from ..game.entities.roster import Roster

HEALTH_BAR_WIDTH = 6
CELL_WIDTH = 14


def health_bar(combatant: Combatant, width: int = HEALTH_BAR_WIDTH) -> str:
    """Render a health bar like ``[###---]``, ``[!!----]`` in danger, ``[xxxxxx]`` when down."""
    if not combatant.alive:
        return "[" + "x" * width + "]"
    filled = round(combatant.health_percent * width)
    if combatant.health > 0:
        filled = max(1, filled)
    fill_char = "!" if combatant.is_in_danger else "#"
    return "[" + fill_char * filled + "-" * (width - filled) + "]"


def render_roster(roster: Roster) -> list[str]:
    """Render one side's board as text lines, row 0 first."""
    lines = []
    for row in range(roster.board.rows):
        cells = []
        for column in range(roster.board.columns):
            occupant = roster.get_at(column, row)
            if occupant is None:
                cells.append(".".center(CELL_WIDTH))
            else:
                label = f"{occupant.name[:CELL_WIDTH - HEALTH_BAR_WIDTH - 3]} {health_bar(occupant)}"
                cells.append(label.center(CELL_WIDTH))
        lines.append("|".join(cells))
    return lines


def render_forecasts(
    attackers: Roster,
    defenders: Roster,
    targeting: TargetingStrategy
) -> list[str]:
    """Describe who each live attacker would hit next and how long it would take."""
    lines = []
    for attacker in attackers.living():
        target = targeting.select_target(attacker, defenders)
        if target is None:
            lines.append(f"{attacker.name} ({attacker.column}, {attacker.row}) -> no target")
            continue
        forecast = BattleCalculator.forecast(attacker, target)
        lines.append(
            f"{attacker.name} ({attacker.column}, {attacker.row}) -> {target.name} "
            f"({target.column}, {target.row}): {forecast.damage} dmg, "
            f"{forecast.hits_to_defeat} hits, {forecast.time_to_defeat_ms / 1000:.1f}s"
        )
    return lines


class TextRenderer:
    """Prints boards and results in response to battle events."""

    def __init__(
        self,
        event_manager: EventManager,
        enemies: Roster,
        players: Roster,
        stream: Optional[TextIO] = None,
        redraw_on_damage: bool = True,
    ):
        self.enemies = enemies
        self.players = players
        self.stream = stream or sys.stdout
        self.redraw_on_damage = redraw_on_damage
        self._subscriptions: list[tuple[EventType, Callable]] = [
            (EventType.COMBATANT_DAMAGED, self._handle_damage),
            (EventType.BATTLE_RESOLVED, self._handle_resolved),
            (EventType.BATTLE_START_REJECTED, self._handle_rejected),
        ]
        for event_type, handler in self._subscriptions:
            event_manager.subscribe(event_type, handler, subscriber_name=f"TextRenderer.{handler.__name__}")
        self._event_manager = event_manager
        self._last_drawn_frame = -1

    def detach(self) -> None:
        for event_type, handler in self._subscriptions:
            self._event_manager.unsubscribe(event_type, handler)

    def draw(self) -> None:
        """Print the enemy board above the player board."""
        self._write("ENEMY")
        for line in render_roster(self.enemies):
            self._write(line)
        self._write("-" * (CELL_WIDTH * self.enemies.board.columns + self.enemies.board.columns - 1))
        for line in render_roster(self.players):
            self._write(line)
        self._write("PLAYER")

    def _handle_damage(self, event) -> None:
        # Several hits in one frame produce a single redraw
        if self.redraw_on_damage and event.frame != self._last_drawn_frame:
            self._last_drawn_frame = event.frame
            self._write(f"\n--- Frame {event.frame} ---")
            self.draw()

    def _handle_resolved(self, event) -> None:
        if not isinstance(event, BattleResolved):
            return
        self._write("")
        if event.victory:
            items = ", ".join(event.items) if event.items else "-"
            self._write("Victory!")
            self._write(f"Reward: {event.gold} gold")
            self._write(f"Items: {items}")
        else:
            self._write("Defeat.")

    def _handle_rejected(self, event) -> None:
        if isinstance(event, BattleStartRejected):
            self._write(event.reason)

    def _write(self, text: str) -> None:
        self.stream.write(text + "\n")
