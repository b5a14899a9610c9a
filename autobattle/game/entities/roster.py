"""Ordered collection of one side's combatants with cell occupancy.

Occupancy is stored in a numpy array shaped (rows, columns) holding the
roster index of the occupant, or -1 for an empty cell. This keeps the
one-combatant-per-cell rule enforced by construction.
"""

from typing import Iterator, Optional

import numpy as np

from ...core.data.data_structures import BoardSize, GridPosition
from ...core.data.game_enums import Side
from .combatant import Combatant

EMPTY_CELL = -1


class Roster:
    """Combatants belonging to one side."""

    def __init__(self, side: Side, board: Optional[BoardSize] = None):
        self.side = side
        self.board = board or BoardSize()
        self._combatants: list[Combatant] = []
        # int16 supports far more combatants than any board can hold
        self.occupancy = np.full(self.board.shape, EMPTY_CELL, dtype=np.int16)

    def __len__(self) -> int:
        return len(self._combatants)

    def __iter__(self) -> Iterator[Combatant]:
        return iter(self._combatants)

    def __contains__(self, combatant_id: str) -> bool:
        return any(c.combatant_id == combatant_id for c in self._combatants)

    def __repr__(self) -> str:
        return f"Roster({self.side.name}, {len(self._combatants)} combatants)"

    @property
    def is_empty(self) -> bool:
        return not self._combatants

    @property
    def combatants(self) -> tuple[Combatant, ...]:
        return tuple(self._combatants)

    def get(self, combatant_id: str) -> Optional[Combatant]:
        for combatant in self._combatants:
            if combatant.combatant_id == combatant_id:
                return combatant
        return None

    def get_at(self, column: int, row: int) -> Optional[Combatant]:
        """Get the occupant of a cell, if any."""
        if not self.board.contains(column, row):
            return None
        index = int(self.occupancy[row, column])
        if index == EMPTY_CELL:
            return None
        return self._combatants[index]

    def is_occupied(self, column: int, row: int) -> bool:
        return self.get_at(column, row) is not None

    def place(self, combatant: Combatant) -> Optional[Combatant]:
        """Put a combatant on its cell, replacing any current occupant.

        Returns:
            The combatant that was replaced, or None if the cell was empty

        Raises:
            ValueError: If the combatant belongs to the other side or its cell
                is off the board
        """
        if combatant.side != self.side:
            raise ValueError(
                f"Cannot place {combatant.side.name} combatant in {self.side.name} roster"
            )
        if not self.board.contains(combatant.column, combatant.row):
            raise ValueError(
                f"Cell ({combatant.column}, {combatant.row}) is outside the "
                f"{self.board.columns}x{self.board.rows} board"
            )

        replaced = self.remove_at(combatant.column, combatant.row)
        self._combatants.append(combatant)
        self.occupancy[combatant.row, combatant.column] = len(self._combatants) - 1
        return replaced

    def remove_at(self, column: int, row: int) -> Optional[Combatant]:
        """Remove the occupant of a cell.

        Returns:
            The removed combatant, or None if the cell was empty
        """
        occupant = self.get_at(column, row)
        if occupant is None:
            return None

        self._combatants = [c for c in self._combatants if c is not occupant]
        self._rebuild_occupancy()
        return occupant

    def _rebuild_occupancy(self) -> None:
        self.occupancy.fill(EMPTY_CELL)
        for index, combatant in enumerate(self._combatants):
            self.occupancy[combatant.row, combatant.column] = index

    def clear(self) -> list[Combatant]:
        """Remove every combatant, returning the removed list."""
        removed = self._combatants
        self._combatants = []
        self.occupancy.fill(EMPTY_CELL)
        return removed

    def living(self) -> list[Combatant]:
        return [c for c in self._combatants if c.alive]

    def liveness_mask(self) -> np.ndarray:
        """Boolean array of liveness in roster order."""
        return np.fromiter((c.alive for c in self._combatants), dtype=bool, count=len(self._combatants))

    def revive_all(self) -> int:
        """Revive every combatant in place.

        Returns:
            Number of combatants revived
        """
        for combatant in self._combatants:
            combatant.revive()
        return len(self._combatants)

    def occupied_positions(self) -> list[GridPosition]:
        rows, columns = np.nonzero(self.occupancy != EMPTY_CELL)
        return [GridPosition(int(column), int(row)) for row, column in zip(rows, columns)]
