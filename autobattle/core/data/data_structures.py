"""Grid data structures shared by the battle engine.

GridPosition uses (column, row) ordering to match the board coordinates of
the battle configuration tables. BoardSize carries the fixed bounds of one
side's grid and knows how to clamp positions into them.
"""

from dataclasses import dataclass

from .game_enums import DEFAULT_COLUMNS, DEFAULT_ROWS


@dataclass(frozen=True)
class GridPosition:
    """Cell on one side's board.

    Immutable so that a combatant's placement cannot drift after it has
    been placed.
    """
    column: int
    row: int

    def __iter__(self):
        """Make GridPosition iterable for unpacking (column, row order)."""
        yield self.column
        yield self.row

    def __repr__(self) -> str:
        return f"GridPosition({self.column}, {self.row})"

    def shares_column(self, other: "GridPosition") -> bool:
        return self.column == other.column

    def shares_row(self, other: "GridPosition") -> bool:
        return self.row == other.row

    def column_offset(self, other: "GridPosition") -> int:
        """Absolute horizontal distance to another cell."""
        return abs(self.column - other.column)

    def row_offset(self, other: "GridPosition") -> int:
        """Absolute vertical distance to another cell."""
        return abs(self.row - other.row)

    def to_tuple(self) -> tuple[int, int]:
        return (self.column, self.row)

    @classmethod
    def from_tuple(cls, coords: tuple[int, int]) -> "GridPosition":
        """Create GridPosition from a (column, row) tuple."""
        return cls(coords[0], coords[1])


@dataclass(frozen=True)
class BoardSize:
    """Bounds of a single side's board."""
    columns: int = DEFAULT_COLUMNS
    rows: int = DEFAULT_ROWS

    def __post_init__(self):
        if self.columns <= 0 or self.rows <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.columns}x{self.rows}")

    @property
    def shape(self) -> tuple[int, int]:
        """Array shape in (rows, columns) order for numpy grids."""
        return (self.rows, self.columns)

    @property
    def cell_count(self) -> int:
        return self.columns * self.rows

    def contains(self, column: int, row: int) -> bool:
        """Check whether a cell lies inside the board."""
        return 0 <= column < self.columns and 0 <= row < self.rows

    def clamp(self, column: int, row: int) -> GridPosition:
        """Clamp a cell into the board bounds."""
        return GridPosition(
            max(0, min(self.columns - 1, column)),
            max(0, min(self.rows - 1, row)),
        )

    def cells(self):
        """Iterate over every cell in row-major order."""
        for row in range(self.rows):
            for column in range(self.columns):
                yield GridPosition(column, row)
