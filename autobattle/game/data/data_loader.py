"""CSV loader for unit, monster and stage tables.

Expected directory structure:
data_directory/
├── Unit.csv     (index, name, attack, attacktime, hp, armor)
├── Monster.csv  (index, name, attack, attacktime, hp, armor, gold, item)
└── Stage.csv    (stage, monster, x, y)

Each file starts with a header line and a column-type line; both are
skipped. Malformed numbers fall back to 0, short rows are skipped, and
Stage.csv coordinates are converted from 1-based to 0-based board cells.
"""

import csv
import os
from typing import Optional

from ...core.data.data_structures import BoardSize
from ..entities.definitions import (
    GameData,
    MonsterDefinition,
    StageConfiguration,
    StagePlacement,
    UnitDefinition,
)

UNIT_FILE = "Unit.csv"
MONSTER_FILE = "Monster.csv"
STAGE_FILE = "Stage.csv"

HEADER_LINES = 2

UNIT_COLUMNS = 6
MONSTER_COLUMNS = 8
STAGE_COLUMNS = 4


def parse_int_safe(value: Optional[str], fallback: int = 0) -> int:
    """Parse a leading integer the way lenient table formats expect.

    "12", " 12 ", "12.5" and "12abc" all parse as 12; anything without a
    leading integer returns the fallback.
    """
    if value is None:
        return fallback
    text = value.strip()
    end = 1 if text[:1] in ("+", "-") else 0
    while end < len(text) and text[end].isdigit():
        end += 1
    digits = text[:end]
    if not digits or digits in ("+", "-"):
        return fallback
    return int(digits)


def read_table(path: str) -> list[list[str]]:
    """Read data rows from a table file, skipping blank lines and the two header lines.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Required table not found: {path}")

    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.reader(f)
        rows = [[cell.strip() for cell in row] for row in reader if any(cell.strip() for cell in row)]

    return rows[HEADER_LINES:]


def parse_unit_rows(rows: list[list[str]]) -> dict[int, UnitDefinition]:
    definitions = {}
    for row in rows:
        if len(row) < UNIT_COLUMNS:
            continue
        index = parse_int_safe(row[0])
        definitions[index] = UnitDefinition(
            index=index,
            name=row[1],
            attack=parse_int_safe(row[2]),
            attack_interval_ms=parse_int_safe(row[3]),
            health=parse_int_safe(row[4]),
            armor=parse_int_safe(row[5]),
        )
    return definitions


def parse_monster_rows(rows: list[list[str]]) -> dict[int, MonsterDefinition]:
    definitions = {}
    for row in rows:
        if len(row) < MONSTER_COLUMNS:
            continue
        index = parse_int_safe(row[0])
        definitions[index] = MonsterDefinition(
            index=index,
            name=row[1],
            attack=parse_int_safe(row[2]),
            attack_interval_ms=parse_int_safe(row[3]),
            health=parse_int_safe(row[4]),
            armor=parse_int_safe(row[5]),
            gold=parse_int_safe(row[6]),
            item=row[7],
        )
    return definitions


def parse_stage_rows(rows: list[list[str]], board: Optional[BoardSize] = None) -> dict[int, StageConfiguration]:
    """Group placements by stage, converting 1-based coordinates to board cells."""
    board = board or BoardSize()
    placements: dict[int, list[StagePlacement]] = {}
    for row in rows:
        if len(row) < STAGE_COLUMNS:
            continue
        stage_id = parse_int_safe(row[0])
        cell = board.clamp(parse_int_safe(row[2]) - 1, parse_int_safe(row[3]) - 1)
        placements.setdefault(stage_id, []).append(
            StagePlacement(monster_index=parse_int_safe(row[1]), column=cell.column, row=cell.row)
        )

    return {
        stage_id: StageConfiguration(stage_id, tuple(stage_placements))
        for stage_id, stage_placements in placements.items()
    }


class GameDataLoader:
    """Loads GameData from a directory of CSV tables."""

    def __init__(self, data_directory: str, board: Optional[BoardSize] = None):
        self.data_directory = os.path.abspath(data_directory)
        self.board = board or BoardSize()

    def load(self) -> GameData:
        """Load all three tables.

        Raises:
            FileNotFoundError: If any table is missing
        """
        data = GameData(
            unit_definitions=parse_unit_rows(read_table(self._path(UNIT_FILE))),
            monster_definitions=parse_monster_rows(read_table(self._path(MONSTER_FILE))),
            stages=parse_stage_rows(read_table(self._path(STAGE_FILE)), self.board),
        )

        print(
            f"Loaded {len(data.unit_definitions)} units, {len(data.monster_definitions)} monsters "
            f"and {len(data.stages)} stages from {self.data_directory}"
        )
        return data

    def _path(self, filename: str) -> str:
        return os.path.join(self.data_directory, filename)
