"""Loading of definition tables and battle settings.

- data_loader.py: CSV tables for units, monsters and stages
- settings_loader.py: YAML battle settings with defaults
"""

from .data_loader import (
    GameDataLoader,
    parse_int_safe,
    parse_monster_rows,
    parse_stage_rows,
    parse_unit_rows,
    read_table,
)
from .settings_loader import BattleSettings, SettingsLoader, get_battle_settings

__all__ = [
    "GameDataLoader",
    "parse_int_safe",
    "parse_monster_rows",
    "parse_stage_rows",
    "parse_unit_rows",
    "read_table",
    "BattleSettings",
    "SettingsLoader",
    "get_battle_settings",
]
