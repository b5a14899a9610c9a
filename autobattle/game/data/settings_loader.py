"""Battle settings loader for data-driven configuration.

Board size, the attack-interval floor, the targeting policy and frame pacing
are read from a YAML file so they can be changed without touching the
engine. A missing file yields the defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ...core.data.data_structures import BoardSize
from ...core.data.game_enums import (
    DEFAULT_COLUMNS,
    DEFAULT_MIN_ATTACK_INTERVAL_MS,
    DEFAULT_ROWS,
    TargetingPolicy,
)

DEFAULT_TARGET_FPS = 60
DEFAULT_STAGE = 1
DEFAULT_DATA_DIRECTORY = "assets/data"


@dataclass
class BattleSettings:
    """Container for battle configuration values."""
    board: BoardSize = field(default_factory=BoardSize)
    min_attack_interval_ms: int = DEFAULT_MIN_ATTACK_INTERVAL_MS
    targeting: TargetingPolicy = TargetingPolicy.COLUMN_OR_ROW
    target_fps: int = DEFAULT_TARGET_FPS
    stage: int = DEFAULT_STAGE
    data_directory: str = DEFAULT_DATA_DIRECTORY

    @classmethod
    def from_dict(cls, config_data: Optional[dict[str, Any]], base_dir: str = "") -> "BattleSettings":
        """Build settings from parsed YAML, falling back to defaults per key.

        Raises:
            ValueError: If a value has the wrong shape or names an unknown policy
        """
        config_data = config_data or {}
        if not isinstance(config_data, dict):
            raise ValueError("Battle settings must be a mapping")

        board_data = config_data.get("board", {}) or {}
        combat_data = config_data.get("combat", {}) or {}
        simulation_data = config_data.get("simulation", {}) or {}
        data_section = config_data.get("data", {}) or {}

        try:
            board = BoardSize(
                columns=int(board_data.get("columns", DEFAULT_COLUMNS)),
                rows=int(board_data.get("rows", DEFAULT_ROWS)),
            )
            min_interval = int(combat_data.get("min_attack_interval_ms", DEFAULT_MIN_ATTACK_INTERVAL_MS))
            target_fps = int(simulation_data.get("target_fps", DEFAULT_TARGET_FPS))
            stage = int(simulation_data.get("stage", DEFAULT_STAGE))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid battle settings: {e}")

        if min_interval <= 0:
            raise ValueError(f"min_attack_interval_ms must be positive, got {min_interval}")

        targeting = TargetingPolicy.from_name(
            str(combat_data.get("targeting", TargetingPolicy.COLUMN_OR_ROW.value))
        )

        data_directory = str(data_section.get("directory", DEFAULT_DATA_DIRECTORY))
        if base_dir and not os.path.isabs(data_directory) and not os.path.exists(data_directory):
            # Relative to the settings file when not found relative to the working directory
            data_directory = os.path.join(base_dir, data_directory)

        return cls(
            board=board,
            min_attack_interval_ms=min_interval,
            targeting=targeting,
            target_fps=target_fps,
            stage=stage,
            data_directory=data_directory,
        )


class SettingsLoader:
    """Loader for battle settings files with caching and defaults."""

    def __init__(self, settings_path: Optional[str] = None):
        self.settings_path = settings_path or self._find_default_settings_path()
        self._cached_settings: Optional[BattleSettings] = None

    def _find_default_settings_path(self) -> str:
        """Find assets/config/battle.yaml by walking up from this file."""
        current_dir = Path(__file__).parent
        for _ in range(5):  # Limit search depth
            settings_path = current_dir / "assets" / "config" / "battle.yaml"
            if settings_path.exists():
                return str(settings_path)
            current_dir = current_dir.parent

        return "assets/config/battle.yaml"

    def load(self, force_reload: bool = False) -> BattleSettings:
        """Load settings, using the cache if available.

        Raises:
            ValueError: If the file exists but cannot be parsed
        """
        if self._cached_settings is not None and not force_reload:
            return self._cached_settings

        if not os.path.exists(self.settings_path):
            self._cached_settings = BattleSettings()
            return self._cached_settings

        try:
            with open(self.settings_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse battle settings {self.settings_path}: {e}")

        # The default config lives at <root>/assets/config, data paths are relative to <root>
        base_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(self.settings_path))))
        self._cached_settings = BattleSettings.from_dict(config_data, base_dir)
        print(f"Loaded battle settings from {Path(self.settings_path).name}")
        return self._cached_settings


_settings_loader: Optional[SettingsLoader] = None


def get_battle_settings(settings_path: Optional[str] = None) -> BattleSettings:
    """Get battle settings through a shared loader.

    Passing a path replaces the shared loader.
    """
    global _settings_loader
    if _settings_loader is None or settings_path is not None:
        _settings_loader = SettingsLoader(settings_path)
    return _settings_loader.load()
