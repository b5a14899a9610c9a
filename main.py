#!/usr/bin/env python3

import argparse

from autobattle.core.data.game_enums import TargetingPolicy
from autobattle.core.engine.scheduler import ManualFrameScheduler, RealtimeFrameScheduler
from autobattle.core.events.event_manager import EventManager
from autobattle.core.events.events import LogSaveRequested
from autobattle.game.data.data_loader import GameDataLoader
from autobattle.game.data.settings_loader import SettingsLoader
from autobattle.game.managers.battle_driver import BattleDriver
from autobattle.game.managers.log_manager import LogLevel, LogManager
from autobattle.renderers.text_renderer import TextRenderer, render_forecasts


def parse_placement(text: str) -> tuple[int, int, int]:
    """Parse ``column,row,unit`` into integers."""
    parts = text.split(",")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"Placement must be column,row,unit: {text!r}")
    try:
        column, row, unit = (int(part) for part in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Placement values must be integers: {text!r}")
    return column, row, unit


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Grid auto-battle simulator")
    parser.add_argument("--config", help="Path to battle settings YAML")
    parser.add_argument("--data-dir", help="Directory holding Unit.csv, Monster.csv and Stage.csv")
    parser.add_argument("--stage", type=int, help="Stage to fight (overrides settings)")
    parser.add_argument(
        "--targeting",
        choices=[policy.value for policy in TargetingPolicy],
        help="Targeting policy (overrides settings)",
    )
    parser.add_argument(
        "--place",
        action="append",
        type=parse_placement,
        default=[],
        metavar="COL,ROW,UNIT",
        help="Place a player unit on a 0-based cell; repeatable",
    )
    parser.add_argument("--list-units", action="store_true", help="List unit definitions and exit")
    parser.add_argument("--headless", action="store_true", help="Simulate on a virtual clock")
    parser.add_argument("--frame-ms", type=float, default=16.0, help="Virtual frame length for --headless")
    parser.add_argument("--forecast", action="store_true", help="Print target forecasts before starting")
    parser.add_argument("--save-log", action="store_true", help="Write the battle log to logs/")
    parser.add_argument("--debug", action="store_true", help="Trace event bus activity in the log")
    return parser


def main():
    args = build_parser().parse_args()

    settings = SettingsLoader(args.config).load()
    if args.stage is not None:
        settings.stage = args.stage
    if args.targeting is not None:
        settings.targeting = TargetingPolicy.from_name(args.targeting)
    if args.data_dir is not None:
        settings.data_directory = args.data_dir

    game_data = GameDataLoader(settings.data_directory, settings.board).load()

    if args.list_units:
        for definition in game_data.sorted_unit_definitions():
            print(definition.describe())
        return

    event_manager = EventManager(enable_debug_logging=args.debug)
    log_manager = LogManager(event_manager, default_level=LogLevel.DEBUG if args.debug else LogLevel.INFO)
    event_manager.set_debug_callback(log_manager.debug)

    scheduler = ManualFrameScheduler() if args.headless else RealtimeFrameScheduler(settings.target_fps)
    driver = BattleDriver(game_data, event_manager, settings=settings, scheduler=scheduler)
    renderer = TextRenderer(event_manager, driver.enemies, driver.players)

    driver.load_stage(settings.stage)
    for column, row, unit in args.place:
        driver.place_unit(column, row, unit)

    print(f"Stage {settings.stage} ({settings.targeting.value} targeting)")
    renderer.draw()

    if args.forecast:
        for line in render_forecasts(driver.players, driver.enemies, driver.targeting):
            print(line)
        for line in render_forecasts(driver.enemies, driver.players, driver.targeting):
            print(line)

    try:
        if args.headless:
            driver.run_headless(frame_ms=args.frame_ms)
        elif driver.start():
            scheduler.run()
    except KeyboardInterrupt:
        print("\n\nBattle interrupted by user")
        driver.reset()
    finally:
        if args.save_log:
            event_manager.publish(LogSaveRequested(frame=driver.state.frame), source="main")
            event_manager.process_events()
        for entry in log_manager.get_messages(count=5):
            print(entry.format())


if __name__ == "__main__":
    main()
