import argparse
import dataclasses
import logging
import random
from collections.abc import Sequence
from typing import TYPE_CHECKING

from tic_tac_toe_duel.audio import AudioFeedback
from tic_tac_toe_duel.config import UI_CHOICES, Settings
from tic_tac_toe_duel.events import EventBus
from tic_tac_toe_duel.game_controller import GameController, GameMode
from tic_tac_toe_duel.logging_setup import setup_logging
from tic_tac_toe_duel.profile import PROFILES, get_profile
from tic_tac_toe_duel.scheduler import Scheduler

if TYPE_CHECKING:
    from tic_tac_toe_duel.ui import Ui

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _apply_args(Settings.from_env(), args)
    except ValueError as e:
        parser.error(str(e))

    setup_logging(settings.log_level, settings.log_file)
    logger.info("Starting with %s", settings)

    event_bus = EventBus()
    scheduler = Scheduler()
    controller = GameController(
        event_bus,
        scheduler,
        mode=settings.mode,
        profile=get_profile(settings.difficulty),
        computer_symbol=settings.computer_plays,
        rng=random.Random(settings.seed),  # noqa: S311
    )
    audio = AudioFeedback(event_bus, scheduler, muted=settings.muted)

    ui: Ui
    match settings.ui:
        case "pygame":
            from tic_tac_toe_duel.ui_pygame import PygameUi  # noqa: PLC0415

            ui = PygameUi(controller, event_bus, audio)
        case _:
            from tic_tac_toe_duel.ui_terminal import TerminalUi  # noqa: PLC0415

            ui = TerminalUi(controller, event_bus, audio)

    try:
        ui.run()
    finally:
        scheduler.cancel_all()
        event_bus.close()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tic-tac-toe-duel",
        description="Play Tic-Tac-Toe against a friend or the computer.",
    )

    parser.add_argument("--ui", choices=UI_CHOICES)
    parser.add_argument("--mode", choices=[mode.value for mode in GameMode])
    parser.add_argument("--difficulty", choices=[str(key) for key in PROFILES])
    parser.add_argument("--computer-plays", choices=("X", "O"))
    parser.add_argument("--seed", type=int)
    parser.add_argument("--mute", action="store_true", default=None)
    parser.add_argument("--log-level", choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    parser.add_argument("--log-file")

    return parser


def _apply_args(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command-line flags override environment settings."""
    overrides: dict[str, object] = {}
    if args.ui is not None:
        overrides["ui"] = args.ui
    if args.mode is not None:
        overrides["mode"] = GameMode(args.mode)
    if args.difficulty is not None:
        overrides["difficulty"] = args.difficulty
    if args.computer_plays is not None:
        overrides["computer_plays"] = args.computer_plays
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.mute:
        overrides["muted"] = True
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.log_file is not None:
        overrides["log_file"] = args.log_file
    return dataclasses.replace(settings, **overrides)  # type: ignore[arg-type]


if __name__ == "__main__":
    main()
