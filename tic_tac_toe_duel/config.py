import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from dotenv import dotenv_values

from tic_tac_toe_duel.board import PlayerSymbol
from tic_tac_toe_duel.game_controller import GameMode
from tic_tac_toe_duel.profile import PROFILES

UI_CHOICES = ("terminal", "pygame")
TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off", ""}


def read_env_file(path: Path) -> dict[str, str]:
    """Values set in a .env file. Keys without a value are left out."""
    if not path.is_file():
        return {}
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


@dataclass(frozen=True)
class Settings:
    ui: str = "terminal"
    mode: GameMode = GameMode.COMPUTER
    difficulty: str = "medium"
    computer_plays: PlayerSymbol = "O"
    seed: int | None = None
    muted: bool = False
    log_level: str = "WARNING"
    log_file: str | None = None

    def __post_init__(self) -> None:
        if self.ui not in UI_CHOICES:
            msg = f"Unknown UI: {self.ui}. Choose from {', '.join(UI_CHOICES)}."
            raise ValueError(msg)
        if self.difficulty not in PROFILES:
            msg = f"Unknown difficulty: {self.difficulty}. Choose from {', '.join(PROFILES)}."
            raise ValueError(msg)
        if self.computer_plays not in ("X", "O"):
            msg = f"Computer must play X or O, got {self.computer_plays}"
            raise ValueError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, env_file: Path | None = None) -> "Settings":
        """Build settings from TTT_* variables; a .env file fills in anything unset."""
        environ = os.environ if environ is None else environ
        file_values = read_env_file(env_file if env_file is not None else Path.cwd() / ".env")

        def _env(name: str, default: str = "") -> str:
            value = environ.get(name)
            if value is not None and value.strip() != "":
                return value.strip()
            return file_values.get(name, default)

        seed = _env("TTT_SEED")
        return cls(
            ui=_env("TTT_UI", cls.ui).lower(),
            mode=GameMode(_env("TTT_MODE", cls.mode).lower()),
            difficulty=_env("TTT_DIFFICULTY", cls.difficulty).lower(),
            computer_plays=cast("PlayerSymbol", _env("TTT_COMPUTER_PLAYS", cls.computer_plays).upper()),
            seed=int(seed) if seed else None,
            muted=_parse_bool("TTT_MUTED", _env("TTT_MUTED")),
            log_level=_env("TTT_LOG_LEVEL", cls.log_level).upper(),
            log_file=_env("TTT_LOG_FILE") or None,
        )


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in TRUTHY:
        return True
    if lowered in FALSY:
        return False
    msg = f"{name} must be a boolean, got {value!r}"
    raise ValueError(msg)
