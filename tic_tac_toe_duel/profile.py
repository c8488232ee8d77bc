from dataclasses import dataclass
from enum import StrEnum
from typing import Final


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    EXPERT = "expert"


@dataclass(frozen=True, slots=True)
class OpponentProfile:
    """A named difficulty tier for the computer opponent.

    thinking_time is the (min, max) delay in seconds before the opponent plays.
    error_rate is the probability of ignoring the computed move for a random one.
    """

    name: str
    difficulty: Difficulty
    thinking_time: tuple[float, float]
    error_rate: float

    def __post_init__(self) -> None:
        low, high = self.thinking_time
        if not (0 <= low <= high):
            msg = f"Invalid thinking time range: {self.thinking_time}"
            raise ValueError(msg)
        if not (0.0 <= self.error_rate <= 1.0):
            msg = f"Error rate must be between 0 and 1, got {self.error_rate}"
            raise ValueError(msg)


ROOKIE: Final = OpponentProfile("Rookie", Difficulty.EASY, (0.5, 1.2), 0.25)
STRATEGIST: Final = OpponentProfile("Strategist", Difficulty.MEDIUM, (0.8, 2.0), 0.10)
GRANDMASTER: Final = OpponentProfile("Grandmaster", Difficulty.EXPERT, (1.0, 2.5), 0.0)

PROFILES: Final[dict[str, OpponentProfile]] = {
    Difficulty.EASY: ROOKIE,
    Difficulty.MEDIUM: STRATEGIST,
    Difficulty.EXPERT: GRANDMASTER,
}


def get_profile(key: str) -> OpponentProfile:  # noqa: D103
    try:
        return PROFILES[key.strip().lower()]
    except KeyError:
        msg = f"Unknown difficulty: {key}. Choose from {', '.join(PROFILES)}."
        raise ValueError(msg) from None
