"""Core data contracts shared by the codecs, the session and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

RAM_SIZE: int = 128
LIVES_UNKNOWN: int = -1


class Outcome(Enum):
    """Result of one observe/act call."""

    CONTINUE = "continue"
    TERMINATED = "terminated"


class PoolingMethod(Enum):
    NONE = "none"
    MAX = "max"
    MEAN = "mean"

    @classmethod
    def parse(cls, name: str) -> "PoolingMethod":
        try:
            return cls(str(name).lower())
        except ValueError:
            raise ValueError(f"Unknown pooling method {name!r}") from None


@dataclass(slots=True)
class SignalRecord:
    """Reinforcement-learning signal reported by the simulator for one frame."""

    terminal: bool = False
    reward: int = 0
    lives: int = LIVES_UNKNOWN  # LIVES_UNKNOWN when the game does not report lives

    def accumulate(self, other: "SignalRecord") -> None:
        self.reward += other.reward
        self.terminal = self.terminal or other.terminal
        self.lives = other.lives

    @property
    def lives_known(self) -> bool:
        return self.lives != LIVES_UNKNOWN


@dataclass(slots=True, frozen=True)
class Capabilities:
    """What the client asks the simulator to send each frame."""

    wants_screen: bool = True
    wants_ram: bool = True
    wants_signal: bool = False
    frame_repeat: int = 1

    def __post_init__(self) -> None:
        if self.frame_repeat < 1:
            raise ValueError("frame_repeat must be >= 1")

    def negotiation_line(self) -> str:
        # The third slot is the simulator-side frame skip, always 1 here.
        return f"{int(self.wants_screen)},{int(self.wants_ram)},1,{int(self.wants_signal)}"


@dataclass(slots=True, frozen=True)
class SessionDimensions:
    width: int
    height: int

    @property
    def frame_shape(self) -> tuple[int, int, int]:
        return (self.height, self.width, 3)

    @property
    def pixels(self) -> int:
        return self.width * self.height


@dataclass(slots=True)
class Observation:
    """Decoded simulator outputs for one controller step."""

    screen: "np.ndarray"  # (height, width, 3), uint8, B,G,R
    ram: "np.ndarray"  # (RAM_SIZE,), uint8
    signal: SignalRecord
    step_idx: int


__all__ = [
    "RAM_SIZE",
    "LIVES_UNKNOWN",
    "Outcome",
    "PoolingMethod",
    "SignalRecord",
    "Capabilities",
    "SessionDimensions",
    "Observation",
]
