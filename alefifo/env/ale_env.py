"""ALE-backed environment facade: process + fifo session + pooling."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from alefifo.actions import action_code
from alefifo.env.process import ALEProcess
from alefifo.env.session import FifoSession
from alefifo.types import Capabilities, Observation, Outcome, PoolingMethod, SessionDimensions

LOGGER = logging.getLogger(__name__)

Action = Union[int, str]


@dataclass(slots=True)
class EnvConfig:
    ale_path: str
    rom_path: str
    working_dir: Optional[str] = None
    record_screen_dir: Optional[str] = None
    extra_args: List[str] = field(default_factory=list)
    wants_screen: bool = True
    wants_ram: bool = True
    wants_signal: bool = True
    frame_skip: int = 1
    use_rle: bool = True
    pooling: PoolingMethod = PoolingMethod.NONE

    def capabilities(self) -> Capabilities:
        return Capabilities(
            wants_screen=self.wants_screen,
            wants_ram=self.wants_ram,
            wants_signal=self.wants_signal,
            frame_repeat=max(1, int(self.frame_skip)),
        )


class ALEEnv:
    """Thin environment facade expected by controllers."""

    def __init__(self, config: EnvConfig, process: Optional[ALEProcess] = None):
        self.config = config
        self.process = process or ALEProcess(
            config.ale_path,
            config.rom_path,
            working_dir=config.working_dir,
            record_screen_dir=config.record_screen_dir,
            extra_args=config.extra_args,
        )
        self.process.start()
        self.session = FifoSession(
            self.process.reader,
            self.process.writer,
            pooling=config.pooling,
            use_rle=config.use_rle,
        )
        try:
            self.dimensions: SessionDimensions = self.session.negotiate(config.capabilities())
        except Exception:
            self.process.close()
            raise

    # --------------------------------------------------------------------- API
    def observe(self) -> Observation:
        """Copy of the latest pooled screen, RAM and signal."""
        return self.session.observation()

    def step(self, action: Action, repeat: Optional[int] = None) -> Tuple[Observation, Outcome]:
        outcome = self.session.act(self._resolve(action), repeat)
        return self.observe(), outcome

    def reset(self) -> Tuple[Observation, Outcome]:
        LOGGER.debug("System reset at step=%s", self.session.step_idx)
        outcome = self.session.reset()
        return self.observe(), outcome

    def wants_terminate(self) -> bool:
        return self.session.wants_terminate()

    @property
    def frame_skip(self) -> int:
        return self.session.capabilities.frame_repeat

    def close(self) -> None:
        self.process.close()

    def __enter__(self) -> "ALEEnv":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ----------------------------------------------------------------- helpers
    @staticmethod
    def _resolve(action: Action) -> int:
        if isinstance(action, str):
            return action_code(action)
        return int(action)


__all__ = ["Action", "ALEEnv", "EnvConfig"]
