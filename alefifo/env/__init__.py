"""Environment exports."""

from .ale_env import ALEEnv, EnvConfig
from .process import ALEProcess, build_command
from .session import FifoSession, parse_handshake

__all__ = [
    "ALEEnv",
    "EnvConfig",
    "ALEProcess",
    "build_command",
    "FifoSession",
    "parse_handshake",
]
