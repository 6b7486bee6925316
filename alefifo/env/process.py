"""Launches the ALE executable with its fifo controller on stdin/stdout."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import IO, List, Optional, Sequence, TextIO

from alefifo.errors import ALEStartError

LOGGER = logging.getLogger(__name__)

ALE_ERROR_FILE = "ale_err.txt"


def build_command(
    ale_path: str,
    rom_path: str,
    record_screen_dir: Optional[str] = None,
    extra_args: Sequence[str] = (),
) -> List[str]:
    """ALE command line: frame skipping and sticky actions are left to the client."""

    command = [
        str(ale_path),
        "-game_controller",
        "fifo",
        "-frame_skip",
        "0",
        "-repeat_action_probability",
        "0",
        "-disable_color_averaging",
        "true",
    ]
    if record_screen_dir:
        command.extend(["-record_screen_dir", str(record_screen_dir)])
    command.extend(str(arg) for arg in extra_args)
    command.append(str(rom_path))
    return command


class ALEProcess:
    """Owns the simulator process and the two pipes the session talks over."""

    def __init__(
        self,
        ale_path: str,
        rom_path: str,
        *,
        working_dir: Optional[str] = None,
        record_screen_dir: Optional[str] = None,
        extra_args: Sequence[str] = (),
    ):
        self.command = build_command(ale_path, rom_path, record_screen_dir, extra_args)
        self.working_dir = Path(working_dir) if working_dir else Path.cwd()
        self.error_path = self.working_dir / ALE_ERROR_FILE
        self._process: Optional[subprocess.Popen] = None
        self._error_log: Optional[IO[bytes]] = None

    def start(self) -> None:
        if self._process is not None:
            return
        LOGGER.info("Starting ALE: %s", " ".join(self.command))
        self._error_log = self.error_path.open("wb")
        try:
            self._process = subprocess.Popen(
                self.command,
                cwd=str(self.working_dir),
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=self._error_log,
                text=True,
                encoding="ascii",
                bufsize=1,
            )
        except OSError as exc:
            self._error_log.close()
            self._error_log = None
            raise ALEStartError(f"Failed to start ALE ({exc}). See '{self.error_path}' for more info") from exc

    @property
    def reader(self) -> TextIO:
        return self._require().stdout

    @property
    def writer(self) -> TextIO:
        return self._require().stdin

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def close(self, timeout: float = 5.0) -> None:
        process, self._process = self._process, None
        if process is not None:
            for stream in (process.stdin, process.stdout):
                try:
                    stream.close()
                except OSError as exc:
                    LOGGER.debug("Ignoring error closing ALE pipe: %s", exc)
            if process.poll() is None:
                process.terminate()
                try:
                    process.wait(timeout=timeout)
                except subprocess.TimeoutExpired:
                    LOGGER.warning("ALE did not exit after %.1fs; killing", timeout)
                    process.kill()
                    process.wait()
            LOGGER.info("ALE exited with code %s", process.returncode)
        if self._error_log is not None:
            self._error_log.close()
            self._error_log = None

    def __enter__(self) -> "ALEProcess":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _require(self) -> subprocess.Popen:
        if self._process is None:
            raise RuntimeError("ALE process is not running")
        return self._process


__all__ = ["ALE_ERROR_FILE", "ALEProcess", "build_command"]
