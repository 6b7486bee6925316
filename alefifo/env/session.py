"""Observe/act exchange with an ALE process over the fifo controller.

The protocol is strictly half-duplex: the simulator writes one observation
line, the client answers with one action line, and so on. ``FifoSession``
enforces that alternation and owns every buffer the exchange writes into.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Optional, TextIO, Tuple

import numpy as np

from alefifo.actions import PLAYER_B_NOOP, SYSTEM_RESET
from alefifo.codec import decode_ram, decode_screen, decode_signal
from alefifo.errors import MalformedHandshake, OutOfSequence, ProtocolError, Truncated
from alefifo.screen import ColorPalette, NTSCPalette, pool_frames
from alefifo.types import (
    RAM_SIZE,
    Capabilities,
    Observation,
    Outcome,
    PoolingMethod,
    SessionDimensions,
    SignalRecord,
)

LOGGER = logging.getLogger(__name__)

DIE_TOKEN = "DIE"
_DIGITS_RE = re.compile(r"[0-9]+")


def parse_handshake(line: Optional[str]) -> SessionDimensions:
    """Parse the ``<width>-<height>`` line the simulator sends on startup."""

    if not line:
        raise MalformedHandshake("simulator sent no handshake line (see ale_err.txt)")
    tokens = line.strip().split("-")
    if len(tokens) != 2:
        raise MalformedHandshake(f"expected '<width>-<height>', got {line!r}")
    if not all(_DIGITS_RE.fullmatch(token) for token in tokens):
        raise MalformedHandshake(f"non-integer dimensions in {line!r}")
    width, height = int(tokens[0]), int(tokens[1])
    if width <= 0 or height <= 0:
        raise MalformedHandshake(f"invalid width/height: {width}x{height}")
    return SessionDimensions(width=width, height=height)


class FifoSession:
    """Single-controller client for the ALE fifo protocol.

    Buffers returned by :attr:`screen` and :attr:`ram` are reused and stay
    valid only until the next :meth:`act`; use :meth:`observation` for copies.
    """

    def __init__(
        self,
        reader: TextIO,
        writer: TextIO,
        *,
        pooling: PoolingMethod = PoolingMethod.NONE,
        use_rle: bool = True,
        palette: Optional[ColorPalette] = None,
    ):
        self._reader = reader
        self._writer = writer
        self.pooling = pooling
        self.use_rle = use_rle
        self.palette = palette or NTSCPalette()
        self._caps = Capabilities()
        self._dims: Optional[SessionDimensions] = None
        self._frame_a: Optional[np.ndarray] = None
        self._frame_b: Optional[np.ndarray] = None
        self._screen: Optional[np.ndarray] = None
        self._ram = np.zeros(RAM_SIZE, dtype=np.uint8)
        self._signal = SignalRecord()
        self._captured = 0
        self._has_observed = False
        self._terminate_requested = False
        self._stream_closed = False
        self.step_idx = 0

    # --------------------------------------------------------------------- API
    def negotiate(self, capabilities: Optional[Capabilities] = None) -> SessionDimensions:
        """Read the handshake, send our preferences and prime the first observation."""

        if self._dims is not None:
            raise OutOfSequence("negotiate() called twice")
        dims = parse_handshake(self._readline())
        if capabilities is not None:
            self._caps = capabilities
        self._dims = dims
        self._frame_a = np.zeros(dims.frame_shape, dtype=np.uint8)
        self._frame_b = np.zeros(dims.frame_shape, dtype=np.uint8)
        self._screen = np.zeros(dims.frame_shape, dtype=np.uint8)
        self._write_line(self._caps.negotiation_line())
        LOGGER.info(
            "Negotiated %sx%s screen=%s ram=%s signal=%s repeat=%s rle=%s",
            dims.width,
            dims.height,
            self._caps.wants_screen,
            self._caps.wants_ram,
            self._caps.wants_signal,
            self._caps.frame_repeat,
            self.use_rle,
        )
        if self.observe(None) is Outcome.TERMINATED:
            LOGGER.warning("Simulator terminated during the initial observation")
        return dims

    def observe(self, output_frame: Optional[np.ndarray] = None) -> Outcome:
        """Block for the next observation line and decode it.

        The screen field is only decoded when ``output_frame`` is given.
        """

        outcome, _ = self._observe(output_frame)
        return outcome

    def act(self, action: int, repeat: Optional[int] = None) -> Outcome:
        """Send ``action`` for ``repeat`` frames, then pool the last two frames.

        Rewards are summed and terminal flags OR-ed across the repeated
        frames; lives come from the last frame.
        """

        self._require_negotiated("act")
        if not self._has_observed:
            raise OutOfSequence("act() called before observe()")
        self._has_observed = False
        repeat = self._caps.frame_repeat if repeat is None else int(repeat)

        terminated = False
        if repeat <= 1:
            # Capture into the previous slot; roles swap only once it decoded.
            self._send_action(action)
            terminated = self._capture(self._frame_b) is Outcome.TERMINATED
            self._frame_a, self._frame_b = self._frame_b, self._frame_a
        else:
            prior = self._signal
            total = SignalRecord()
            targets = [None] * (repeat - 2) + [self._frame_b, self._frame_a]
            try:
                for idx, frame in enumerate(targets):
                    if idx:
                        self._has_observed = False
                    self._send_action(action)
                    if self._capture(frame) is Outcome.TERMINATED:
                        terminated = True
                        break
                    total.accumulate(self._signal)
            except ProtocolError:
                self._signal = prior
                raise
            self._signal = total

        self._pool()
        self.step_idx += 1
        return Outcome.TERMINATED if terminated else Outcome.CONTINUE

    def reset(self) -> Outcome:
        # Two frames so both pooling slots hold post-reset pixels.
        return self.act(SYSTEM_RESET, 2)

    def wants_terminate(self) -> bool:
        return self._terminate_requested

    def observation(self) -> Observation:
        """Copy of the current screen, RAM and signal."""

        self._require_negotiated("observation")
        return Observation(
            screen=self._screen.copy(),
            ram=self._ram.copy(),
            signal=replace(self._signal),
            step_idx=self.step_idx,
        )

    # -------------------------------------------------------------- accessors
    @property
    def dimensions(self) -> Optional[SessionDimensions]:
        return self._dims

    @property
    def capabilities(self) -> Capabilities:
        return self._caps

    @property
    def screen(self) -> Optional[np.ndarray]:
        return self._screen

    @property
    def ram(self) -> np.ndarray:
        return self._ram

    @property
    def signal(self) -> SignalRecord:
        return self._signal

    @property
    def has_observed(self) -> bool:
        return self._has_observed

    # ----------------------------------------------------------------- helpers
    def _require_negotiated(self, op: str) -> None:
        if self._dims is None:
            raise OutOfSequence(f"{op}() called before negotiate()")

    def _observe(self, output_frame: Optional[np.ndarray]) -> Tuple[Outcome, bool]:
        self._require_negotiated("observe")
        if self._has_observed:
            raise OutOfSequence("observe() called without subsequent act()")
        self._has_observed = True

        line = self._readline()
        if line is None:
            LOGGER.info("Simulator stream closed at step=%s", self.step_idx)
            return Outcome.TERMINATED, False
        if line == DIE_TOKEN:
            LOGGER.info("Simulator requested termination at step=%s", self.step_idx)
            self._terminate_requested = True
            return Outcome.TERMINATED, False
        if not line:
            # Blank line: nothing to decode, an action is still expected.
            return Outcome.CONTINUE, False
        return Outcome.CONTINUE, self._decode_line(line, output_frame)

    def _decode_line(self, line: str, output_frame: Optional[np.ndarray]) -> bool:
        # Format: <ram>:<screen>:<signal>: with only the negotiated fields present.
        caps = self._caps
        fields = line.split(":")
        needed = int(caps.wants_ram) + int(caps.wants_screen) + int(caps.wants_signal)
        if len(fields) < needed:
            raise Truncated(f"observation has {len(fields)} fields, expected {needed}")

        idx = 0
        ram = screen = signal = None
        if caps.wants_ram:
            ram = decode_ram(fields[idx])
            idx += 1
        if caps.wants_screen:
            if output_frame is not None:
                screen = decode_screen(fields[idx], self._dims, self.palette, self.use_rle)
            idx += 1
        if caps.wants_signal:
            signal = decode_signal(fields[idx])

        if ram is not None:
            self._ram[...] = ram
        if screen is not None:
            np.copyto(output_frame, screen)
        if signal is not None:
            self._signal = signal
        LOGGER.debug(
            "step=%s decoded ram=%s screen=%s signal=%s",
            self.step_idx,
            ram is not None,
            screen is not None,
            signal,
        )
        return screen is not None

    def _capture(self, frame: Optional[np.ndarray]) -> Outcome:
        outcome, decoded = self._observe(frame)
        if decoded:
            self._captured = min(2, self._captured + 1)
        return outcome

    def _pool(self) -> None:
        previous = self._frame_b if self._captured >= 2 else None
        pool_frames(self._frame_a, previous, self.pooling, out=self._screen)

    def _send_action(self, action: int) -> None:
        # Format: <player_a_action>,<player_b_action>
        self._write_line(f"{int(action)},{PLAYER_B_NOOP}")

    def _readline(self) -> Optional[str]:
        if self._stream_closed:
            return None
        try:
            line = self._reader.readline()
        except (OSError, ValueError) as exc:
            LOGGER.warning("Read from simulator failed: %s", exc)
            self._stream_closed = True
            return None
        if not line:
            self._stream_closed = True
            return None
        return line.rstrip("\r\n")

    def _write_line(self, line: str) -> None:
        if self._stream_closed:
            return
        try:
            self._writer.write(line + "\n")
            self._writer.flush()
        except (OSError, ValueError) as exc:
            LOGGER.warning("Write to simulator failed: %s", exc)
            self._stream_closed = True


__all__ = ["DIE_TOKEN", "FifoSession", "parse_handshake"]
