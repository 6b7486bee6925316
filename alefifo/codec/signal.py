"""RL signal field decoding."""

from __future__ import annotations

import re

from alefifo.errors import MalformedField, Truncated
from alefifo.types import LIVES_UNKNOWN, SignalRecord

_INT_RE = re.compile(r"-?[0-9]+")


def _parse_int(token: str, name: str) -> int:
    if not _INT_RE.fullmatch(token):
        raise MalformedField(f"{name} field {token!r} is not an integer")
    return int(token)


def decode_signal(text: str) -> SignalRecord:
    """Parse ``<terminal>,<reward>[,<lives>]``."""

    tokens = text.split(",")
    if len(tokens) < 2:
        raise Truncated(f"signal field {text!r} needs terminal and reward")
    lives = _parse_int(tokens[2], "lives") if len(tokens) > 2 else LIVES_UNKNOWN
    return SignalRecord(
        terminal=tokens[0].strip() == "1",
        reward=_parse_int(tokens[1], "reward"),
        lives=lives,
    )


__all__ = ["decode_signal"]
