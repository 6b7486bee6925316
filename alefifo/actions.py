"""Symbolic ALE action names and their numeric codes."""

from __future__ import annotations

from typing import Dict, Tuple

_JOYSTICK: Tuple[str, ...] = (
    "noop",
    "fire",
    "up",
    "right",
    "left",
    "down",
    "upright",
    "upleft",
    "downright",
    "downleft",
    "upfire",
    "rightfire",
    "leftfire",
    "downfire",
    "uprightfire",
    "upleftfire",
    "downrightfire",
    "downleftfire",
)

ACTION_CODES: Dict[str, int] = {}
for _idx, _name in enumerate(_JOYSTICK):
    ACTION_CODES[f"player_a_{_name}"] = _idx
    ACTION_CODES[f"player_b_{_name}"] = _idx + len(_JOYSTICK)
ACTION_CODES.update(
    {
        "reset": 40,
        "undefined": 41,
        "random": 42,
        "save_state": 43,
        "load_state": 44,
        "system_reset": 45,
    }
)

PLAYER_A_ACTIONS: Tuple[str, ...] = tuple(f"player_a_{name}" for name in _JOYSTICK)
PLAYER_B_NOOP: int = ACTION_CODES["player_b_noop"]
SYSTEM_RESET: int = ACTION_CODES["system_reset"]


def action_code(name: str) -> int:
    """Look up an action by name; ``KeyError`` for unknown names."""

    key = name.strip().lower()
    if key not in ACTION_CODES:
        raise KeyError(f"Unknown action {name!r}")
    return ACTION_CODES[key]


__all__ = [
    "ACTION_CODES",
    "PLAYER_A_ACTIONS",
    "PLAYER_B_NOOP",
    "SYSTEM_RESET",
    "action_code",
]
