"""Exceptions raised by the pipe protocol client."""

from __future__ import annotations


class ProtocolError(Exception):
    """Base class for violations of the fifo protocol."""


class MalformedHandshake(ProtocolError):
    """The simulator's ``<width>-<height>`` line was missing or invalid."""


class OutOfSequence(ProtocolError):
    """observe()/act() was called out of turn."""


class Truncated(ProtocolError):
    """A payload field was shorter than the negotiated layout requires."""


class FrameSizeMismatch(ProtocolError):
    """A screen payload does not cover exactly width*height pixels."""


class MalformedField(ProtocolError):
    """A payload field contains characters that cannot be decoded."""


class ALEStartError(RuntimeError):
    """The simulator process could not be launched."""


__all__ = [
    "ProtocolError",
    "MalformedHandshake",
    "OutOfSequence",
    "Truncated",
    "FrameSizeMismatch",
    "MalformedField",
    "ALEStartError",
]
