"""Exceptions raised by the front-end."""

from __future__ import annotations


class StartripError(Exception):
    """Base class for all front-end errors."""


class BufferLengthError(StartripError):
    """An engine buffer does not have the length its geometry promises."""

    def __init__(self, name: str, expected: int, actual: int) -> None:
        super().__init__(f"{name} buffer has {actual} tiles, expected {expected}")
        self.name = name
        self.expected = expected
        self.actual = actual


class UnknownStatusError(StartripError):
    """``enter()`` returned a status outside ``{0, 1, 2}``."""

    def __init__(self, status: int) -> None:
        super().__init__(f"Unknown engine status: {status}")
        self.status = status


class AtlasError(StartripError):
    """The tile sheet could not be loaded or is too small."""
