"""Exceptions raised by the graph engine and the record codec."""

from __future__ import annotations


class NetworkError(Exception):
    """Base class for graph engine errors."""


class InvalidArgumentError(NetworkError, ValueError):
    """An absent user, an ID that breaks the allocator, or a bad reference."""


class DuplicateNameError(NetworkError, ValueError):
    """A user name is already taken while uniqueness is enforced."""

    def __init__(self, name: str) -> None:
        super().__init__(f"User name already exists: {name!r}")
        self.name = name


class RecordFormatError(ValueError):
    """Malformed flat-file user data.

    Attributes:
        line: 1-based line number where parsing failed (0 when unknown).
    """

    def __init__(self, message: str, *, line: int = 0) -> None:
        super().__init__(f"line {line}: {message}" if line else message)
        self.line = line
