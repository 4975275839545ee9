"""Operation outcomes and error codes.

Mutations on the graph engine report what happened through these enums
rather than raising. The service layer maps them onto ``ServiceError`` codes.
"""

from __future__ import annotations

from enum import StrEnum


class ConnectOutcome(StrEnum):
    """Result of adding a friendship between two users."""

    CONNECTED = "connected"
    ALREADY_CONNECTED = "already_connected"
    REJECTED = "rejected"
    NOT_FOUND = "not_found"

    @property
    def changed(self) -> bool:
        return self is ConnectOutcome.CONNECTED


class DisconnectOutcome(StrEnum):
    """Result of removing a friendship between two users."""

    DISCONNECTED = "disconnected"
    NO_SUCH_CONNECTION = "no_such_connection"
    REJECTED = "rejected"
    NOT_FOUND = "not_found"

    @property
    def changed(self) -> bool:
        return self is DisconnectOutcome.DISCONNECTED


class ErrorCode(StrEnum):
    """Error codes carried by ``ServiceError.code``."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    REJECTED = "REJECTED"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    NO_PATH = "NO_PATH"
    INVALID_FORMAT = "INVALID_FORMAT"
    IO_ERROR = "IO_ERROR"
