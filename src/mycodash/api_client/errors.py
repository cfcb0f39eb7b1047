"""Errors raised by the agent client."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class UbusStatus(IntEnum):
    """Status codes returned by ubus in the first slot of a call result."""

    OK = 0
    INVALID_COMMAND = 1
    INVALID_ARGUMENT = 2
    METHOD_NOT_FOUND = 3
    NOT_FOUND = 4
    NO_DATA = 5
    PERMISSION_DENIED = 6
    TIMEOUT = 7
    NOT_SUPPORTED = 8
    UNKNOWN_ERROR = 9
    CONNECTION_FAILED = 10

    @classmethod
    def describe(cls, code: int) -> str:
        try:
            return cls(code).name.lower().replace("_", " ")
        except ValueError:
            return f"status {code}"


class AgentClientError(RuntimeError):
    """Raised when a call to the agent fails."""

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        code: int | None = None,
        payload: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.code = code
        self.payload = payload


class TransportFailure(AgentClientError):
    """The agent could not be reached or refused the request."""


class RemoteCallError(TransportFailure):
    """ubus answered with a non-zero status code."""

    @property
    def status(self) -> str:
        return UbusStatus.describe(self.code if self.code is not None else UbusStatus.UNKNOWN_ERROR)


class MalformedResponse(AgentClientError):
    """The reply envelope was not usable (not JSON, or no result)."""
