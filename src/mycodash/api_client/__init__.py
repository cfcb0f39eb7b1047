"""Client for the MycoFlow agent's ubus API."""

from .client import DEFAULT_AGENT_URL, DEFAULT_OBJECT, MycoAgentClient
from .errors import (
    AgentClientError,
    MalformedResponse,
    RemoteCallError,
    TransportFailure,
    UbusStatus,
)

__all__ = [
    "DEFAULT_AGENT_URL",
    "DEFAULT_OBJECT",
    "AgentClientError",
    "MalformedResponse",
    "MycoAgentClient",
    "RemoteCallError",
    "TransportFailure",
    "UbusStatus",
]
