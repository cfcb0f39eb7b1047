from __future__ import annotations

from typing import Any, TypedDict

JSONDict = dict[str, Any]

NULL_SESSION = "00000000000000000000000000000000"


class RpcRequest(TypedDict):
    jsonrpc: str
    id: int
    method: str
    params: list[Any]


class RpcErrorBody(TypedDict, total=False):
    code: int
    message: str


class PolicySetPayload(TypedDict):
    bandwidth_kbit: int


class PolicyStepPayload(TypedDict):
    step_kbit: int


class PersonaAddPayload(TypedDict):
    persona: str
