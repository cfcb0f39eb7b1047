from __future__ import annotations

import itertools
from typing import Any

import httpx

from ..model import PersonaOverrideList, Policy, StatusSnapshot
from ..util.log import Log
from .errors import MalformedResponse, RemoteCallError, TransportFailure, UbusStatus
from .types import (
    NULL_SESSION,
    JSONDict,
    PersonaAddPayload,
    PolicySetPayload,
    PolicyStepPayload,
    RpcErrorBody,
    RpcRequest,
)

log = Log.create({"service": "api_client"})

DEFAULT_AGENT_URL = "http://192.168.1.1/ubus"
DEFAULT_OBJECT = "myco"


def _kbit(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return value


class MycoAgentClient:
    """Client for the MycoFlow agent's ubus object over rpcd JSON-RPC."""

    def __init__(
        self,
        *,
        url: str = DEFAULT_AGENT_URL,
        session: str = NULL_SESSION,
        object_name: str = DEFAULT_OBJECT,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
        verify: bool = True,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._session = session
        self._object = object_name
        self._ids = itertools.count(1)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            transport=transport,
            timeout=timeout,
            verify=verify,
        )

    @property
    def url(self) -> str:
        return self._url

    @property
    def object_name(self) -> str:
        return self._object

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _build_request(self, method: str, args: JSONDict | None) -> RpcRequest:
        return {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": "call",
            "params": [self._session, self._object, method, dict(args or {})],
        }

    @staticmethod
    def _extract_rpc_error(payload: Any) -> str | None:
        if not isinstance(payload, dict):
            return None
        error: RpcErrorBody | Any = payload.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message.strip():
                return message
            return f"JSON-RPC error {error.get('code')}"
        if isinstance(error, str) and error.strip():
            return error
        return None

    async def _call(self, method: str, args: JSONDict | None = None) -> JSONDict:
        """Invoke ``method`` on the agent object and return its data table."""
        request = self._build_request(method, args)
        try:
            response = await self._client.post(self._url, json=request)
        except httpx.HTTPError as exc:
            raise TransportFailure(
                f"cannot reach agent at {self._url}: {exc}",
                method=method,
            ) from exc

        if not response.is_success:
            raise TransportFailure(
                f"HTTP {response.status_code} from {self._url}",
                method=method,
                code=response.status_code,
                payload=response.text,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponse(
                f"agent reply to {method} is not JSON",
                method=method,
                payload=response.text,
            ) from exc

        rpc_error = self._extract_rpc_error(payload)
        if rpc_error is not None:
            error = payload.get("error")
            code = error.get("code") if isinstance(error, dict) else None
            raise TransportFailure(rpc_error, method=method, code=code, payload=payload)

        result = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(result, list) or not result or not isinstance(result[0], int):
            raise MalformedResponse(
                f"agent reply to {method} has no result",
                method=method,
                payload=payload,
            )

        status = result[0]
        if status != UbusStatus.OK:
            raise RemoteCallError(
                f"{self._object}.{method} failed: {UbusStatus.describe(status)}",
                method=method,
                code=status,
                payload=payload,
            )

        data = result[1] if len(result) > 1 else {}
        log.debug("agent call", {"method": method, "id": request["id"]})
        return data if isinstance(data, dict) else {}

    async def status(self) -> StatusSnapshot:
        return StatusSnapshot.from_wire(await self._call("status"))

    async def persona_list(self) -> PersonaOverrideList:
        return PersonaOverrideList.from_wire(await self._call("persona_list"))

    async def policy_get(self) -> Policy:
        return Policy.model_validate(await self._call("policy_get"))

    async def policy_set(self, bandwidth_kbit: int) -> None:
        payload: PolicySetPayload = {"bandwidth_kbit": _kbit("bandwidth_kbit", bandwidth_kbit)}
        await self._call("policy_set", dict(payload))

    async def policy_boost(self, step_kbit: int) -> None:
        payload: PolicyStepPayload = {"step_kbit": _kbit("step_kbit", step_kbit)}
        await self._call("policy_boost", dict(payload))

    async def policy_throttle(self, step_kbit: int) -> None:
        payload: PolicyStepPayload = {"step_kbit": _kbit("step_kbit", step_kbit)}
        await self._call("policy_throttle", dict(payload))

    async def persona_add(self, persona: str) -> None:
        name = str(persona or "").strip()
        if not name:
            raise ValueError("persona cannot be empty")
        payload: PersonaAddPayload = {"persona": name}
        await self._call("persona_add", dict(payload))

    async def persona_delete(self) -> None:
        await self._call("persona_delete")
