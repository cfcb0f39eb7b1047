from __future__ import annotations

from mycodash.api_client import MalformedResponse, RemoteCallError, TransportFailure
from mycodash.util.error import describe_error, format_error, format_unknown_error


def test_format_error_maps_agent_failures() -> None:
    assert format_error(RemoteCallError("x", method="persona_add", code=2)) == (
        "Agent rejected persona_add: invalid argument"
    )
    assert format_error(TransportFailure("timed out")) == "Agent unreachable: timed out"
    assert format_error(MalformedResponse("no result")) == "Unexpected reply from agent: no result"
    assert format_error(ValueError("persona cannot be empty")) == "Invalid request: persona cannot be empty"
    assert format_error(KeyError("x")) is None


def test_format_unknown_error_includes_traceback() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError as exc:
        text = format_unknown_error(exc)

    assert "Traceback" in text
    assert "RuntimeError: boom" in text
    assert format_unknown_error({"code": 1}) == '{\n  "code": 1\n}'
    assert format_unknown_error(RuntimeError("plain")) == "RuntimeError: plain"


def test_describe_error_is_one_line() -> None:
    assert describe_error(TransportFailure("down")) == "Agent unreachable: down"
    assert describe_error(RuntimeError("odd")) == "RuntimeError: odd"
    assert describe_error("text") == "text"
