"""Error formatting utilities.

Turns errors into the one-line messages shown to the operator.
"""

import json
import traceback
from typing import Any

from ..api_client.errors import MalformedResponse, RemoteCallError, TransportFailure


def format_error(error: Any) -> str | None:
    """Format known agent errors into user-friendly messages.

    Returns None if the error type is not recognized, allowing
    fallback to format_unknown_error.
    """
    if isinstance(error, RemoteCallError):
        return f"Agent rejected {error.method or 'request'}: {error.status}"
    if isinstance(error, TransportFailure):
        return f"Agent unreachable: {error}"
    if isinstance(error, MalformedResponse):
        return f"Unexpected reply from agent: {error}"
    if isinstance(error, ValueError):
        return f"Invalid request: {error}"
    return None


def format_unknown_error(error: Any) -> str:
    """Format any error into a string representation.

    Handles Exception objects, serializable objects, and primitives.
    """
    if isinstance(error, Exception):
        if error.__traceback__:
            return "".join(traceback.format_exception(type(error), error, error.__traceback__))
        return f"{error.__class__.__name__}: {error}"

    if isinstance(error, (dict, list)):
        try:
            return json.dumps(error, indent=2)
        except (TypeError, ValueError):
            return "Unexpected error (unserializable)"

    return str(error)


def describe_error(error: Any) -> str:
    """One-line message for notifications: known errors first, then the repr."""
    known = format_error(error)
    if known is not None:
        return known
    if isinstance(error, Exception):
        return f"{error.__class__.__name__}: {error}"
    return str(error)
