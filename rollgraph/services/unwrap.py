"""
Unwrapping of Rollbar response envelopes
"""

from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from rollgraph.models.envelope import Envelope, Outcome


def parse_envelope(document: Any) -> Envelope:
    """Validate a decoded JSON body as an envelope.

    Raises ValueError when the body is not an envelope-shaped object.
    """
    if not isinstance(document, dict):
        raise ValueError(f"expected a JSON object, got {type(document).__name__}")
    try:
        return Envelope.model_validate(document)
    except ValidationError as e:
        raise ValueError(f"malformed envelope: {e}") from e


def navigate(value: Any, path: str | None) -> Outcome:
    """Follow a dotted path into ``value``, stopping at the first missing segment"""
    if path:
        for segment in path.split("."):
            if not isinstance(value, dict) or segment not in value:
                return Outcome.missing()
            value = value[segment]

    if value is None:
        return Outcome.missing()
    return Outcome.found(value)


def unwrap(document: Any, path: str | None = None) -> Outcome:
    envelope = parse_envelope(document)
    if envelope.failed:
        return Outcome.failed(envelope.message or f"err={envelope.err}")
    return navigate(envelope.result, path)


def keep(value: Any, predicate: Callable[[dict[str, Any]], Any] | None) -> Any:
    """Drop list entries failing ``predicate``; anything that is not a list passes"""
    if predicate is None or not isinstance(value, list):
        return value
    return [entry for entry in value if predicate(entry)]


def user_has_identity(user: dict[str, Any]) -> bool:
    # Rollbar returns placeholder users (invites) without username or email
    return bool(user.get("username") and user.get("email"))


def project_has_status(project: dict[str, Any]) -> bool:
    # Deleted projects come back with a null status
    return bool(project.get("status"))
