"""Response resolution.

Maps the raw result of an HTTP exchange onto an Outcome. The checks run in
a fixed precedence: network failure, then HTTP status, then the envelope.
Within a 2xx envelope, errors and data are parsed independently so that
server errors are reported even when data is unusable.

Partial data is surfaced: an envelope with decodable data and non-empty
errors resolves to PartialSuccess rather than a failure.
"""

import json
import logging
from typing import Any, Callable, TypeVar

from pydantic import TypeAdapter, ValidationError

from .outcome import (
    DecodeError,
    HttpFailure,
    NetworkFailure,
    Outcome,
    PartialSuccess,
    ServerError,
    Success,
)
from .transport import HttpResponse

T = TypeVar("T")

logger = logging.getLogger(__name__)

_errors_adapter = TypeAdapter(list[ServerError])


class EnvelopeError(ValueError):
    """The body is not a GraphQL response envelope."""


def parse_envelope(text: str) -> dict[str, Any]:
    """Parse a response body into an envelope dict.

    Raises:
        EnvelopeError: If the body is not a JSON object
    """
    try:
        envelope = json.loads(text)
    except ValueError as e:
        raise EnvelopeError(f"Response body is not valid JSON: {e}") from e
    if not isinstance(envelope, dict):
        raise EnvelopeError(f"Expected a JSON object, got {type(envelope).__name__}")
    return envelope


def parse_errors(envelope: dict[str, Any]) -> tuple[ServerError, ...]:
    """Parse the envelope's errors field.

    A missing, null or empty field gives no errors. A malformed entry
    invalidates the whole field.

    Raises:
        EnvelopeError: If errors is not a list of well-formed error objects
    """
    raw = envelope.get("errors")
    if raw is None:
        return ()
    try:
        return tuple(_errors_adapter.validate_python(raw))
    except ValidationError as e:
        raise EnvelopeError(f"Malformed errors field: {e}") from e


def _decode_data(envelope: dict[str, Any], decoder: Callable[[Any], T]) -> tuple[bool, Any]:
    """Returns (True, data) or (False, detail)."""
    if "data" not in envelope:
        return False, "Response envelope has no data field"
    try:
        return True, decoder(envelope["data"])
    except Exception as e:
        return False, f"Could not decode data: {type(e).__name__}: {e}"


def resolve_envelope(envelope: dict[str, Any], decoder: Callable[[Any], T]) -> Outcome[T]:
    """Resolve a parsed 2xx envelope."""
    try:
        errors = parse_errors(envelope)
    except EnvelopeError as e:
        return DecodeError((), str(e))

    ok, value = _decode_data(envelope, decoder)
    if ok:
        if errors:
            logger.warning("GraphQL response carried %d error(s) alongside data", len(errors))
            return PartialSuccess(errors, value)
        return Success(value)

    if errors:
        return DecodeError(errors, value)
    return DecodeError((), f"Neither data nor errors were usable: {value}")


def resolve(response: NetworkFailure | HttpResponse, decoder: Callable[[Any], T]) -> Outcome[T]:
    """Resolve the result of an exchange.

    Args:
        response: What the HTTP engine returned
        decoder: The request's data decoder; any exception it raises is a decode failure

    Returns:
        The exchange's Outcome
    """
    if isinstance(response, NetworkFailure):
        outcome = response
    elif not response.is_success:
        outcome = HttpFailure(response.status_code, response.text)
    else:
        try:
            envelope = parse_envelope(response.text)
        except EnvelopeError as e:
            outcome = DecodeError((), str(e))
        else:
            outcome = resolve_envelope(envelope, decoder)

    logger.debug("Resolved exchange to %s", type(outcome).__name__)
    return outcome
