"""Transport selection.

Computes the wire request an HTTP engine executes from an endpoint
configuration and a rendered request. No I/O happens here.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .config import EndpointConfig
from .encoder import (
    Body,
    EmptyBody,
    JsonBody,
    MultipartBody,
    Part,
    append_params,
    encode,
    encode_multipart,
    encode_url,
)
from .request import BuiltRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WireRequest:
    """Everything the HTTP engine needs to perform one exchange."""
    method: str
    url: str
    headers: tuple[tuple[str, str], ...]
    body: Body
    timeout_ms: int | None = None
    cancellation_tag: str | None = None
    credential_mode: bool = False


@dataclass(frozen=True)
class HttpResponse:
    """A response that reached us from the server, whatever its status."""
    status_code: int
    text: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def _extra_fields(config: EndpointConfig) -> dict[str, Any]:
    if config.operation_name is None:
        return {}
    return {"operationName": config.operation_name}


def _wire(config: EndpointConfig, method: str, url: str, body: Body) -> WireRequest:
    wire = WireRequest(
        method=method,
        url=url,
        headers=config.headers,
        body=body,
        timeout_ms=config.timeout_ms,
        cancellation_tag=config.cancellation_tag,
        credential_mode=config.credential_mode,
    )
    logger.debug("Selected %s %s (%s)", wire.method, wire.url, type(body).__name__)
    return wire


def select(
    config: EndpointConfig,
    document: str,
    variables: dict[str, Any] | None = None,
) -> WireRequest:
    """Select GET or POST transport for a rendered request.

    GET folds the document, variables and operation name into the query
    string and sends no body. Anything else posts a JSON envelope to the
    configured URL.
    """
    extra = _extra_fields(config)
    if config.uses_get:
        params = list(extra.items()) + list(config.query_params)
        url = encode_url(config.url, document, variables, params)
        return _wire(config, "GET", url, EmptyBody())

    url = append_params(config.url, config.query_params)
    return _wire(config, config.method, url, JsonBody(encode(document, variables, extra)))


def select_multipart(
    config: EndpointConfig,
    part_name: str,
    parts: Iterable[Part],
    document: str,
    variables: dict[str, Any] | None = None,
) -> WireRequest:
    """Select multipart transport. Always takes the POST path."""
    body: MultipartBody = encode_multipart(
        part_name, document, variables, parts, _extra_fields(config)
    )
    method = "POST" if config.uses_get else config.method
    url = append_params(config.url, config.query_params)
    return _wire(config, method, url, body)


def for_request(
    config: EndpointConfig,
    request: BuiltRequest,
    part_name: str | None = None,
    parts: Iterable[Part] = (),
) -> WireRequest:
    """Render a built request and select its transport."""
    document = request.render_document()
    variables = request.render_variables()
    if part_name is not None:
        return select_multipart(config, part_name, parts, document, variables)
    return select(config, document, variables)
