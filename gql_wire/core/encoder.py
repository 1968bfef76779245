"""Payload encoding for GraphQL-over-HTTP.

Turns a document and its variables into one of the wire body shapes:
a JSON envelope for POST, a query string for GET, or a multipart body
for file-upload mutations. Encoding is deterministic: identical inputs
always produce identical output.
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from .errors import EnvelopeFieldCollision

RESERVED_FIELDS = ("query", "variables")


@dataclass(frozen=True)
class Part:
    """One part of a multipart body."""
    name: str
    content: bytes | str
    filename: str | None = None
    content_type: str | None = None


@dataclass(frozen=True)
class EmptyBody:
    """No body; everything travels in the URL."""


@dataclass(frozen=True)
class JsonBody:
    """A JSON envelope body."""
    envelope: dict[str, Any]

    def to_bytes(self) -> bytes:
        return minify(self.envelope).encode("utf-8")


@dataclass(frozen=True)
class MultipartBody:
    """A multipart body; parts are sent in order."""
    parts: tuple[Part, ...]


Body = EmptyBody | JsonBody | MultipartBody


def minify(value: Any) -> str:
    """Serialize to compact JSON, preserving key order."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def encode(
    document: str,
    variables: dict[str, Any] | None = None,
    extra: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the GraphQL request envelope.

    Args:
        document: GraphQL document text
        variables: Variables, omitted from the envelope when None
        extra: Protocol extension fields such as operationName

    Returns:
        {"query": ..., "variables": ..., **extra}

    Raises:
        EnvelopeFieldCollision: If extra contains query or variables
    """
    envelope: dict[str, Any] = {"query": document}
    if variables is not None:
        envelope["variables"] = variables
    if extra:
        collisions = [key for key in extra if key in RESERVED_FIELDS]
        if collisions:
            raise EnvelopeFieldCollision(collisions)
        envelope.update(extra)
    return envelope


def _component(value: str) -> str:
    return quote(value, safe="")


def encode_url(
    base_url: str,
    document: str,
    variables: dict[str, Any] | None = None,
    extra_params: Iterable[tuple[str, str]] = (),
) -> str:
    """Fold a request into a URL for GET transport.

    Appends query= (with & when base_url already has a query string), then
    variables= as minified JSON when variables are given, then any extra
    parameters. Every value is percent-encoded as UTF-8.
    """
    separator = "&" if "?" in base_url else "?"
    params = [("query", document)]
    if variables is not None:
        params.append(("variables", minify(variables)))
    params.extend(extra_params)
    query_string = "&".join(f"{_component(k)}={_component(v)}" for k, v in params)
    return f"{base_url}{separator}{query_string}"


def append_params(url: str, params: Iterable[tuple[str, str]]) -> str:
    """Append percent-encoded parameters to a URL, if there are any."""
    params = list(params)
    if not params:
        return url
    separator = "&" if "?" in url else "?"
    return url + separator + "&".join(f"{_component(k)}={_component(v)}" for k, v in params)


def encode_multipart(
    part_name: str,
    document: str,
    variables: dict[str, Any] | None,
    extra_parts: Iterable[Part],
    extra: Mapping[str, Any] | None = None,
) -> MultipartBody:
    """Build a multipart body: the JSON envelope first, then the caller's parts."""
    envelope_part = Part(
        name=part_name,
        content=minify(encode(document, variables, extra)),
        content_type="application/json",
    )
    return MultipartBody(parts=(envelope_part, *extra_parts))
