"""Outcomes of a GraphQL exchange.

Every completed exchange resolves to exactly one of:

    NetworkFailure   the request never reached the server
    HttpFailure      the server answered with a non-2xx status
    DecodeError      the envelope or its data could not be decoded
    PartialSuccess   usable data alongside server-reported errors
    Success          usable data, no errors

NetworkFailure and HttpFailure are both TransportError.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, PositiveInt

from .errors import GraphQLError

T = TypeVar("T")
U = TypeVar("U")


class Location(BaseModel):
    """Position in the document a server error refers to."""
    line: PositiveInt
    column: PositiveInt


class ServerError(BaseModel):
    """A GraphQL error reported in the response envelope."""
    model_config = ConfigDict(frozen=True)

    message: str
    locations: list[Location] = []
    path: list[str | int] | None = None
    extensions: dict[str, Any] | None = None


class NetworkFailureKind(Enum):
    """Why a request never reached the server."""
    BAD_URL = "bad_url"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"


class _OutcomeMixin(Generic[T]):
    """Shared accessors for outcome variants."""

    @property
    def is_ok(self) -> bool:
        return isinstance(self, (Success, PartialSuccess))

    def data_or_none(self) -> T | None:
        return getattr(self, "data", None) if self.is_ok else None

    def map(self, fn: Callable[[T], U]) -> "Outcome[U]":
        """Apply fn to the data of a successful outcome; failures pass through."""
        return self

    def unwrap(self) -> T:
        """Return the data, or raise GraphQLError for failures.

        Partial successes return their data; their errors stay on the outcome.
        """
        raise GraphQLError(self.describe(), list(getattr(self, "errors", [])))

    def describe(self) -> str:
        return type(self).__name__


class TransportError(_OutcomeMixin[Any]):
    """Marker base for failures before GraphQL processing."""


@dataclass(frozen=True)
class NetworkFailure(TransportError):
    kind: NetworkFailureKind
    detail: str = ""

    def describe(self) -> str:
        return f"Network failure ({self.kind.value}): {self.detail}"


@dataclass(frozen=True)
class HttpFailure(TransportError):
    status_code: int
    body: str = ""

    def describe(self) -> str:
        return f"HTTP failure: status {self.status_code}"


@dataclass(frozen=True)
class DecodeError(_OutcomeMixin[Any]):
    errors: tuple[ServerError, ...]
    detail: str

    def describe(self) -> str:
        if not self.errors:
            return f"Decode error: {self.detail}"
        error_messages = "; ".join(e.message for e in self.errors)
        return f"GraphQL errors: {error_messages}"


@dataclass(frozen=True)
class PartialSuccess(_OutcomeMixin[T]):
    errors: tuple[ServerError, ...]
    data: T

    def map(self, fn: Callable[[T], U]) -> "PartialSuccess[U]":
        return PartialSuccess(self.errors, fn(self.data))

    def unwrap(self) -> T:
        return self.data


@dataclass(frozen=True)
class Success(_OutcomeMixin[T]):
    data: T
    errors: tuple[ServerError, ...] = field(default=(), init=False)

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.data))

    def unwrap(self) -> T:
        return self.data


Outcome = Union[NetworkFailure, HttpFailure, DecodeError, PartialSuccess[T], Success[T]]
