"""Exceptions raised by gql-wire.

Transport and decoding failures are never raised; they are returned as
outcome values. The exceptions here signal programming errors, or are
raised on request when a caller unwraps a failed outcome.
"""

from typing import Any


class GqlWireError(Exception):
    """Base class for gql-wire exceptions."""


class EnvelopeFieldCollision(GqlWireError):
    """Raised when extra envelope fields try to replace query or variables."""

    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(f"Extra envelope fields collide with reserved keys: {', '.join(fields)}")


class OperationKindError(GqlWireError):
    """Raised when a mutation is sent as a query, or the reverse."""


class DataDecodeError(ValueError):
    """Raised by decoders when response data does not match the declared type."""


class GraphQLError(GqlWireError):
    """Exception raised for GraphQL errors when unwrapping an outcome."""

    def __init__(self, message: str, errors: list[Any]):
        self.message = message
        self.errors = errors
        super().__init__(message)
