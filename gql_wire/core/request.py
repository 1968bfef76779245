"""Built GraphQL requests.

A request carries everything needed for one exchange: the operation kind,
the rendered document, its variables, and a decoder for the response data.
Any object implementing the BuiltRequest protocol can be sent, so query
builders can hand over their own request types.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import DataDecodeError

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

Decoder = Callable[[Any], T]


class OperationKind(Enum):
    """GraphQL operation kinds."""
    QUERY = "query"
    MUTATION = "mutation"


@runtime_checkable
class BuiltRequest(Protocol[T_co]):
    """Protocol for requests produced by a query builder.

    Example:
        class MyRequest:
            kind = OperationKind.QUERY

            def render_document(self) -> str:
                return "query { viewer { login } }"

            def render_variables(self) -> dict | None:
                return None

            def decode_data(self, data):
                return Viewer.model_validate(data["viewer"])
    """

    kind: OperationKind

    def render_document(self) -> str:
        """Return the GraphQL document text."""
        ...

    def render_variables(self) -> dict[str, Any] | None:
        """Return the variables as a JSON-serializable dict, or None."""
        ...

    def decode_data(self, data: Any) -> T_co:
        """Decode the envelope's data field, raising on mismatch."""
        ...


def raw_decoder(data: Any) -> Any:
    """Decoder that returns the data untouched."""
    return data


def pydantic_decoder(tp: type[T]) -> Decoder[T]:
    """Build a decoder validating data against a type using pydantic.

    Args:
        tp: Any type pydantic can validate (models, dicts, lists, scalars)

    Returns:
        A decoder raising DataDecodeError when validation fails
    """
    adapter = TypeAdapter(tp)

    def decode(data: Any) -> T:
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            raise DataDecodeError(str(e)) from e

    return decode


def field_decoder(name: str, inner: Decoder[T] = raw_decoder) -> Decoder[T]:
    """Build a decoder that extracts a top-level field, then decodes it."""

    def decode(data: Any) -> T:
        if not isinstance(data, dict) or name not in data:
            raise DataDecodeError(f"Expected field '{name}' in response data")
        return inner(data[name])

    return decode


def serialize_variables(variables: dict[str, Any]) -> dict[str, Any]:
    """Serialize variables for the GraphQL request.

    Handles Pydantic models by converting them to dicts. Explicit None
    values are kept, since null and an omitted variable differ in GraphQL.
    """
    result = {}
    for key, value in variables.items():
        if isinstance(value, BaseModel):
            result[key] = value.model_dump(mode="json", by_alias=True, exclude_none=True)
        elif isinstance(value, list):
            result[key] = [
                v.model_dump(mode="json", by_alias=True, exclude_none=True) if isinstance(v, BaseModel) else v
                for v in value
            ]
        else:
            result[key] = value
    return result


@dataclass(frozen=True)
class GraphQLRequest(Generic[T]):
    """A built query or mutation.

    Examples:
        request = GraphQLRequest.query("query { me { id } }")
        request = GraphQLRequest.mutation(
            "mutation($input: AddInput!) { add(input: $input) { id } }",
            variables={"input": AddInput(name="x")},
            decoder=field_decoder("add", pydantic_decoder(AddPayload)),
        )
    """
    kind: OperationKind
    document: str
    variables: dict[str, Any] | None = None
    decoder: Decoder[T] = field(default=raw_decoder, compare=False)

    @classmethod
    def query(
        cls,
        document: str,
        variables: dict[str, Any] | None = None,
        decoder: Decoder[T] = raw_decoder,
    ) -> "GraphQLRequest[T]":
        """Create a query request."""
        return cls(OperationKind.QUERY, document, variables, decoder)

    @classmethod
    def mutation(
        cls,
        document: str,
        variables: dict[str, Any] | None = None,
        decoder: Decoder[T] = raw_decoder,
    ) -> "GraphQLRequest[T]":
        """Create a mutation request."""
        return cls(OperationKind.MUTATION, document, variables, decoder)

    def render_document(self) -> str:
        return self.document

    def render_variables(self) -> dict[str, Any] | None:
        if self.variables is None:
            return None
        return serialize_variables(self.variables)

    def decode_data(self, data: Any) -> T:
        return self.decoder(data)
