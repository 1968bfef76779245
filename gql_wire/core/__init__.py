"""Core modules for sending GraphQL requests."""

from .auth import (
    ApiKeyAuth,
    Auth,
    BasicAuth,
    BearerAuth,
    HeaderAuth,
    NoAuth,
)
from .config import EndpointConfig
from .dispatch import (
    Cmd,
    Runtime,
    Task,
    custom_mutation_task,
    custom_mutation_with_body_parts_task,
    custom_query_task,
    custom_send_mutation,
    custom_send_mutation_with_body_parts,
    custom_send_query,
    mutation_task,
    query_task,
    run_exchange,
    send_mutation,
    send_query,
)
from .encoder import (
    EmptyBody,
    JsonBody,
    MultipartBody,
    Part,
    encode,
    encode_multipart,
    encode_url,
    minify,
)
from .engine import HttpEngine, HttpxEngine
from .errors import (
    DataDecodeError,
    EnvelopeFieldCollision,
    GqlWireError,
    GraphQLError,
    OperationKindError,
)
from .outcome import (
    DecodeError,
    HttpFailure,
    Location,
    NetworkFailure,
    NetworkFailureKind,
    Outcome,
    PartialSuccess,
    ServerError,
    Success,
    TransportError,
)
from .request import (
    BuiltRequest,
    GraphQLRequest,
    OperationKind,
    field_decoder,
    pydantic_decoder,
    raw_decoder,
)
from .resolver import resolve
from .transport import HttpResponse, WireRequest, for_request, select, select_multipart

__all__ = [
    # Auth
    "Auth",
    "ApiKeyAuth",
    "BearerAuth",
    "BasicAuth",
    "HeaderAuth",
    "NoAuth",
    # Requests
    "BuiltRequest",
    "GraphQLRequest",
    "OperationKind",
    "field_decoder",
    "pydantic_decoder",
    "raw_decoder",
    # Configuration
    "EndpointConfig",
    # Encoding
    "EmptyBody",
    "JsonBody",
    "MultipartBody",
    "Part",
    "encode",
    "encode_multipart",
    "encode_url",
    "minify",
    # Transport
    "HttpResponse",
    "WireRequest",
    "for_request",
    "select",
    "select_multipart",
    # Outcomes
    "DecodeError",
    "HttpFailure",
    "Location",
    "NetworkFailure",
    "NetworkFailureKind",
    "Outcome",
    "PartialSuccess",
    "ServerError",
    "Success",
    "TransportError",
    "resolve",
    # Engine
    "HttpEngine",
    "HttpxEngine",
    # Dispatch
    "Cmd",
    "Runtime",
    "Task",
    "run_exchange",
    "send_query",
    "send_mutation",
    "custom_send_query",
    "custom_send_mutation",
    "custom_send_mutation_with_body_parts",
    "query_task",
    "mutation_task",
    "custom_query_task",
    "custom_mutation_task",
    "custom_mutation_with_body_parts_task",
    # Errors
    "DataDecodeError",
    "EnvelopeFieldCollision",
    "GqlWireError",
    "GraphQLError",
    "OperationKindError",
]
