"""Endpoint configuration for sending GraphQL requests."""

from dataclasses import dataclass, replace

from .auth import Auth, Header


@dataclass(frozen=True)
class EndpointConfig:
    """Where and how a request is sent.

    Only the exact string "GET" selects query-string transport; any other
    method, including "get", is sent with a POST body. Headers are ordered
    pairs and duplicates are sent as given.

    Examples:
        config = EndpointConfig("https://api.example.com/graphql")
        config = (
            EndpointConfig("https://api.example.com/graphql", method="GET")
            .with_header("X-Request-ID", "abc")
            .with_timeout(5000)
            .with_credentials()
        )
    """
    url: str
    method: str = "POST"
    headers: tuple[Header, ...] = ()
    timeout_ms: int | None = None
    cancellation_tag: str | None = None
    credential_mode: bool = False
    operation_name: str | None = None
    query_params: tuple[tuple[str, str], ...] = ()

    @property
    def uses_get(self) -> bool:
        return self.method == "GET"

    def with_header(self, name: str, value: str) -> "EndpointConfig":
        return replace(self, headers=self.headers + ((name, value),))

    def with_headers(self, headers: list[Header]) -> "EndpointConfig":
        return replace(self, headers=self.headers + tuple(headers))

    def with_auth(self, auth: Auth) -> "EndpointConfig":
        """Append the auth handler's headers explicitly."""
        return self.with_headers(auth.get_headers())

    def with_timeout(self, timeout_ms: int) -> "EndpointConfig":
        return replace(self, timeout_ms=timeout_ms)

    def with_credentials(self, enabled: bool = True) -> "EndpointConfig":
        return replace(self, credential_mode=enabled)

    def with_cancellation_tag(self, tag: str) -> "EndpointConfig":
        return replace(self, cancellation_tag=tag)

    def with_operation_name(self, name: str) -> "EndpointConfig":
        return replace(self, operation_name=name)

    def with_query_param(self, name: str, value: str) -> "EndpointConfig":
        return replace(self, query_params=self.query_params + ((name, value),))
