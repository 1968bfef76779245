"""Credential handlers for GraphQL endpoints.

An Auth produces ordered header pairs. They reach the wire in one of two
ways: explicitly, via EndpointConfig.with_auth(), or implicitly through
HttpxEngine(auth=...), which only attaches them to requests sent in
credential mode.
"""

import base64
from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

Header = tuple[str, str]


@runtime_checkable
class Auth(Protocol):
    """Protocol for credential handlers.

    Example:
        class TenantAuth:
            def __init__(self, token: str, tenant: str):
                self.token = token
                self.tenant = tenant

            def get_headers(self) -> list[tuple[str, str]]:
                return [
                    ("Authorization", f"Bearer {self.token}"),
                    ("X-Tenant-ID", self.tenant),
                ]
    """

    def get_headers(self) -> list[Header]:
        """Return header pairs to send with credentialed requests."""
        ...


class ApiKeyAuth:
    """API key sent in a custom header (default: x-api-key)."""

    def __init__(self, api_key: str, header_name: str = "x-api-key"):
        self.api_key = api_key
        self.header_name = header_name

    def get_headers(self) -> list[Header]:
        return [(self.header_name, self.api_key)]


class BearerAuth:
    """Bearer token authentication."""

    def __init__(self, token: str):
        self.token = token

    def get_headers(self) -> list[Header]:
        return [("Authorization", f"Bearer {self.token}")]


class BasicAuth:
    """HTTP Basic authentication."""

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password

    def get_headers(self) -> list[Header]:
        credentials = f"{self.username}:{self.password}"
        encoded = base64.b64encode(credentials.encode()).decode()
        return [("Authorization", f"Basic {encoded}")]


class HeaderAuth:
    """Arbitrary credential headers, given as a mapping or ordered pairs.

    Example:
        auth = HeaderAuth([("X-API-Key", "key123"), ("X-Tenant-ID", "t1")])
    """

    def __init__(self, headers: Mapping[str, str] | Iterable[Header]):
        if isinstance(headers, Mapping):
            headers = headers.items()
        self._headers = [(name, value) for name, value in headers]

    def get_headers(self) -> list[Header]:
        return list(self._headers)


class NoAuth:
    """No credentials (public endpoints, tests)."""

    def get_headers(self) -> list[Header]:
        return []
