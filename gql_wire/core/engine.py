"""HTTP engine backed by httpx.

Executes wire requests and reports either a NetworkFailure or the raw
HttpResponse. Status codes and bodies are not interpreted here.
"""

import asyncio
import logging
from typing import Callable, Protocol, runtime_checkable

import httpx

from .auth import Auth
from .encoder import EmptyBody, JsonBody, MultipartBody
from .outcome import NetworkFailure, NetworkFailureKind
from .transport import HttpResponse, WireRequest

logger = logging.getLogger(__name__)

EngineResult = NetworkFailure | HttpResponse


@runtime_checkable
class HttpEngine(Protocol):
    """Protocol for HTTP engines.

    Implement this to run exchanges over something other than httpx,
    for example a recorded-response fake in tests.
    """

    async def execute(self, wire: WireRequest) -> EngineResult:
        """Perform one exchange."""
        ...


class HttpxEngine:
    """Runs wire requests with an httpx.AsyncClient.

    Credentials (the auth handler's headers and the cookie jar) are
    attached only to requests sent in credential mode.

    Examples:
        engine = HttpxEngine()
        engine = HttpxEngine(auth=BearerAuth(token))

        async with HttpxEngine() as engine:
            result = await engine.execute(wire)
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        auth: Auth | None = None,
        cookies: httpx.Cookies | None = None,
    ):
        """Initialize the engine.

        Args:
            client: Client to use; one is created lazily when omitted
            auth: Credential headers for credential-mode requests
            cookies: Cookie jar for credential-mode requests
        """
        self._client = client
        self._owns_client = client is None
        self._auth = auth
        self.cookies = cookies if cookies is not None else httpx.Cookies()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def close(self):
        """Close the HTTP client if the engine created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxEngine":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    def build_request(self, wire: WireRequest) -> httpx.Request:
        """Translate a wire request into an httpx.Request."""
        client = self._get_client()
        headers = list(wire.headers)
        if wire.credential_mode and self._auth is not None:
            headers.extend(self._auth.get_headers())

        kwargs = {}
        if isinstance(wire.body, JsonBody):
            if not any(name.lower() == "content-type" for name, _ in headers):
                headers.append(("Content-Type", "application/json"))
            kwargs["content"] = wire.body.to_bytes()
        elif isinstance(wire.body, MultipartBody):
            kwargs["files"] = [
                (part.name, (part.filename, part.content, part.content_type))
                for part in wire.body.parts
            ]
        elif not isinstance(wire.body, EmptyBody):
            raise TypeError(f"Unsupported body: {wire.body!r}")

        timeout = None if wire.timeout_ms is None else wire.timeout_ms / 1000
        request = client.build_request(
            wire.method,
            wire.url,
            headers=headers,
            timeout=timeout,
            **kwargs,
        )
        if "Cookie" in request.headers and not wire.credential_mode:
            del request.headers["Cookie"]
        if wire.credential_mode:
            self.cookies.set_cookie_header(request)
        return request

    async def execute(self, wire: WireRequest) -> EngineResult:
        """Perform one exchange.

        Returns:
            NetworkFailure if the server was never reached, else the response
        """
        try:
            request = self.build_request(wire)
            response = await self._get_client().send(request)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            return NetworkFailure(NetworkFailureKind.BAD_URL, str(e))
        except httpx.TimeoutException as e:
            return NetworkFailure(NetworkFailureKind.TIMEOUT, str(e) or "timed out")
        except httpx.RequestError as e:
            return NetworkFailure(NetworkFailureKind.NETWORK_ERROR, str(e) or type(e).__name__)

        if wire.credential_mode:
            self.cookies.extract_cookies(response)
        logger.debug("%s %s -> %d", wire.method, wire.url, response.status_code)
        return HttpResponse(response.status_code, response.text)

    def execute_with_callback(
        self,
        wire: WireRequest,
        callback: Callable[[EngineResult], None],
    ) -> asyncio.Task:
        """Schedule an exchange on the running loop and call back with its result."""

        async def run():
            callback(await self.execute(wire))

        return asyncio.get_running_loop().create_task(run())
