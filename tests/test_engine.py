"""Tests for the httpx-backed engine."""

import asyncio
import json

import httpx

from gql_wire.core.auth import BearerAuth
from gql_wire.core.config import EndpointConfig
from gql_wire.core.encoder import Part
from gql_wire.core.engine import HttpEngine, HttpxEngine
from gql_wire.core.outcome import NetworkFailure, NetworkFailureKind
from gql_wire.core.transport import HttpResponse, select, select_multipart

URL = "https://example.com/graphql"


class TestExecute:
    """Tests for HttpxEngine.execute."""

    async def test_post_json(self, engine, recorder):
        """Test POST JSON."""
        recorder.respond(payload={"data": {"x": 1}})
        result = await engine.execute(select(EndpointConfig(URL), "{ x }", {"a": 1}))

        assert result == HttpResponse(200, '{"data": {"x": 1}}')
        sent = recorder.requests[0]
        assert sent.method == "POST"
        assert str(sent.url) == URL
        assert sent.headers["Content-Type"] == "application/json"
        assert json.loads(sent.content) == {"query": "{ x }", "variables": {"a": 1}}

    async def test_get_has_no_body(self, engine, recorder):
        """Test GET has no body."""
        await engine.execute(select(EndpointConfig(URL, method="GET"), "{ x }"))
        sent = recorder.requests[0]
        assert sent.method == "GET"
        assert sent.content == b""
        assert sent.url.params["query"] == "{ x }"
        assert "Content-Type" not in sent.headers

    async def test_duplicate_headers_sent_in_order(self, engine, recorder):
        """Test duplicate headers sent in order."""
        config = EndpointConfig(URL).with_header("X-Dup", "1").with_header("X-Dup", "2")
        await engine.execute(select(config, "{ x }"))
        assert recorder.requests[0].headers.get_list("X-Dup") == ["1", "2"]

    async def test_caller_content_type_is_not_duplicated(self, engine, recorder):
        """Test that a configured Content-Type replaces the JSON default."""
        config = EndpointConfig(URL).with_header("content-type", "application/graphql-response+json")
        await engine.execute(select(config, "{ x }"))
        sent = recorder.requests[0]
        assert sent.headers.get_list("Content-Type") == ["application/graphql-response+json"]

    async def test_error_status_is_returned_as_response(self, engine, recorder):
        """Test error status is returned as response."""
        recorder.respond(503, text="unavailable")
        result = await engine.execute(select(EndpointConfig(URL), "{ x }"))
        assert result == HttpResponse(503, "unavailable")

    async def test_multipart(self, engine, recorder):
        """Test multipart."""
        wire = select_multipart(
            EndpointConfig(URL), "operations", [Part("file", b"payload", filename="f.txt")], "mutation { a }"
        )
        await engine.execute(wire)
        sent = recorder.requests[0]
        assert sent.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        content = sent.content
        assert b'name="operations"' in content
        assert b'name="file"; filename="f.txt"' in content
        assert content.index(b'name="operations"') < content.index(b'name="file"')


class TestNetworkFailures:
    """Tests for failures before a response arrives."""

    async def test_timeout(self, engine, recorder):
        """Test timeout."""
        recorder.fail(httpx.ReadTimeout("timed out"))
        result = await engine.execute(select(EndpointConfig(URL).with_timeout(10), "{ x }"))
        assert result == NetworkFailure(NetworkFailureKind.TIMEOUT, "timed out")

    async def test_connection_error(self, engine, recorder):
        """Test connection error."""
        recorder.fail(httpx.ConnectError("connection refused"))
        result = await engine.execute(select(EndpointConfig(URL), "{ x }"))
        assert isinstance(result, NetworkFailure)
        assert result.kind is NetworkFailureKind.NETWORK_ERROR

    async def test_undecodable_body_is_network_error(self, engine, recorder):
        """Test that a body failing content decoding becomes a NetworkFailure."""
        recorder.responses.append(
            httpx.Response(200, headers={"Content-Encoding": "gzip"}, stream=httpx.ByteStream(b"not gzip"))
        )
        result = await engine.execute(select(EndpointConfig(URL), "{ x }"))
        assert isinstance(result, NetworkFailure)
        assert result.kind is NetworkFailureKind.NETWORK_ERROR

    async def test_too_many_redirects_is_network_error(self, engine, recorder):
        """Test that a redirect loop becomes a NetworkFailure."""
        recorder.fail(httpx.TooManyRedirects("Exceeded maximum allowed redirects."))
        result = await engine.execute(select(EndpointConfig(URL), "{ x }"))
        assert result == NetworkFailure(NetworkFailureKind.NETWORK_ERROR, "Exceeded maximum allowed redirects.")

    async def test_bad_url(self, engine, recorder):
        """Test bad URL."""
        result = await engine.execute(select(EndpointConfig("http://example.com:notaport/graphql"), "{ x }"))
        assert isinstance(result, NetworkFailure)
        assert result.kind is NetworkFailureKind.BAD_URL
        assert recorder.requests == []


class TestCredentialMode:
    """Auth headers and cookies only travel in credential mode."""

    def _engine(self, recorder):
        client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        cookies = httpx.Cookies()
        cookies.set("session", "s3cret", domain="example.com")
        return HttpxEngine(client=client, auth=BearerAuth("tok"), cookies=cookies)

    async def test_without_credentials(self, recorder):
        """Test without credentials."""
        engine = self._engine(recorder)
        await engine.execute(select(EndpointConfig(URL), "{ x }"))
        sent = recorder.requests[0]
        assert "Authorization" not in sent.headers
        assert "Cookie" not in sent.headers

    async def test_with_credentials(self, recorder):
        """Test with credentials."""
        engine = self._engine(recorder)
        await engine.execute(select(EndpointConfig(URL).with_credentials(), "{ x }"))
        sent = recorder.requests[0]
        assert sent.headers["Authorization"] == "Bearer tok"
        assert sent.headers["Cookie"] == "session=s3cret"


class TestCallbackForm:
    """Tests for execute_with_callback."""

    async def test_callback_receives_result(self, engine, recorder):
        """Test callback receives result."""
        recorder.respond(payload={"data": {"ok": True}})
        received = []
        handle = engine.execute_with_callback(select(EndpointConfig(URL), "{ ok }"), received.append)
        assert isinstance(handle, asyncio.Task)
        await handle
        assert received == [HttpResponse(200, '{"data": {"ok": true}}')]


def test_httpx_engine_is_http_engine():
    """Test httpx engine is HTTP engine."""
    assert isinstance(HttpxEngine(), HttpEngine)
