"""Tests for endpoint configuration and transport selection."""

import json
from urllib.parse import parse_qs, urlsplit

import pytest

from gql_wire.core.config import EndpointConfig
from gql_wire.core.encoder import EmptyBody, JsonBody, MultipartBody, Part
from gql_wire.core.request import GraphQLRequest
from gql_wire.core.transport import for_request, select, select_multipart

URL = "https://example.com/graphql"


class TestEndpointConfig:
    """Tests for EndpointConfig defaults and builders."""

    def test_defaults(self):
        """Test defaults."""
        config = EndpointConfig(URL)
        assert config.method == "POST"
        assert config.headers == ()
        assert config.timeout_ms is None
        assert config.cancellation_tag is None
        assert config.credential_mode is False

    def test_builders_return_new_configs(self):
        """Test builders return new configs."""
        base = EndpointConfig(URL)
        config = base.with_header("A", "1").with_timeout(500).with_credentials().with_cancellation_tag("t")
        assert base.headers == ()
        assert config.headers == (("A", "1"),)
        assert config.timeout_ms == 500
        assert config.credential_mode is True
        assert config.cancellation_tag == "t"

    @pytest.mark.parametrize("method,uses_get", [("GET", True), ("get", False), ("POST", False), ("PUT", False)])
    def test_only_exact_get_uses_get(self, method, uses_get):
        """Test only exact GET uses GET."""
        assert EndpointConfig(URL, method=method).uses_get is uses_get


class TestSelect:
    """Tests for GET/POST selection."""

    def test_post_sends_json_envelope_to_configured_url(self):
        """Test POST sends JSON envelope to configured URL."""
        wire = select(EndpointConfig(URL), "{ a }", {"x": 1})
        assert wire.method == "POST"
        assert wire.url == URL
        assert wire.body == JsonBody({"query": "{ a }", "variables": {"x": 1}})

    def test_get_folds_request_into_url(self):
        """Test GET folds request into URL."""
        wire = select(EndpointConfig(URL, method="GET"), "{ a }", {"x": 1})
        assert wire.method == "GET"
        assert isinstance(wire.body, EmptyBody)
        assert wire.url.startswith(URL + "?query=")
        assert parse_qs(urlsplit(wire.url).query)["variables"] == ['{"x":1}']

    def test_get_with_existing_query_string(self):
        """Test GET with existing query string."""
        wire = select(EndpointConfig(URL + "?key=1", method="GET"), "{ a }")
        assert wire.url.startswith(URL + "?key=1&query=")

    def test_lowercase_get_takes_post_path(self):
        """Test lowercase GET takes POST path."""
        wire = select(EndpointConfig(URL, method="get"), "{ a }")
        assert isinstance(wire.body, JsonBody)
        assert wire.url == URL

    def test_passes_config_through_unmodified(self):
        """Test passes config through unmodified."""
        headers = (("X-Dup", "1"), ("X-Dup", "2"))
        config = EndpointConfig(
            URL, headers=headers, timeout_ms=250, cancellation_tag="search", credential_mode=True
        )
        wire = select(config, "{ a }")
        assert wire.headers == headers
        assert wire.timeout_ms == 250
        assert wire.cancellation_tag == "search"
        assert wire.credential_mode is True

    def test_no_headers_injected(self):
        """Test no headers injected."""
        assert select(EndpointConfig(URL), "{ a }").headers == ()

    def test_operation_name_in_envelope(self):
        """Test operation name in envelope."""
        wire = select(EndpointConfig(URL).with_operation_name("Viewer"), "query Viewer { a }")
        assert wire.body.envelope["operationName"] == "Viewer"

    def test_operation_name_in_get_url(self):
        """Test operation name in GET URL."""
        wire = select(EndpointConfig(URL, method="GET").with_operation_name("Viewer"), "{ a }")
        assert parse_qs(urlsplit(wire.url).query)["operationName"] == ["Viewer"]

    def test_query_params_appended_for_post(self):
        """Test query params appended for POST."""
        wire = select(EndpointConfig(URL).with_query_param("trace", "on"), "{ a }")
        assert wire.url == URL + "?trace=on"


class TestSelectMultipart:
    """Tests for multipart selection."""

    def test_multipart_always_posts(self):
        """Test multipart always posts."""
        config = EndpointConfig(URL, method="GET")
        wire = select_multipart(config, "operations", [Part("file", b"x", filename="x.bin")], "mutation { a }")
        assert wire.method == "POST"
        assert wire.url == URL
        assert isinstance(wire.body, MultipartBody)
        assert [p.name for p in wire.body.parts] == ["operations", "file"]


class TestForRequest:
    """Tests for rendering a built request into a wire request."""

    def test_renders_request(self):
        """Test renders request."""
        request = GraphQLRequest.query("{ a }", {"x": None, "y": 2})
        wire = for_request(EndpointConfig(URL), request)
        assert json.loads(wire.body.to_bytes()) == {"query": "{ a }", "variables": {"x": None, "y": 2}}

    def test_part_name_selects_multipart(self):
        """Test part name selects multipart."""
        request = GraphQLRequest.mutation("mutation { a }")
        wire = for_request(EndpointConfig(URL), request, "operations", [Part("f", b"1")])
        assert isinstance(wire.body, MultipartBody)
