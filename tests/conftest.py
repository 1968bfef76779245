"""Shared fixtures: an httpx engine whose transport is a recorded handler."""

import json

import httpx
import pytest

from gql_wire.core.engine import HttpxEngine



class Recorder:
    """Records requests and answers them from a queue of handlers."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list = []

    def respond(self, status_code: int = 200, payload=None, text: str | None = None):
        if text is None:
            text = json.dumps(payload if payload is not None else {"data": {}})
        self.responses.append(httpx.Response(status_code, text=text))

    def fail(self, exc: Exception):
        self.responses.append(exc)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if self.responses else httpx.Response(200, json={"data": {}})
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
async def engine(recorder):
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    engine = HttpxEngine(client=client)
    yield engine
    await client.aclose()
