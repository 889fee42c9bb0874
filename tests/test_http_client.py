"""Tests for the async registry client."""

import asyncio

import pytest

aiohttp_mod = pytest.importorskip("aiohttp")

from npm_mirror.common.http_client import RegistryClient
from npm_mirror.errors import RegistryNotFound, TransportFailure


class _DummyResponse:
    def __init__(self, status, body=""):
        self.status = status
        self._body = body

    async def text(self):
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class _DummySession:
    def __init__(self, responses, calls):
        self._responses = iter(responses)
        self._calls = calls

    def get(self, url, headers=None):
        self._calls.append((url, headers))
        item = next(self._responses)
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self):
        pass


def _client(responses, calls, retry_max=3):
    client = RegistryClient(retry_max=retry_max, retry_base_delay=0)
    client._session = _DummySession(responses, calls)
    return client


class TestRegistryClientDownload:
    """Status handling and retries."""

    def test_success_returns_body(self):
        calls = []
        client = _client([_DummyResponse(200, '{"versions": {}}')], calls)
        assert asyncio.run(client.download("https://r/pkg")) == '{"versions": {}}'
        url, headers = calls[0]
        assert url == "https://r/pkg"
        assert headers["Accept"] == "application/json"
        assert headers["User-Agent"].startswith("npm-mirror-resolver/")

    def test_not_found(self):
        client = _client([_DummyResponse(404)], [])
        with pytest.raises(RegistryNotFound) as excinfo:
            asyncio.run(client.download("https://r/missing"))
        assert excinfo.value.status == 404

    def test_other_client_error_status(self):
        client = _client([_DummyResponse(403)], [])
        with pytest.raises(TransportFailure) as excinfo:
            asyncio.run(client.download("https://r/private"))
        assert excinfo.value.status == 403

    def test_server_error_is_retried(self):
        calls = []
        client = _client([_DummyResponse(503), _DummyResponse(200, "ok")], calls)
        assert asyncio.run(client.download("https://r/pkg")) == "ok"
        assert len(calls) == 2

    def test_connection_errors_exhaust_retries(self):
        calls = []
        errors = [aiohttp_mod.ClientConnectionError("reset") for _ in range(2)]
        client = _client(errors, calls, retry_max=2)
        with pytest.raises(TransportFailure) as excinfo:
            asyncio.run(client.download("https://r/pkg"))
        assert "after 2 attempts" in str(excinfo.value)
        assert len(calls) == 2

    def test_custom_headers_kept(self):
        client = RegistryClient(headers={"Authorization": "Bearer t", "Accept": "application/vnd.npm.install-v1+json"})
        assert client._headers["Authorization"] == "Bearer t"
        assert client._headers["Accept"] == "application/vnd.npm.install-v1+json"


class TestRegistryClientLifecycle:
    """Session management."""

    def test_context_manager_opens_and_closes(self):
        async def _run():
            async with RegistryClient() as client:
                assert client._session is not None
            return client

        client = asyncio.run(_run())
        assert client._session is None
