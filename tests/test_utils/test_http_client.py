"""Tests for HTTP client helpers."""

from __future__ import annotations

import pytest
import requests

from registry.errors import NetworkError
from utils import http_client


class DummyResponse:
    def __init__(self, status_code: int, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content
        self.closed = False

    def close(self) -> None:
        self.closed = True


class DummySession:
    def __init__(self, responses: dict[str, DummyResponse] | None = None, error: Exception | None = None) -> None:
        self.proxies: dict[str, str] = {}
        self.headers: dict[str, str] = {}
        self.trust_env = True
        self.responses = responses or {}
        self.error = error
        self.calls: list[tuple[str, str, dict]] = []
        self.closed = False

    def _respond(self, method: str, url: str, **kwargs) -> DummyResponse:
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.get(url, DummyResponse(404))

    def head(self, url: str, **kwargs) -> DummyResponse:
        return self._respond("HEAD", url, **kwargs)

    def get(self, url: str, **kwargs) -> DummyResponse:
        return self._respond("GET", url, **kwargs)

    def close(self) -> None:
        self.closed = True


def _client_with(monkeypatch: pytest.MonkeyPatch, session: DummySession, timeout: float = 30) -> http_client.HttpClient:
    monkeypatch.setattr(http_client, "configure_requests_session", lambda: session)
    return http_client.HttpClient(timeout=timeout)


def test_configure_requests_session_sanitizes_ipv6_proxy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        http_client.requests.utils,
        "get_environ_proxies",
        lambda _url: {"http": "http://::1:6152", "https": "http://user:pw@fe80::1"},
    )

    session = DummySession()
    configured = http_client.configure_requests_session(session)  # type: ignore[arg-type]

    assert configured is session
    assert session.trust_env is False
    assert session.proxies == {"http": "http://[::1]:6152", "https": "http://user:pw@[fe80::1]"}
    assert "User-Agent" in session.headers


def test_configure_requests_session_ignores_invalid_proxy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        http_client.requests.utils,
        "get_environ_proxies",
        lambda _url: {"http": "not a url", "https": "http://proxy.local:8080"},
    )

    session = DummySession()
    http_client.configure_requests_session(session)  # type: ignore[arg-type]

    assert session.proxies == {"https": "http://proxy.local:8080"}


@pytest.mark.parametrize(("status", "expected"), [(200, True), (204, True), (299, True), (302, False), (404, False)])
def test_exists_reports_2xx(monkeypatch: pytest.MonkeyPatch, status: int, expected: bool) -> None:
    response = DummyResponse(status)
    session = DummySession({"https://example.test/file": response})
    client = _client_with(monkeypatch, session, timeout=12)

    assert client.exists("https://example.test/file") is expected
    assert response.closed
    method, _url, kwargs = session.calls[0]
    assert method == "HEAD"
    assert kwargs == {"timeout": 12, "allow_redirects": False}


def test_get_bytes_returns_body(monkeypatch: pytest.MonkeyPatch) -> None:
    session = DummySession({"https://example.test/version": DummyResponse(200, b"1.0\n")})
    client = _client_with(monkeypatch, session)

    assert client.get_bytes("https://example.test/version") == b"1.0\n"


def test_get_bytes_rejects_non_2xx(monkeypatch: pytest.MonkeyPatch) -> None:
    session = DummySession({"https://example.test/version": DummyResponse(503)})
    client = _client_with(monkeypatch, session)

    with pytest.raises(NetworkError, match="HTTP status code 503") as excinfo:
        client.get_bytes("https://example.test/version")

    assert excinfo.value.status_code == 503
    assert excinfo.value.url == "https://example.test/version"


@pytest.mark.parametrize(
    ("error", "reason"),
    [
        (requests.Timeout("slow"), "timed out"),
        (requests.ConnectionError("refused"), "refused"),
    ],
)
def test_transport_errors_raise_network_error(monkeypatch: pytest.MonkeyPatch, error: Exception, reason: str) -> None:
    client = _client_with(monkeypatch, DummySession(error=error))

    with pytest.raises(NetworkError, match=reason):
        client.exists("https://example.test/file")
    with pytest.raises(NetworkError, match=reason):
        client.get_bytes("https://example.test/file")


def test_context_manager_closes_sessions(monkeypatch: pytest.MonkeyPatch) -> None:
    session = DummySession({"https://example.test/a": DummyResponse(200)})

    with _client_with(monkeypatch, session) as client:
        client.exists("https://example.test/a")

    assert session.closed
