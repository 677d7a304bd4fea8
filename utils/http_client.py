"""HTTP helpers for probing and fetching files from GitHub."""

from __future__ import annotations

import ipaddress
import logging
import threading
from types import TracebackType
from urllib.parse import urlsplit, urlunsplit

import requests  # type: ignore[import-untyped]

from config import CONFIG
from registry.errors import NetworkError

logger = logging.getLogger(__name__)


def get_sanitized_proxies() -> dict[str, str]:
    """Return the environment's proxies with bare IPv6 hosts bracketed."""

    try:
        detected = requests.utils.get_environ_proxies("https://github.com")
    except Exception:  # noqa: BLE001 - fallback to direct connections
        logger.debug("Unable to inspect system proxy configuration", exc_info=True)
        return {}

    sanitized: dict[str, str] = {}
    for scheme, url in (detected or {}).items():
        normalized = _sanitize_proxy_url(url)
        if normalized:
            sanitized[scheme] = normalized
    if detected and not sanitized:
        logger.debug("System proxy configuration ignored after sanitization: %s", detected)
    return sanitized


def configure_requests_session(session: requests.Session | None = None) -> requests.Session:
    """Return a requests session that uses sanitized proxies instead of the raw environment."""

    configured = session or requests.Session()
    configured.trust_env = False
    configured.proxies.clear()
    proxies = get_sanitized_proxies()
    if proxies:
        configured.proxies.update(proxies)
    configured.headers["User-Agent"] = CONFIG.network.user_agent
    return configured


def _sanitize_proxy_url(proxy: str | None) -> str | None:
    """Wrap bare IPv6 hosts in [] so urllib3 can parse them."""

    if not proxy or "://" not in proxy.strip():
        return None
    proxy = proxy.strip()

    try:
        parsed = urlsplit(proxy)
    except ValueError:
        logger.debug("Skipping invalid proxy value: %s", proxy, exc_info=True)
        return None

    userinfo, _, host_port = parsed.netloc.rpartition("@")
    if not host_port or host_port.startswith("[") or host_port.count(":") <= 1:
        return proxy

    host, port = host_port, ""
    candidate_host, _, candidate_port = host_port.rpartition(":")
    if candidate_port.isdigit() and candidate_host:
        try:
            ipaddress.IPv6Address(candidate_host)
            host, port = candidate_host, candidate_port
        except ValueError:
            pass

    try:
        ipaddress.IPv6Address(host)
    except ValueError:
        return proxy

    netloc = f"[{host}]:{port}" if port else f"[{host}]"
    if userinfo:
        netloc = f"{userinfo}@{netloc}"
    return urlunsplit((parsed.scheme, netloc, parsed.path, parsed.query, parsed.fragment))


def _is_success(status_code: int) -> bool:
    return 200 <= status_code <= 299


class HttpClient:
    """Thin wrapper over ``requests`` with one session per worker thread.

    Probes use HEAD without following redirects and report existence as a
    boolean. Fetches use GET and raise :class:`NetworkError` on anything but a
    2xx status. Timeouts and connection failures always raise.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout if timeout is not None else CONFIG.network.request_timeout
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = configure_requests_session()
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def exists(self, url: str) -> bool:
        """Return ``True`` when a HEAD request to ``url`` answers with a 2xx status."""
        logger.debug("HEAD %s", url)
        try:
            response = self.session.head(url, timeout=self.timeout, allow_redirects=False)
        except requests.Timeout as exc:
            raise NetworkError(url, "timed out") from exc
        except requests.RequestException as exc:
            raise NetworkError(url, str(exc)) from exc
        try:
            return _is_success(response.status_code)
        finally:
            response.close()

    def get_bytes(self, url: str) -> bytes:
        """Fetch ``url`` and return the response body."""
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.Timeout as exc:
            raise NetworkError(url, "timed out") from exc
        except requests.RequestException as exc:
            raise NetworkError(url, str(exc)) from exc
        if not _is_success(response.status_code):
            raise NetworkError(url, f"HTTP status code {response.status_code}", response.status_code)
        return response.content

    def close(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            try:
                session.close()
            except Exception:  # noqa: BLE001 - closing failures are non-fatal
                logger.debug("Failed to close session cleanly", exc_info=True)

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["HttpClient", "configure_requests_session", "get_sanitized_proxies"]
