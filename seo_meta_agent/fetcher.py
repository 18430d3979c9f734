from __future__ import annotations

import codecs
import logging
import socket
import threading
import time
from dataclasses import dataclass

import httpx

from .config import FetchPolicy
from .errors import (
    ContentTooLarge,
    FetchTimeout,
    MalformedURL,
    NetworkError,
    TooManyRedirects,
    UnsupportedContentType,
    UpstreamHTTPError,
)
from .url_guard import ValidatedURL, sanitize

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")
REDIRECT_STATUSES = {301, 302, 303, 307, 308}


@dataclass(frozen=True)
class FetchedDocument:
    url: str
    status: int
    content_type: str
    text: str
    redirects: tuple[str, ...] = ()


@dataclass(frozen=True)
class _Redirect:
    location: str


class _HopWatchdog:
    """Cuts a fetch attempt off once its deadline passes.

    Socket timeouts only bound each single read, so a server dribbling its
    status line or body a byte at a time never trips them. The watchdog
    collects the sockets httpcore opens (via the ``trace`` extension) and shuts
    them down when the timer fires, which wakes any read blocked on them.
    """

    def __init__(self, timeout_s: float):
        self.deadline = time.monotonic() + timeout_s
        self.expired = False
        self._sockets: list[socket.socket] = []
        self._lock = threading.Lock()
        self._timer = threading.Timer(timeout_s, self._fire)
        self._timer.daemon = True

    def trace(self, event_name: str, info: dict) -> None:
        stream = info.get("return_value")
        if not event_name.endswith(".complete") or not hasattr(stream, "get_extra_info"):
            return
        sock = stream.get_extra_info("socket")
        if sock is None:
            return
        with self._lock:
            self._sockets.append(sock)
            late = self.expired
        if late:
            self._shutdown(sock)

    def _fire(self) -> None:
        with self._lock:
            self.expired = True
            sockets = list(self._sockets)
        for sock in sockets:
            self._shutdown(sock)

    @staticmethod
    def _shutdown(sock: socket.socket) -> None:
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as exc:
            # Already closed by the connection pool.
            logger.debug("watchdog shutdown skipped: %s", exc)

    def check(self, timeout_s: float) -> None:
        if self.expired or time.monotonic() > self.deadline:
            raise FetchTimeout(f"attempt not finished within {timeout_s}s")

    def __enter__(self) -> "_HopWatchdog":
        self._timer.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self._timer.cancel()


def _request_headers(policy: FetchPolicy) -> dict[str, str]:
    return {
        "user-agent": policy.user_agent,
        "accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "accept-language": "en-US,en;q=0.5",
        # The size cap counts decoded bytes; ask for no compression.
        "accept-encoding": "identity",
    }


def _mime_type(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def _decode(body: bytes, charset: str | None) -> str:
    encoding = "utf-8"
    if charset:
        try:
            encoding = codecs.lookup(charset).name
        except LookupError:
            encoding = "utf-8"
    return body.decode(encoding, errors="replace")


def _read_capped(res: httpx.Response, policy: FetchPolicy, watchdog: _HopWatchdog) -> bytes:
    declared = res.headers.get("content-length")
    if declared and declared.strip().isdigit() and int(declared) > policy.max_bytes:
        raise ContentTooLarge(f"declared content-length {declared} exceeds {policy.max_bytes}")

    chunks: list[bytes] = []
    received = 0
    for chunk in res.iter_bytes():
        received += len(chunk)
        # Content-Length can lie (or be missing); the cutoff is on bytes actually read.
        if received > policy.max_bytes:
            raise ContentTooLarge(f"body exceeded {policy.max_bytes} bytes")
        watchdog.check(policy.timeout_s)
        chunks.append(chunk)
    return b"".join(chunks)


def _fetch_once(client: httpx.Client, target: ValidatedURL, policy: FetchPolicy) -> FetchedDocument | _Redirect:
    with _HopWatchdog(policy.timeout_s) as watchdog:
        try:
            with client.stream("GET", target.url, extensions={"trace": watchdog.trace}) as res:
                watchdog.check(policy.timeout_s)
                if res.status_code in REDIRECT_STATUSES and res.headers.get("location"):
                    return _Redirect(location=res.headers["location"])
                if res.status_code >= 300:
                    raise UpstreamHTTPError(res.status_code, f"{target.url} answered {res.status_code}")

                content_type = res.headers.get("content-type")
                if _mime_type(content_type) not in HTML_CONTENT_TYPES:
                    raise UnsupportedContentType(f"{target.url} declared content-type {content_type!r}")

                body = _read_capped(res, policy, watchdog)
                return FetchedDocument(
                    url=target.url,
                    status=res.status_code,
                    content_type=content_type or "",
                    text=_decode(body, res.charset_encoding),
                )
        except httpx.TransportError as exc:
            if watchdog.expired:
                raise FetchTimeout(f"{target.url}: cut off after {policy.timeout_s}s ({exc!r})") from exc
            raise


_DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "getaddrinfo failed",
)


def _caused_by_dns(exc: BaseException) -> bool:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, socket.gaierror):
            return True
        text = str(current).lower()
        if any(marker in text for marker in _DNS_FAILURE_MARKERS):
            return True
        current = current.__cause__ or current.__context__
    return False


def _network_error(exc: httpx.HTTPError, url: str) -> NetworkError:
    if "refused" in str(exc).lower():
        public = "Connection refused. The website may be down."
    elif _caused_by_dns(exc):
        public = "Website not found. Please check the URL and try again."
    else:
        public = "Failed to fetch website. The website may be down."
    return NetworkError(f"{url}: {exc.__class__.__name__}: {exc}", public_message=public)


def fetch_document(
    target: ValidatedURL,
    policy: FetchPolicy | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> FetchedDocument:
    """Fetch an HTML document from an already validated URL.

    Redirects are never followed by the transport. Each ``Location`` is
    resolved against the current URL and put through ``sanitize`` again, so a
    public host can't bounce us to an internal one. At most
    ``policy.max_redirects`` hops are taken.

    The hostname is resolved again by the connection layer, so a DNS answer
    that changes between validation and connect (rebinding) is not caught here.
    """
    policy = policy or FetchPolicy()
    t = policy.timeout_s
    timeout = httpx.Timeout(connect=min(t, 5.0), read=t, write=t, pool=t)
    redirects: list[str] = []
    current = target

    try:
        with httpx.Client(
            timeout=timeout,
            follow_redirects=False,
            headers=_request_headers(policy),
            # One fresh connection per hop, so the watchdog sees every socket.
            limits=httpx.Limits(max_keepalive_connections=0),
            transport=transport,
        ) as client:
            while True:
                outcome = _fetch_once(client, current, policy)
                if isinstance(outcome, FetchedDocument):
                    if not redirects:
                        return outcome
                    return FetchedDocument(
                        url=outcome.url,
                        status=outcome.status,
                        content_type=outcome.content_type,
                        text=outcome.text,
                        redirects=tuple(redirects),
                    )

                if len(redirects) >= policy.max_redirects:
                    raise TooManyRedirects(f"{current.url} redirected again after {len(redirects)} hop(s)")
                location = str(httpx.URL(current.url).join(outcome.location))
                logger.debug("redirect %s -> %s", current.url, location)
                redirects.append(current.url)
                current = sanitize(location, policy)
    except httpx.TimeoutException as exc:
        raise FetchTimeout(f"{current.url}: {exc.__class__.__name__}") from exc
    except httpx.InvalidURL as exc:
        raise MalformedURL(f"{current.url}: {exc}") from exc
    except httpx.HTTPError as exc:
        raise _network_error(exc, current.url) from exc
