from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

from .config import ALLOWED_SCHEMES, DEFAULT_PORTS, FetchPolicy
from .errors import MalformedURL, PortNotAllowed, ProtocolNotAllowed
from .resolver import validate_hostname


@dataclass(frozen=True)
class ValidatedURL:
    """A URL whose scheme, port and every resolved address passed the policy.

    Only ``sanitize`` builds these. One is made per fetch attempt, including
    one per redirect hop, and never reused across requests.
    """

    url: str
    scheme: str
    hostname: str
    port: int
    addresses: tuple[str, ...]

    def __str__(self) -> str:
        return self.url


def _ascii_host(hostname: str) -> str:
    try:
        return hostname.encode("idna").decode("ascii").lower()
    except UnicodeError:
        raise MalformedURL(f"hostname {hostname!r} is not a valid domain name") from None


def sanitize(raw: str, policy: FetchPolicy | None = None) -> ValidatedURL:
    """Parse and validate a caller-supplied URL.

    Checks run in order and stop at the first failure: parse, scheme, port,
    then hostname resolution and address classification.
    """
    policy = policy or FetchPolicy()
    value = (raw or "").strip()
    if not value:
        raise MalformedURL("empty URL")

    try:
        parts = urlsplit(value)
    except ValueError as exc:
        raise MalformedURL(f"unparsable URL {value!r}: {exc}") from exc

    scheme = parts.scheme.lower()
    if not scheme:
        raise MalformedURL(f"URL {value!r} is not absolute")
    if scheme not in ALLOWED_SCHEMES:
        raise ProtocolNotAllowed(f"scheme {scheme!r} not allowed")

    if not parts.hostname:
        raise MalformedURL(f"URL {value!r} has no host")
    if parts.username is not None or parts.password is not None:
        raise MalformedURL("credentials in URL are not allowed")

    try:
        explicit_port = parts.port
    except ValueError as exc:
        raise MalformedURL(f"invalid port in {value!r}") from exc
    port = explicit_port if explicit_port is not None else DEFAULT_PORTS[scheme]
    if port not in policy.allowed_ports:
        raise PortNotAllowed(f"port {port} not in {sorted(policy.allowed_ports)}")

    hostname = parts.hostname
    if ":" not in hostname:
        hostname = _ascii_host(hostname)
    addresses = validate_hostname(hostname, timeout_s=policy.dns_timeout_s)

    netloc = f"[{hostname}]" if ":" in hostname else hostname
    if explicit_port is not None:
        netloc = f"{netloc}:{explicit_port}"
    url = urlunsplit((scheme, netloc, parts.path or "/", parts.query, ""))
    return ValidatedURL(url=url, scheme=scheme, hostname=hostname, port=port, addresses=addresses)
