from __future__ import annotations

import logging
import socket
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass

from .errors import BlockedAddress, ResolutionFailure
from .ip_policy import classify, parse_ip

logger = logging.getLogger(__name__)

DEFAULT_DNS_TIMEOUT_S = 5.0

_LOCAL_NAMES = {"localhost", "localhost.localdomain"}

_FAMILIES = (
    ("ipv4", socket.AF_INET),
    ("ipv6", socket.AF_INET6),
)


@dataclass(frozen=True)
class LookupResult:
    """Outcome of resolving one address family.

    A family that errors and a family that answers with nothing are both
    failures; only the combination of the two lookups decides whether the
    hostname as a whole failed to resolve.
    """

    family: str
    addresses: tuple[str, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.addresses)


def lookup(hostname: str, family_name: str, family: int) -> LookupResult:
    try:
        infos = socket.getaddrinfo(hostname, None, family, socket.SOCK_STREAM)
    except (OSError, UnicodeError) as exc:
        return LookupResult(family=family_name, error=str(exc) or exc.__class__.__name__)

    addresses: list[str] = []
    for _family, _type, _proto, _canon, sockaddr in infos:
        ip = str(sockaddr[0])
        if ip not in addresses:
            addresses.append(ip)
    if not addresses:
        return LookupResult(family=family_name, error="no addresses returned")
    return LookupResult(family=family_name, addresses=tuple(addresses))


def resolve_both(hostname: str, timeout_s: float = DEFAULT_DNS_TIMEOUT_S) -> tuple[LookupResult, ...]:
    """Resolve IPv4 and IPv6 independently, each bounded by ``timeout_s``."""
    pool = ThreadPoolExecutor(max_workers=len(_FAMILIES))
    try:
        futures = [(name, pool.submit(lookup, hostname, name, fam)) for name, fam in _FAMILIES]
        results: list[LookupResult] = []
        for name, fut in futures:
            try:
                results.append(fut.result(timeout=timeout_s))
            except FutureTimeout:
                results.append(LookupResult(family=name, error=f"timed out after {timeout_s}s"))
        return tuple(results)
    finally:
        # getaddrinfo can't be interrupted; don't wait for a stuck lookup.
        pool.shutdown(wait=False)


def combine(hostname: str, results: tuple[LookupResult, ...]) -> tuple[str, ...]:
    """Merge per-family results; at least one family must have succeeded."""
    for r in results:
        if r.ok:
            logger.debug("resolved %s (%s): %s", hostname, r.family, ", ".join(r.addresses))
        else:
            logger.debug("no %s answer for %s: %s", r.family, hostname, r.error)

    succeeded = [r for r in results if r.ok]
    if not succeeded:
        errors = "; ".join(f"{r.family}: {r.error}" for r in results)
        raise ResolutionFailure(f"could not resolve {hostname!r} ({errors})")

    merged: list[str] = []
    for r in succeeded:
        for ip in r.addresses:
            if ip not in merged:
                merged.append(ip)
    return tuple(merged)


def check_addresses(hostname: str, addresses: tuple[str, ...]) -> None:
    for ip in addresses:
        kind = classify(ip)
        if kind is not None:
            raise BlockedAddress(f"{hostname!r} resolves to blocked {kind.value} address {ip}")


def validate_hostname(hostname: str, *, timeout_s: float = DEFAULT_DNS_TIMEOUT_S) -> tuple[str, ...]:
    """Check that every address ``hostname`` stands for is publicly routable.

    IP literals are classified directly without touching DNS. Returns the
    addresses that were checked; raises ``BlockedAddress`` or
    ``ResolutionFailure``.
    """
    host = (hostname or "").strip().lower()
    if not host:
        raise ResolutionFailure("empty hostname")

    literal = parse_ip(host)
    if literal is not None:
        addresses = (str(literal),)
        check_addresses(hostname, addresses)
        return addresses

    if host.rstrip(".") in _LOCAL_NAMES:
        raise BlockedAddress(f"{hostname!r} is a local name")

    addresses = combine(host, resolve_both(host, timeout_s))
    check_addresses(hostname, addresses)
    return addresses
