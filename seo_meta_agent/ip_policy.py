"""Blocked destination table for outbound fetches.

Every address the fetcher might connect to is checked here first. The table is
built once at import time and never mutated.
"""
from __future__ import annotations

import ipaddress
from enum import Enum
from typing import Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class RangeKind(str, Enum):
    METADATA = "metadata"
    UNSPECIFIED = "unspecified"
    LOOPBACK = "loopback"
    PRIVATE = "private"
    SHARED = "shared"  # carrier-grade NAT
    LINK_LOCAL = "link-local"
    RESERVED = "reserved"
    MULTICAST = "multicast"
    BROADCAST = "broadcast"


# Cloud metadata services, checked before the generic ranges.
METADATA_ADDRESSES: frozenset[IPAddress] = frozenset(
    ipaddress.ip_address(a)
    for a in (
        "169.254.169.254",  # AWS, GCP, Azure, OpenStack
        "169.254.169.123",  # AWS time sync
        "169.254.170.2",  # AWS ECS task metadata
        "100.100.100.200",  # Alibaba Cloud
        "192.0.0.192",  # Oracle Cloud
        "fd00:ec2::254",  # AWS IMDS over IPv6
    )
)

BLOCKED_RANGES: tuple[tuple[RangeKind, ipaddress.IPv4Network | ipaddress.IPv6Network], ...] = tuple(
    (kind, ipaddress.ip_network(cidr))
    for kind, cidr in (
        (RangeKind.UNSPECIFIED, "0.0.0.0/8"),
        (RangeKind.PRIVATE, "10.0.0.0/8"),
        (RangeKind.SHARED, "100.64.0.0/10"),
        (RangeKind.LOOPBACK, "127.0.0.0/8"),
        (RangeKind.LINK_LOCAL, "169.254.0.0/16"),
        (RangeKind.PRIVATE, "172.16.0.0/12"),
        (RangeKind.RESERVED, "192.0.0.0/24"),
        (RangeKind.PRIVATE, "192.168.0.0/16"),
        (RangeKind.RESERVED, "198.18.0.0/15"),
        (RangeKind.MULTICAST, "224.0.0.0/4"),
        (RangeKind.RESERVED, "240.0.0.0/4"),
        (RangeKind.BROADCAST, "255.255.255.255/32"),
        (RangeKind.UNSPECIFIED, "::/128"),
        (RangeKind.LOOPBACK, "::1/128"),
        (RangeKind.RESERVED, "::/8"),  # includes IPv4-compatible ::a.b.c.d
        (RangeKind.RESERVED, "64:ff9b:1::/48"),  # local-use NAT64
        (RangeKind.RESERVED, "2001::/32"),  # Teredo
        (RangeKind.PRIVATE, "fc00::/7"),
        (RangeKind.LINK_LOCAL, "fe80::/10"),
        (RangeKind.MULTICAST, "ff00::/8"),
    )
)

NAT64_PREFIX = ipaddress.ip_network("64:ff9b::/96")


def parse_ip(value: str) -> IPAddress | None:
    """Parse an IP literal, returning ``None`` for anything that isn't one.

    Accepts bracketed IPv6 (``[::1]``) and strips a zone id (``fe80::1%eth0``).
    IPv6 forms that carry an IPv4 address (IPv4-mapped, 6to4, well-known NAT64
    prefix) are unwrapped to that IPv4 address.
    """
    text = (value or "").strip()
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    text = text.split("%", 1)[0]
    try:
        addr = ipaddress.ip_address(text)
    except ValueError:
        return None
    if isinstance(addr, ipaddress.IPv6Address):
        if addr.ipv4_mapped is not None:
            return addr.ipv4_mapped
        if addr.sixtofour is not None:
            return addr.sixtofour
        if addr in NAT64_PREFIX:
            return ipaddress.IPv4Address(int(addr) & 0xFFFFFFFF)
    return addr


def classify(value: str) -> RangeKind | None:
    """Return the blocked range kind ``value`` falls in, or ``None`` if public."""
    addr = parse_ip(value)
    if addr is None:
        # Not an IP literal: refuse.
        return RangeKind.RESERVED
    if addr in METADATA_ADDRESSES:
        return RangeKind.METADATA
    for kind, network in BLOCKED_RANGES:
        if addr.version == network.version and addr in network:
            return kind
    return None


def is_blocked(value: str) -> bool:
    return classify(value) is not None
