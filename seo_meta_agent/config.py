from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_USER_AGENT = "SEO-Analyzer-Bot/1.0 (Website SEO Analysis Tool)"

ALLOWED_SCHEMES = frozenset({"http", "https"})
DEFAULT_PORTS = {"http": 80, "https": 443}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _ports_env(name: str, default: frozenset[int]) -> frozenset[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    ports: set[int] = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or not 0 < int(part) < 65536:
            raise ValueError(f"{name} contains an invalid port: {part!r}")
        ports.add(int(part))
    if not ports:
        raise ValueError(f"{name} must list at least one port")
    return frozenset(ports)


@dataclass(frozen=True)
class FetchPolicy:
    allowed_ports: frozenset[int] = field(default_factory=lambda: frozenset({80, 443, 8080, 8443}))
    max_redirects: int = 1
    timeout_s: float = 10.0
    dns_timeout_s: float = 5.0
    max_bytes: int = 10 * 1024 * 1024
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> "FetchPolicy":
        base = cls()
        return cls(
            allowed_ports=_ports_env("SEO_AGENT_ALLOWED_PORTS", base.allowed_ports),
            max_redirects=_int_env("SEO_AGENT_MAX_REDIRECTS", base.max_redirects),
            timeout_s=_float_env("SEO_AGENT_TIMEOUT_S", base.timeout_s),
            dns_timeout_s=_float_env("SEO_AGENT_DNS_TIMEOUT_S", base.dns_timeout_s),
            max_bytes=_int_env("SEO_AGENT_MAX_BYTES", base.max_bytes),
            user_agent=os.getenv("SEO_AGENT_USER_AGENT", "").strip() or base.user_agent,
        )


def cors_allow_origins() -> list[str]:
    raw = os.getenv("SEO_AGENT_CORS_ORIGINS", "").strip()
    if not raw:
        return ["http://localhost:5000"]
    return [o.strip() for o in raw.split(",") if o.strip()]


def log_level() -> str:
    return (os.getenv("SEO_AGENT_LOG_LEVEL", "") or "INFO").strip().upper()
