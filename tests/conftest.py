import socket

import pytest

PUBLIC_V4 = "93.184.216.34"
PUBLIC_V6 = "2606:2800:220:1:248:1893:25c8:1946"

DEFAULT_RECORDS = {
    "example.com": {"ipv4": [PUBLIC_V4], "ipv6": [PUBLIC_V6]},
    "www.example.com": {"ipv4": [PUBLIC_V4]},
    "cdn.example.net": {"ipv4": ["203.0.113.10"]},
    "v6only.example.org": {"ipv6": [PUBLIC_V6]},
    "internal.example.com": {"ipv4": ["10.0.0.5"]},
    "mixed.example.com": {"ipv4": [PUBLIC_V4], "ipv6": ["fd00::1"]},
    "metadata.example.com": {"ipv4": ["169.254.169.254"]},
    "empty.example.com": {"ipv4": [], "ipv6": []},
}


class FakeDNS:
    def __init__(self, records):
        self.records = {k: dict(v) for k, v in records.items()}
        self.calls = []

    def getaddrinfo(self, host, port, family=0, type=0, proto=0, flags=0):
        self.calls.append((host, family))
        entry = self.records.get(host)
        if entry is None:
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
        if family == socket.AF_INET:
            ips = entry.get("ipv4")
            sockaddr = lambda ip: (ip, 0)  # noqa: E731
        else:
            ips = entry.get("ipv6")
            sockaddr = lambda ip: (ip, 0, 0, 0)  # noqa: E731
        if ips is None:
            raise socket.gaierror(socket.EAI_NONAME, "No address associated with hostname")
        return [(family, socket.SOCK_STREAM, 6, "", sockaddr(ip)) for ip in ips]


@pytest.fixture
def fake_dns(monkeypatch):
    dns = FakeDNS(DEFAULT_RECORDS)
    monkeypatch.setattr(socket, "getaddrinfo", dns.getaddrinfo)
    return dns
