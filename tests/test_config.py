import pytest

from seo_meta_agent.config import DEFAULT_USER_AGENT, FetchPolicy, cors_allow_origins


def test_defaults(monkeypatch):
    for name in (
        "SEO_AGENT_ALLOWED_PORTS",
        "SEO_AGENT_MAX_REDIRECTS",
        "SEO_AGENT_TIMEOUT_S",
        "SEO_AGENT_DNS_TIMEOUT_S",
        "SEO_AGENT_MAX_BYTES",
        "SEO_AGENT_USER_AGENT",
    ):
        monkeypatch.delenv(name, raising=False)

    policy = FetchPolicy.from_env()

    assert policy.allowed_ports == frozenset({80, 443, 8080, 8443})
    assert policy.max_redirects == 1
    assert policy.timeout_s == 10.0
    assert policy.max_bytes == 10 * 1024 * 1024
    assert policy.user_agent == DEFAULT_USER_AGENT


def test_overrides(monkeypatch):
    monkeypatch.setenv("SEO_AGENT_ALLOWED_PORTS", "443, 8443")
    monkeypatch.setenv("SEO_AGENT_MAX_REDIRECTS", "3")
    monkeypatch.setenv("SEO_AGENT_TIMEOUT_S", "2.5")
    monkeypatch.setenv("SEO_AGENT_MAX_BYTES", "2048")
    monkeypatch.setenv("SEO_AGENT_USER_AGENT", "Bot/2")

    policy = FetchPolicy.from_env()

    assert policy.allowed_ports == frozenset({443, 8443})
    assert policy.max_redirects == 3
    assert policy.timeout_s == 2.5
    assert policy.max_bytes == 2048
    assert policy.user_agent == "Bot/2"


@pytest.mark.parametrize(
    "name, value",
    [
        ("SEO_AGENT_ALLOWED_PORTS", "80,http"),
        ("SEO_AGENT_ALLOWED_PORTS", "70000"),
        ("SEO_AGENT_MAX_REDIRECTS", "-1"),
        ("SEO_AGENT_MAX_REDIRECTS", "one"),
        ("SEO_AGENT_TIMEOUT_S", "0"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        FetchPolicy.from_env()


def test_policy_is_frozen():
    with pytest.raises(Exception):
        FetchPolicy().max_redirects = 5


def test_cors_origins(monkeypatch):
    monkeypatch.delenv("SEO_AGENT_CORS_ORIGINS", raising=False)
    assert cors_allow_origins() == ["http://localhost:5000"]
    monkeypatch.setenv("SEO_AGENT_CORS_ORIGINS", "https://a.example, https://b.example,")
    assert cors_allow_origins() == ["https://a.example", "https://b.example"]
