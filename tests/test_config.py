from souq_client.config import Config


def test_defaults_are_valid(monkeypatch):
    for name in ("GRAPHQL_ENDPOINT", "GRAPHQL_TIMEOUT_SECONDS", "GRAPHQL_CACHE_TTL_SECONDS", "CACHE_CLEANUP_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    cfg = Config()

    assert cfg.graphql_endpoint == "http://localhost:4000/graphql"
    assert cfg.cache_ttl_seconds == 300
    assert cfg.validate() == []


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("GRAPHQL_ENDPOINT", "https://api.souq.test/graphql")
    monkeypatch.setenv("SITE_URL", "https://souq.test/")
    monkeypatch.setenv("DISCORD_GUILD_ID", "1234")
    monkeypatch.setenv("GRAPHQL_CACHE_TTL_SECONDS", "0")

    cfg = Config()

    assert cfg.graphql_endpoint == "https://api.souq.test/graphql"
    assert cfg.tracking_url == "https://souq.test/api/ads/track"
    assert cfg.discord_guild_id == 1234
    assert cfg.cache_ttl_seconds == 0
    assert cfg.validate() == []


def test_validate_reports_every_problem():
    cfg = Config(
        graphql_endpoint="ftp://souq.test",
        request_timeout_seconds=0,
        cache_ttl_seconds=-1,
        cache_cleanup_seconds=0,
        discord_token="",
    )

    assert cfg.validate(require_bot=True) == [
        "GRAPHQL_ENDPOINT must be an http(s) URL",
        "GRAPHQL_TIMEOUT_SECONDS must be positive",
        "GRAPHQL_CACHE_TTL_SECONDS cannot be negative",
        "CACHE_CLEANUP_SECONDS must be positive",
        "DISCORD_TOKEN is required",
    ]


def test_missing_endpoint():
    assert Config(graphql_endpoint="").validate() == ["GRAPHQL_ENDPOINT is required"]
