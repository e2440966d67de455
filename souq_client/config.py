"""Configuration management for the Souq client."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


# Cache lifetimes used by the stores, in seconds
ADS_TTL = 5 * 60
ADSENSE_TTL = 10 * 60
AD_PACKAGES_TTL = 5 * 60
WISHLIST_TTL = 2 * 60
HIGHEST_BID_TTL = 30
ADMIN_CAMPAIGNS_TTL = 5 * 60
CATEGORIES_TTL = 10 * 60
LISTINGS_TTL = 2 * 60


@dataclass
class Config:
    """Application configuration."""

    # GraphQL backend
    graphql_endpoint: str = field(
        default_factory=lambda: os.getenv(
            "GRAPHQL_ENDPOINT", "http://localhost:4000/graphql"
        )
    )
    site_url: str = field(
        default_factory=lambda: os.getenv("SITE_URL", "http://localhost:3000")
    )
    api_token: str = field(default_factory=lambda: os.getenv("API_TOKEN", ""))
    admin_token: str = field(default_factory=lambda: os.getenv("ADMIN_TOKEN", ""))
    request_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("GRAPHQL_TIMEOUT_SECONDS", "30"))
    )

    # Client-side caching
    cache_ttl_seconds: int = field(
        default_factory=lambda: int(os.getenv("GRAPHQL_CACHE_TTL_SECONDS", "300"))
    )
    cache_cleanup_seconds: int = field(
        default_factory=lambda: int(os.getenv("CACHE_CLEANUP_SECONDS", "300"))
    )
    data_dir: str = field(default_factory=lambda: os.getenv("DATA_DIR", "data"))

    # Discord
    discord_token: str = field(default_factory=lambda: os.getenv("DISCORD_TOKEN", ""))
    discord_guild_id: Optional[int] = field(
        default_factory=lambda: int(os.getenv("DISCORD_GUILD_ID", "0")) or None
    )
    default_ad_placement: str = field(
        default_factory=lambda: os.getenv("DEFAULT_AD_PLACEMENT", "homepage-top")
    )

    @property
    def tracking_url(self) -> str:
        """Route that records ad impressions and clicks."""
        return f"{self.site_url.rstrip('/')}/api/ads/track"

    def validate(self, require_bot: bool = False) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []
        if not self.graphql_endpoint:
            errors.append("GRAPHQL_ENDPOINT is required")
        elif not self.graphql_endpoint.startswith(("http://", "https://")):
            errors.append("GRAPHQL_ENDPOINT must be an http(s) URL")
        if self.request_timeout_seconds <= 0:
            errors.append("GRAPHQL_TIMEOUT_SECONDS must be positive")
        if self.cache_ttl_seconds < 0:
            errors.append("GRAPHQL_CACHE_TTL_SECONDS cannot be negative")
        if self.cache_cleanup_seconds <= 0:
            errors.append("CACHE_CLEANUP_SECONDS must be positive")
        if require_bot and not self.discord_token:
            errors.append("DISCORD_TOKEN is required")
        return errors


# Global config instance
config = Config()
