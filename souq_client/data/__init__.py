"""Data layer - GraphQL transport, caches and models."""

from souq_client.data.graphql_client import GraphQLClient
from souq_client.data.models import (
    AdCampaign,
    AdPackageInstance,
    AdSenseSettings,
    Bid,
    ChatMessage,
    ChatThread,
    ListingSummary,
)
from souq_client.data.session_cache import SessionCache

__all__ = [
    "AdCampaign",
    "AdPackageInstance",
    "AdSenseSettings",
    "Bid",
    "ChatMessage",
    "ChatThread",
    "GraphQLClient",
    "ListingSummary",
    "SessionCache",
]
