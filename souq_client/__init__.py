"""Python client for the Souq marketplace GraphQL API."""

from souq_client.ads.selector import compute_weight, select_package
from souq_client.ads.slot import AdSenseDecision, AdSlot, CustomAdDecision
from souq_client.data.graphql_client import (
    GraphQLClient,
    GraphQLClientError,
    GraphQLResponseError,
    GraphQLTransportError,
)

__all__ = [
    "AdSenseDecision",
    "AdSlot",
    "CustomAdDecision",
    "GraphQLClient",
    "GraphQLClientError",
    "GraphQLResponseError",
    "GraphQLTransportError",
    "compute_weight",
    "select_package",
]
