"""Listing search with filters, pagination and result aggregations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional

from souq_client.config import LISTINGS_TTL
from souq_client.data import queries
from souq_client.data.models import Listing
from souq_client.data.session_cache import SessionCache
from souq_client.stores.base import STORE_ERRORS, BaseStore

logger = logging.getLogger(__name__)

VIEW_TYPES = ("grid", "list", "detail")

# Filter keys passed through to the backend unchanged when set
_PASSTHROUGH_FILTERS = ("categoryId", "priceMinMinor", "priceMaxMinor", "city", "sellerType", "search", "sort")


@dataclass
class Pagination:
    page: int = 1
    limit: int = 20
    total: int = 0
    has_more: bool = True

    @property
    def offset(self) -> int:
        return (max(self.page, 1) - 1) * self.limit


def build_listing_filter(filters: dict[str, Any], view_type: str) -> dict[str, Any]:
    """Translate store filters into a ``ListingFilterInput``; only active listings are searched."""
    graphql_filter: dict[str, Any] = {"status": "ACTIVE"}
    for key in _PASSTHROUGH_FILTERS:
        if filters.get(key):
            graphql_filter[key] = filters[key]
    if filters.get("priceCurrency"):
        graphql_filter["priceCurrency"] = filters["priceCurrency"]
        graphql_filter["displayCurrency"] = filters["priceCurrency"]
    if filters.get("specs"):
        graphql_filter["specs"] = filters["specs"]
    graphql_filter["viewType"] = view_type
    return graphql_filter


class ListingsStore(BaseStore):
    """Paged listing search.

    Result pages are cached by the GraphQL client. Aggregations for a
    category are shared through the ``SessionCache`` and keyed by the
    filter that produced them.
    """

    def __init__(self, client=None, session_cache: Optional[SessionCache] = None) -> None:
        super().__init__(client)
        self.session_cache = session_cache or SessionCache()
        self.listings: list[Listing] = []
        self.current_listing: Optional[Listing] = None
        self.filters: dict[str, Any] = {}
        self.pagination = Pagination()
        self.view_type = "grid"
        self.aggregations: dict[str, Any] = {}

    async def fetch_listings(
        self,
        filter_overrides: Optional[dict[str, Any]] = None,
        view_type: Optional[str] = None,
    ) -> None:
        view_type = view_type or self.view_type
        filters = {**self.filters, **(filter_overrides or {})}
        graphql_filter = build_listing_filter(filters, view_type)
        pagination = self.pagination
        offset = pagination.offset

        self._begin()
        try:
            data = await self.client.request(
                queries.listings_query_for(view_type),
                {"filter": graphql_filter, "limit": pagination.limit, "offset": offset},
                ttl=LISTINGS_TTL,
            )
            listings = [Listing.from_dict(raw) for raw in data.get("listingsSearch") or []]
            aggregations = await self._aggregations(graphql_filter)
        except STORE_ERRORS as e:
            self.listings = []
            self._fail(e, "Failed to load listings")
            return

        total = int(aggregations.get("totalResults") or 0)
        self.listings = listings
        self.aggregations = aggregations
        self.pagination = replace(pagination, total=total, has_more=offset + len(listings) < total)
        self.is_loading = False
        logger.debug(f"Loaded {len(listings)} of {total} listings (page {pagination.page})")

    async def _aggregations(self, graphql_filter: dict[str, Any]) -> dict[str, Any]:
        category = graphql_filter.get("categoryId")
        if category:
            cached = self.session_cache.get_aggregations(category, graphql_filter)
            if cached is not None:
                return cached

        data = await self.client.request(
            queries.LISTINGS_AGGREGATIONS_QUERY,
            {"filter": graphql_filter},
            ttl=LISTINGS_TTL,
        )
        aggregations = data.get("listingsAggregations") or {}
        if category:
            self.session_cache.set_aggregations(category, graphql_filter, aggregations)
        return aggregations

    async def fetch_listings_by_category(
        self,
        category_slug: str,
        filter_overrides: Optional[dict[str, Any]] = None,
        view_type: Optional[str] = None,
    ) -> None:
        await self.fetch_listings({**(filter_overrides or {}), "categoryId": category_slug}, view_type)

    def set_filters(self, **filters: Any) -> None:
        """Merge filters and go back to the first page."""
        self.filters = {**self.filters, **filters}
        self.reset_pagination()

    def clear_filters(self) -> None:
        self.filters = {}
        self.reset_pagination()

    def set_sort_filter(self, sort: str) -> None:
        self.set_filters(sort=sort)

    def set_pagination(self, **changes: Any) -> None:
        self.pagination = replace(self.pagination, **changes)

    def reset_pagination(self) -> None:
        self.pagination = Pagination(limit=self.pagination.limit)

    def set_view_type(self, view_type: str) -> None:
        if view_type not in VIEW_TYPES:
            raise ValueError(f"Unknown view type {view_type!r}")
        self.view_type = view_type

    def add_listings(self, listings: list[Listing]) -> None:
        """Append listings not already present."""
        seen = {listing.id for listing in self.listings}
        self.listings = [*self.listings, *(item for item in listings if item.id not in seen)]

    def update_listing(self, listing_id: str, **updates: Any) -> None:
        self.listings = [
            replace(item, **updates) if item.id == listing_id else item for item in self.listings
        ]
        if self.current_listing is not None and self.current_listing.id == listing_id:
            self.current_listing = replace(self.current_listing, **updates)

    def remove_listing(self, listing_id: str) -> None:
        self.listings = [item for item in self.listings if item.id != listing_id]
        if self.current_listing is not None and self.current_listing.id == listing_id:
            self.current_listing = None

    def set_current_listing(self, listing: Optional[Listing]) -> None:
        self.current_listing = listing
