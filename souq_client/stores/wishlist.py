"""The signed-in user's wishlist."""

from __future__ import annotations

import logging

from souq_client.config import WISHLIST_TTL
from souq_client.data import queries
from souq_client.data.models import ListingSummary
from souq_client.stores.base import STORE_ERRORS, BaseStore

logger = logging.getLogger(__name__)

WISHLIST_CACHE_FRAGMENT = "myWishlist"


class WishlistStore(BaseStore):
    """Wishlist membership with optimistic add/remove.

    Membership changes are applied locally before the mutation is sent and
    rolled back if it fails, so toggles feel instant.
    """

    def __init__(self, client=None) -> None:
        super().__init__(client)
        self.wishlist_ids: set[str] = set()
        self.listings: list[ListingSummary] = []

    async def load_my_wishlist(self) -> None:
        self._begin()
        try:
            data = await self.client.request(queries.MY_WISHLIST_QUERY, ttl=WISHLIST_TTL)
            listings = [ListingSummary.from_dict(raw) for raw in data.get("myWishlist") or []]
        except STORE_ERRORS as e:
            self._fail(e, "Failed to load wishlist")
            return

        self.listings = listings
        self.wishlist_ids = {listing.id for listing in listings}
        self.is_loading = False

    def is_in_wishlist(self, listing_id: str) -> bool:
        return listing_id in self.wishlist_ids

    async def add_to_wishlist(self, listing_id: str, is_archived: bool = False) -> None:
        self._begin()
        already_present = listing_id in self.wishlist_ids
        self.wishlist_ids.add(listing_id)
        try:
            await self.client.request(
                queries.ADD_TO_WISHLIST_MUTATION,
                {"listingId": listing_id, "isArchived": is_archived},
                ttl=0,
            )
        except STORE_ERRORS as e:
            if not already_present:
                self.wishlist_ids.discard(listing_id)
            self._fail(e, "Failed to add listing to wishlist")
            raise

        self.is_loading = False
        self.client.invalidate(WISHLIST_CACHE_FRAGMENT)

    async def remove_from_wishlist(self, listing_id: str, is_archived: bool = False) -> None:
        self._begin()
        was_present = listing_id in self.wishlist_ids
        previous_listings = self.listings
        self.wishlist_ids.discard(listing_id)
        self.listings = [listing for listing in self.listings if listing.id != listing_id]
        try:
            await self.client.request(
                queries.REMOVE_FROM_WISHLIST_MUTATION,
                {"listingId": listing_id, "isArchived": is_archived},
                ttl=0,
            )
        except STORE_ERRORS as e:
            if was_present:
                self.wishlist_ids.add(listing_id)
            self.listings = previous_listings
            self._fail(e, "Failed to remove listing from wishlist")
            raise

        self.is_loading = False
        self.client.invalidate(WISHLIST_CACHE_FRAGMENT)

    async def toggle_wishlist(self, listing_id: str, is_archived: bool = False) -> bool:
        """Flip membership. Returns True if the listing is now wishlisted."""
        if self.is_in_wishlist(listing_id):
            await self.remove_from_wishlist(listing_id, is_archived)
            return False
        await self.add_to_wishlist(listing_id, is_archived)
        return True
