"""Bidding on listings."""

from __future__ import annotations

import logging
from typing import Optional

from souq_client.config import HIGHEST_BID_TTL
from souq_client.data import queries
from souq_client.data.models import Bid
from souq_client.stores.base import STORE_ERRORS, BaseStore, require

logger = logging.getLogger(__name__)

# Bids must always reflect the backend's latest ordering
FRESH = 0


class BidsStore(BaseStore):
    def __init__(self, client=None) -> None:
        super().__init__(client)
        self.bids: list[Bid] = []
        self.my_bids: list[Bid] = []
        self.highest_bid: Optional[Bid] = None

    async def place_bid(self, listing_id: str, amount: float) -> Bid:
        """Place a bid and prepend it to the listing's bids.

        Raises:
            ValueError: if ``amount`` is not positive.
            GraphQLClientError: if the backend rejects the bid.
        """
        if amount <= 0:
            raise ValueError("Bid amount must be positive")

        self._begin()
        try:
            data = await self.client.request(
                queries.PLACE_BID_MUTATION,
                {"input": {"listingId": listing_id, "amount": amount}},
                ttl=FRESH,
            )
            bid = Bid.from_dict(require(data, "placeBid"))
        except STORE_ERRORS as e:
            self._fail(e, "Failed to place bid")
            raise

        self.bids = [bid, *self.bids]
        self.is_loading = False
        logger.info(f"Placed bid {bid.id} of {amount} on listing {listing_id}")
        return bid

    async def _load_bids(self, query: str, field: str, variables: dict, fallback: str) -> Optional[list[Bid]]:
        self._begin()
        try:
            data = await self.client.request(query, variables, ttl=FRESH)
            bids = [Bid.from_dict(raw) for raw in data.get(field) or []]
        except STORE_ERRORS as e:
            self._fail(e, fallback)
            return None
        self.is_loading = False
        return bids

    async def fetch_listing_bids(self, listing_id: str) -> None:
        bids = await self._load_bids(
            queries.GET_LISTING_BIDS_QUERY, "listingBids", {"listingId": listing_id},
            "Failed to fetch bids",
        )
        if bids is not None:
            self.bids = bids

    async def fetch_public_listing_bids(self, listing_id: str) -> None:
        bids = await self._load_bids(
            queries.GET_PUBLIC_LISTING_BIDS_QUERY, "publicListingBids", {"listingId": listing_id},
            "Failed to fetch bids",
        )
        if bids is not None:
            self.bids = bids

    async def fetch_my_bids(self) -> None:
        bids = await self._load_bids(
            queries.GET_MY_BIDS_QUERY, "myBids", {}, "Failed to fetch my bids"
        )
        if bids is not None:
            self.my_bids = bids

    async def fetch_highest_bid(self, listing_id: str) -> None:
        try:
            data = await self.client.request(
                queries.GET_HIGHEST_BID_QUERY, {"listingId": listing_id}, ttl=HIGHEST_BID_TTL
            )
            raw = data.get("highestBid")
            self.highest_bid = Bid.from_dict(raw) if raw else None
        except STORE_ERRORS as e:
            logger.error(f"Error fetching highest bid for {listing_id}: {e}")

    def clear_bids(self) -> None:
        self.bids = []
        self.my_bids = []
        self.highest_bid = None
        self.error = None
