import pytest

from souq_client.data.graphql_client import GraphQLResponseError, GraphQLTransportError
from souq_client.data.models import Bid
from souq_client.stores.bids import BidsStore


def raw_bid(bid_id, amount, bidder="Dana"):
    return {
        "id": bid_id,
        "listingId": "l1",
        "bidderId": f"u-{bid_id}",
        "amount": amount,
        "createdAt": "2026-03-01T10:00:00.000Z",
        "bidder": {"id": f"u-{bid_id}", "name": bidder},
    }


def seed(store):
    store.bids = [Bid.from_dict(raw_bid("b1", 100))]
    return store.bids[0]


@pytest.mark.asyncio
async def test_place_bid_prepends_new_bid(make_client):
    client = make_client({"PlaceBid": lambda variables: {"placeBid": raw_bid("b2", variables["input"]["amount"])}})
    store = BidsStore(client)
    existing = seed(store)

    bid = await store.place_bid("l1", 250.5)

    assert bid.amount == 250.5
    assert [b.id for b in store.bids] == ["b2", existing.id]
    assert client.calls == [("PlaceBid", {"input": {"listingId": "l1", "amount": 250.5}}, 0)]
    assert store.is_loading is False
    assert store.error is None


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -5])
async def test_place_bid_rejects_non_positive_amounts(make_client, amount):
    client = make_client()
    store = BidsStore(client)

    with pytest.raises(ValueError):
        await store.place_bid("l1", amount)

    assert client.calls == []


@pytest.mark.asyncio
async def test_place_bid_failure_sets_error_and_raises(make_client):
    client = make_client({"PlaceBid": GraphQLResponseError([{"message": "Bid too low"}])})
    store = BidsStore(client)

    with pytest.raises(GraphQLResponseError):
        await store.place_bid("l1", 5)

    assert store.error == "Bid too low"
    assert store.bids == []
    assert store.is_loading is False


@pytest.mark.asyncio
async def test_fetch_listing_bids_parses_bidders(make_client):
    client = make_client({"GetListingBids": {"listingBids": [raw_bid("b2", 300), raw_bid("b1", 200, "Sam")]}})
    store = BidsStore(client)

    await store.fetch_listing_bids("l1")

    assert [b.amount for b in store.bids] == [300, 200]
    assert store.bids[1].bidder.name == "Sam"
    assert store.bids[0].created_at.year == 2026
    assert client.calls == [("GetListingBids", {"listingId": "l1"}, 0)]


@pytest.mark.asyncio
async def test_fetch_failure_keeps_previous_bids(make_client):
    client = make_client({"GetPublicListingBids": GraphQLTransportError("offline")})
    store = BidsStore(client)
    seed(store)

    await store.fetch_public_listing_bids("l1")

    assert [b.id for b in store.bids] == ["b1"]
    assert store.error == "offline"


@pytest.mark.asyncio
async def test_fetch_my_bids(make_client):
    client = make_client({"GetMyBids": {"myBids": [raw_bid("b9", 42)]}})
    store = BidsStore(client)

    await store.fetch_my_bids()

    assert [b.id for b in store.my_bids] == ["b9"]
    assert store.bids == []


@pytest.mark.asyncio
async def test_fetch_highest_bid_uses_short_cache(make_client):
    client = make_client({"GetHighestBid": {"highestBid": raw_bid("b3", 999)}})
    store = BidsStore(client)

    await store.fetch_highest_bid("l1")

    assert store.highest_bid.amount == 999
    assert client.calls == [("GetHighestBid", {"listingId": "l1"}, 30)]


@pytest.mark.asyncio
async def test_fetch_highest_bid_none_and_errors(make_client):
    store = BidsStore(make_client({"GetHighestBid": {"highestBid": None}}))
    await store.fetch_highest_bid("l1")
    assert store.highest_bid is None

    failing = BidsStore(make_client({"GetHighestBid": GraphQLTransportError("offline")}))
    await failing.fetch_highest_bid("l1")
    assert failing.highest_bid is None
    assert failing.error is None


@pytest.mark.asyncio
async def test_clear_bids(make_client):
    store = BidsStore(make_client())
    seed(store)
    store.error = "stale"

    store.clear_bids()

    assert store.bids == []
    assert store.my_bids == []
    assert store.highest_bid is None
    assert store.error is None


@pytest.mark.asyncio
async def test_place_bid_without_bid_in_response_fails_cleanly(make_client):
    store = BidsStore(make_client({"PlaceBid": {"placeBid": None}}))
    existing = seed(store)

    with pytest.raises(GraphQLResponseError):
        await store.place_bid("l1", 50)

    assert store.is_loading is False
    assert store.error == "No placeBid in response"
    assert store.bids == [existing]
