import pytest

from souq_client.data.graphql_client import GraphQLTransportError
from souq_client.stores.wishlist import WishlistStore

WISHLIST = {
    "myWishlist": [
        {"id": "l1", "title": "Road bike", "priceMinor": 45000, "status": "ACTIVE"},
        {"id": "l2", "title": "Desk lamp", "priceMinor": 1500, "status": "ACTIVE"},
    ]
}


@pytest.mark.asyncio
async def test_load_my_wishlist(make_client):
    client = make_client({"MyWishlist": WISHLIST})
    store = WishlistStore(client)

    await store.load_my_wishlist()

    assert store.wishlist_ids == {"l1", "l2"}
    assert [listing.title for listing in store.listings] == ["Road bike", "Desk lamp"]
    assert store.is_in_wishlist("l1")
    assert not store.is_in_wishlist("l3")
    assert client.calls == [("MyWishlist", {}, 120)]


@pytest.mark.asyncio
async def test_load_failure_sets_error(make_client):
    store = WishlistStore(make_client({"MyWishlist": GraphQLTransportError("offline")}))

    await store.load_my_wishlist()

    assert store.error == "offline"
    assert store.wishlist_ids == set()


@pytest.mark.asyncio
async def test_add_invalidates_cached_wishlist(make_client):
    client = make_client({"AddToWishlist": {"addToWishlist": True}})
    store = WishlistStore(client)

    await store.add_to_wishlist("l3")

    assert store.is_in_wishlist("l3")
    assert client.calls == [("AddToWishlist", {"listingId": "l3", "isArchived": False}, 0)]
    assert client.invalidated == ["myWishlist"]


@pytest.mark.asyncio
async def test_add_failure_rolls_back(make_client):
    client = make_client({"AddToWishlist": GraphQLTransportError("offline")})
    store = WishlistStore(client)

    with pytest.raises(GraphQLTransportError):
        await store.add_to_wishlist("l3")

    assert not store.is_in_wishlist("l3")
    assert store.error == "offline"
    assert client.invalidated == []


@pytest.mark.asyncio
async def test_remove_failure_restores_membership(make_client):
    client = make_client({"MyWishlist": WISHLIST, "RemoveFromWishlist": GraphQLTransportError("offline")})
    store = WishlistStore(client)
    await store.load_my_wishlist()

    with pytest.raises(GraphQLTransportError):
        await store.remove_from_wishlist("l1")

    assert store.is_in_wishlist("l1")
    assert [listing.id for listing in store.listings] == ["l1", "l2"]


@pytest.mark.asyncio
async def test_remove_drops_listing(make_client):
    client = make_client({"MyWishlist": WISHLIST, "RemoveFromWishlist": {"removeFromWishlist": True}})
    store = WishlistStore(client)
    await store.load_my_wishlist()

    await store.remove_from_wishlist("l1", is_archived=True)

    assert store.wishlist_ids == {"l2"}
    assert [listing.id for listing in store.listings] == ["l2"]
    assert client.calls[-1] == ("RemoveFromWishlist", {"listingId": "l1", "isArchived": True}, 0)


@pytest.mark.asyncio
async def test_toggle_flips_membership(make_client):
    client = make_client(
        {
            "AddToWishlist": {"addToWishlist": True},
            "RemoveFromWishlist": {"removeFromWishlist": True},
        }
    )
    store = WishlistStore(client)

    assert await store.toggle_wishlist("l9") is True
    assert await store.toggle_wishlist("l9") is False
    assert client.operations() == ["AddToWishlist", "RemoveFromWishlist"]
