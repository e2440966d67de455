from datetime import datetime, timedelta, timezone

import pytest

from souq_client.bot.accounts import AccountStore, UserSessions
from souq_client.bot.commands.account import LINK_PROMPT, AccountCommands
from souq_client.bot.commands.ads import AdCommands
from souq_client.bot.commands.bids import BidCommands
from souq_client.bot.commands.listings import ListingCommands
from souq_client.bot.commands.wishlist import WishlistCommands
from souq_client.data.graphql_client import GraphQLResponseError
from souq_client.data.models import AdPackageInstance
from souq_client.data.session_cache import SessionCache
from souq_client.stores.bids import BidsStore
from souq_client.stores.categories import CategoriesStore


class FakeResponse:
    def __init__(self):
        self.deferred = None
        self.messages = []

    async def defer(self, ephemeral=False):
        self.deferred = ephemeral

    async def send_message(self, content=None, embed=None, ephemeral=False):
        self.messages.append((content or embed, ephemeral))


class FakeFollowup:
    def __init__(self):
        self.sent = []

    async def send(self, content=None, embed=None, ephemeral=False):
        self.sent.append((embed, ephemeral))


class FakeUser:
    def __init__(self, user_id):
        self.id = user_id


class FakeInteraction:
    def __init__(self, user_id=1):
        self.user = FakeUser(user_id)
        self.response = FakeResponse()
        self.followup = FakeFollowup()


ALICE = 101
BOB = 202


class LinkedUsers:
    """UserSessions backed by one DummyClient per linked token."""

    def __init__(self, path, make_client):
        self.make_client = make_client
        self.responses = {}
        self.clients = {}
        self.sessions = UserSessions(AccountStore(path=path), client_factory=self._client)

    def _client(self, token):
        client = self.make_client(self.responses.get(token, {}))
        self.clients[token] = client
        return client

    def link(self, user_id, token, responses=None):
        self.sessions.accounts.link(user_id, token)
        self.responses[token] = responses or {}


@pytest.fixture
def users(tmp_path, make_client):
    return LinkedUsers(tmp_path / "accounts.json", make_client)


@pytest.mark.asyncio
async def test_place_rejects_non_positive_amount(make_client, users):
    client = make_client()
    group = BidCommands(BidsStore(client), users.sessions)
    interaction = FakeInteraction()

    await group.place.callback(group, interaction, "l1", 0)

    assert interaction.response.messages == [("Amount must be positive.", True)]
    assert client.calls == []


@pytest.mark.asyncio
async def test_place_asks_unlinked_user_to_link(make_client, users):
    group = BidCommands(BidsStore(make_client()), users.sessions)
    interaction = FakeInteraction(ALICE)

    await group.place.callback(group, interaction, "l1", 10)

    assert interaction.response.messages == [(LINK_PROMPT, True)]
    assert interaction.followup.sent == []


@pytest.mark.asyncio
async def test_place_reports_backend_rejection(make_client, users):
    rejected = GraphQLResponseError([{"message": "Bidding closed"}])
    users.link(ALICE, "alice-token", {"PlaceBid": rejected})
    group = BidCommands(BidsStore(make_client()), users.sessions)
    interaction = FakeInteraction(ALICE)

    await group.place.callback(group, interaction, "l1", 10)

    embed, ephemeral = interaction.followup.sent[0]
    assert embed.title == "Error: Bid rejected"
    assert embed.description == "Bidding closed"
    assert ephemeral is True


@pytest.mark.asyncio
async def test_place_replies_when_server_returns_no_bid(make_client, users):
    users.link(ALICE, "alice-token", {"PlaceBid": {"placeBid": None}})
    group = BidCommands(BidsStore(make_client()), users.sessions)
    interaction = FakeInteraction(ALICE)

    await group.place.callback(group, interaction, "l1", 10)

    embed, _ = interaction.followup.sent[0]
    assert embed.title == "Error: Bid rejected"
    assert embed.description == "No placeBid in response"
    assert users.sessions.get(ALICE).bids.is_loading is False


@pytest.mark.asyncio
async def test_place_uses_the_callers_own_client(make_client, users):
    placed = {"placeBid": {"id": "b1", "listingId": "l1", "amount": 25}}
    users.link(ALICE, "alice-token", {"PlaceBid": placed})
    public = make_client()
    group = BidCommands(BidsStore(public), users.sessions)
    interaction = FakeInteraction(ALICE)

    await group.place.callback(group, interaction, "l1", 25)

    embed, _ = interaction.followup.sent[0]
    assert embed.title == "Bid placed"
    assert public.calls == []
    assert users.clients["alice-token"].operations() == ["PlaceBid"]


@pytest.mark.asyncio
async def test_list_bids_sends_embed(make_client, users):
    client = make_client({"GetPublicListingBids": {"publicListingBids": []}})
    group = BidCommands(BidsStore(client), users.sessions)
    interaction = FakeInteraction()

    await group.list_bids.callback(group, interaction, "l1")

    embed, _ = interaction.followup.sent[0]
    assert embed.title == "Bids on listing l1"
    assert embed.description == "No bids yet."


@pytest.mark.asyncio
async def test_wishlist_toggle_reports_new_state(users):
    users.link(ALICE, "alice-token", {"AddToWishlist": {"addToWishlist": True}})
    group = WishlistCommands(users.sessions)
    interaction = FakeInteraction(ALICE)

    await group.toggle.callback(group, interaction, "l5")

    embed, ephemeral = interaction.followup.sent[0]
    assert embed.title == "l5"
    assert embed.description == "Added to wishlist."
    assert ephemeral is True


@pytest.mark.asyncio
async def test_wishlists_are_kept_per_user(users):
    for user_id, token in ((ALICE, "alice-token"), (BOB, "bob-token")):
        users.link(user_id, token, {"AddToWishlist": {"addToWishlist": True}})
    group = WishlistCommands(users.sessions)

    alice = FakeInteraction(ALICE)
    bob = FakeInteraction(BOB)
    await group.toggle.callback(group, alice, "l5")
    await group.toggle.callback(group, bob, "l5")

    assert alice.followup.sent[0][0].description == "Added to wishlist."
    assert bob.followup.sent[0][0].description == "Added to wishlist."
    assert users.sessions.get(ALICE).wishlist is not users.sessions.get(BOB).wishlist
    assert users.clients["bob-token"].operations() == ["AddToWishlist"]


@pytest.mark.asyncio
async def test_wishlist_show_asks_unlinked_user_to_link(users):
    group = WishlistCommands(users.sessions)
    interaction = FakeInteraction(BOB)

    await group.show.callback(group, interaction)

    assert interaction.response.messages == [(LINK_PROMPT, True)]


@pytest.mark.asyncio
async def test_account_link_and_unlink(users):
    group = AccountCommands(users.sessions)
    interaction = FakeInteraction(ALICE)

    await group.link.callback(group, interaction, "  alice-token ")
    assert users.sessions.accounts.get_token(ALICE) == "alice-token"
    session = users.sessions.get(ALICE)

    interaction = FakeInteraction(ALICE)
    await group.unlink.callback(group, interaction)

    assert interaction.response.messages == [("Account unlinked.", True)]
    assert users.sessions.get(ALICE) is None
    assert session.client.closed is True


@pytest.mark.asyncio
async def test_account_link_rejects_blank_token(users):
    group = AccountCommands(users.sessions)
    interaction = FakeInteraction(ALICE)

    await group.link.callback(group, interaction, "   ")

    assert interaction.response.messages == [("Token must not be empty.", True)]
    assert users.sessions.accounts.get_token(ALICE) is None


class PreviewAdsStore:
    def __init__(self):
        self.impressions = []

    async def fetch_all_ads(self):
        return []

    def get_ads_by_placement(self, placement):
        return [
            AdPackageInstance(
                campaign_id="camp-1",
                campaign_package_id="p1",
                campaign_name="Spring sale",
                impressions_purchased=1000,
                impressions_delivered=10,
                end_date=datetime.now(timezone.utc) + timedelta(days=7),
            )
        ]

    async def fetch_adsense_settings(self):
        return None

    async def track_impression(self, campaign_id, campaign_package_id=None):
        self.impressions.append((campaign_id, campaign_package_id))


@pytest.mark.asyncio
async def test_ad_preview_does_not_count_an_impression():
    store = PreviewAdsStore()
    group = AdCommands(store)
    interaction = FakeInteraction()

    await group.show.callback(group, interaction, "homepage_hero")

    embed, _ = interaction.followup.sent[0]
    assert embed.title == "Spring sale"
    assert store.impressions == []


CATEGORIES = {
    "categories": [
        {"id": "c1", "name": "Cars", "slug": "cars", "isActive": True},
        {"id": "c2", "name": "Boats", "slug": "boats", "isActive": False},
    ]
}


@pytest.mark.asyncio
async def test_listings_search_in_category(tmp_path, make_client):
    client = make_client(
        {
            "GetCategories": CATEGORIES,
            "ListingsList": {"listingsSearch": [{"id": "l1", "title": "Golf", "priceMinor": 500000}]},
            "AggregationsOnly": {"listingsAggregations": {"totalResults": 1}},
        }
    )
    cache = SessionCache(path=tmp_path / "session.json")
    group = ListingCommands(client, CategoriesStore(client, cache), cache)
    interaction = FakeInteraction()

    await group.search.callback(group, interaction, "golf", "cars", 1)

    embed, _ = interaction.followup.sent[0]
    assert embed.title == "Listings: golf"
    assert "`l1` Golf 5,000.00 USD" in embed.description
    assert embed.footer.text == "Showing 1 of 1"
    assert client.calls[1][1]["filter"]["categoryId"] == "cars"


@pytest.mark.asyncio
async def test_listings_search_rejects_inactive_category(tmp_path, make_client):
    client = make_client({"GetCategories": CATEGORIES})
    cache = SessionCache(path=tmp_path / "session.json")
    group = ListingCommands(client, CategoriesStore(client, cache), cache)
    interaction = FakeInteraction()

    await group.search.callback(group, interaction, "", "boats", 1)

    embed, _ = interaction.followup.sent[0]
    assert embed.title == "Error: Listings"
    assert client.operations() == ["GetCategories"]
