"""Client-side state stores, one per domain."""

from souq_client.stores.ad_packages import AdPackagesStore
from souq_client.stores.admin_campaigns import AdminAdCampaignsStore
from souq_client.stores.ads import AdsStore
from souq_client.stores.bids import BidsStore
from souq_client.stores.categories import CategoriesStore
from souq_client.stores.chat import ChatStore
from souq_client.stores.listings import ListingsStore
from souq_client.stores.wishlist import WishlistStore

__all__ = [
    "AdPackagesStore",
    "AdminAdCampaignsStore",
    "AdsStore",
    "BidsStore",
    "CategoriesStore",
    "ChatStore",
    "ListingsStore",
    "WishlistStore",
]
