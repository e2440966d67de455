"""Data models mirrored from the marketplace GraphQL API."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 3

Timestamp = Union[str, date, datetime, None]


def parse_timestamp(value: Timestamp) -> Optional[datetime]:
    """Parse an API timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (a trailing ``Z`` included), dates, datetimes or
    ``None``. Naive values are treated as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Bidder:
    id: str
    name: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Bidder:
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            email=data.get("email") or "",
        )


@dataclass
class ListingSummary:
    """Listing as embedded in wishlist, bid and thread payloads."""

    id: str
    title: str = ""
    price_minor: int = 0
    status: str = ""
    image_keys: list[str] = field(default_factory=list)
    wishlist_count: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ListingSummary:
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            price_minor=_int(data.get("priceMinor")),
            status=data.get("status") or "",
            image_keys=list(data.get("imageKeys") or []),
            wishlist_count=_int(data.get("wishlistCount")),
        )


@dataclass
class Bid:
    """A monetary offer against a listing with bidding enabled."""

    id: str
    listing_id: str
    bidder_id: str
    amount: float  # USD
    created_at: Optional[datetime] = None
    bidder: Optional[Bidder] = None
    listing: Optional[ListingSummary] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Bid:
        bidder = data.get("bidder")
        listing = data.get("listing")
        return cls(
            id=str(data["id"]),
            listing_id=str(data.get("listingId") or ""),
            bidder_id=str(data.get("bidderId") or ""),
            amount=float(data.get("amount") or 0),
            created_at=parse_timestamp(data.get("createdAt")),
            bidder=Bidder.from_dict(bidder) if bidder else None,
            listing=ListingSummary.from_dict(listing) if listing else None,
        )


@dataclass
class ChatThread:
    id: str
    listing_id: str = ""
    buyer_id: str = ""
    seller_id: str = ""
    last_message_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatThread:
        return cls(
            id=str(data["id"]),
            listing_id=str(data.get("listingId") or ""),
            buyer_id=str(data.get("buyerId") or ""),
            seller_id=str(data.get("sellerId") or ""),
            last_message_at=parse_timestamp(data.get("lastMessageAt")),
        )


@dataclass
class ChatMessage:
    id: str
    thread_id: str = ""
    sender_id: str = ""
    text: Optional[str] = None
    image_key: Optional[str] = None
    status: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatMessage:
        return cls(
            id=str(data["id"]),
            thread_id=str(data.get("threadId") or ""),
            sender_id=str(data.get("senderId") or ""),
            text=data.get("text"),
            image_key=data.get("imageKey"),
            status=data.get("status") or "",
            created_at=parse_timestamp(data.get("createdAt")),
        )


@dataclass
class BlockedUser:
    id: str
    blocked_user_id: str
    blocked_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BlockedUser:
        return cls(
            id=str(data["id"]),
            blocked_user_id=str(data["blockedUserId"]),
            blocked_at=parse_timestamp(data.get("blockedAt")),
        )


@dataclass
class ImageUploadUrl:
    upload_url: str
    asset_key: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ImageUploadUrl:
        return cls(upload_url=data["uploadUrl"], asset_key=data["assetKey"])


@dataclass
class CampaignPackage:
    """One purchased package inside a campaign's package breakdown."""

    package_id: str
    placement: str
    package_name: str = ""
    ad_type: str = ""
    format: str = ""
    base_price: float = 0.0
    duration_days: int = 0
    start_date: Optional[datetime] = None  # None for ASAP packages
    end_date: Optional[datetime] = None
    is_asap: bool = False
    desktop_media_url: str = ""
    mobile_media_url: str = ""
    click_url: Optional[str] = None
    open_in_new_tab: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CampaignPackage:
        package_data = data.get("packageData") or {}
        return cls(
            package_id=str(data.get("packageId") or ""),
            placement=package_data.get("placement") or "",
            package_name=package_data.get("packageName") or "",
            ad_type=package_data.get("adType") or "",
            format=package_data.get("format") or "",
            base_price=float(package_data.get("basePrice") or 0),
            duration_days=_int(package_data.get("durationDays")),
            start_date=parse_timestamp(data.get("startDate")),
            end_date=parse_timestamp(data.get("endDate")),
            is_asap=bool(data.get("isAsap", False)),
            desktop_media_url=data.get("desktopMediaUrl") or "",
            mobile_media_url=data.get("mobileMediaUrl") or "",
            click_url=data.get("clickUrl"),
            open_in_new_tab=bool(data.get("openInNewTab", False)),
        )


@dataclass
class PackageBreakdown:
    packages: list[CampaignPackage] = field(default_factory=list)
    total_before_discount: float = 0.0
    total_after_discount: float = 0.0
    discount_percentage: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PackageBreakdown:
        return cls(
            packages=[CampaignPackage.from_dict(p) for p in data.get("packages") or []],
            total_before_discount=float(data.get("totalBeforeDiscount") or 0),
            total_after_discount=float(data.get("totalAfterDiscount") or 0),
            discount_percentage=data.get("discountPercentage"),
        )


@dataclass
class AdCampaign:
    """An advertiser campaign as returned by the active ads query."""

    id: str
    campaign_name: str = ""
    description: str = ""
    status: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    priority: Optional[int] = None  # 1-5
    pacing_mode: Optional[str] = None  # EVEN, ASAP, MANUAL
    impressions_purchased: int = 0
    impressions_delivered: int = 0
    package_breakdown: Optional[PackageBreakdown] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AdCampaign:
        breakdown = data.get("packageBreakdown")
        priority = data.get("priority")
        return cls(
            id=str(data["id"]),
            campaign_name=data.get("campaignName") or "",
            description=data.get("description") or "",
            status=data.get("status") or "",
            start_date=parse_timestamp(data.get("startDate")),
            end_date=parse_timestamp(data.get("endDate")),
            priority=_int(priority) if priority is not None else None,
            pacing_mode=data.get("pacingMode"),
            impressions_purchased=_int(data.get("impressionsPurchased")),
            impressions_delivered=_int(data.get("impressionsDelivered")),
            package_breakdown=PackageBreakdown.from_dict(breakdown) if breakdown else None,
        )


@dataclass
class AdPackageInstance:
    """A single campaign package eligible for display in one placement."""

    campaign_id: str
    campaign_package_id: str
    campaign_name: str
    impressions_purchased: int
    impressions_delivered: int
    end_date: datetime
    priority: int = DEFAULT_PRIORITY
    pacing_mode: Optional[str] = None
    package: Optional[CampaignPackage] = None

    @property
    def impressions_remaining(self) -> int:
        return self.impressions_purchased - self.impressions_delivered


@dataclass
class AdSenseSlot:
    id: str
    enabled: bool = False


@dataclass
class AdSenseSettings:
    """Fallback ad network configuration."""

    client_id: Optional[str] = None
    image_slot: Optional[AdSenseSlot] = None
    video_slot: Optional[AdSenseSlot] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AdSenseSettings:
        def slot(raw: Optional[Mapping[str, Any]]) -> Optional[AdSenseSlot]:
            if not raw:
                return None
            return AdSenseSlot(id=raw.get("id") or "", enabled=bool(raw.get("enabled")))

        return cls(
            client_id=data.get("clientId"),
            image_slot=slot(data.get("imageSlot")),
            video_slot=slot(data.get("videoSlot")),
        )


@dataclass
class AdPackage:
    """A purchasable ad package from the pricing catalogue."""

    id: str
    name: str = ""
    description: str = ""
    ad_type: str = ""
    placement: str = ""
    format: str = ""
    base_price: float = 0.0
    duration_days: int = 0
    impression_limit: int = 0
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AdPackage:
        return cls(
            id=str(data["id"]),
            name=data.get("packageName") or data.get("name") or "",
            description=data.get("description") or "",
            ad_type=data.get("adType") or "",
            placement=data.get("placement") or "",
            format=data.get("format") or "",
            base_price=float(data.get("basePrice") or 0),
            duration_days=_int(data.get("durationDays")),
            impression_limit=_int(data.get("impressionLimit")),
            is_active=bool(data.get("isActive", True)),
        )


@dataclass
class Category:
    id: str
    name: str = ""
    name_ar: str = ""
    slug: str = ""
    is_active: bool = True
    icon: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Category:
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            name_ar=data.get("nameAr") or "",
            slug=data.get("slug") or "",
            is_active=bool(data.get("isActive", True)),
            icon=data.get("icon") or "",
        )


@dataclass
class Price:
    value: float
    currency: str = "USD"


def _parse_specs(raw: Any, listing_id: str) -> dict[str, Any]:
    """Specs arrive as a JSON string; anything unparseable becomes empty."""
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"Failed to parse specs for listing {listing_id}")
        return {}
    return parsed if isinstance(parsed, dict) else {}


@dataclass
class Listing:
    """A marketplace listing as returned by ``listingsSearch``."""

    id: str
    title: str = ""
    description: str = ""
    price_minor: int = 0
    status: str = ""
    image_keys: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    category_id: str = ""
    seller_type: str = ""
    city: str = ""
    province: str = ""
    specs: dict[str, Any] = field(default_factory=dict)
    specs_display: dict[str, Any] = field(default_factory=dict)
    prices: list[Price] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Listing:
        listing_id = str(data["id"])
        price_minor = _int(data.get("priceMinor"))
        specs = _parse_specs(data.get("specs"), listing_id)
        prices = [
            Price(value=float(p.get("value") or 0), currency=p.get("currency") or "USD")
            for p in data.get("prices") or []
        ] or [Price(value=price_minor / 100)]
        return cls(
            id=listing_id,
            title=data.get("title") or "",
            description=data.get("description") or "",
            price_minor=price_minor,
            status=data.get("status") or "",
            image_keys=list(data.get("imageKeys") or []),
            created_at=parse_timestamp(data.get("createdAt")),
            category_id=str(data.get("categoryId") or ""),
            seller_type=data.get("sellerType") or "",
            city=specs.get("location") or data.get("city") or "",
            province=data.get("province") or "",
            specs=specs,
            specs_display=_parse_specs(data.get("specsDisplay"), listing_id),
            prices=prices,
        )
