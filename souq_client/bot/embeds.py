"""Discord embed builders for the Souq bot."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import discord

from souq_client.ads.slot import AdSenseDecision, CustomAdDecision, SlotDecision
from souq_client.data.models import Bid, Category, Listing, ListingSummary

COLORS = {
    "ad": discord.Color.purple(),
    "adsense": discord.Color.light_grey(),
    "bids": discord.Color.gold(),
    "wishlist": discord.Color.teal(),
    "listings": discord.Color.dark_teal(),
    "success": discord.Color.green(),
    "error": discord.Color.red(),
    "info": discord.Color.blue(),
}


def format_amount(amount: float) -> str:
    return f"${amount:,.2f}"


def build_ad_embed(decision: Optional[SlotDecision], placement: str) -> discord.Embed:
    """Build an embed describing what an ad slot would show."""
    if isinstance(decision, CustomAdDecision):
        instance = decision.instance
        package = instance.package
        embed = discord.Embed(
            title=instance.campaign_name or "Sponsored",
            url=package.click_url if package and package.click_url else None,
            color=COLORS["ad"],
        )
        embed.add_field(
            name="Impressions",
            value=f"{instance.impressions_delivered:,} / {instance.impressions_purchased:,}",
            inline=True,
        )
        embed.add_field(name="Priority", value=str(instance.priority), inline=True)
        embed.add_field(
            name="Ends",
            value=instance.end_date.strftime("%Y-%m-%d"),
            inline=True,
        )
        if package and package.desktop_media_url:
            embed.set_image(url=package.desktop_media_url)
        embed.set_footer(text=f"Placement: {placement} | Package: {instance.campaign_package_id}")
        return embed

    if isinstance(decision, AdSenseDecision):
        embed = discord.Embed(
            title="Ad network fallback",
            description=f"Client `{decision.client_id}`, slot `{decision.slot_id}`",
            color=COLORS["adsense"],
        )
        embed.set_footer(text=f"Placement: {placement}")
        return embed

    return discord.Embed(
        title="No ad",
        description=f"Nothing to show for placement `{placement}`.",
        color=COLORS["info"],
    )


def build_bids_embed(listing_id: str, bids: list[Bid], limit: int = 10) -> discord.Embed:
    """Build an embed listing the latest bids on a listing."""
    embed = discord.Embed(
        title=f"Bids on listing {listing_id}",
        color=COLORS["bids"],
        timestamp=datetime.now(timezone.utc),
    )
    if not bids:
        embed.description = "No bids yet."
        return embed

    lines = []
    for bid in bids[:limit]:
        who = bid.bidder.name if bid.bidder and bid.bidder.name else bid.bidder_id
        when = bid.created_at.strftime("%Y-%m-%d %H:%M") if bid.created_at else "?"
        lines.append(f"**{format_amount(bid.amount)}** by {who} ({when})")
    embed.description = "\n".join(lines)
    if len(bids) > limit:
        embed.set_footer(text=f"Showing {limit} of {len(bids)} bids")
    return embed


def build_highest_bid_embed(listing_id: str, bid: Optional[Bid]) -> discord.Embed:
    if bid is None:
        return discord.Embed(
            title=f"Highest bid on listing {listing_id}",
            description="No bids yet.",
            color=COLORS["bids"],
        )
    embed = discord.Embed(
        title=f"Highest bid on listing {listing_id}",
        description=f"**{format_amount(bid.amount)}**",
        color=COLORS["bids"],
    )
    if bid.bidder and bid.bidder.name:
        embed.add_field(name="Bidder", value=bid.bidder.name, inline=True)
    return embed


def build_wishlist_embed(listings: list[ListingSummary]) -> discord.Embed:
    embed = discord.Embed(title="Wishlist", color=COLORS["wishlist"])
    if not listings:
        embed.description = "Your wishlist is empty."
        return embed
    embed.description = "\n".join(
        f"`{listing.id}` {listing.title or 'Untitled'}" for listing in listings
    )
    embed.set_footer(text=f"{len(listings)} saved listings")
    return embed


def build_listings_embed(title: str, listings: list[Listing], total: int) -> discord.Embed:
    embed = discord.Embed(title=title, color=COLORS["listings"])
    if not listings:
        embed.description = "No listings match."
        return embed
    lines = []
    for listing in listings:
        price = listing.prices[0] if listing.prices else None
        price_text = f"{price.value:,.2f} {price.currency}" if price else ""
        place = f" ({listing.city})" if listing.city else ""
        lines.append(f"`{listing.id}` {listing.title or 'Untitled'} {price_text}{place}".rstrip())
    embed.description = "\n".join(lines)
    embed.set_footer(text=f"Showing {len(listings)} of {total}")
    return embed


def build_categories_embed(categories: list[Category]) -> discord.Embed:
    embed = discord.Embed(title="Categories", color=COLORS["listings"])
    active = [c for c in categories if c.is_active]
    embed.description = "\n".join(f"`{c.slug}` {c.name}" for c in active) or "No categories."
    return embed


def build_error_embed(title: str, message: str) -> discord.Embed:
    """Build an error embed."""
    return discord.Embed(
        title=f"Error: {title}",
        description=message,
        color=COLORS["error"],
        timestamp=datetime.now(timezone.utc),
    )


def build_success_embed(title: str, message: str) -> discord.Embed:
    """Build a success embed."""
    return discord.Embed(
        title=title,
        description=message,
        color=COLORS["success"],
        timestamp=datetime.now(timezone.utc),
    )
