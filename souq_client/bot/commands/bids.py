"""Bidding commands."""
from __future__ import annotations

import discord
from discord import app_commands

from souq_client.bot.accounts import UserSessions
from souq_client.bot.commands.account import LINK_PROMPT
from souq_client.bot.embeds import (
    build_bids_embed,
    build_error_embed,
    build_highest_bid_embed,
    build_success_embed,
    format_amount,
)
from souq_client.stores.base import STORE_ERRORS
from souq_client.stores.bids import BidsStore


class BidCommands(app_commands.Group):
    """Public bid lookups use the bot's store; placing a bid uses the caller's account."""

    def __init__(self, store: BidsStore, sessions: UserSessions) -> None:
        super().__init__(name="bids", description="Listing bids")
        self.store = store
        self.sessions = sessions

    @app_commands.command(name="list", description="Latest bids on a listing")
    @app_commands.describe(listing_id="Listing id")
    async def list_bids(self, interaction: discord.Interaction, listing_id: str) -> None:
        await interaction.response.defer()
        await self.store.fetch_public_listing_bids(listing_id)
        if self.store.error:
            await interaction.followup.send(embed=build_error_embed("Bids", self.store.error))
            return
        await interaction.followup.send(embed=build_bids_embed(listing_id, self.store.bids))

    @app_commands.command(name="highest", description="Current highest bid on a listing")
    @app_commands.describe(listing_id="Listing id")
    async def highest(self, interaction: discord.Interaction, listing_id: str) -> None:
        await interaction.response.defer()
        await self.store.fetch_highest_bid(listing_id)
        await interaction.followup.send(
            embed=build_highest_bid_embed(listing_id, self.store.highest_bid)
        )

    @app_commands.command(name="place", description="Place a bid on a listing")
    @app_commands.describe(listing_id="Listing id", amount="Bid amount in USD")
    async def place(self, interaction: discord.Interaction, listing_id: str, amount: float) -> None:
        if amount <= 0:
            await interaction.response.send_message("Amount must be positive.", ephemeral=True)
            return
        session = self.sessions.get(interaction.user.id)
        if session is None:
            await interaction.response.send_message(LINK_PROMPT, ephemeral=True)
            return
        await interaction.response.defer(ephemeral=True)
        try:
            bid = await session.bids.place_bid(listing_id, amount)
        except STORE_ERRORS as exc:
            await interaction.followup.send(
                embed=build_error_embed("Bid rejected", str(exc)), ephemeral=True
            )
            return
        await interaction.followup.send(
            embed=build_success_embed(
                "Bid placed", f"{format_amount(bid.amount)} on listing {listing_id}"
            ),
            ephemeral=True,
        )


def setup(tree: app_commands.CommandTree, store: BidsStore, sessions: UserSessions) -> None:
    tree.add_command(BidCommands(store, sessions))
