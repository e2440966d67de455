"""Wishlist commands."""
from __future__ import annotations

import discord
from discord import app_commands

from souq_client.bot.accounts import UserSessions
from souq_client.bot.commands.account import LINK_PROMPT
from souq_client.bot.embeds import build_error_embed, build_success_embed, build_wishlist_embed
from souq_client.stores.base import STORE_ERRORS


class WishlistCommands(app_commands.Group):
    def __init__(self, sessions: UserSessions) -> None:
        super().__init__(name="wishlist", description="Saved listings")
        self.sessions = sessions

    @app_commands.command(name="show", description="Show saved listings")
    async def show(self, interaction: discord.Interaction) -> None:
        session = self.sessions.get(interaction.user.id)
        if session is None:
            await interaction.response.send_message(LINK_PROMPT, ephemeral=True)
            return
        await interaction.response.defer(ephemeral=True)
        store = session.wishlist
        await store.load_my_wishlist()
        if store.error:
            await interaction.followup.send(
                embed=build_error_embed("Wishlist", store.error), ephemeral=True
            )
            return
        await interaction.followup.send(embed=build_wishlist_embed(store.listings), ephemeral=True)

    @app_commands.command(name="toggle", description="Add or remove a listing")
    @app_commands.describe(listing_id="Listing id")
    async def toggle(self, interaction: discord.Interaction, listing_id: str) -> None:
        session = self.sessions.get(interaction.user.id)
        if session is None:
            await interaction.response.send_message(LINK_PROMPT, ephemeral=True)
            return
        await interaction.response.defer(ephemeral=True)
        try:
            saved = await session.wishlist.toggle_wishlist(listing_id)
        except STORE_ERRORS as exc:
            await interaction.followup.send(
                embed=build_error_embed("Wishlist", str(exc)), ephemeral=True
            )
            return
        message = "Added to wishlist." if saved else "Removed from wishlist."
        await interaction.followup.send(embed=build_success_embed(listing_id, message), ephemeral=True)


def setup(tree: app_commands.CommandTree, sessions: UserSessions) -> None:
    tree.add_command(WishlistCommands(sessions))
