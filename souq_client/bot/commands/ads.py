"""Ad slot preview commands."""
from __future__ import annotations

import discord
from discord import app_commands

from souq_client.ads.slot import AdSlot
from souq_client.bot.embeds import build_ad_embed
from souq_client.config import config
from souq_client.stores.ads import AdsStore


class AdCommands(app_commands.Group):
    def __init__(self, store: AdsStore) -> None:
        super().__init__(name="ad", description="Marketplace ads")
        self.store = store

    @app_commands.command(name="show", description="Preview the ad a placement would display")
    @app_commands.describe(placement="Placement key, e.g. homepage-top")
    async def show(self, interaction: discord.Interaction, placement: str = "") -> None:
        await interaction.response.defer()
        slot = AdSlot(placement or config.default_ad_placement, self.store)
        decision = await slot.resolve()
        await interaction.followup.send(embed=build_ad_embed(decision, slot.placement))


def setup(tree: app_commands.CommandTree, store: AdsStore) -> None:
    tree.add_command(AdCommands(store))
