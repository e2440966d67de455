"""Listing search commands."""
from __future__ import annotations

from typing import Optional

import discord
from discord import app_commands

from souq_client.bot.embeds import build_categories_embed, build_error_embed, build_listings_embed
from souq_client.data.graphql_client import GraphQLClient
from souq_client.data.session_cache import SessionCache
from souq_client.stores.categories import CategoriesStore
from souq_client.stores.listings import ListingsStore


class ListingCommands(app_commands.Group):
    """Search results are per invocation; categories and aggregations are shared."""

    def __init__(
        self,
        client: GraphQLClient,
        categories: CategoriesStore,
        session_cache: SessionCache,
    ) -> None:
        super().__init__(name="listings", description="Browse marketplace listings")
        self.client = client
        self.categories = categories
        self.session_cache = session_cache

    @app_commands.command(name="categories", description="List active categories")
    async def list_categories(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer()
        await self.categories.fetch_categories()
        if self.categories.error:
            await interaction.followup.send(
                embed=build_error_embed("Categories", self.categories.error)
            )
            return
        await interaction.followup.send(embed=build_categories_embed(self.categories.categories))

    @app_commands.command(name="search", description="Search active listings")
    @app_commands.describe(
        query="Words to search for",
        category="Category slug, see /listings categories",
        page="Result page",
    )
    async def search(
        self,
        interaction: discord.Interaction,
        query: str = "",
        category: Optional[str] = None,
        page: app_commands.Range[int, 1, 50] = 1,
    ) -> None:
        await interaction.response.defer()
        if category:
            await self.categories.initialize_categories()
            if self.categories.get_category_by_slug(category) is None:
                await interaction.followup.send(
                    embed=build_error_embed("Listings", f"Unknown category `{category}`.")
                )
                return

        store = ListingsStore(self.client, self.session_cache)
        store.set_filters(search=query.strip(), categoryId=category)
        store.set_pagination(page=page)
        await store.fetch_listings(view_type="list")
        if store.error:
            await interaction.followup.send(embed=build_error_embed("Listings", store.error))
            return

        title = f"Listings: {query}" if query else "Listings"
        await interaction.followup.send(
            embed=build_listings_embed(title, store.listings, store.pagination.total)
        )


def setup(
    tree: app_commands.CommandTree,
    client: GraphQLClient,
    categories: CategoriesStore,
    session_cache: SessionCache,
) -> None:
    tree.add_command(ListingCommands(client, categories, session_cache))
