"""Main Discord bot for the Souq marketplace."""

from __future__ import annotations

import logging
from typing import Optional

import discord
import httpx
from discord import app_commands

from souq_client.bot.accounts import AccountStore, UserSessions
from souq_client.config import config
from souq_client.data.graphql_client import USER_AGENT, GraphQLClient
from souq_client.data.response_store import ResponseStore
from souq_client.data.session_cache import SessionCache
from souq_client.stores.ads import AdsStore
from souq_client.stores.bids import BidsStore
from souq_client.stores.categories import CategoriesStore

logger = logging.getLogger(__name__)


class SouqBot(discord.Client):
    """Discord client exposing ads, listings, bids and the wishlist as slash commands.

    Public data goes through one GraphQL client with the bot's token.
    Bids and wishlist changes go through per-user clients carrying the token
    each user linked with ``/account link``.
    """

    def __init__(self) -> None:
        intents = discord.Intents.default()
        intents.guilds = True

        super().__init__(intents=intents)

        self.tree = app_commands.CommandTree(self)
        self.http_client: Optional[httpx.AsyncClient] = None
        self.graphql: Optional[GraphQLClient] = None
        self.sessions: Optional[UserSessions] = None
        self.ads: Optional[AdsStore] = None

    async def setup_hook(self) -> None:
        """Create the shared clients and stores, then register commands."""
        self.http_client = httpx.AsyncClient(
            timeout=config.request_timeout_seconds,
            headers={"User-Agent": USER_AGENT},
        )
        self.graphql = GraphQLClient(client=self.http_client, response_store=ResponseStore())
        self.graphql.start_cleanup()
        self.sessions = UserSessions(AccountStore(), http=self.http_client)
        session_cache = SessionCache()

        self.ads = AdsStore(self.graphql)

        from souq_client.bot.commands import account, ads, bids, listings, wishlist

        account.setup(self.tree, self.sessions)
        ads.setup(self.tree, self.ads)
        bids.setup(self.tree, BidsStore(self.graphql), self.sessions)
        listings.setup(
            self.tree, self.graphql, CategoriesStore(self.graphql, session_cache), session_cache
        )
        wishlist.setup(self.tree, self.sessions)

        if config.discord_guild_id:
            guild = discord.Object(id=config.discord_guild_id)
            self.tree.copy_global_to(guild=guild)
            await self.tree.sync(guild=guild)
            logger.info(f"Synced commands to guild {config.discord_guild_id}")
        else:
            await self.tree.sync()
            logger.info("Synced commands globally")

    async def on_ready(self) -> None:
        logger.info(f"Logged in as {self.user} (ID: {self.user.id})")
        logger.info(f"Connected to {len(self.guilds)} guilds")

    async def close(self) -> None:
        """Release HTTP resources before disconnecting."""
        if self.ads:
            await self.ads.close()
        if self.sessions:
            await self.sessions.close()
        if self.graphql:
            await self.graphql.close()
        if self.http_client:
            await self.http_client.aclose()
        await super().close()


def run_bot() -> None:
    """Run the bot until interrupted."""
    bot = SouqBot()
    bot.run(config.discord_token, log_handler=None)
