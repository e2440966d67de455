"""Account linking commands."""
from __future__ import annotations

import discord
from discord import app_commands

from souq_client.bot.accounts import UserSessions
from souq_client.bot.embeds import build_success_embed

LINK_PROMPT = "Link your Souq account first with `/account link`."


class AccountCommands(app_commands.Group):
    def __init__(self, sessions: UserSessions) -> None:
        super().__init__(name="account", description="Your Souq account")
        self.sessions = sessions

    @app_commands.command(name="link", description="Link your Souq API token")
    @app_commands.describe(token="API token from your Souq account settings")
    async def link(self, interaction: discord.Interaction, token: str) -> None:
        token = token.strip()
        if not token:
            await interaction.response.send_message("Token must not be empty.", ephemeral=True)
            return
        await self.sessions.forget(interaction.user.id)
        self.sessions.accounts.link(interaction.user.id, token)
        await interaction.response.send_message(
            embed=build_success_embed("Account linked", "Bids and wishlist now use your account."),
            ephemeral=True,
        )

    @app_commands.command(name="unlink", description="Forget your Souq API token")
    async def unlink(self, interaction: discord.Interaction) -> None:
        await self.sessions.forget(interaction.user.id)
        if self.sessions.accounts.unlink(interaction.user.id):
            await interaction.response.send_message("Account unlinked.", ephemeral=True)
        else:
            await interaction.response.send_message("No account was linked.", ephemeral=True)


def setup(tree: app_commands.CommandTree, sessions: UserSessions) -> None:
    tree.add_command(AccountCommands(sessions))
