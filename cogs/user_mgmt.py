"""
User Management Cog
Profiles (points and daily challenge streak) and reviewer management
"""

import logging
from typing import Optional

import discord
from discord.ext import commands
from discord import app_commands

import config
from utils.embeds import error_embed
from utils.errors import ChallengeError
from utils.logic import format_streak_message
from utils.submissions import ensure_user_profile, get_user_profile

logger = logging.getLogger(__name__)


class UserManagementCog(commands.Cog):
    """User profile management commands"""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="profile", description="View points and streak")
    @app_commands.describe(user="Whose profile to show (default: you)")
    async def profile(self, interaction: discord.Interaction, user: Optional[discord.User] = None):
        target = user or interaction.user
        await interaction.response.defer()

        try:
            if target.id == interaction.user.id:
                profile = await ensure_user_profile(
                    self.bot.db, str(target.id), display_name=target.display_name
                )
            else:
                profile = await get_user_profile(self.bot.db, str(target.id))
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e))
            return

        if profile is None:
            await interaction.followup.send(
                embed=discord.Embed(
                    title="📭 No Data",
                    description=f"{target.display_name} hasn't taken part yet!",
                    color=config.COLOR_INFO
                )
            )
            return

        embed = discord.Embed(
            title=f"📊 Profile - {target.display_name}",
            description=format_streak_message(profile.daily_challenge_streak),
            color=config.COLOR_INFO
        )
        embed.set_thumbnail(url=target.display_avatar.url)
        embed.add_field(name="Total Points", value=f"**{profile.points}**", inline=True)
        embed.add_field(name="🔥 Streak", value=f"**{profile.daily_challenge_streak}**", inline=True)
        if profile.is_admin:
            embed.add_field(name="Role", value="🛡️ Reviewer", inline=True)
        if profile.created_at:
            embed.set_footer(text=f"Member since {profile.created_at.strftime('%B %d, %Y')}")
        await interaction.followup.send(embed=embed)

    @app_commands.command(name="grant_reviewer", description="Owner: grant or revoke reviewer rights")
    @app_commands.describe(user="Member to update", enabled="Grant (default) or revoke")
    async def grant_reviewer(self, interaction: discord.Interaction, user: discord.User, enabled: bool = True):
        if not await self.bot.is_owner(interaction.user):
            await interaction.response.send_message("❌ Only the bot owner can do this.", ephemeral=True)
            return

        await interaction.response.defer(ephemeral=True)
        try:
            await ensure_user_profile(self.bot.db, str(user.id), display_name=user.display_name)
            await self.bot.db.set_admin(str(user.id), enabled)
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        logger.info(f"Reviewer rights for {user.id} set to {enabled} by {interaction.user.id}")
        verb = "is now a reviewer" if enabled else "is no longer a reviewer"
        await interaction.followup.send(f"✅ {user.mention} {verb}.", ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    """Load the UserManagementCog"""
    await bot.add_cog(UserManagementCog(bot))
