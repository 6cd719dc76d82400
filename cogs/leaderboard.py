"""
Leaderboard Cog - Display rankings by approved points
"""

import discord
from discord import app_commands
from discord.ext import commands

import config
from utils.embeds import error_embed
from utils.errors import ChallengeError
from utils.submissions import get_leaderboard


class Leaderboard(commands.Cog):
    """Commands for viewing leaderboards and rankings"""

    def __init__(self, bot):
        self.bot = bot

    @app_commands.command(name="leaderboard", description="View the top users by points")
    @app_commands.describe(limit="Number of users to show (1-25)")
    async def leaderboard_slash(self, interaction: discord.Interaction, limit: int = None):
        """Display the top users by points"""
        await interaction.response.defer()

        if limit is None:
            limit = config.LEADERBOARD_SIZE
        elif limit < 1 or limit > 25:
            await interaction.followup.send(
                embed=discord.Embed(
                    title="❌ Invalid Limit",
                    description="Limit must be between 1 and 25",
                    color=config.COLOR_ERROR
                )
            )
            return

        try:
            leaderboard = await get_leaderboard(self.bot.db, limit)
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e))
            return

        if not leaderboard:
            await interaction.followup.send(
                embed=discord.Embed(
                    title="📭 Empty Leaderboard",
                    description="No approved solutions yet! Solve `/challenge` to get on the board.",
                    color=config.COLOR_INFO
                )
            )
            return

        embed = discord.Embed(
            title="🏆 Daily Challenge Leaderboard",
            description="Top performers ranked by approved points",
            color=config.COLOR_INFO
        )

        # Medal emojis for top 3
        medals = ["🥇", "🥈", "🥉"]

        for idx, profile in enumerate(leaderboard, 1):
            rank_prefix = medals[idx - 1] if idx <= 3 else f"**#{idx}**"
            embed.add_field(
                name=f"{rank_prefix} {profile.display_name or f'User {profile.uid}'}",
                value=f"Points: **{profile.points}** | 🔥 Streak: {profile.daily_challenge_streak}",
                inline=False
            )

        embed.set_footer(text=f"Showing top {len(leaderboard)} users")
        await interaction.followup.send(embed=embed)


async def setup(bot):
    """Load the cog"""
    await bot.add_cog(Leaderboard(bot))
