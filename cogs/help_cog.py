"""
Help Cog - Display all available commands with descriptions
"""

import discord
from discord import app_commands
from discord.ext import commands

import config
from utils.logic import DIFFICULTY_POINTS


class HelpCog(commands.Cog):
    """Cog for displaying help information about all available commands"""

    def __init__(self, bot):
        self.bot = bot

    @app_commands.command(
        name="help",
        description="View all available commands"
    )
    async def help_command(self, interaction: discord.Interaction):
        """Display help for general user commands"""
        embed = discord.Embed(
            title="📚 Daily Challenge Commands",
            description="One problem a day, one solution per person, reviewed by humans.",
            color=config.COLOR_PRIMARY
        )

        embed.add_field(
            name="🏆 /challenge — Today's problem",
            value="Shows the problem of the day and your submission status.",
            inline=False
        )

        embed.add_field(
            name="📝 /solve — Submit your solution",
            value=(
                "```\n"
                "/solve <language> [file]\n"
                "```\n"
                "**Examples:**\n"
                "• `/solve language:python` — Paste code in a box\n"
                "• `/solve language:cpp file:solution.cpp` — Upload a file\n"
                "Only **one** solution per day is accepted."
            ),
            inline=False
        )

        embed.add_field(
            name="🔎 /my_submission, /history",
            value="Status of today's solution and your recent submissions.",
            inline=False
        )

        embed.add_field(
            name="📊 /profile, /leaderboard",
            value=(
                "```\n"
                "/profile [user]\n"
                "/leaderboard [limit]\n"
                "```"
            ),
            inline=False
        )

        embed.add_field(
            name="📣 /campaigns, /apply, /my_applications",
            value="Browse campaigns, apply once per campaign, and track your applications.",
            inline=False
        )

        points = " │ ".join(f"{d.value.title()}: {p}" for d, p in DIFFICULTY_POINTS.items())
        embed.add_field(
            name="💡 Points System",
            value=f"{points}\nPoints and streak are awarded when a reviewer approves.",
            inline=False
        )

        embed.set_footer(text="Reviewers: use /reviewhelp")

        await interaction.response.send_message(embed=embed)

    @app_commands.command(
        name="reviewhelp",
        description="View reviewer commands"
    )
    async def review_help_command(self, interaction: discord.Interaction):
        """Display help for reviewer commands (ephemeral)"""
        embed = discord.Embed(
            title="⚙️ Reviewer Commands",
            description="Review submissions and campaign applications (all responses are private)",
            color=config.COLOR_WARNING
        )

        embed.add_field(
            name="📋 /review_queue — Submissions for a day",
            value=(
                "```\n"
                "/review_queue [date] [status]\n"
                "```\n"
                "**Example:** `/review_queue date:2024-01-15 status:Review`"
            ),
            inline=False
        )

        embed.add_field(
            name="📄 /submission_code — Download full code",
            value="```\n/submission_code <submission_id>\n```",
            inline=False
        )

        embed.add_field(
            name="✅ /review — Approve, reject or reopen",
            value=(
                "```\n"
                "/review <submission_id> <decision> [notes]\n"
                "```\n"
                "Rejections need notes. Approving awards points and streak; "
                "moving away from approved takes them back."
            ),
            inline=False
        )

        embed.add_field(
            name="📣 Campaigns",
            value=(
                "```\n"
                "/campaign_create <name> [description] [status]\n"
                "/campaign_applications <campaign_id>\n"
                "/campaign_review <application_id> <decision>\n"
                "```"
            ),
            inline=False
        )

        embed.add_field(
            name="🔧 Owner",
            value=(
                "```\n"
                "/grant_reviewer <user> [enabled]\n"
                "!sync [global]\n"
                "```"
            ),
            inline=False
        )

        await interaction.response.send_message(embed=embed, ephemeral=True)


async def setup(bot):
    """Load the HelpCog"""
    await bot.add_cog(HelpCog(bot))
