"""
Submission Cog - Daily Challenge & Solutions
--------------------------------------------
1. /challenge shows the problem of the day (fetched once per day, then cached)
2. /solve accepts exactly one solution per user per day, via a code modal
   or an attached source file
3. Solutions wait in `review` until a reviewer approves or rejects them;
   points and streak are only awarded on approval (see review_cog)
"""

import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

import config
from utils.embeds import error_embed, problem_embed, submission_embed
from utils.errors import ChallengeError
from utils.logic import today_utc
from utils.submissions import (
    get_submission,
    list_user_submissions,
    submit_daily_solution,
)

logger = logging.getLogger(__name__)

LANGUAGE_CHOICES = [
    app_commands.Choice(name=language, value=language)
    for language in config.SUPPORTED_LANGUAGES
]


class SolutionModal(discord.ui.Modal, title="Submit your solution"):
    code = discord.ui.TextInput(
        label="Code",
        style=discord.TextStyle.paragraph,
        placeholder="Paste your full solution here",
        max_length=4000
    )

    def __init__(self, cog: "SubmissionCog", language: str):
        super().__init__()
        self.cog = cog
        self.language = language

    async def on_submit(self, interaction: discord.Interaction):
        await self.cog.record_solution(interaction, self.code.value, self.language)


class SubmissionCog(commands.Cog):
    def __init__(self, bot):
        self.bot = bot
        logger.info("SubmissionCog initialized")

    async def record_solution(self, interaction: discord.Interaction, code: str, language: str):
        """Shared by the modal and the file upload path"""
        if not interaction.response.is_done():
            await interaction.response.defer(ephemeral=True)

        try:
            submission = await submit_daily_solution(
                self.bot.db,
                str(interaction.user.id),
                today_utc(),
                code,
                language,
                user_name=interaction.user.display_name,
            )
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        embed = submission_embed(submission)
        embed.title = "📨 Solution Received"
        embed.description = (
            f"Your **{submission.language}** solution is waiting for review.\n"
            f"You'll earn **{submission.challenge_points}** points once it's approved."
        )
        await interaction.followup.send(embed=embed, ephemeral=True)

    # ==================================================================
    # /challenge
    # ==================================================================
    @app_commands.command(name="challenge", description="Show today's daily challenge")
    async def challenge(self, interaction: discord.Interaction):
        await interaction.response.defer()

        problem = await self.bot.challenges.get_daily_challenge()
        if problem is None:
            await interaction.followup.send(
                embed=discord.Embed(
                    title="🌙 No Challenge Today",
                    description="The problem source is unavailable right now. Try again later!",
                    color=config.COLOR_WARNING
                )
            )
            return

        embed = problem_embed(problem)
        try:
            existing = await get_submission(self.bot.db, str(interaction.user.id), problem.date)
        except ChallengeError:
            existing = None
        if existing:
            embed.add_field(
                name="Your Submission",
                value=f"Status: **{existing.status.value.title()}**",
                inline=False
            )
        await interaction.followup.send(embed=embed)

    # ==================================================================
    # /solve
    # ==================================================================
    @app_commands.command(name="solve", description="Submit your solution to today's challenge")
    @app_commands.describe(
        language="The language your solution is written in",
        file="Optional source file (otherwise a code box opens)"
    )
    @app_commands.choices(language=LANGUAGE_CHOICES)
    @app_commands.checks.cooldown(1, 10.0, key=lambda i: i.user.id)
    async def solve(
        self,
        interaction: discord.Interaction,
        language: app_commands.Choice[str],
        file: Optional[discord.Attachment] = None
    ):
        if file is None:
            await interaction.response.send_modal(SolutionModal(self, language.value))
            return

        await interaction.response.defer(ephemeral=True)
        if file.size > config.MAX_CODE_LENGTH * 4:
            await interaction.followup.send("❌ That file is too large.", ephemeral=True)
            return
        try:
            code = (await file.read()).decode("utf-8")
        except UnicodeDecodeError:
            await interaction.followup.send("❌ The file must be UTF-8 text.", ephemeral=True)
            return
        except discord.HTTPException as e:
            logger.warning(f"Could not download attachment {file.filename}: {e}")
            await interaction.followup.send("❌ Could not read the attachment, try again.", ephemeral=True)
            return

        await self.record_solution(interaction, code, language.value)

    # ==================================================================
    # /my_submission, /history
    # ==================================================================
    @app_commands.command(name="my_submission", description="See the status of today's submission")
    async def my_submission(self, interaction: discord.Interaction):
        await interaction.response.defer(ephemeral=True)
        try:
            submission = await get_submission(self.bot.db, str(interaction.user.id), today_utc())
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        if submission is None:
            await interaction.followup.send("📭 You haven't submitted today. Use `/solve`!", ephemeral=True)
            return
        await interaction.followup.send(embed=submission_embed(submission, show_code=True), ephemeral=True)

    @app_commands.command(name="history", description="Your recent daily challenge submissions")
    async def history(self, interaction: discord.Interaction):
        await interaction.response.defer(ephemeral=True)
        try:
            submissions = await list_user_submissions(self.bot.db, str(interaction.user.id))
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        if not submissions:
            await interaction.followup.send("📭 No submissions yet.", ephemeral=True)
            return

        embed = discord.Embed(title="🗂️ Recent Submissions", color=config.COLOR_INFO)
        for submission in submissions:
            embed.add_field(
                name=f"{submission.challenge_date.isoformat()} • {submission.challenge_id}",
                value=(
                    f"Status: **{submission.status.value.title()}** • {submission.language}"
                    + (f" • +{submission.points_awarded} pts" if submission.points_awarded else "")
                ),
                inline=False
            )
        await interaction.followup.send(embed=embed, ephemeral=True)


async def setup(bot):
    await bot.add_cog(SubmissionCog(bot))
