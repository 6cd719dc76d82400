"""
Review Cog - Reviewer commands for daily submissions
Reviewers are users whose profile carries the admin flag (ADMIN_USER_IDS
or /grant_reviewer). Every decision goes through utils.review, which
applies the status change and the points/streak change together.
"""

import io
import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

import config
from database.models import Submission
from utils.embeds import code_block, error_embed, submission_embed
from utils.errors import ChallengeError
from utils.logic import SubmissionStatus, parse_challenge_date, today_utc
from utils.review import require_reviewer, review_submission
from utils.submissions import list_submissions_for_date

logger = logging.getLogger(__name__)

DECISION_CHOICES = [
    app_commands.Choice(name="Approve", value=SubmissionStatus.APPROVED.value),
    app_commands.Choice(name="Reject (notes required)", value=SubmissionStatus.REJECTED.value),
    app_commands.Choice(name="Mark as pending", value=SubmissionStatus.REVIEW.value),
]

STATUS_CHOICES = [
    app_commands.Choice(name=status.value.title(), value=status.value)
    for status in SubmissionStatus
]


class ReviewCog(commands.Cog):
    """Commands for reviewing daily challenge submissions"""

    def __init__(self, bot):
        self.bot = bot

    async def _notify_author(self, submission: Submission):
        """DM the author about a decision; failures are only logged"""
        try:
            user = self.bot.get_user(int(submission.user_id)) or await self.bot.fetch_user(int(submission.user_id))
            await user.send(embed=submission_embed(submission))
        except (discord.HTTPException, ValueError) as e:
            logger.info(f"Could not notify {submission.user_id} about {submission.submission_id}: {e}")

    @app_commands.command(name="review_queue", description="Reviewer: list submissions for a day")
    @app_commands.describe(
        date="Day to list (YYYY-MM-DD, default today)",
        status="Only show submissions in this status (default: awaiting review)"
    )
    @app_commands.choices(status=STATUS_CHOICES)
    async def review_queue(
        self,
        interaction: discord.Interaction,
        date: Optional[str] = None,
        status: Optional[app_commands.Choice[str]] = None
    ):
        await interaction.response.defer(ephemeral=True)
        try:
            await require_reviewer(self.bot.db, str(interaction.user.id))
            day = parse_challenge_date(date) if date else today_utc()
            wanted = SubmissionStatus(status.value) if status else SubmissionStatus.REVIEW
            submissions = await list_submissions_for_date(self.bot.db, day, wanted)
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        if not submissions:
            await interaction.followup.send(
                f"📭 No `{wanted.value}` submissions for {day.isoformat()}.", ephemeral=True
            )
            return

        embed = discord.Embed(
            title=f"📋 {wanted.value.title()} Submissions • {day.isoformat()}",
            description=f"{len(submissions)} submission(s), oldest first",
            color=config.COLOR_INFO
        )
        for submission in submissions[:config.REVIEW_QUEUE_LIMIT]:
            embed.add_field(
                name=f"{submission.user_name or submission.user_id} • {submission.language}",
                value=(
                    f"ID: `{submission.submission_id}`\n"
                    f"Submitted {discord.utils.format_dt(submission.submitted_at, 'R')}\n"
                    + code_block(submission.code, submission.language, limit=300)
                ),
                inline=False
            )
        if len(submissions) > config.REVIEW_QUEUE_LIMIT:
            embed.set_footer(text=f"Showing {config.REVIEW_QUEUE_LIMIT} of {len(submissions)}")
        await interaction.followup.send(embed=embed, ephemeral=True)

    @app_commands.command(name="submission_code", description="Reviewer: download a submission's full code")
    @app_commands.describe(submission_id="ID shown in /review_queue")
    async def submission_code(self, interaction: discord.Interaction, submission_id: str):
        await interaction.response.defer(ephemeral=True)
        try:
            await require_reviewer(self.bot.db, str(interaction.user.id))
            submission = await self.bot.db.get_submission(submission_id.strip())
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        if submission is None:
            await interaction.followup.send(f"❌ Submission `{submission_id}` not found.", ephemeral=True)
            return

        attachment = discord.File(
            io.BytesIO(submission.code.encode("utf-8")),
            filename=f"{submission.submission_id}.{submission.language}.txt"
        )
        await interaction.followup.send(
            embed=submission_embed(submission), file=attachment, ephemeral=True
        )

    @app_commands.command(name="review", description="Reviewer: approve, reject or reopen a submission")
    @app_commands.describe(
        submission_id="ID shown in /review_queue",
        decision="New status",
        notes="Reason (required when rejecting)"
    )
    @app_commands.choices(decision=DECISION_CHOICES)
    async def review(
        self,
        interaction: discord.Interaction,
        submission_id: str,
        decision: app_commands.Choice[str],
        notes: Optional[str] = None
    ):
        await interaction.response.defer(ephemeral=True)
        try:
            submission = await review_submission(
                self.bot.db,
                submission_id.strip(),
                str(interaction.user.id),
                decision.value,
                notes
            )
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        embed = submission_embed(submission)
        embed.title = f"✅ Submission marked {submission.status.value}"
        await interaction.followup.send(embed=embed, ephemeral=True)
        await self._notify_author(submission)


async def setup(bot):
    await bot.add_cog(ReviewCog(bot))
