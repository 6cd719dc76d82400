"""
Embed builders shared by the cogs
"""

import html
import re

import discord

import config
from database.models import DailyProblem, Submission
from utils.errors import ChallengeError, AlreadySubmitted, AlreadyApplied
from utils.logic import SubmissionStatus

DIFFICULTY_ICONS = {"easy": "🟢", "medium": "🟡", "hard": "🔴"}
STATUS_ICONS = {
    "review": "⏳",
    "pending": "⏳",
    "approved": "✅",
    "rejected": "❌",
}

_BLOCK_TAGS = re.compile(r"</?(p|br|div|li|ul|ol|pre)[^>]*>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")
_BLANK_LINES = re.compile(r"\n{3,}")


def html_to_text(fragment: str, limit: int = 1000) -> str:
    """Rough HTML → Discord text, truncated to `limit` characters"""
    text = _BLOCK_TAGS.sub("\n", fragment or "")
    text = html.unescape(_TAG.sub("", text))
    text = _BLANK_LINES.sub("\n\n", text).strip()
    if len(text) > limit:
        text = text[:limit - 1].rstrip() + "…"
    return text


def code_block(code: str, language: str = "", limit: int = 900) -> str:
    code = code.replace("```", "` ` `")
    snippet = code if len(code) <= limit else code[:limit] + "\n# … truncated"
    return f"```{language}\n{snippet}\n```"


def error_embed(error: ChallengeError) -> discord.Embed:
    duplicate = isinstance(error, (AlreadySubmitted, AlreadyApplied))
    return discord.Embed(
        title="⚠️ Already Done" if duplicate else "❌ Request Failed",
        description=error.message,
        color=config.COLOR_WARNING if duplicate else config.COLOR_ERROR
    )


def problem_embed(problem: DailyProblem) -> discord.Embed:
    difficulty = problem.difficulty.value
    embed = discord.Embed(
        title=f"🏆 {problem.title}",
        url=problem.url,
        description=html_to_text(problem.description),
        color=config.COLOR_PRIMARY
    )
    embed.add_field(name="Date", value=problem.date.strftime("%B %d, %Y"), inline=True)
    embed.add_field(name="Difficulty", value=f"{DIFFICULTY_ICONS.get(difficulty, '')} {difficulty.title()}", inline=True)
    embed.add_field(name="Points", value=f"**{problem.points}**", inline=True)

    for number, example in enumerate(problem.examples[:3], 1):
        value = f"**Input:** `{example.input[:300]}`\n**Output:** `{example.output[:300]}`"
        if example.explanation:
            value += f"\n{example.explanation[:300]}"
        embed.add_field(name=f"Example {number}", value=value, inline=False)

    embed.set_footer(text=f"{problem.id} • Submit with /solve, one solution per day")
    return embed


def submission_embed(submission: Submission, show_code: bool = False) -> discord.Embed:
    status = submission.status.value
    color = {
        SubmissionStatus.APPROVED: config.COLOR_SUCCESS,
        SubmissionStatus.REJECTED: config.COLOR_ERROR,
    }.get(submission.status, config.COLOR_INFO)

    embed = discord.Embed(
        title=f"{STATUS_ICONS.get(status, '')} Submission for {submission.challenge_date.isoformat()}",
        color=color
    )
    embed.add_field(name="Status", value=status.title(), inline=True)
    embed.add_field(name="Language", value=submission.language, inline=True)
    embed.add_field(name="Challenge", value=f"{submission.challenge_id} ({submission.challenge_points} pts)", inline=True)
    embed.add_field(name="Submitted", value=discord.utils.format_dt(submission.submitted_at, "R"), inline=True)
    if submission.reviewed_at:
        embed.add_field(name="Reviewed", value=discord.utils.format_dt(submission.reviewed_at, "R"), inline=True)
    if submission.admin_notes:
        embed.add_field(name="Reviewer Notes", value=submission.admin_notes[:1000], inline=False)
    if show_code:
        embed.add_field(name="Code", value=code_block(submission.code, submission.language), inline=False)
    embed.set_footer(text=f"ID: {submission.submission_id}")
    return embed
