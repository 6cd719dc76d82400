"""
Campaign Cog - Campaigns and applications
Users apply once per campaign; reviewers approve or reject applications.
"""

import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

import config
from utils.campaigns import (
    apply_to_campaign,
    create_campaign,
    list_campaign_applications,
    list_campaigns,
    list_user_applications,
    review_application,
)
from utils.embeds import STATUS_ICONS, error_embed
from utils.errors import ChallengeError
from utils.logic import ApplicationStatus, CampaignStatus

logger = logging.getLogger(__name__)

CAMPAIGN_STATUS_ICONS = {"upcoming": "🗓️", "ongoing": "🚀", "past": "📦"}


class CampaignCog(commands.Cog):
    """Campaign listing, applications and application review"""

    def __init__(self, bot):
        self.bot = bot

    @app_commands.command(name="campaigns", description="List campaigns you can apply to")
    async def campaigns(self, interaction: discord.Interaction):
        await interaction.response.defer()
        try:
            campaigns = await list_campaigns(self.bot.db)
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e))
            return

        if not campaigns:
            await interaction.followup.send("📭 No campaigns yet.")
            return

        embed = discord.Embed(title="📣 Campaigns", color=config.COLOR_PRIMARY)
        for campaign in campaigns[:25]:
            embed.add_field(
                name=f"{CAMPAIGN_STATUS_ICONS.get(campaign.status.value, '')} {campaign.name}",
                value=f"{campaign.description[:200] or '—'}\nID: `{campaign.id}` • {campaign.status.value.title()}",
                inline=False
            )
        embed.set_footer(text="Apply with /apply <campaign_id>")
        await interaction.followup.send(embed=embed)

    @app_commands.command(name="campaign_create", description="Reviewer: create a campaign")
    @app_commands.describe(name="Campaign name", description="Short description", status="Campaign status")
    @app_commands.choices(status=[
        app_commands.Choice(name=s.value.title(), value=s.value) for s in CampaignStatus
    ])
    async def campaign_create(
        self,
        interaction: discord.Interaction,
        name: str,
        description: Optional[str] = None,
        status: Optional[app_commands.Choice[str]] = None
    ):
        await interaction.response.defer(ephemeral=True)
        try:
            campaign = await create_campaign(
                self.bot.db,
                str(interaction.user.id),
                name,
                description or "",
                CampaignStatus(status.value) if status else CampaignStatus.UPCOMING
            )
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        await interaction.followup.send(
            embed=discord.Embed(
                title="✅ Campaign Created",
                description=f"**{campaign.name}** (ID: `{campaign.id}`)",
                color=config.COLOR_SUCCESS
            ),
            ephemeral=True
        )

    @app_commands.command(name="apply", description="Apply to a campaign")
    @app_commands.describe(campaign_id="ID shown in /campaigns")
    async def apply(self, interaction: discord.Interaction, campaign_id: str):
        await interaction.response.defer(ephemeral=True)
        try:
            application = await apply_to_campaign(
                self.bot.db,
                str(interaction.user.id),
                campaign_id.strip(),
                user_name=interaction.user.display_name
            )
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        await interaction.followup.send(
            embed=discord.Embed(
                title="📨 Application Sent",
                description=f"You applied to **{application.campaign_name}**. A reviewer will get back to you.",
                color=config.COLOR_SUCCESS
            ),
            ephemeral=True
        )

    @app_commands.command(name="my_applications", description="Your campaign applications")
    async def my_applications(self, interaction: discord.Interaction):
        await interaction.response.defer(ephemeral=True)
        try:
            applications = await list_user_applications(self.bot.db, str(interaction.user.id))
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        if not applications:
            await interaction.followup.send("📭 You haven't applied to any campaign.", ephemeral=True)
            return

        embed = discord.Embed(title="🗂️ Your Applications", color=config.COLOR_INFO)
        for application in applications[:25]:
            status = application.status.value
            embed.add_field(
                name=application.campaign_name or application.campaign_id,
                value=f"{STATUS_ICONS.get(status, '')} {status.title()} • applied {discord.utils.format_dt(application.applied_at, 'd')}",
                inline=False
            )
        await interaction.followup.send(embed=embed, ephemeral=True)

    @app_commands.command(name="campaign_applications", description="Reviewer: list applications for a campaign")
    @app_commands.describe(campaign_id="ID shown in /campaigns")
    async def campaign_applications(self, interaction: discord.Interaction, campaign_id: str):
        await interaction.response.defer(ephemeral=True)
        try:
            applications = await list_campaign_applications(
                self.bot.db, str(interaction.user.id), campaign_id.strip()
            )
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        if not applications:
            await interaction.followup.send("📭 No applications for this campaign.", ephemeral=True)
            return

        embed = discord.Embed(title=f"📋 Applications • {campaign_id}", color=config.COLOR_INFO)
        for application in applications[:25]:
            status = application.status.value
            embed.add_field(
                name=f"{STATUS_ICONS.get(status, '')} {application.user_name or application.user_id}",
                value=f"ID: `{application.application_id}` • {status.title()}",
                inline=False
            )
        await interaction.followup.send(embed=embed, ephemeral=True)

    @app_commands.command(name="campaign_review", description="Reviewer: approve or reject a campaign application")
    @app_commands.describe(application_id="ID shown in /campaign_applications", decision="New status")
    @app_commands.choices(decision=[
        app_commands.Choice(name=s.value.title(), value=s.value) for s in ApplicationStatus
    ])
    async def campaign_review(
        self,
        interaction: discord.Interaction,
        application_id: str,
        decision: app_commands.Choice[str]
    ):
        await interaction.response.defer(ephemeral=True)
        try:
            application = await review_application(
                self.bot.db, application_id.strip(), str(interaction.user.id), decision.value
            )
        except ChallengeError as e:
            await interaction.followup.send(embed=error_embed(e), ephemeral=True)
            return

        await interaction.followup.send(
            embed=discord.Embed(
                title="✅ Application Updated",
                description=f"{application.user_name or application.user_id} → **{application.status.value}**",
                color=config.COLOR_SUCCESS
            ),
            ephemeral=True
        )


async def setup(bot):
    await bot.add_cog(CampaignCog(bot))
