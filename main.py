"""
Daily Challenge Discord Bot - Main Entry Point
A Discord bot that posts one programming problem per day, accepts one
solution per member, and lets reviewers approve or reject solutions.

Features:
- Daily problem fetched from LeetCode or Codeforces, cached per day
- One submission per user per day, reviewed by humans
- Points and streak ledger driven by review decisions
- Campaigns with one application per user
- PostgreSQL database via asyncpg

Usage:
    python main.py

Environment Variables:
    DISCORD_TOKEN - Your Discord bot token (required)
    DATABASE_URL - PostgreSQL connection URL (required)
    ADMIN_USER_IDS - Comma separated Discord IDs promoted to reviewers
"""

from keep_alive import keep_alive
import discord
from discord.ext import commands
from discord import app_commands
import asyncio
import logging
import sys
from datetime import datetime

import config
from database import DatabaseManager
from utils.daily_challenge import DailyChallengeProvider, close_problem_sources

logger = logging.getLogger(__name__)

COGS = [
    "submission_cog",
    "review_cog",
    "campaign_cog",
    "user_mgmt",
    "leaderboard",
    "help_cog",
]


class DailyChallengeBot(commands.Bot):
    """Custom Bot class with database integration and global error handling"""

    def __init__(self):
        intents = discord.Intents.default()
        intents.message_content = True

        super().__init__(
            command_prefix=config.COMMAND_PREFIX,
            description=config.BOT_DESCRIPTION,
            intents=intents
        )

        if not config.DATABASE_URL:
            raise ValueError("DATABASE_URL environment variable is required")

        self.db = DatabaseManager(config.DATABASE_URL)
        self.challenges = DailyChallengeProvider(self.db)
        self.start_time = datetime.now()

    async def is_owner(self, user: discord.User) -> bool:
        """Check if user is the bot owner"""
        if self.owner_id:
            return user.id == self.owner_id
        app = await self.application_info()
        self.owner_id = app.owner.id
        return user.id == self.owner_id

    async def setup_hook(self):
        """Called when the bot is starting up"""
        logger.info("Connecting to database...")
        await self.db.connect()
        await self.db.initialize_tables()

        await self.load_cogs()

        @self.command(name='sync', hidden=True)
        async def sync_commands(ctx: commands.Context, scope: str = "guild"):
            """
            Owner-only sync.
            Usage: !sync (copies global commands to THIS server instantly)
                   !sync global
            """
            if not await self.is_owner(ctx.author):
                return

            try:
                await ctx.message.delete()
            except discord.HTTPException:
                pass

            try:
                if scope.lower() == "global":
                    msg = await ctx.send("⏳ Syncing **globally** (updates in ~1 hour)...")
                    synced = await self.tree.sync()
                    await msg.edit(content=f"✅ Synced {len(synced)} global commands.", delete_after=3)
                    logger.info(f"Global sync: {len(synced)} commands")
                else:
                    if not ctx.guild:
                        await ctx.send("❌ Guild sync must be run inside a server.", delete_after=3)
                        return

                    msg = await ctx.send(f"⏳ Syncing commands to **{ctx.guild.name}**...")
                    self.tree.clear_commands(guild=ctx.guild)
                    self.tree.copy_global_to(guild=ctx.guild)
                    synced = await self.tree.sync(guild=ctx.guild)

                    await msg.edit(
                        content=f"✅ Synced {len(synced)} commands: {', '.join(f'`/{cmd.name}`' for cmd in synced)}",
                        delete_after=3
                    )
                    logger.info(f"Guild sync ({ctx.guild.name}): {len(synced)} commands")

            except discord.HTTPException as e:
                await ctx.send(f"❌ Sync failed: {e}", delete_after=3)
                logger.error(f"Sync error: {e}")

        self.tree.error(self.on_app_command_error)
        logger.info("Setup complete")

    async def load_cogs(self):
        """Load the cogs listed in COGS"""
        loaded = 0
        failed = 0

        for cog_name in COGS:
            try:
                await self.load_extension(f"cogs.{cog_name}")
                logger.info(f"✓ {cog_name.ljust(20)} - Loaded successfully")
                loaded += 1
            except commands.ExtensionError:
                logger.exception(f"✗ {cog_name.ljust(20)} - Failed")
                failed += 1

        logger.info(f"Cogs: {loaded} loaded, {failed} failed")

    async def on_ready(self):
        """Called when the bot is ready and connected to Discord"""
        logger.info(f"Logged in as {self.user.name} (ID: {self.user.id}) in {len(self.guilds)} guild(s)")

        try:
            synced = await self.tree.sync()
            logger.info(f"Synced {len(synced)} slash command(s)")
        except discord.HTTPException as e:
            logger.error(f"Failed to sync commands: {e}")

        uptime = (datetime.now() - self.start_time).total_seconds()
        logger.info(f"Bot ready in {uptime:.2f} seconds")

        await self.change_presence(
            activity=discord.Activity(
                type=discord.ActivityType.watching,
                name="/challenge | Daily Problem"
            )
        )

    async def on_command_error(self, ctx: commands.Context, error: Exception):
        """Global error handler for prefix commands"""
        if isinstance(error, commands.CommandNotFound):
            return

        elif isinstance(error, commands.MissingRequiredArgument):
            await ctx.send(
                embed=discord.Embed(
                    title="❌ Missing Argument",
                    description=f"Missing required argument: `{error.param.name}`",
                    color=config.COLOR_ERROR
                )
            )

        else:
            logger.error(f"Error in command {ctx.command}: {error}")
            await ctx.send(
                embed=discord.Embed(
                    title="❌ Error",
                    description="An unexpected error occurred.",
                    color=config.COLOR_ERROR
                )
            )

    async def _reply(self, interaction: discord.Interaction, embed: discord.Embed):
        if interaction.response.is_done():
            await interaction.followup.send(embed=embed, ephemeral=True)
        else:
            await interaction.response.send_message(embed=embed, ephemeral=True)

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError
    ):
        """Global error handler for slash commands"""
        if isinstance(error, app_commands.CommandOnCooldown):
            await self._reply(interaction, discord.Embed(
                title="⏱️ Cooldown Active",
                description=f"Please wait **{error.retry_after:.1f} seconds** before using this command again.",
                color=config.COLOR_WARNING
            ))
            return

        if isinstance(error, app_commands.TransformerError):
            await self._reply(interaction, discord.Embed(
                title="❌ Invalid Input",
                description=f"Invalid input provided: {error}",
                color=config.COLOR_ERROR
            ))
            return

        if isinstance(error, app_commands.CheckFailure):
            await self._reply(interaction, discord.Embed(
                title="🚫 Check Failed",
                description="You cannot use this command here or now.",
                color=config.COLOR_ERROR
            ))
            return

        logger.error(
            f"Unhandled error in /{interaction.command.name if interaction.command else 'unknown'} "
            f"for {interaction.user} ({interaction.user.id}): {type(error).__name__}: {error}",
            exc_info=error
        )
        try:
            await self._reply(interaction, discord.Embed(
                title="❌ Unexpected Error",
                description="An unexpected error occurred while processing your command.\n"
                            "The error has been logged. Please try again later.",
                color=config.COLOR_ERROR
            ))
        except discord.HTTPException as send_error:
            logger.error(f"Failed to send error message: {send_error}")

    async def close(self):
        """Cleanup when bot is shutting down"""
        logger.info("Shutting down bot...")
        await self.db.close()
        await close_problem_sources()
        await super().close()
        logger.info("Cleanup complete")


async def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    print("\n" + "=" * 60)
    print(" " * 15 + "🤖 Daily Challenge Bot")
    print("=" * 60 + "\n")

    if not config.DISCORD_TOKEN:
        print("❌ ERROR: DISCORD_TOKEN not found in environment variables")
        print("   Add DISCORD_TOKEN=your_token_here to your .env file")
        sys.exit(1)

    if not config.DATABASE_URL:
        print("❌ ERROR: DATABASE_URL not found in environment variables")
        sys.exit(1)

    # Start web server first so the host marks the service as live
    keep_alive()
    logger.info(f"Health server listening on port {config.PORT}")

    bot = DailyChallengeBot()

    try:
        await bot.start(config.DISCORD_TOKEN)
    except discord.LoginFailure:
        print("\n❌ ERROR: Invalid Discord token")
        sys.exit(1)
    except discord.PrivilegedIntentsRequired:
        print("\n❌ ERROR: Enable the MESSAGE CONTENT intent in the Developer Portal")
        sys.exit(1)
    finally:
        if not bot.is_closed():
            await bot.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n✓ Bot stopped")
