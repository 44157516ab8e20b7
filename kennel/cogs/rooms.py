# kennel/cogs/rooms.py

import logging

import discord
from discord.ext import commands

from kennel.core.models import VoiceStateChanged
from kennel.core.rooms import RoomOrchestrator

log = logging.getLogger(__name__)


class RoomsCog(commands.Cog):
    """
    Gateway side of the temporary rooms:
    - Logs who we connected as
    - Feeds every voice-state update to the orchestrator, one at a time
    """

    def __init__(self, bot: commands.Bot, settings, orchestrator: RoomOrchestrator):
        self.bot = bot
        self.settings = settings
        self.orchestrator = orchestrator

    @commands.Cog.listener()
    async def on_ready(self):
        me = self.bot.user
        log.info("connected to the gateway as %s | guilds=%d", me.name if me else "?", len(self.bot.guilds))

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ):
        if member.bot and self.settings.ignore_bots:
            return

        event = VoiceStateChanged(
            user_id=member.id,
            guild_id=member.guild.id,
            channel_id=after.channel.id if after.channel is not None else None,
            display_name=member.display_name,
            is_bot=member.bot,
        )
        await self.orchestrator.handle(event)
