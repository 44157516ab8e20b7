# kennel/cogs/meta.py
from __future__ import annotations

import discord
from discord.ext import commands

from kennel.core.rooms import RoomOrchestrator


class MetaCog(commands.Cog):
    def __init__(self, bot: commands.Bot, settings, orchestrator: RoomOrchestrator):
        self.bot = bot
        self.settings = settings
        self.orchestrator = orchestrator

    def _in_guild(self, guild: discord.Guild, channel_ids) -> list[str]:
        lines = []
        for cid in sorted(channel_ids):
            ch = guild.get_channel(cid)
            if ch is not None:
                lines.append(ch.mention)
        return lines

    @commands.command(name="rooms")
    @commands.guild_only()
    @commands.has_permissions(manage_channels=True)
    async def rooms(self, ctx: commands.Context):
        """
        Show temporary rooms currently managed in this server.
        Usage:
          !rooms
        """
        tracker = self.orchestrator.tracker
        rooms = self._in_guild(ctx.guild, tracker.channels)
        teams = self._in_guild(ctx.guild, tracker.categories)

        embed = discord.Embed(title="🐕 Temporary rooms")
        embed.description = (
            f"**Clone trigger:** `{self.settings.clone_trigger}`\n"
            f"**Teams trigger:** `{self.settings.teams_trigger}`"
        )
        embed.add_field(name=f"Rooms ({len(rooms)})", value="\n".join(rooms) or "none", inline=False)
        embed.add_field(name=f"Teams ({len(teams)})", value="\n".join(teams) or "none", inline=False)
        embed.set_footer(text=f"Users in voice here (seen): {self.orchestrator.registry.connected_in(ctx.guild.id)}")
        await ctx.reply(embed=embed)
