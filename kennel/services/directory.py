# kennel/services/directory.py
from __future__ import annotations

import logging

import discord

from kennel.core.models import ChannelInfo, ChannelKind

log = logging.getLogger(__name__)


class DirectoryError(Exception):
    """A Discord REST call failed."""


class ChannelNotFound(DirectoryError):
    pass


def _kind_of(channel) -> ChannelKind:
    if isinstance(channel, discord.VoiceChannel):
        return ChannelKind.VOICE
    if isinstance(channel, discord.TextChannel):
        return ChannelKind.TEXT
    if isinstance(channel, discord.CategoryChannel):
        return ChannelKind.CATEGORY
    return ChannelKind.OTHER


def channel_info(channel) -> ChannelInfo:
    guild = getattr(channel, "guild", None)
    return ChannelInfo(
        id=channel.id,
        name=getattr(channel, "name", "") or "",
        kind=_kind_of(channel),
        guild_id=guild.id if guild is not None else 0,
        parent_id=getattr(channel, "category_id", None),
    )


def _wrap(e: discord.HTTPException, what: str) -> DirectoryError:
    if isinstance(e, discord.NotFound):
        return ChannelNotFound(f"{what}: not found")
    return DirectoryError(f"{what}: {type(e).__name__}: {e}")


class DirectoryClient:
    """
    Channel directory on top of a discord.py client.

    Reads prefer the gateway cache and fall back to REST.
    Every failure surfaces as DirectoryError so callers handle one type.
    """

    def __init__(self, client: discord.Client):
        self.client = client

    def _guild(self, guild_id: int) -> discord.Guild:
        guild = self.client.get_guild(guild_id)
        if guild is None:
            raise DirectoryError(f"guild {guild_id} is not available")
        return guild

    async def _resolve(self, channel_id: int):
        channel = self.client.get_channel(channel_id)
        if channel is not None:
            return channel
        try:
            return await self.client.fetch_channel(channel_id)
        except discord.HTTPException as e:
            raise _wrap(e, f"fetch channel {channel_id}") from e

    async def get_channel(self, channel_id: int) -> ChannelInfo:
        return channel_info(await self._resolve(channel_id))

    async def list_channels(self, guild_id: int) -> list[ChannelInfo]:
        guild = self._guild(guild_id)
        try:
            channels = await guild.fetch_channels()
        except discord.HTTPException as e:
            raise _wrap(e, f"list channels of guild {guild_id}") from e
        return [channel_info(ch) for ch in channels]

    async def create_channel(
        self,
        guild_id: int,
        name: str,
        kind: ChannelKind,
        parent_id: int | None = None,
        reason: str | None = None,
    ) -> ChannelInfo:
        guild = self._guild(guild_id)
        category = None
        if parent_id is not None:
            category = guild.get_channel(parent_id) or discord.Object(id=parent_id)

        try:
            if kind is ChannelKind.VOICE:
                created = await guild.create_voice_channel(name, category=category, reason=reason)
            elif kind is ChannelKind.TEXT:
                created = await guild.create_text_channel(name, category=category, reason=reason)
            elif kind is ChannelKind.CATEGORY:
                created = await guild.create_category(name, reason=reason)
            else:
                raise DirectoryError(f"cannot create channel of kind {kind.value}")
        except discord.HTTPException as e:
            raise _wrap(e, f"create {kind.value} channel {name!r}") from e

        log.debug("created %s channel %s (%s) in guild %s", kind.value, created.id, name, guild_id)
        return channel_info(created)

    async def delete_channel(self, channel_id: int, reason: str) -> None:
        channel = await self._resolve(channel_id)
        try:
            await channel.delete(reason=reason)
        except discord.HTTPException as e:
            raise _wrap(e, f"delete channel {channel_id}") from e

    async def move_member(self, guild_id: int, user_id: int, channel_id: int) -> None:
        guild = self._guild(guild_id)
        try:
            member = guild.get_member(user_id) or await guild.fetch_member(user_id)
        except discord.HTTPException as e:
            raise _wrap(e, f"fetch member {user_id}") from e

        destination = guild.get_channel(channel_id) or discord.Object(id=channel_id)
        try:
            await member.move_to(destination, reason="moving into temporary room")
        except discord.HTTPException as e:
            raise _wrap(e, f"move member {user_id} to {channel_id}") from e

    async def member_count(self, channel_id: int) -> int:
        """
        Users currently connected to a voice channel, from the gateway
        voice-state cache (works without the members intent).
        """
        channel = await self._resolve(channel_id)
        voice_states = getattr(channel, "voice_states", None)
        if voice_states is None:
            raise DirectoryError(f"channel {channel_id} has no voice occupancy")
        return len(voice_states)
