# kennel/core/rooms.py
from __future__ import annotations

import asyncio
import logging

from kennel.config import Settings
from kennel.core.models import ChannelInfo, ChannelKind, VoiceMembership, VoiceStateChanged
from kennel.core.state import EphemeralResourceTracker, VoiceStateRegistry
from kennel.core.transitions import Transition, classify
from kennel.services.directory import ChannelNotFound, DirectoryClient, DirectoryError

log = logging.getLogger(__name__)


class RoomOrchestrator:
    """
    Turns voice-state notifications into temporary room lifecycles.

    - JOIN into the clone trigger  -> standalone voice room, user moved in
    - JOIN into the teams trigger  -> category + text + voice, user moved in
    - LEAVE from a tracked room    -> delete it once nobody is connected
    - MOVE / NOOP                  -> registry update only (unless teardown_on_move)

    One lock covers the whole workflow of a notification, directory calls included,
    so the registry and tracker are never seen half-updated.
    """

    def __init__(
        self,
        directory: DirectoryClient,
        settings: Settings,
        registry: VoiceStateRegistry | None = None,
        tracker: EphemeralResourceTracker | None = None,
    ):
        self.directory = directory
        self.settings = settings
        self.registry = registry if registry is not None else VoiceStateRegistry()
        self.tracker = tracker if tracker is not None else EphemeralResourceTracker()
        self._lock = asyncio.Lock()
        self._draining = False

    async def handle(self, event: VoiceStateChanged) -> Transition:
        async with self._lock:
            before = self.registry.set(event.user_id, event.membership)
            transition = classify(before.channel_id, event.channel_id)

            log.debug(
                "user %s %s: %s -> %s",
                event.user_id, transition.value, before.channel_id, event.channel_id,
            )

            if self._draining:
                log.info("shutting down, skipping %s for user %s", transition.value, event.user_id)
            elif transition is Transition.JOIN:
                await self._on_join(event)
            elif transition is Transition.LEAVE:
                await self._on_leave(before)
            elif transition is Transition.MOVE and self.settings.teardown_on_move:
                await self._on_leave(before)

            return transition

    async def drain(self) -> None:
        """
        Wait for the in-flight notification (if any) to finish.
        Notifications handled afterwards only update the registry.
        """
        async with self._lock:
            self._draining = True

    # ---------------- join ----------------

    async def _on_join(self, event: VoiceStateChanged) -> None:
        try:
            channel = await self.directory.get_channel(event.channel_id)
        except DirectoryError as e:
            log.warning("failed to get joined channel %s: %s", event.channel_id, e)
            return

        if channel.name == self.settings.clone_trigger:
            await self._provision_room(event, channel)
        elif channel.name == self.settings.teams_trigger:
            await self._provision_team(event, channel)

    async def _provision_room(self, event: VoiceStateChanged, trigger: ChannelInfo) -> ChannelInfo | None:
        created: list[int] = []
        try:
            room = await self.directory.create_channel(
                trigger.guild_id,
                self.settings.room_name(event.display_name),
                ChannelKind.VOICE,
                parent_id=trigger.parent_id,
                reason=f"temporary room for {event.user_id}",
            )
            created.append(room.id)
            await self.directory.move_member(trigger.guild_id, event.user_id, room.id)
        except DirectoryError as e:
            await self._abort("room", event, created, e)
            return None

        self.tracker.mark_channel(room.id)
        log.info("created room %s (%s) for user %s", room.id, room.name, event.user_id)
        return room

    async def _provision_team(self, event: VoiceStateChanged, trigger: ChannelInfo) -> ChannelInfo | None:
        created: list[int] = []
        reason = f"temporary team for {event.user_id}"
        try:
            category = await self.directory.create_channel(
                trigger.guild_id,
                self.settings.room_name(event.display_name),
                ChannelKind.CATEGORY,
                reason=reason,
            )
            created.append(category.id)

            text = await self.directory.create_channel(
                category.guild_id, self.settings.team_text_name, ChannelKind.TEXT,
                parent_id=category.id, reason=reason,
            )
            created.append(text.id)

            voice = await self.directory.create_channel(
                category.guild_id, self.settings.team_voice_name, ChannelKind.VOICE,
                parent_id=category.id, reason=reason,
            )
            created.append(voice.id)

            await self.directory.move_member(category.guild_id, event.user_id, voice.id)
        except DirectoryError as e:
            await self._abort("team", event, created, e)
            return None

        self.tracker.mark_category(voice.id)
        log.info("created team %s (%s) for user %s", category.id, category.name, event.user_id)
        return voice

    async def _abort(self, what: str, event: VoiceStateChanged, created: list[int], error: DirectoryError) -> None:
        log.warning("failed to provision %s for user %s: %s", what, event.user_id, error)
        if not created:
            return

        if not self.settings.rollback_on_failure:
            log.error("leaked channels %s from failed %s for user %s", created, what, event.user_id)
            return

        # children before their category
        for channel_id in reversed(created):
            try:
                await self.directory.delete_channel(channel_id, reason="rolling back failed setup")
            except ChannelNotFound:
                continue
            except DirectoryError as e:
                log.error("failed to roll back channel %s: %s", channel_id, e)

    # ---------------- leave ----------------

    async def _on_leave(self, before: VoiceMembership) -> None:
        try:
            channel = await self.directory.get_channel(before.channel_id)
        except DirectoryError as e:
            log.warning("failed to get left channel %s: %s", before.channel_id, e)
            return

        if self.tracker.is_tracked_channel(channel.id):
            await self._teardown_room(channel)

        if channel.parent_id is not None and self.tracker.is_tracked_category(channel.id):
            await self._teardown_team(channel)

    async def _is_empty(self, channel: ChannelInfo) -> bool:
        try:
            return await self.directory.member_count(channel.id) == 0
        except DirectoryError as e:
            log.warning("failed to count members of %s: %s", channel.id, e)
            return False

    async def _teardown_room(self, channel: ChannelInfo) -> None:
        if not await self._is_empty(channel):
            return

        try:
            await self.directory.delete_channel(channel.id, reason=self.settings.delete_reason)
        except ChannelNotFound:
            pass
        except DirectoryError as e:
            log.error("failed to delete room %s: %s", channel.id, e)
            return

        self.tracker.unmark_channel(channel.id)
        log.info("deleted room %s (%s)", channel.id, channel.name)

    async def _teardown_team(self, voice: ChannelInfo) -> None:
        if not await self._is_empty(voice):
            return

        category_id = voice.parent_id
        try:
            channels = await self.directory.list_channels(voice.guild_id)
        except DirectoryError as e:
            log.warning("failed to list channels of guild %s: %s", voice.guild_id, e)
            return

        for ch in channels:
            if ch.parent_id != category_id:
                continue
            try:
                await self.directory.delete_channel(ch.id, reason=self.settings.delete_reason)
            except ChannelNotFound:
                continue
            except DirectoryError as e:
                log.error("failed to delete team channel %s: %s", ch.id, e)

        try:
            await self.directory.delete_channel(category_id, reason=self.settings.delete_reason)
        except ChannelNotFound:
            pass
        except DirectoryError as e:
            log.error("failed to delete team category %s: %s", category_id, e)

        self.tracker.unmark_category(voice.id)
        log.info("deleted team category %s", category_id)
