# kennel/core/state.py
from __future__ import annotations

from kennel.core.models import VoiceMembership


class VoiceStateRegistry:
    """
    Runtime-only map of user_id -> last observed voice membership.

    Not a history: every notification overwrites the previous entry.
    A user that was never seen reads back as the "not connected" sentinel.
    """

    def __init__(self):
        self._memberships: dict[int, VoiceMembership] = {}

    def get(self, user_id: int) -> VoiceMembership:
        return self._memberships.get(user_id) or VoiceMembership.none(user_id)

    def set(self, user_id: int, membership: VoiceMembership) -> VoiceMembership:
        previous = self.get(user_id)
        self._memberships[user_id] = membership
        return previous

    def __len__(self) -> int:
        return sum(1 for m in self._memberships.values() if m.connected)

    def connected_in(self, guild_id: int) -> int:
        return sum(1 for m in self._memberships.values() if m.connected and m.guild_id == guild_id)


class EphemeralResourceTracker:
    """
    Channel ids this process created and must clean up.

    - temporary channels: standalone rooms from the clone trigger
    - temporary categories: keyed by the *voice* channel inside each team category
    """

    def __init__(self):
        self._channels: set[int] = set()
        self._categories: set[int] = set()

    def mark_channel(self, channel_id: int) -> None:
        self._channels.add(channel_id)

    def mark_category(self, voice_channel_id: int) -> None:
        self._categories.add(voice_channel_id)

    def is_tracked_channel(self, channel_id: int) -> bool:
        return channel_id in self._channels

    def is_tracked_category(self, voice_channel_id: int) -> bool:
        return voice_channel_id in self._categories

    def unmark_channel(self, channel_id: int) -> None:
        self._channels.discard(channel_id)

    def unmark_category(self, voice_channel_id: int) -> None:
        self._categories.discard(voice_channel_id)

    @property
    def channels(self) -> frozenset[int]:
        return frozenset(self._channels)

    @property
    def categories(self) -> frozenset[int]:
        return frozenset(self._categories)
