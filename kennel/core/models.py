# kennel/core/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChannelKind(str, Enum):
    VOICE = "voice"
    TEXT = "text"
    CATEGORY = "category"
    OTHER = "other"


@dataclass(frozen=True)
class ChannelInfo:
    """
    Snapshot of a guild channel as seen through the directory.
    Occupancy is not part of it; ask the directory for member_count().
    """

    id: int
    name: str
    kind: ChannelKind
    guild_id: int
    parent_id: int | None = None


@dataclass(frozen=True)
class VoiceMembership:
    user_id: int
    channel_id: int | None = None  # None = not in any voice channel
    guild_id: int | None = None

    @classmethod
    def none(cls, user_id: int) -> "VoiceMembership":
        return cls(user_id=user_id)

    @property
    def connected(self) -> bool:
        return self.channel_id is not None


@dataclass(frozen=True)
class VoiceStateChanged:
    """One voice-state notification for a single user."""

    user_id: int
    guild_id: int
    channel_id: int | None
    display_name: str
    is_bot: bool = False

    @property
    def membership(self) -> VoiceMembership:
        return VoiceMembership(user_id=self.user_id, channel_id=self.channel_id, guild_id=self.guild_id)
