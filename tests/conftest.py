import itertools

import pytest

from kennel.config import Settings
from kennel.core.models import ChannelInfo, ChannelKind, VoiceStateChanged
from kennel.core.rooms import RoomOrchestrator
from kennel.services.directory import ChannelNotFound, DirectoryError

GUILD = 1000
LOBBY_CATEGORY = 10
BARK = 11
TEAMS = 12
GENERAL = 13


class FakeDirectory:
    """
    In-memory stand-in for DirectoryClient.

    Records every call in ``calls`` as (operation, args...). Individual
    operations can be made to fail via ``fail_on``: {"create_channel": 2}
    fails the second create, {"move_member": 1} the first move, etc.
    """

    def __init__(self):
        self.channels: dict[int, ChannelInfo] = {}
        self.occupancy: dict[int, int] = {}
        self.calls: list[tuple] = []
        self.fail_on: dict[str, int] = {}
        self.fail_delete_ids: set[int] = set()
        self._counts: dict[str, int] = {}
        self._ids = itertools.count(500)

    def add(self, channel_id, name, kind=ChannelKind.VOICE, parent_id=None) -> ChannelInfo:
        info = ChannelInfo(id=channel_id, name=name, kind=kind, guild_id=GUILD, parent_id=parent_id)
        self.channels[channel_id] = info
        return info

    def _maybe_fail(self, op: str) -> None:
        self._counts[op] = self._counts.get(op, 0) + 1
        if self.fail_on.get(op) == self._counts[op]:
            raise DirectoryError(f"{op} failed")

    def ops(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    async def get_channel(self, channel_id):
        self.calls.append(("get_channel", channel_id))
        self._maybe_fail("get_channel")
        if channel_id not in self.channels:
            raise ChannelNotFound(f"channel {channel_id}")
        return self.channels[channel_id]

    async def list_channels(self, guild_id):
        self.calls.append(("list_channels", guild_id))
        self._maybe_fail("list_channels")
        return [c for c in self.channels.values() if c.guild_id == guild_id]

    async def create_channel(self, guild_id, name, kind, parent_id=None, reason=None):
        self.calls.append(("create_channel", guild_id, name, kind, parent_id))
        self._maybe_fail("create_channel")
        return self.add(next(self._ids), name, kind, parent_id)

    async def delete_channel(self, channel_id, reason):
        self.calls.append(("delete_channel", channel_id))
        self._maybe_fail("delete_channel")
        if channel_id in self.fail_delete_ids:
            raise DirectoryError(f"delete {channel_id} failed")
        if channel_id not in self.channels:
            raise ChannelNotFound(f"channel {channel_id}")
        del self.channels[channel_id]

    async def move_member(self, guild_id, user_id, channel_id):
        self.calls.append(("move_member", guild_id, user_id, channel_id))
        self._maybe_fail("move_member")
        self.occupancy[channel_id] = self.occupancy.get(channel_id, 0) + 1

    async def member_count(self, channel_id):
        self.calls.append(("member_count", channel_id))
        self._maybe_fail("member_count")
        return self.occupancy.get(channel_id, 0)


@pytest.fixture
def settings():
    return Settings(token="test-token")


@pytest.fixture
def directory():
    d = FakeDirectory()
    d.add(LOBBY_CATEGORY, "Lobby", ChannelKind.CATEGORY)
    d.add(BARK, "🐕 bark", parent_id=LOBBY_CATEGORY)
    d.add(TEAMS, "teams", parent_id=LOBBY_CATEGORY)
    d.add(GENERAL, "General", parent_id=LOBBY_CATEGORY)
    return d


@pytest.fixture
def orchestrator(directory, settings):
    return RoomOrchestrator(directory, settings)


def voice_event(user_id=1, channel_id=None, name="milk", guild_id=GUILD) -> VoiceStateChanged:
    return VoiceStateChanged(user_id=user_id, guild_id=guild_id, channel_id=channel_id, display_name=name)
