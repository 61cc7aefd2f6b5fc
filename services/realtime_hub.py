# services/realtime_hub.py
"""
In-process Real-Time Hub.

Owns every piece of live-connection state for this process:
  connections       channel -> user id (None for anonymous sockets)
  user_connections  user id -> channels, oldest first
  online            user id -> most recent channel
  rooms             room -> channels
  memberships       channel -> rooms

Maps are mutated synchronously before any await, so a single task turn
always leaves them consistent. Delivery goes through the Channels layer
using the `dispatch_event` message type understood by the central consumer.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

from channels.layers import get_channel_layer
from django.conf import settings

logger = logging.getLogger(__name__)

ONLINE_ROOM = "online_users"


class ChannelNotReady(Exception):
    """Raised when something tries to publish before any socket bound the hub."""


def user_room(user_id) -> str:
    return f"user_{user_id}"


def group_room(group_id) -> str:
    return f"group_{group_id}"


class RealtimeHub:

    def __init__(self, channel_layer=None, always_ready: Optional[bool] = None):
        self._channel_layer = channel_layer
        self.always_ready = (
            getattr(settings, "REALTIME_BRIDGE_ALWAYS_READY", False)
            if always_ready is None else always_ready
        )
        self.connections: Dict[str, Optional[int]] = {}
        self.user_connections: Dict[int, Dict[str, None]] = {}
        self.online: Dict[int, str] = {}
        self.rooms: Dict[str, Set[str]] = {}
        self.memberships: Dict[str, Set[str]] = {}
        self._bound = False

    # ---------------------------------------------------------------
    # STATE
    # ---------------------------------------------------------------
    @property
    def channel_layer(self):
        if self._channel_layer is not None:
            return self._channel_layer
        return get_channel_layer()

    def is_ready(self) -> bool:
        if self.channel_layer is None:
            return False
        return self._bound or self.always_ready

    def ensure_ready(self) -> None:
        if not self.is_ready():
            raise ChannelNotReady("Real-time hub has no bound connections yet")

    def online_user_ids(self) -> List[int]:
        return sorted(self.online.keys())

    def room_members(self, room: str) -> Set[str]:
        return set(self.rooms.get(room, ()))

    def identity_of(self, channel_name: str) -> Optional[int]:
        return self.connections.get(channel_name)

    def _track(self, room: str, channel_name: str) -> None:
        self.rooms.setdefault(room, set()).add(channel_name)
        self.memberships.setdefault(channel_name, set()).add(room)

    def _untrack(self, room: str, channel_name: str) -> None:
        members = self.rooms.get(room)
        if members is not None:
            members.discard(channel_name)
            if not members:
                del self.rooms[room]
        joined = self.memberships.get(channel_name)
        if joined is not None:
            joined.discard(room)

    # ---------------------------------------------------------------
    # CONNECTION LIFECYCLE
    # ---------------------------------------------------------------
    async def register(self, channel_name: str, user_id: Optional[int] = None) -> None:
        """
        Tag the connection with its identity (or none), subscribe it to the
        global presence room and, when authenticated, to its personal room.
        """
        self._bound = True
        self.connections[channel_name] = user_id
        self.memberships.setdefault(channel_name, set())
        self._track(ONLINE_ROOM, channel_name)

        if user_id is not None:
            self.user_connections.setdefault(user_id, {})[channel_name] = None
            self.online[user_id] = channel_name
            self._track(user_room(user_id), channel_name)

        layer = self.channel_layer
        await layer.group_add(ONLINE_ROOM, channel_name)
        if user_id is not None:
            await layer.group_add(user_room(user_id), channel_name)

        logger.info(f"[HUB] registered {channel_name} user={user_id} online={len(self.online)}")
        await self.broadcast_online_users()

    async def unregister(self, channel_name: str) -> None:
        """
        Drop the connection from every room. The identity leaves the online
        set only when this was its active connection and nothing else remains.
        """
        if channel_name not in self.connections:
            return

        user_id = self.connections.pop(channel_name)
        rooms = self.memberships.pop(channel_name, set())
        for room in rooms:
            self._untrack(room, channel_name)

        if user_id is not None:
            remaining = self.user_connections.get(user_id, {})
            remaining.pop(channel_name, None)
            if not remaining:
                self.user_connections.pop(user_id, None)

            if self.online.get(user_id) == channel_name:
                if remaining:
                    self.online[user_id] = next(reversed(remaining))
                else:
                    self.online.pop(user_id, None)

        layer = self.channel_layer
        for room in rooms:
            try:
                await layer.group_discard(room, channel_name)
            except Exception as e:
                logger.error(f"[HUB] failed to discard {channel_name} from {room}: {e}")

        logger.info(f"[HUB] unregistered {channel_name} user={user_id} online={len(self.online)}")
        await self.broadcast_online_users()

    # ---------------------------------------------------------------
    # ROOMS
    # ---------------------------------------------------------------
    async def join_room(self, channel_name: str, room: str) -> None:
        self._track(room, channel_name)
        await self.channel_layer.group_add(room, channel_name)

    async def leave_room(self, channel_name: str, room: str) -> None:
        self._untrack(room, channel_name)
        await self.channel_layer.group_discard(room, channel_name)

    # ---------------------------------------------------------------
    # PUBLISH
    # ---------------------------------------------------------------
    async def broadcast(
        self,
        room: str,
        event: str,
        data: Any,
        *,
        app: str = "groups",
        exclude_channel: Optional[str] = None,
    ) -> None:
        """Publish `event` to every subscriber of `room` (optionally skipping one channel)."""
        self.ensure_ready()
        await self.channel_layer.group_send(
            room,
            {
                "type": "dispatch_event",
                "app": app,
                "event": event,
                "data": data,
                "exclude_channel": exclude_channel,
            },
        )

    async def send_to_user(self, user_id, event: str, data: Any, *, app: str = "groups") -> None:
        await self.broadcast(user_room(user_id), event, data, app=app)

    async def broadcast_online_users(self) -> None:
        await self.broadcast(ONLINE_ROOM, "getOnlineUsers", self.online_user_ids(), app="presence")


# ---------------------------------------------------------------
# Process-wide instance
# ---------------------------------------------------------------
_hub: Optional[RealtimeHub] = None


def get_hub() -> RealtimeHub:
    global _hub
    if _hub is None:
        _hub = RealtimeHub()
    return _hub


def reset_hub() -> RealtimeHub:
    """Fresh hub; used on teardown and by tests."""
    global _hub
    _hub = RealtimeHub()
    return _hub
