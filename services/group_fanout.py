# services/group_fanout.py
"""
Group Fan-out Bridge: the sync call surface HTTP views use to push events
into the Real-Time Hub without touching live connections.

- before any socket bound the hub -> False (never raises)
- empty recipient list            -> 0
"""
import json
import logging
from typing import Iterable, Union

from asgiref.sync import async_to_sync
from rest_framework.renderers import JSONRenderer

from services.realtime_hub import ChannelNotReady, RealtimeHub, get_hub, group_room, user_room

logger = logging.getLogger(__name__)


class GroupFanoutBridge:

    def __init__(self, hub: RealtimeHub):
        self.hub = hub

    @staticmethod
    def _normalize(payload):
        # serializer output may hold datetimes / Decimals; make it layer-safe JSON
        return json.loads(JSONRenderer().render(payload))

    def _publish(self, room: str, event: str, payload) -> bool:
        try:
            async_to_sync(self.hub.broadcast)(room, event, self._normalize(payload))
            return True
        except ChannelNotReady:
            logger.info(f"[FANOUT] hub not ready, dropped {event} -> {room}")
            return False
        except Exception:
            logger.exception(f"[FANOUT] publish failed ({event} -> {room})")
            return False

    # ---------------------------------------------------------------
    def emit_to_group(self, group_id, event: str, payload) -> bool:
        if not self.hub.is_ready() or not group_id:
            logger.info(f"[FANOUT] cannot emit {event} to group {group_id} (ready={self.hub.is_ready()})")
            return False
        logger.debug(f"[FANOUT] {event} -> {group_room(group_id)}")
        return self._publish(group_room(group_id), event, payload)

    def emit_to_user(self, user_id, event: str, payload) -> bool:
        if not self.hub.is_ready() or not user_id:
            logger.info(f"[FANOUT] cannot emit {event} to user {user_id} (ready={self.hub.is_ready()})")
            return False
        return self._publish(user_room(user_id), event, payload)

    def notify_group_members(self, member_ids: Iterable, event: str, payload) -> Union[int, bool]:
        """Personal-room delivery to each member; returns how many were notified."""
        if not self.hub.is_ready():
            logger.info(f"[FANOUT] cannot notify members with {event}: hub not ready")
            return False

        notified = 0
        for member_id in member_ids or []:
            if member_id and self._publish(user_room(member_id), event, payload):
                notified += 1

        logger.info(f"[FANOUT] notified {notified} members with {event}")
        return notified

    def evict_user_from_group(self, group_id, user_id) -> int:
        """
        Unsubscribe every local connection of `user_id` from the group's room
        after they leave or are removed; returns how many were dropped.
        """
        room = group_room(group_id)
        channels = [
            channel for channel in self.hub.room_members(room)
            if self.hub.identity_of(channel) == user_id
        ]
        for channel in channels:
            try:
                async_to_sync(self.hub.leave_room)(channel, room)
            except Exception:
                logger.exception(f"[FANOUT] failed to evict {channel} from {room}")
        return len(channels)


def get_fanout() -> GroupFanoutBridge:
    """Bridge bound to the process-wide hub."""
    return GroupFanoutBridge(get_hub())
