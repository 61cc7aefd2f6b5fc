# apps/groups/realtime/handler.py

from typing import Any, Dict, Optional
import logging
import time

from asgiref.sync import sync_to_async
from django.utils import timezone

from apps.groups.services import is_member
from services.realtime_hub import group_room

logger = logging.getLogger(__name__)


class GroupsHandler:
    """
    WS handler for group rooms.
    FE → BE:
        { app: "groups", type: "joinGroup" | "leaveGroup" | "sendGroupMessage" | "groupTyping", payload: {...} }
    BE → FE:
        { type: "event", app: "groups", event: "...", data: {...} }

    Failures are reported with an `error` event; the socket stays open.
    """
    app = "groups"

    def __init__(self, socket: Any, hub: Any) -> None:
        self.socket = socket
        self.hub = hub

    @property
    def user_id(self) -> Optional[int]:
        return self.socket.user_id

    # --------------------------------------------------------------
    async def on_connect(self) -> None:
        logger.info(f"[GroupsHandler] user {self.user_id} connected")

    async def on_disconnect(self) -> None:
        # hub.unregister() drops the room subscriptions themselves
        logger.info(f"[GroupsHandler] user {self.user_id} disconnected")

    # --------------------------------------------------------------
    async def handle(self, data: Dict[str, Any]) -> None:
        msg_type = data.get("type")
        routes = {
            "joinGroup": self._join_group,
            "leaveGroup": self._leave_group,
            "sendGroupMessage": self._send_group_message,
            "groupTyping": self._group_typing,
        }
        route = routes.get(msg_type)
        if route is None:
            logger.debug(f"[GroupsHandler] Unknown msg type: {msg_type}")
            await self._error(f"Unknown event '{msg_type}'")
            return
        await route(data)

    async def handle_backend_event(self, payload: Dict[str, Any]) -> None:
        await self.socket.safe_send_json(payload)

    # --------------------------------------------------------------
    async def _emit(self, event: str, data: Any) -> None:
        await self.socket.safe_send_json({
            "type": "event",
            "app": self.app,
            "event": event,
            "data": data,
        })

    async def _error(self, message: str) -> None:
        await self._emit("error", {"message": message})

    @staticmethod
    def _group_id(data: Dict[str, Any]) -> Optional[int]:
        raw = data.get("groupId")
        if raw in (None, ""):
            return None
        try:
            group_id = int(raw)
        except (TypeError, ValueError):
            return None
        return group_id if group_id > 0 else None

    def _subscribed(self, room: str) -> bool:
        # the hub is the source of truth; HTTP leave/remove evicts from it directly
        return room in self.hub.memberships.get(self.socket.channel_name, ())

    async def _is_member(self, group_id: int) -> bool:
        return await sync_to_async(is_member)(group_id, self.user_id)

    # --------------------------------------------------------------
    async def _join_group(self, data: Dict[str, Any]) -> None:
        group_id = self._group_id(data)
        if group_id is None:
            await self._error("Group ID is required")
            return

        if not await self._is_member(group_id):
            await self._error("You are not a member of this group")
            return

        room = group_room(group_id)
        await self.hub.join_room(self.socket.channel_name, room)
        logger.debug(f"[GroupsHandler] {self.socket.channel_name} joined {room}")
        await self._emit("joinedGroup", {"groupId": group_id, "roomName": room})

    async def _leave_group(self, data: Dict[str, Any]) -> None:
        group_id = self._group_id(data)
        if group_id is None:
            await self._error("Group ID is required")
            return

        room = group_room(group_id)
        await self.hub.leave_room(self.socket.channel_name, room)
        await self._emit("leftGroup", {"groupId": group_id, "roomName": room})

    async def _send_group_message(self, data: Dict[str, Any]) -> None:
        """Optimistic path: broadcast only; durable writes go through HTTP."""
        group_id = self._group_id(data)
        text = data.get("text") or ""
        image = data.get("image") or None

        if group_id is None or (not text and not image):
            await self._error("Group ID and message content are required")
            return

        if self.user_id is None:
            await self._error("User not authenticated")
            return

        if not await self._is_member(group_id):
            await self._error("You are not a member of this group")
            return

        temp_id = f"temp_{int(time.time() * 1000)}_{self.socket.channel_name}"
        message = {
            "id": temp_id,
            "groupId": group_id,
            "senderId": self.user_id,
            "text": text,
            "image": image,
            "createdAt": timezone.now().isoformat(),
            "optimistic": True,
        }

        await self.hub.broadcast(group_room(group_id), "newGroupMessage", message)
        await self._emit("messageSent", {"tempId": temp_id, "groupId": group_id, "success": True})

    async def _group_typing(self, data: Dict[str, Any]) -> None:
        group_id = self._group_id(data)
        if group_id is None or self.user_id is None:
            return

        room = group_room(group_id)
        if not self._subscribed(room):
            return

        await self.hub.broadcast(
            room,
            "userTyping",
            {"groupId": group_id, "userId": self.user_id, "isTyping": bool(data.get("isTyping"))},
            exclude_channel=self.socket.channel_name,
        )
