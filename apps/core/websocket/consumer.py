# apps/core/websocket/consumer.py
# ===================================================================
#                 CENTRAL WEBSOCKET GATEWAY
# ===================================================================

import json
import asyncio
import time
import logging

from asgiref.sync import sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.conf import settings

from apps.groups.realtime.handler import GroupsHandler
from services.realtime_hub import get_hub

logger = logging.getLogger(__name__)


# ===================================================================
#   CENTRAL WEBSOCKET CONSUMER
# ===================================================================
class CentralWebSocketConsumer(AsyncJsonWebsocketConsumer):
    hub = None

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.connected = False
        self.handlers = {}
        self._heartbeat_task = None
        self._last_pong_ts = time.time()

    @property
    def user_id(self):
        user = getattr(self, "user", None)
        if user is None or not user.is_authenticated:
            return None
        return user.id

    # ---------------------------------------------------------------
    # CONNECT
    # ---------------------------------------------------------------
    async def connect(self):
        self.user = self.scope.get("user")
        if self.hub is None:
            self.hub = get_hub()

        # 🛡️ PATH GUARD
        path = self.scope.get("path", "")
        if path not in ("/ws", "/ws/"):
            logger.warning(f"[CENTRAL] blocked invalid path: {path}")
            await self.close(code=4404)
            return

        self._register_handlers()

        await self.accept()
        self.connected = True

        # Handshake first, then presence
        await self.safe_send_json({
            "type": "connected",
            "status": "ok",
            "user_id": self.user_id,
        })

        await self.hub.register(self.channel_name, self.user_id)

        for name, handler in self.handlers.items():
            if hasattr(handler, "on_connect"):
                try:
                    await handler.on_connect()
                except Exception as e:
                    logger.error(f"[CENTRAL] handler '{name}' on_connect error: {e}", exc_info=True)

        self._last_pong_ts = time.time()
        self._heartbeat_task = asyncio.create_task(self._heartbeat_loop())

    # ---------------------------------------------------------------
    # SAFE SEND
    # ---------------------------------------------------------------
    async def safe_send_json(self, data):
        if not self.connected:
            return
        try:
            await self.send_json(data)
        except Exception as e:
            # socket already gone; disconnect() does the cleanup
            logger.debug(f"[CENTRAL] send on closed socket dropped: {e}")

    # ---------------------------------------------------------------
    # HANDLER REGISTRATION
    # ---------------------------------------------------------------
    def _register_handlers(self):
        self.handlers["groups"] = GroupsHandler(self, self.hub)

    # ---------------------------------------------------------------
    # HEARTBEAT
    # ---------------------------------------------------------------
    async def _heartbeat_loop(self):
        """
        Socket-level heartbeat:
        - ping every WS_HEARTBEAT_SECONDS
        - no pong for WS_PONG_TIMEOUT_SECONDS -> close, which triggers cleanup
        """
        interval = getattr(settings, "WS_HEARTBEAT_SECONDS", 20)
        timeout = getattr(settings, "WS_PONG_TIMEOUT_SECONDS", 70)
        try:
            while self.connected:
                await asyncio.sleep(interval)

                if (time.time() - self._last_pong_ts) > timeout:
                    logger.warning(f"[CENTRAL] pong timeout -> closing {self.channel_name}")
                    await self.close(code=4000)
                    return

                await self.safe_send_json({"type": "ping", "ts": int(time.time())})
        except asyncio.CancelledError:
            return

    # ---------------------------------------------------------------
    # DISCONNECT
    # ---------------------------------------------------------------
    async def disconnect(self, close_code):
        was_connected = self.connected
        self.connected = False

        if self._heartbeat_task:
            self._heartbeat_task.cancel()
            try:
                await self._heartbeat_task
            except asyncio.CancelledError:
                pass
            self._heartbeat_task = None

        if not was_connected:
            return

        for name, handler in self.handlers.items():
            if hasattr(handler, "on_disconnect"):
                try:
                    await handler.on_disconnect()
                except Exception as e:
                    logger.error(f"[CENTRAL] handler '{name}' cleanup error: {e}")

        try:
            await self.hub.unregister(self.channel_name)
        except Exception as e:
            logger.error(f"[CENTRAL] hub unregister failed for {self.channel_name}: {e}", exc_info=True)

        if self.user_id is not None:
            try:
                await sync_to_async(self.user.touch_last_active)()
            except Exception as e:
                logger.error(f"[CENTRAL] last_active update failed for user {self.user_id}: {e}")

    # ---------------------------------------------------------------
    # RECEIVE → ROUTE TO HANDLER
    # ---------------------------------------------------------------
    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "")
        except ValueError:
            await self.safe_send_json({"type": "error", "message": "Invalid JSON"})
            return

        if not isinstance(data, dict):
            await self.safe_send_json({"type": "error", "message": "Invalid JSON"})
            return

        # Unified envelope: merge payload into root
        if isinstance(data.get("payload"), dict):
            payload = data.pop("payload")
            for k, v in payload.items():
                if k not in ("app", "type"):
                    data[k] = v

        app = data.get("app")
        msg_type = data.get("type")

        if msg_type == "pong":
            self._last_pong_ts = time.time()
            return

        if not app:
            await self.safe_send_json({"type": "error", "message": "Missing 'app' field"})
            return

        handler = self.handlers.get(app)
        if not handler:
            await self.safe_send_json({"type": "error", "message": f"No handler for app '{app}'"})
            return

        try:
            await handler.handle(data)
        except Exception as e:
            logger.error(f"[CENTRAL] Handler '{app}' error: {e}", exc_info=True)
            await self.safe_send_json({"type": "error", "message": "Handler failed"})

    # ---------------------------------------------------------------
    # EVENT DISPATCHER
    # ---------------------------------------------------------------
    async def dispatch_event(self, event):
        """
        Hub → socket delivery.

        {
            "type": "dispatch_event",
            "app": "groups" | "presence",
            "event": "newGroupMessage" | "getOnlineUsers" | ...,
            "data": ...,
            "exclude_channel": "<channel name>" | None
        }
        """
        if not self.connected:
            return
        if event.get("exclude_channel") and event["exclude_channel"] == self.channel_name:
            return

        app = event.get("app")
        evt = event.get("event")
        if not app or not evt:
            logger.error(f"[CENTRAL] dispatch_event missing app/event: {event}")
            return

        payload = {"type": "event", "app": app, "event": evt, "data": event.get("data")}

        handler = self.handlers.get(app)
        try:
            if handler is not None and hasattr(handler, "handle_backend_event"):
                await handler.handle_backend_event(payload)
            else:
                await self.safe_send_json(payload)
        except Exception as e:
            logger.error(f"[CENTRAL] dispatch_event processing error: {e}", exc_info=True)
