import json
from channels.generic.websocket import AsyncWebsocketConsumer

from care.services.notify import queue_group


class QueueConsumer(AsyncWebsocketConsumer):
    """Streams new and resolved dispatch requests to the hospital that owns them."""

    async def connect(self):
        user = self.scope.get("user")
        if not (user and user.is_authenticated and getattr(user, "is_approved_hospital", False)):
            await self.close()
            return
        self.group = queue_group(user.id)
        await self.channel_layer.group_add(self.group, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        group = getattr(self, "group", None)
        if group:
            await self.channel_layer.group_discard(group, self.channel_name)

    async def queue_request(self, event):
        # event: {"type": "queue.request", "request": {...}}
        await self.send(json.dumps(event))

    async def queue_resolved(self, event):
        # event: {"type": "queue.resolved", "requestId": "..."}
        await self.send(json.dumps(event))
