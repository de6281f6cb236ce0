import json

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from core.services.permissions import accessible_modules

# board -> module a subscriber must be able to open
BOARDS = {"crm": "crm-pipeline", "talent-bank": "talent-bank"}


@database_sync_to_async
def _may_watch(user, board) -> bool:
    return BOARDS[board] in accessible_modules(user)


class PipelineConsumer(AsyncWebsocketConsumer):
    """Pushes card moves of one kanban board to every open copy of it."""

    async def connect(self):
        user = self.scope.get("user")
        board = self.scope["url_route"]["kwargs"].get("board")
        if not (user and user.is_authenticated) or board not in BOARDS or not await _may_watch(user, board):
            await self.close(code=4403)
            return
        self.group_name = f"pipeline.{board}"
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "board": board}))

    async def disconnect(self, close_code):
        group = getattr(self, "group_name", None)
        if group:
            await self.channel_layer.group_discard(group, self.channel_name)

    async def pipeline_moved(self, event):
        # event: {"type": "pipeline.moved", "board": ..., "id": ..., "from": ..., "to": ..., "ts": ...}
        await self.send(json.dumps(event))
