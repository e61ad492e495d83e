from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

from starlette.websockets import WebSocket, WebSocketState

from checkin.core.errors import ChannelError


class Subscriber(Protocol):
    def is_open(self) -> bool: ...

    async def send(self, message: str) -> bool: ...


class WebSocketSubscriber:
    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket

    def is_open(self) -> bool:
        return (
            self.websocket.application_state == WebSocketState.CONNECTED
            and self.websocket.client_state == WebSocketState.CONNECTED
        )

    async def send(self, message: str) -> bool:
        await self.websocket.send_text(message)
        return True


class EventBroadcaster:
    """Registry of live subscribers with best-effort, at-most-once fan-out.

    Each delivery runs in its own task, so a slow or broken subscriber never
    holds up the others or the publisher. Subscribers that fail a send are
    dropped; nothing is replayed to them on reconnect.
    """

    def __init__(self, send_timeout: float = 5.0) -> None:
        self._subscribers: set[Subscriber] = set()
        self._pending: set[asyncio.Task] = set()
        self._send_timeout = send_timeout
        self._log = logging.getLogger("uvicorn.error")

    def __len__(self) -> int:
        return len(self._subscribers)

    def subscribe(self, subscriber: Subscriber) -> Subscriber:
        self._subscribers.add(subscriber)
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.discard(subscriber)

    def publish(self, event: dict[str, Any]) -> list[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._log.warning("publish called outside an event loop; %s dropped", event.get("type"))
            return []

        message = json.dumps(event)
        tasks = []
        for subscriber in list(self._subscribers):
            if not subscriber.is_open():
                continue
            task = loop.create_task(self._safe_send(subscriber, message))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            tasks.append(task)
        return tasks

    async def drain(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending))

    async def _safe_send(self, subscriber: Subscriber, message: str) -> bool:
        try:
            try:
                ok = await asyncio.wait_for(subscriber.send(message), timeout=self._send_timeout)
            except asyncio.TimeoutError as exc:
                raise ChannelError("send timed out") from exc
            except Exception as exc:  # noqa: BLE001
                raise ChannelError(str(exc) or type(exc).__name__) from exc
            if not ok:
                raise ChannelError("subscriber refused message")
        except ChannelError as exc:
            self._log.warning("Dropping subscriber %r: %s", subscriber, exc)
            self.unsubscribe(subscriber)
            return False
        return True
