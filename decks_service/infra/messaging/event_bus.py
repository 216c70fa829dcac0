"""
Redis-backed event bus for the service mesh.

``emit`` appends to a per-event stream so that consumer groups get balanced
delivery, ``broadcast`` uses Pub/Sub so that every running instance sees the
message.
"""

import asyncio
import json
from typing import Any, Iterable, List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from decks_service.application.ports import EventBusPort, EventHandler
from decks_service.infra.config.logging_config import get_logger
from decks_service.infra.metrics import EVENTS_PUBLISHED


class RedisEventBus(EventBusPort):
    def __init__(
        self,
        redis_client: redis.Redis,
        node_id: str,
        stream_maxlen: int = 10_000,
    ):
        self.redis_client = redis_client
        self.node_id = node_id
        self.stream_maxlen = stream_maxlen
        self._listeners: List[asyncio.Task] = []
        self._log = get_logger("infra.event_bus")

    @staticmethod
    def stream_name(event: str) -> str:
        return f"events:{event}"

    async def emit(self, event: str, payload: Any) -> None:
        fields = {
            "event": event,
            "sender": self.node_id,
            "payload": json.dumps(payload),
        }
        message_id = await self.redis_client.xadd(
            self.stream_name(event),
            fields,
            maxlen=self.stream_maxlen,
            approximate=True,
        )
        EVENTS_PUBLISHED.labels(event=event, mode="emit").inc()
        self._log.info("event.emit", event_name=event, message_id=message_id)

    async def broadcast(self, event: str, payload: Any = None) -> None:
        message = json.dumps({"sender": self.node_id, "payload": payload})
        receivers = await self.redis_client.publish(event, message)
        EVENTS_PUBLISHED.labels(event=event, mode="broadcast").inc()
        self._log.info("event.broadcast", event_name=event, receivers=receivers)

    async def subscribe(self, channels: Iterable[str], handler: EventHandler) -> None:
        channels = list(channels)
        pubsub = self.redis_client.pubsub()
        await pubsub.subscribe(*channels)
        task = asyncio.create_task(self._listen(pubsub, handler))
        self._listeners.append(task)
        self._log.info("event.subscribe", channels=channels)

    async def _listen(self, pubsub, handler: EventHandler) -> None:
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                channel = message["channel"]
                payload = self._decode(message.get("data"))
                try:
                    await handler(channel, payload)
                except Exception as e:
                    # A faulty handler must not stop the listener
                    self._log.exception(
                        "event.handler.error", event_name=channel, error=str(e)
                    )
        except RedisError as e:
            self._log.error("event.listener.error", error=str(e))
            raise
        finally:
            await pubsub.aclose()

    @staticmethod
    def _decode(data: Optional[str]) -> Any:
        if data is None:
            return None
        try:
            return json.loads(data).get("payload")
        except (json.JSONDecodeError, AttributeError, TypeError):
            return data

    async def close(self) -> None:
        for task in self._listeners:
            task.cancel()
        for task in self._listeners:
            try:
                await task
            except (asyncio.CancelledError, RedisError):
                pass
        self._listeners.clear()
        self._log.info("event_bus.closed")
