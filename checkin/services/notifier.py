# checkin/services/notifier.py
"""
Change notifications for live check-in viewers.

Every committed check-in/out is published on the `tag_change` topic to all
currently connected subscribers. Delivery is best effort and at most once:
a subscriber whose buffer is full misses the event, and nothing is kept
for subscribers that connect later.

The notifier is created once at startup and handed to resolvers through
the request context.
"""

import asyncio
import json
import logging
from collections import defaultdict
from typing import Any, AsyncIterator, Dict, Set

import redis.asyncio as redis

logger = logging.getLogger(__name__)

TAG_CHANGE = "tag_change"


class ChangeNotifier:
    """In-process fan-out to per-subscriber bounded queues."""

    def __init__(self, max_queue_size: int = 100):
        self.max_queue_size = max_queue_size
        self._subscribers: Dict[str, Set[asyncio.Queue]] = defaultdict(set)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    async def publish(self, topic: str, payload: Any) -> int:
        """Delivers payload to current subscribers; returns how many received it."""
        delivered = 0
        for queue in list(self._subscribers.get(topic, ())):
            try:
                queue.put_nowait(payload)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(f"Dropping {topic} event for a slow subscriber")
        return delivered

    async def subscribe(self, topic: str) -> AsyncIterator[Any]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue_size)
        self._subscribers[topic].add(queue)
        logger.info(f"Subscriber joined {topic} ({self.subscriber_count(topic)} connected)")
        try:
            while True:
                yield await queue.get()
        finally:
            self._subscribers[topic].discard(queue)
            logger.info(f"Subscriber left {topic}")

    async def close(self) -> None:
        self._subscribers.clear()


class RedisChangeNotifier(ChangeNotifier):
    """
    Shares topics between service processes through Redis Pub/Sub.
    Payloads travel as JSON, so they must be JSON-ready dicts.
    """

    def __init__(self, client: redis.Redis):
        super().__init__()
        self._client = client

    async def publish(self, topic: str, payload: Any) -> int:
        return await self._client.publish(topic, json.dumps(payload, default=str))

    async def subscribe(self, topic: str) -> AsyncIterator[Any]:
        pubsub = self._client.pubsub()
        await pubsub.subscribe(topic)
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                try:
                    yield json.loads(message["data"])
                except json.JSONDecodeError as e:
                    logger.warning(f"Failed to parse {topic} message: {e}")
        finally:
            await pubsub.unsubscribe(topic)
            await pubsub.aclose()

    async def close(self) -> None:
        await self._client.aclose()
