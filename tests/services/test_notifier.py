# tests/services/test_notifier.py
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from checkin.services.notifier import TAG_CHANGE, ChangeNotifier, RedisChangeNotifier

PAYLOAD = {"user": {"id": "ada"}, "tags": []}


async def start_subscriber(notifier, topic=TAG_CHANGE):
    """Returns the subscription and a task waiting for its first event."""
    subscription = notifier.subscribe(topic)
    task = asyncio.create_task(subscription.__anext__())
    # Let the subscriber register its queue
    await asyncio.sleep(0)
    return subscription, task


@pytest.mark.asyncio
async def test_publish_without_subscribers_delivers_nothing():
    notifier = ChangeNotifier()

    assert await notifier.publish(TAG_CHANGE, PAYLOAD) == 0


@pytest.mark.asyncio
async def test_publish_fans_out_to_every_subscriber():
    notifier = ChangeNotifier()
    first, first_task = await start_subscriber(notifier)
    second, second_task = await start_subscriber(notifier)

    delivered = await notifier.publish(TAG_CHANGE, PAYLOAD)

    assert delivered == 2
    assert await asyncio.wait_for(first_task, 1) == PAYLOAD
    assert await asyncio.wait_for(second_task, 1) == PAYLOAD
    await first.aclose()
    await second.aclose()


@pytest.mark.asyncio
async def test_topics_are_isolated():
    notifier = ChangeNotifier()
    subscription, task = await start_subscriber(notifier, "other")

    assert await notifier.publish(TAG_CHANGE, PAYLOAD) == 0
    assert not task.done()

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await subscription.aclose()


@pytest.mark.asyncio
async def test_closing_subscription_unsubscribes():
    notifier = ChangeNotifier()
    subscription, task = await start_subscriber(notifier)
    assert notifier.subscriber_count(TAG_CHANGE) == 1

    await notifier.publish(TAG_CHANGE, PAYLOAD)
    await asyncio.wait_for(task, 1)
    await subscription.aclose()

    assert notifier.subscriber_count(TAG_CHANGE) == 0
    assert await notifier.publish(TAG_CHANGE, PAYLOAD) == 0


@pytest.mark.asyncio
async def test_slow_subscriber_misses_events_beyond_its_buffer():
    notifier = ChangeNotifier(max_queue_size=1)
    subscription, task = await start_subscriber(notifier)

    # The waiting subscriber takes the first event off its queue
    assert await notifier.publish(TAG_CHANGE, {"n": 1}) == 1
    assert await asyncio.wait_for(task, 1) == {"n": 1}

    assert await notifier.publish(TAG_CHANGE, {"n": 2}) == 1
    assert await notifier.publish(TAG_CHANGE, {"n": 3}) == 0

    assert await asyncio.wait_for(subscription.__anext__(), 1) == {"n": 2}
    await subscription.aclose()


@pytest.mark.asyncio
async def test_redis_notifier_publishes_json():
    client = MagicMock()
    client.publish = AsyncMock(return_value=3)
    notifier = RedisChangeNotifier(client)

    delivered = await notifier.publish(TAG_CHANGE, PAYLOAD)

    assert delivered == 3
    client.publish.assert_awaited_once_with(TAG_CHANGE, json.dumps(PAYLOAD))


@pytest.mark.asyncio
async def test_redis_notifier_yields_decoded_messages_and_unsubscribes():
    async def listen():
        yield {"type": "subscribe", "data": 1}
        yield {"type": "message", "data": "not json"}
        yield {"type": "message", "data": json.dumps(PAYLOAD)}

    pubsub = MagicMock()
    pubsub.subscribe = AsyncMock()
    pubsub.unsubscribe = AsyncMock()
    pubsub.aclose = AsyncMock()
    pubsub.listen = listen
    client = MagicMock()
    client.pubsub.return_value = pubsub
    notifier = RedisChangeNotifier(client)

    subscription = notifier.subscribe(TAG_CHANGE)
    assert await subscription.__anext__() == PAYLOAD
    await subscription.aclose()

    pubsub.subscribe.assert_awaited_once_with(TAG_CHANGE)
    pubsub.unsubscribe.assert_awaited_once_with(TAG_CHANGE)
    pubsub.aclose.assert_awaited_once()
