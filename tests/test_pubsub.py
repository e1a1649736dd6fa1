"""
Tests for the in-process publish/subscribe channel.

Async scenarios run under ``asyncio.run`` so no async plugin is needed.
"""
import asyncio
import logging

import pytest

from launchpad.infrastructure.pubsub import PubSub

DONE = object()


async def next_or_done(subscription):
    try:
        return await subscription.__anext__()
    except StopAsyncIteration:
        return DONE


class TestDelivery:
    """Publish reaches current subscribers of the same channel only."""

    def test_only_matching_channel_resolves(self):
        """A publish on COMMENT_ADDED:s1 never reaches a COMMENT_ADDED:s2 subscriber."""
        async def scenario():
            pubsub = PubSub()
            first = pubsub.subscribe("COMMENT_ADDED:s1")
            second = pubsub.subscribe("COMMENT_ADDED:s2")
            payload = {"commentAdded": {"id": "c1", "text": "hi"}}

            pending = asyncio.ensure_future(next_or_done(second))
            await asyncio.sleep(0)
            pubsub.publish("COMMENT_ADDED:s1", payload)

            received = await asyncio.wait_for(next_or_done(first), timeout=1)
            await asyncio.sleep(0)
            second_done = pending.done()

            second.close()
            return received, second_done, await pending

        received, second_done, second_result = asyncio.run(scenario())

        assert received == {"commentAdded": {"id": "c1", "text": "hi"}}
        assert second_done is False
        assert second_result is DONE

    def test_fan_out(self):
        async def scenario():
            pubsub = PubSub()
            subscriptions = [pubsub.subscribe("STARTUP_UPVOTED") for _ in range(3)]
            delivered = pubsub.publish("STARTUP_UPVOTED", {"id": 1})
            results = [await next_or_done(s) for s in subscriptions]
            return delivered, results

        delivered, results = asyncio.run(scenario())

        assert delivered == 3
        assert results == [{"id": 1}] * 3

    def test_waiting_consumer_is_resolved_by_publish(self):
        async def scenario():
            pubsub = PubSub()
            subscription = pubsub.subscribe("news")
            waiting = asyncio.ensure_future(next_or_done(subscription))
            await asyncio.sleep(0)
            assert not waiting.done()

            pubsub.publish("news", "hello")
            return await asyncio.wait_for(waiting, timeout=1), subscription.pending

        assert asyncio.run(scenario()) == ("hello", 0)

    def test_fifo_order(self):
        async def scenario():
            pubsub = PubSub()
            subscription = pubsub.subscribe("news")
            for n in range(5):
                pubsub.publish("news", n)
            return [await next_or_done(subscription) for _ in range(5)]

        assert asyncio.run(scenario()) == [0, 1, 2, 3, 4]

    def test_no_replay_for_late_subscribers(self):
        async def scenario():
            pubsub = PubSub()
            dropped = pubsub.publish("news", "early")
            subscription = pubsub.subscribe("news")
            pubsub.publish("news", "late")
            return dropped, await next_or_done(subscription)

        assert asyncio.run(scenario()) == (0, "late")

    def test_async_for(self):
        async def scenario():
            pubsub = PubSub()
            subscription = pubsub.subscribe("news")
            received = []

            async def consume():
                async for payload in subscription:
                    received.append(payload)

            consumer = asyncio.ensure_future(consume())
            pubsub.publish("news", "a")
            pubsub.publish("news", "b")
            await asyncio.sleep(0.01)
            subscription.close()
            await asyncio.wait_for(consumer, timeout=1)
            return received

        assert asyncio.run(scenario()) == ["a", "b"]


class TestCancellation:
    """Closing a subscription frees it from the registry."""

    def test_close_shrinks_listener_count(self):
        pubsub = PubSub()
        first = pubsub.subscribe("COMMENT_ADDED:1")
        second = pubsub.subscribe("COMMENT_ADDED:1")
        assert pubsub.listener_count("COMMENT_ADDED:1") == 2

        first.close()
        assert pubsub.listener_count("COMMENT_ADDED:1") == 1
        assert pubsub.publish("COMMENT_ADDED:1", "x") == 1

        second.close()
        assert pubsub.listener_count() == 0
        assert "COMMENT_ADDED:1" not in pubsub.channels()

    def test_close_is_idempotent(self):
        pubsub = PubSub()
        subscription = pubsub.subscribe("news")
        other = pubsub.subscribe("news")

        subscription.close()
        subscription.close()

        assert subscription.closed
        assert pubsub.listener_count("news") == 1
        other.close()

    def test_close_resolves_pending_next(self):
        async def scenario():
            pubsub = PubSub()
            subscription = pubsub.subscribe("news")
            waiting = asyncio.ensure_future(next_or_done(subscription))
            await asyncio.sleep(0)
            subscription.close()
            return await asyncio.wait_for(waiting, timeout=1)

        assert asyncio.run(scenario()) is DONE

    def test_next_after_close_is_done(self):
        async def scenario():
            pubsub = PubSub()
            subscription = pubsub.subscribe("news")
            pubsub.publish("news", "unread")
            subscription.close()
            return await next_or_done(subscription), pubsub.publish("news", "ignored")

        assert asyncio.run(scenario()) == (DONE, 0)

    def test_async_with_closes(self):
        async def scenario():
            pubsub = PubSub()
            async with pubsub.subscribe("news") as subscription:
                pubsub.publish("news", 1)
                first = await next_or_done(subscription)
            return first, subscription.closed, pubsub.listener_count()

        assert asyncio.run(scenario()) == (1, True, 0)

    def test_cancelled_consumer_can_close(self):
        async def scenario():
            pubsub = PubSub()
            subscription = pubsub.subscribe("news")
            waiting = asyncio.ensure_future(subscription.__anext__())
            await asyncio.sleep(0)
            waiting.cancel()
            await asyncio.gather(waiting, return_exceptions=True)
            subscription.close()
            return pubsub.listener_count()

        assert asyncio.run(scenario()) == 0

    def test_close_all(self):
        pubsub = PubSub()
        subscriptions = [pubsub.subscribe(f"channel-{n}") for n in range(3)]

        pubsub.close()

        assert all(s.closed for s in subscriptions)
        assert pubsub.channels() == []


class TestBuffering:

    def test_bounded_buffer_drops_oldest(self, caplog):
        caplog.set_level(logging.WARNING, logger="launchpad")

        async def scenario():
            pubsub = PubSub(max_buffer=2)
            subscription = pubsub.subscribe("news")
            for n in (1, 2, 3):
                pubsub.publish("news", n)
            pending, dropped = subscription.pending, subscription.dropped
            return pending, dropped, [await next_or_done(subscription) for _ in range(2)]

        pending, dropped, received = asyncio.run(scenario())

        assert (pending, dropped) == (2, 1)
        assert received == [2, 3]
        assert any("dropping oldest" in r.getMessage() for r in caplog.records)

    def test_unbounded_by_default(self):
        pubsub = PubSub()
        subscription = pubsub.subscribe("news")
        for n in range(1000):
            pubsub.publish("news", n)
        assert subscription.pending == 1000

    def test_concurrent_next_rejected(self):
        async def scenario():
            pubsub = PubSub()
            subscription = pubsub.subscribe("news")
            first = asyncio.ensure_future(subscription.__anext__())
            await asyncio.sleep(0)
            try:
                await subscription.__anext__()
            finally:
                subscription.close()
                await asyncio.gather(first, return_exceptions=True)

        with pytest.raises(RuntimeError):
            asyncio.run(scenario())


class TestArguments:

    def test_bad_buffer_size(self):
        with pytest.raises(ValueError):
            PubSub(max_buffer=0)

    def test_channel_required(self):
        with pytest.raises(ValueError):
            PubSub().subscribe("")
