"""In-process publish/subscribe for live updates.

Architecture:
1. A registry maps each channel name to its live subscriptions
2. ``publish`` pushes the payload to every subscription of that channel and
   returns at once; it never waits on a consumer
3. Each subscription buffers payloads until its consumer pulls them with
   ``async for``; a consumer waiting on an empty buffer parks on a single
   future that the next publish resolves

Delivery is at-most-once: a channel without subscribers drops the event and
nothing is replayed to later subscribers. The registry is not locked; it is
only touched from the event loop thread.
"""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional

logger = logging.getLogger(__name__)

_DONE = object()


class Subscription:
    """An async iterator over the payloads published to one channel.

    Use it with ``async for`` and close it when the consumer goes away,
    either explicitly or through ``async with``. Closing removes it from the
    registry and ends a pending ``__anext__``.

    There is a single waiter slot: only one consumer may await the next
    payload at a time, and a second concurrent ``__anext__`` raises
    ``RuntimeError``. Fan out by subscribing again, not by sharing.
    """

    def __init__(self, pubsub: PubSub, channel: str, max_buffer: Optional[int] = None) -> None:
        self._pubsub = pubsub
        self.channel = channel
        self._buffer: Deque[Any] = deque(maxlen=max_buffer)
        self._waiter: Optional[asyncio.Future] = None
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Payloads buffered and not yet consumed."""
        return len(self._buffer)

    def _push(self, payload: Any) -> None:
        if self._closed:
            return

        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result(payload)
            self._waiter = None
            return

        if self._buffer.maxlen is not None and len(self._buffer) == self._buffer.maxlen:
            # deque(maxlen) drops the oldest entry on append
            self.dropped += 1
            logger.warning(
                f"Subscriber buffer full on channel {self.channel}, dropping oldest event "
                f"({self.dropped} dropped so far)"
            )
        self._buffer.append(payload)

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> Any:
        if self._buffer:
            return self._buffer.popleft()
        if self._closed:
            raise StopAsyncIteration
        if self._waiter is not None:
            raise RuntimeError(f"Subscription to {self.channel} is already being awaited")

        self._waiter = asyncio.get_running_loop().create_future()
        try:
            result = await self._waiter
        finally:
            self._waiter = None

        if result is _DONE:
            raise StopAsyncIteration
        return result

    def close(self) -> None:
        """Deregister and end the iteration. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._pubsub._remove(self)
        self._buffer.clear()

        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result(_DONE)

    async def aclose(self) -> None:
        self.close()

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Subscription channel={self.channel} {state} pending={len(self._buffer)}>"


class PubSub:
    """Channel-keyed fan-out of payloads to subscriptions.

    Args:
        max_buffer: Per-subscription buffer bound. ``None`` (the default)
            buffers without limit, so a consumer that stops reading grows
            memory until it is closed; a bound drops the oldest payload.
    """

    def __init__(self, max_buffer: Optional[int] = None) -> None:
        if max_buffer is not None and max_buffer < 1:
            raise ValueError("max_buffer must be at least 1")
        self._max_buffer = max_buffer
        # dict used as an insertion-ordered set
        self._subscriptions: Dict[str, Dict[Subscription, None]] = {}

    def publish(self, channel: str, payload: Any) -> int:
        """Deliver ``payload`` to every current subscriber of ``channel``.

        Returns:
            Number of subscriptions the payload was handed to
        """
        subscribers = self._subscriptions.get(channel)
        if not subscribers:
            logger.debug(f"No subscribers on {channel}, event dropped")
            return 0

        delivered = 0
        for subscription in list(subscribers):
            subscription._push(payload)
            delivered += 1
        logger.debug(f"Published to {channel}: {delivered} subscriber(s)")
        return delivered

    def subscribe(self, channel: str) -> Subscription:
        """Register a new subscription; it sees only events published from now on."""
        if not channel:
            raise ValueError("channel name is required")

        subscription = Subscription(self, channel, self._max_buffer)
        self._subscriptions.setdefault(channel, {})[subscription] = None
        logger.debug(f"Subscribed to {channel} ({len(self._subscriptions[channel])} listener(s))")
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        subscribers = self._subscriptions.get(subscription.channel)
        if subscribers is None:
            return
        subscribers.pop(subscription, None)
        if not subscribers:
            del self._subscriptions[subscription.channel]
        logger.debug(f"Unsubscribed from {subscription.channel}")

    def listener_count(self, channel: Optional[str] = None) -> int:
        if channel is None:
            return sum(len(subscribers) for subscribers in self._subscriptions.values())
        return len(self._subscriptions.get(channel, ()))

    def channels(self) -> List[str]:
        return list(self._subscriptions)

    def close(self) -> None:
        """Close every subscription, e.g. on shutdown."""
        for subscribers in list(self._subscriptions.values()):
            for subscription in list(subscribers):
                subscription.close()

    def __repr__(self) -> str:
        return f"<PubSub channels={len(self._subscriptions)} listeners={self.listener_count()}>"
