"""Streams pub/sub events to a WebSocket client."""
from __future__ import annotations

import asyncio
import logging

from starlette.websockets import WebSocket, WebSocketDisconnect

from launchpad.infrastructure.pubsub import Subscription

logger = logging.getLogger(__name__)


async def stream_subscription(websocket: WebSocket, subscription: Subscription) -> None:
    """Forward every payload of ``subscription`` to ``websocket`` as JSON.

    The websocket must already be accepted. Returns when the client
    disconnects or the subscription ends; the subscription is closed either
    way, so the channel stops buffering for a client that is gone.
    """
    forward = asyncio.ensure_future(_forward(websocket, subscription))
    watch = asyncio.ensure_future(_wait_for_disconnect(websocket))
    try:
        done, pending = await asyncio.wait({forward, watch}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        for task in done:
            error = task.exception()
            if error is not None and not isinstance(error, WebSocketDisconnect):
                raise error
    finally:
        subscription.close()
        logger.debug(f"Stream for {subscription.channel} ended")


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    async for payload in subscription:
        await websocket.send_json(payload)


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return
