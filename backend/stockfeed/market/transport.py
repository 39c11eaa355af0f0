"""In-process publish/subscribe transport built on asyncio queues."""

from __future__ import annotations

import asyncio
import logging

from .errors import TransportError
from .interface import Transport
from .models import Command, OutboundMessage

logger = logging.getLogger(__name__)


class QueueTransport(Transport):
    """Transport with one inbound command queue and one queue per listener.

    Producers (the HTTP command endpoint, tests) call ``submit``; each
    consumer of outbound messages (an SSE client, a test) calls ``listen``
    to obtain its own queue. ``publish`` fans out with put_nowait, so a slow
    listener loses messages instead of stalling the service.
    """

    def __init__(self, max_queue_size: int = 1000) -> None:
        self._max_queue_size = max_queue_size
        self._inbound: asyncio.Queue[Command] = asyncio.Queue(maxsize=max_queue_size)
        self._listeners: set[asyncio.Queue[OutboundMessage]] = set()
        self._closed = False

    # --- Transport ---

    async def publish(self, message: OutboundMessage) -> None:
        if self._closed:
            raise TransportError(message.kind.value, "Transport is closed")
        for queue in list(self._listeners):
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                logger.warning("Listener queue full, dropping %s message", message.kind.value)

    async def receive(self, timeout: float | None = None) -> Command | None:
        try:
            return await asyncio.wait_for(self._inbound.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._listeners.clear()
            logger.info("Queue transport closed")

    # --- Producer / consumer side ---

    def submit(self, command: Command) -> None:
        """Enqueue an inbound command. Raises TransportError if closed or full."""
        if self._closed:
            raise TransportError(command.kind, "Transport is closed")
        try:
            self._inbound.put_nowait(command)
        except asyncio.QueueFull as e:
            raise TransportError(command.kind, "Inbound command queue is full") from e

    def listen(self) -> asyncio.Queue[OutboundMessage]:
        """Register a new listener and return the queue it will receive messages on."""
        queue: asyncio.Queue[OutboundMessage] = asyncio.Queue(maxsize=self._max_queue_size)
        self._listeners.add(queue)
        return queue

    def unlisten(self, queue: asyncio.Queue[OutboundMessage]) -> None:
        self._listeners.discard(queue)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
