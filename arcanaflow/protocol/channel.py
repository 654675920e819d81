"""
Outbound message channel.

Bounded FIFO between the dispatcher and the socket writer. A full channel
makes the dispatcher wait; messages are never dropped or reordered while the
channel is open.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from arcanaflow.models.messages import (
    SERVER_MESSAGE_TYPES,
    ServerMessage,
    encode_server_message,
)

logger = logging.getLogger(__name__)

DEFAULT_MAXSIZE = 32

Sink = Callable[[str], Awaitable[None]]


class ChannelClosedError(Exception):
    """A message was sent after the channel was closed."""


class OutboundChannel:
    """
    Ordered, bounded delivery path for one connection.

    One producer (the dispatcher) and one consumer (the writer task).
    """

    def __init__(self, maxsize: int = DEFAULT_MAXSIZE):
        self._queue: asyncio.Queue[ServerMessage] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._closed_event = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, message: ServerMessage) -> None:
        """
        Enqueue a message, waiting while the channel is full.

        Raises:
            ChannelClosedError: If the channel is closed, including when it
                closes while this call is waiting for room
            TypeError: If the message is not an outbound variant
        """
        if not isinstance(message, SERVER_MESSAGE_TYPES):
            raise TypeError(f"Not an outbound message: {type(message).__name__}")
        if self._closed:
            raise ChannelClosedError()
        await self._queue.put(message)
        if self._closed:
            raise ChannelClosedError()

    async def drain(self, sink: Sink) -> None:
        """
        Writer loop: deliver messages to the sink in order until closed.

        Errors raised by the sink close the channel and propagate.
        """
        closed = asyncio.ensure_future(self._closed_event.wait())
        getter: asyncio.Future[ServerMessage] | None = None
        try:
            while not self._closed:
                getter = asyncio.ensure_future(self._queue.get())
                await asyncio.wait({getter, closed}, return_when=asyncio.FIRST_COMPLETED)
                if not getter.done() or self._closed:
                    break
                await sink(encode_server_message(getter.result()))
        finally:
            closed.cancel()
            if getter is not None and not getter.done():
                getter.cancel()
            self.close()

    def close(self) -> None:
        """Close the channel, discard pending messages and wake the writer."""
        if self._closed:
            return
        self._closed = True
        self._discard_pending()
        self._closed_event.set()

    def _discard_pending(self) -> None:
        discarded = 0
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            discarded += 1
        if discarded:
            logger.debug("Discarded %d undelivered outbound messages", discarded)
