"""
WebSocket session endpoint.

Each connection owns one SessionState, one outbound channel and one writer
task. Inbound frames are dispatched strictly one at a time; the writer
drains the channel onto the socket concurrently.
"""

import asyncio
import logging
import random
from typing import Annotated

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from arcanaflow.api.dependencies import get_catalog, get_interpreter, get_reading_store
from arcanaflow.config import settings
from arcanaflow.models.session import SessionState
from arcanaflow.protocol.channel import ChannelClosedError, OutboundChannel
from arcanaflow.protocol.dispatcher import ProtocolDispatcher
from arcanaflow.services.card_catalog import CardCatalog
from arcanaflow.services.interpretation import Interpreter
from arcanaflow.services.reading_store import ReadingStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["session"])


async def _read_frames(
    websocket: WebSocket,
    dispatcher: ProtocolDispatcher,
    state: SessionState,
) -> None:
    """Dispatch inbound frames until the client disconnects."""
    while True:
        event = await websocket.receive()
        if event["type"] == "websocket.disconnect":
            return
        frame = event.get("text")
        if frame is None:
            frame = event.get("bytes")
        if frame is None:
            continue
        await dispatcher.handle_frame(frame, state)


async def _stop_writer(writer: asyncio.Task[None], state: SessionState) -> None:
    writer.cancel()
    try:
        await writer
    except asyncio.CancelledError:
        pass
    except Exception as e:
        # The socket was already gone when the writer tried to send
        logger.debug("Writer for session %s stopped: %r", state.session_id, e)


@router.websocket("/ws")
async def session_socket(
    websocket: WebSocket,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
    interpreter: Annotated[Interpreter, Depends(get_interpreter)],
    reading_store: Annotated[ReadingStore, Depends(get_reading_store)],
) -> None:
    """Serve the reading protocol for one connection."""
    await websocket.accept()

    state = SessionState()
    channel = OutboundChannel(maxsize=settings.outbound_queue_size)
    dispatcher = ProtocolDispatcher(
        catalog=catalog,
        interpreter=interpreter,
        reading_store=reading_store,
        channel=channel,
        rng=random.Random(),
        chunk_delay=settings.chunk_delay_ms / 1000,
    )
    writer = asyncio.create_task(channel.drain(websocket.send_text))
    logger.info("WebSocket connection opened", extra={"session_id": state.session_id})

    try:
        await _read_frames(websocket, dispatcher, state)
    except (WebSocketDisconnect, ChannelClosedError) as e:
        logger.debug("Transport ended for session %s: %r", state.session_id, e)
    finally:
        channel.close()
        await _stop_writer(writer, state)
        logger.info(
            "WebSocket connection closed",
            extra={"session_id": state.session_id, "phase": state.phase.value},
        )
        state.close()
