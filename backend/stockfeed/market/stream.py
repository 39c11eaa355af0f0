"""HTTP front for the queue transport: command intake and SSE message stream."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from .errors import TransportError
from .models import Command
from .transport import QueueTransport

logger = logging.getLogger(__name__)


class CommandRequest(BaseModel):
    type: str = Field(..., description="Command kind, e.g. Subscribe or SetCurrency")
    symbol: str | None = Field(None, description="Ticker symbol for symbol commands")
    currency: str | None = Field(None, description="ISO 4217 code for SetCurrency")


def create_stream_router(transport: QueueTransport) -> APIRouter:
    """Create the command and streaming routes bound to a transport.

    This factory pattern lets us inject the transport without globals.
    """
    router = APIRouter(prefix="/api", tags=["quotes"])

    @router.post("/commands", status_code=202)
    async def submit_command(body: CommandRequest) -> dict:
        """Queue a command for the service's command loop.

        Replies arrive asynchronously on the message stream, not in this
        response.
        """
        command = Command.from_dict(body.model_dump(exclude_none=True))
        try:
            transport.submit(command)
        except TransportError as e:
            logger.error("Rejected %s command: %s", command.kind, e)
            raise HTTPException(status_code=503, detail=str(e)) from e
        return {"accepted": command.to_dict()}

    @router.get("/stream/messages")
    async def stream_messages(request: Request) -> StreamingResponse:
        """SSE endpoint for outbound messages.

        Every message published by the service is delivered to every
        connected client in the format:

            data: {"type": "QuoteUpdate", "quote": {...}}
        """
        return StreamingResponse(
            _generate_events(transport, request),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering if proxied
            },
        )

    return router


async def _generate_events(
    transport: QueueTransport,
    request: Request,
    poll_interval: float = 0.5,
) -> AsyncGenerator[str, None]:
    """Async generator that yields SSE-formatted outbound messages.

    Stops when the client disconnects (checked at least every
    ``poll_interval`` seconds).
    """
    # Tell the client to retry after 1 second if the connection drops
    yield "retry: 1000\n\n"

    queue = transport.listen()
    client_ip = request.client.host if request.client else "unknown"
    logger.info("SSE client connected: %s", client_ip)

    try:
        while True:
            if await request.is_disconnected():
                logger.info("SSE client disconnected: %s", client_ip)
                break

            try:
                message = await asyncio.wait_for(queue.get(), timeout=poll_interval)
            except asyncio.TimeoutError:
                continue
            yield f"data: {json.dumps(message.to_dict())}\n\n"
    except asyncio.CancelledError:
        logger.info("SSE stream cancelled for: %s", client_ip)
    finally:
        transport.unlisten(queue)
