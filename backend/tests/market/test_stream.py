"""Tests for the HTTP command endpoint and SSE generator."""

import asyncio
import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from stockfeed.market.models import CommandKind, OutboundMessage
from stockfeed.market.stream import _generate_events, create_stream_router
from stockfeed.market.transport import QueueTransport


def _client(transport: QueueTransport) -> TestClient:
    app = FastAPI()
    app.include_router(create_stream_router(transport))
    return TestClient(app)


class TestCommandEndpoint:
    """POST /api/commands feeds the transport's inbound queue."""

    def test_accepts_command(self):
        transport = QueueTransport()
        response = _client(transport).post("/api/commands", json={"type": "Subscribe", "symbol": "AAPL"})

        assert response.status_code == 202
        assert response.json() == {"accepted": {"type": "Subscribe", "symbol": "AAPL"}}
        command = transport._inbound.get_nowait()
        assert command.kind == CommandKind.SUBSCRIBE
        assert command.symbol == "AAPL"

    def test_set_currency(self):
        transport = QueueTransport()
        response = _client(transport).post("/api/commands", json={"type": "SetCurrency", "currency": "EUR"})
        assert response.status_code == 202
        assert transport._inbound.get_nowait().currency == "EUR"

    def test_missing_type_is_rejected(self):
        transport = QueueTransport()
        response = _client(transport).post("/api/commands", json={"symbol": "AAPL"})
        assert response.status_code == 422
        assert transport._inbound.empty()

    def test_full_queue_is_unavailable(self):
        transport = QueueTransport(max_queue_size=1)
        client = _client(transport)
        client.post("/api/commands", json={"type": "Query", "symbol": "AAPL"})
        response = client.post("/api/commands", json={"type": "Query", "symbol": "MSFT"})
        assert response.status_code == 503


@pytest.mark.asyncio
class TestGenerateEvents:
    """The SSE generator relays published messages until the client leaves."""

    async def test_relays_messages(self):
        transport = QueueTransport()
        request = MagicMock()
        request.client.host = "127.0.0.1"
        disconnected = False

        async def is_disconnected():
            return disconnected

        request.is_disconnected = is_disconnected
        events = _generate_events(transport, request, poll_interval=0.01)

        assert await events.__anext__() == "retry: 1000\n\n"
        next_event = asyncio.ensure_future(events.__anext__())
        await asyncio.sleep(0.02)  # Let the generator register its listener
        assert transport.listener_count == 1

        await transport.publish(OutboundMessage.subscribe_ack("AAPL"))
        event = await asyncio.wait_for(next_event, timeout=1.0)
        assert event.startswith("data: ")
        assert json.loads(event[len("data: "):]) == {"type": "SubscribeAck", "symbol": "AAPL"}

        disconnected = True
        with pytest.raises(StopAsyncIteration):
            await asyncio.wait_for(events.__anext__(), timeout=1.0)
        assert transport.listener_count == 0
