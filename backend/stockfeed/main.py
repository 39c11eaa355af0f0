"""FastAPI application entrypoint for the stock quote feed.

Run with (needs the ``serve`` extra):
    uvicorn stockfeed.main:app
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .market import QueueTransport, create_quote_service, create_stream_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    transport = QueueTransport()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(
            level=logging.INFO,
            format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        )
        logger.info("Starting stock data service")
        # Startup aborts here if the store cannot be opened
        service = create_quote_service(transport=transport)
        await service.start()
        app.state.quote_service = service
        try:
            yield
        finally:
            await service.close()

    app = FastAPI(title="Stock Quote Feed", lifespan=lifespan)
    app.include_router(create_stream_router(transport))
    return app


app = create_app()
