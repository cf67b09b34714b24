"""Application factory for the FastAPI app.

Centralizes app construction (state, middleware, handlers, routers) so tests
can build isolated apps with their own store and limiter.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from quickpaste.adapters.rate_limit.base import AbstractRateLimiter
from quickpaste.adapters.store.base import AbstractPasteStore
from quickpaste.adapters.store.factory import create_paste_store
from quickpaste.adapters.store.in_memory import InMemoryPasteStore
from quickpaste.adapters.store.reaper import PasteReaper
from quickpaste.api.routes import health_router, paste_router
from quickpaste.core.config import settings
from quickpaste.core.exception_handlers import setup_exception_handlers
from quickpaste.core.logging import configure_logging
from quickpaste.core.middleware import request_id_middleware, security_headers_middleware
from quickpaste.core.rate_limit import build_rate_limiter
from quickpaste.services.paste_service import PasteService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the in-memory reaper and release the store on shutdown."""
    store: AbstractPasteStore = app.state.paste_store
    reaper: PasteReaper | None = None

    if isinstance(store, InMemoryPasteStore):
        reaper = PasteReaper(store, interval_seconds=settings.store.reap_interval_seconds)
        reaper.start()

    logger.info("app.startup", extra={"store_backend": type(store).__name__})
    try:
        yield
    finally:
        if reaper is not None:
            await reaper.stop()
        await store.close()
        logger.info("app.shutdown")


def create_app(
    *,
    store: AbstractPasteStore | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        store: Paste store to use; built from settings when omitted.
        rate_limiter: Write-path limiter; built from settings when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="QuickPaste",
        description=(
            "Minimal paste-sharing service: submit text, receive a short "
            "identifier, fetch it back until it expires."
        ),
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    paste_store = store if store is not None else create_paste_store(settings.store)
    app.state.paste_store = paste_store
    app.state.paste_service = PasteService(paste_store, config=settings.paste)
    app.state.rate_limiter = (
        rate_limiter if rate_limiter is not None else build_rate_limiter(settings.rate_limit)
    )

    # Last registered runs first: request id wraps the security layer
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(paste_router)
    app.include_router(health_router)

    return app
