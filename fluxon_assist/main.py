import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from . import __version__
from .api import router
from .core.catalog import CatalogError, CatalogStore
from .core.config import Settings, configure_logging, settings
from .core.documents import DocumentTracker
from .core.provider import CompletionProvider
from .core.user_functions import UserFunctionExtractor

logger = logging.getLogger("fluxon_assist.main")


def build_services(cfg: Settings) -> tuple[CatalogStore, UserFunctionExtractor, CompletionProvider]:
    """Create the catalog store, extractor and provider for one host.

    A failed initial load is logged and leaves the store unloaded, so
    completion returns nothing until a refresh succeeds.
    """
    store = CatalogStore()
    try:
        store.initialize(cfg.resolved_catalog_path(), cfg.builtin_catalog_path)
    except CatalogError as e:
        logger.error("Failed to load Fluxon function catalog: %s", e)
    extractor = UserFunctionExtractor()
    return store, extractor, CompletionProvider(store, extractor, cfg)


def create_app(cfg: Settings | None = None) -> FastAPI:
    cfg = cfg or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store, extractor, provider = build_services(cfg)
        app.state.settings = cfg
        app.state.catalog_store = store
        app.state.completion_provider = provider
        app.state.document_tracker = DocumentTracker(extractor, cfg.debounce_seconds)
        logger.info("Fluxon completion service started")
        yield
        app.state.document_tracker.shutdown()
        logger.info("Fluxon completion service stopped")

    app = FastAPI(
        title="Fluxon Assist",
        version=__version__,
        description="Completion engine for the Fluxon scripting language",
        lifespan=lifespan,
    )
    app.include_router(router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


def run(cfg: Settings | None = None) -> None:
    cfg = cfg or settings
    configure_logging(cfg)
    uvicorn.run(
        create_app(cfg),
        host=cfg.host,
        port=cfg.port,
        log_level=logging.getLevelName(cfg.log_level).lower(),
    )


if __name__ == "__main__":
    run()
