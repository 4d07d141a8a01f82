from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.responses import ORJSONResponse

from wishlist_export.core.config import get_settings
from wishlist_export.core.errors import AuthRequiredError, FetchError
from wishlist_export.core.logging_config import configure_logging, get_logger
from wishlist_export.schemas import AuthorizeResult, ExportRequest, ExportResult, ExtractionResult, HostMessage
from wishlist_export.scraper.fetcher import PageFetcher
from wishlist_export.scraper.page import PageDocument
from wishlist_export.scraper.session import ExtractionSession
from wishlist_export.services.auth import build_token_provider
from wishlist_export.services.exporter import WishlistExporter
from wishlist_export.services.sheets import SheetsClient

configure_logging(get_settings())
logger = get_logger(component="FastAPI")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    fetcher = PageFetcher(settings)
    app.state.session = ExtractionSession(settings)
    app.state.fetcher = fetcher
    app.state.exporter = WishlistExporter(
        SheetsClient(client, settings),
        build_token_provider(client, settings),
        settings,
    )
    logger.info("Wishlist export service initialised", environment=settings.environment)
    try:
        yield
    finally:
        await fetcher.aclose()
        await client.aclose()
        logger.info("Wishlist export service shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Airbnb Wishlist Export",
        version="0.1.0",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    @app.get("/health", response_model=dict[str, str])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/messages")
    async def handle_message(message: HostMessage) -> dict[str, Any]:
        session: ExtractionSession = app.state.session
        if message.action != "extract":
            return await session.handle(message.action)

        if message.html is not None:
            page = PageDocument(message.html, url=message.url)
        elif message.url:
            fetcher: PageFetcher = app.state.fetcher
            try:
                page = await fetcher.fetch(message.url)
            except FetchError as exc:
                return ExtractionResult.failure(exc.message).to_message()
        else:
            raise HTTPException(status_code=400, detail="Extraction requires either html or url")
        return await session.handle(message.action, page)

    @app.post("/authorize", response_model=AuthorizeResult, response_model_exclude_none=True)
    async def authorize() -> AuthorizeResult:
        exporter: WishlistExporter = app.state.exporter
        try:
            await exporter.authorize()
        except AuthRequiredError as exc:
            logger.warning("Authorization failed", error=exc.message)
            return AuthorizeResult(success=False, error=exc.message)
        return AuthorizeResult(success=True)

    @app.post("/export", response_model=ExportResult, response_model_exclude_none=True)
    async def export_wishlist(request: ExportRequest) -> ExportResult:
        exporter: WishlistExporter = app.state.exporter
        logger.info("Saving wishlist to Google Sheets", listings=len(request.wishlistData))
        return await exporter.export(request.wishlistData, request.wishlistName)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("wishlist_export.main:app", host="0.0.0.0", port=8000, reload=False)
