"""HTTP surface of the conversion webhook."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from crd_converter.configuration import Configuration, ServerSettings
from crd_converter.review_handling import ConversionReviewHandler

logger = logging.getLogger(__name__)


def build_review_handlers(configuration: Configuration) -> list[ConversionReviewHandler]:
    """Create one review handler per configured kind."""
    return [
        ConversionReviewHandler(kind, parallelism=configuration.conversion.parallelism)
        for kind in configuration.kinds
    ]


def create_app(handlers: Iterable[ConversionReviewHandler]) -> FastAPI:
    """Build the webhook application serving ``POST /convert/{kind}``.

    Kinds are matched case-insensitively. Conversion failures are reported
    inside the returned ConversionReview, so the route answers 200 for every
    known kind and 404 for unknown ones.
    """
    by_kind = {handler.kind.lower(): handler for handler in handlers}
    app = FastAPI(title="CRD Conversion Webhook")

    @app.get("/healthz")
    async def healthz() -> dict[str, object]:
        return {"status": "ok", "kinds": sorted(handler.kind for handler in by_kind.values())}

    @app.post("/convert/{kind}")
    async def convert(kind: str, request: Request) -> JSONResponse:
        handler = by_kind.get(kind.lower())
        if handler is None:
            logger.warning("Received conversion review for unknown kind %s", kind)
            raise HTTPException(status_code=404, detail=f"Unknown kind: {kind}")
        body = await request.body()
        review = await run_in_threadpool(handler.handle, body)
        return JSONResponse(content=review)

    return app


def create_app_from_configuration(configuration: Configuration) -> FastAPI:
    return create_app(build_review_handlers(configuration))


def serve_webhook(app: FastAPI, settings: ServerSettings, log_level: str = "INFO") -> None:
    """Run the webhook until interrupted."""
    ssl_certfile = str(settings.tls.cert_file) if settings.tls else None
    ssl_keyfile = str(settings.tls.key_file) if settings.tls else None
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level=log_level.lower(),
        ssl_certfile=ssl_certfile,
        ssl_keyfile=ssl_keyfile,
    )
    logger.info(
        "Starting conversion webhook on %s:%d (tls=%s)",
        settings.host,
        settings.port,
        settings.tls is not None,
    )
    server = uvicorn.Server(config)
    server.run()
