import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from castify.api import api_router
from castify.config import Settings, get_settings
from castify.errors import BadRequestError, CastifyError, classify
from castify.log_config import configure_logging
from castify.services.fetcher import PageFetcher
from castify.services.metadata import MetadataService
from castify.services.payload import CastPayloadBuilder
from castify.services.pipeline import CastPipeline
from castify.services.publisher import NeynarPublisher

logger = logging.getLogger(__name__)


def build_pipeline(
    settings: Settings,
    fetch_client: httpx.AsyncClient,
    publish_client: httpx.AsyncClient,
) -> CastPipeline:
    """Wire the pipeline; fails with ConfigurationError before any request."""
    api_key, signer_uuid = settings.require_publishing_credentials()
    return CastPipeline(
        fetcher=PageFetcher(
            fetch_client,
            timeout=settings.fetch_timeout,
            user_agent=settings.user_agent,
            accept=settings.accept_header,
            max_bytes=settings.fetch_max_bytes,
        ),
        extractor=MetadataService(fallback_title=settings.fallback_title),
        builder=CastPayloadBuilder(
            hashtag=settings.cast_hashtag,
            prefix=settings.cast_text_prefix,
            include_image_embed=settings.include_image_embed,
            max_bytes=settings.max_cast_bytes,
        ),
        publisher=NeynarPublisher(
            publish_client, api_key=api_key, signer_uuid=signer_uuid
        ),
        image_policy=settings.image_policy,
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        async with httpx.AsyncClient() as fetch_client, httpx.AsyncClient(
            base_url=str(settings.publish_api_base_url),
            timeout=settings.publish_timeout,
        ) as publish_client:
            app.state.pipeline = build_pipeline(settings, fetch_client, publish_client)
            logger.info(
                "Castify ready (image policy: %s)", settings.image_policy.value
            )
            yield
        # Shutdown: clients closed by the context managers

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.include_router(api_router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(CastifyError)
    async def castify_error_handler(request: Request, exc: CastifyError) -> JSONResponse:
        error = classify(exc)
        return JSONResponse(status_code=error.http_status, content={"error": error.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = request_error(exc).to_conversion_error()
        return JSONResponse(status_code=error.http_status, content={"error": error.message})

    @app.get("/health", tags=["system"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok", "app": settings.app_name}

    return app


def request_error(exc: RequestValidationError) -> BadRequestError:
    for err in exc.errors():
        if err.get("type") == "json_invalid":
            return BadRequestError("Invalid JSON sent")
    for err in exc.errors():
        if err.get("type") == "missing":
            return BadRequestError("Missing video URL.")
    return BadRequestError("Invalid request body.")


app = create_app()
