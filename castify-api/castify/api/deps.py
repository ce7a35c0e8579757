from fastapi import Request

from castify.config import Settings
from castify.errors import ConfigurationError
from castify.services.pipeline import CastPipeline


async def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_pipeline(request: Request) -> CastPipeline:
    """The pipeline built once in the application lifespan."""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise ConfigurationError("Cast pipeline is not initialised")
    return pipeline
