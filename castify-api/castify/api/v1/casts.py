from typing import Annotated

from fastapi import APIRouter, Depends

from castify.api.deps import get_app_settings, get_pipeline
from castify.config import Settings
from castify.schemas import CastPreviewRead, CastPublished, CastRequest, ErrorRead
from castify.services.payload import cast_url, composer_url
from castify.services.pipeline import CastPipeline

router = APIRouter(tags=["casts"])

ERROR_RESPONSES = {
    400: {"model": ErrorRead},
    422: {"model": ErrorRead},
    500: {"model": ErrorRead},
    504: {"model": ErrorRead},
}


@router.post(
    "/generate-cast",
    response_model=CastPublished,
    responses=ERROR_RESPONSES,
)
async def generate_cast(
    payload: CastRequest,
    pipeline: Annotated[CastPipeline, Depends(get_pipeline)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CastPublished:
    """Fetch the page behind videoUrl and publish it as a cast."""
    result = await pipeline.convert(payload.video_url)
    return CastPublished.from_result(
        result, cast_url(settings.web_client_base_url, result.hash)
    )


@router.post(
    "/preview-cast",
    response_model=CastPreviewRead,
    responses=ERROR_RESPONSES,
)
async def preview_cast(
    payload: CastRequest,
    pipeline: Annotated[CastPipeline, Depends(get_pipeline)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CastPreviewRead:
    """Build the cast for videoUrl without publishing it."""
    preview = await pipeline.preview(payload.video_url)
    return CastPreviewRead.from_preview(
        preview, composer_url(settings.web_client_base_url, preview.payload)
    )
