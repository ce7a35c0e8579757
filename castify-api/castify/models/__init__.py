from castify.models.cast import (
    CastPayload,
    CastPreview,
    Embed,
    PageMetadata,
    PublishResult,
)

__all__ = ["CastPayload", "CastPreview", "Embed", "PageMetadata", "PublishResult"]
