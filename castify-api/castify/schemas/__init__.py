from castify.schemas.cast import (
    CastPreviewRead,
    CastPublished,
    CastRequest,
    EmbedRead,
    ErrorRead,
)

__all__ = [
    "CastPreviewRead",
    "CastPublished",
    "CastRequest",
    "EmbedRead",
    "ErrorRead",
]
