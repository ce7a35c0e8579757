from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from castify.models import CastPreview, Embed, PublishResult


class EmbedRead(BaseModel):
    url: str

    model_config = ConfigDict(from_attributes=True)


class CastRequest(BaseModel):
    video_url: Optional[str] = Field(default=None, alias="videoUrl")

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class CastPublished(BaseModel):
    success: bool = True
    cast_hash: str = Field(alias="castHash")
    cast_text: str = Field(alias="castText")
    cast_embeds: list[EmbedRead] = Field(alias="castEmbeds")
    cast_url: str = Field(alias="castUrl")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: PublishResult, cast_url: str) -> "CastPublished":
        return cls(
            cast_hash=result.hash,
            cast_text=result.text,
            cast_embeds=_embeds(result.embeds),
            cast_url=cast_url,
        )


class CastPreviewRead(BaseModel):
    success: bool = True
    cast_text: str = Field(alias="castText")
    cast_embeds: list[EmbedRead] = Field(alias="castEmbeds")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    composer_url: str = Field(alias="composerUrl")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_preview(cls, preview: CastPreview, composer_url: str) -> "CastPreviewRead":
        return cls(
            cast_text=preview.payload.text,
            cast_embeds=_embeds(preview.payload.embeds),
            image_url=preview.metadata.image_url,
            composer_url=composer_url,
        )


class ErrorRead(BaseModel):
    error: str


def _embeds(embeds: tuple[Embed, ...]) -> list[EmbedRead]:
    return [EmbedRead.model_validate(embed) for embed in embeds]
