"""OCR models: the uploaded page photo and the extraction result."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class PageImage(BaseModel):
    """An uploaded photo of a book page.

    The raw bytes live in a private attribute so the model can be logged
    or dumped without dragging megabytes of image data along.
    """

    model_config = ConfigDict(frozen=True)

    filename: str = "upload"
    content_type: str = "application/octet-stream"
    file_size: int = Field(default=0, ge=0)

    _image_data: bytes | None = PrivateAttr(default=None)

    @property
    def image_data(self) -> bytes | None:
        return self._image_data

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> PageImage:
        image = cls(
            filename=filename or "upload",
            content_type=content_type or "application/octet-stream",
            file_size=len(data),
        )
        image.__pydantic_private__["_image_data"] = data
        return image


class OCRResult(BaseModel):
    """Text extracted from a page image."""

    model_config = ConfigDict(frozen=True)

    text: str
    # Mean word confidence on a 0-100 scale; None when the engine reports none.
    confidence: float | None = None
    provider_used: str
    processing_time: float = Field(default=0.0, ge=0.0)
