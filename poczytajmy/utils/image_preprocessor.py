"""Image preprocessing for OCR of book-page photos.

Children's book pages are photographed by a phone held at arbitrary angles
and lighting.  The pipeline is fixed and single-pass:

    1. rotate     -- apply the EXIF orientation tag
    2. resize     -- shrink to at most ``width`` px wide (never enlarge)
    3. grayscale
    4. normalize  -- stretch the histogram to the full 0-255 range
    5a. threshold -- hard black/white at ``threshold_value``   (OCR_THRESHOLD=1)
    5b. linear    -- ``a * px + b`` contrast stretch, then sharpen (default)
"""

import io

import numpy as np
from PIL import Image, ImageFilter, ImageOps


class ImagePreprocessor:
    """Prepares page photos for Tesseract.

    Args:
        width: Maximum output width in pixels.
        threshold: Use hard thresholding instead of the linear stretch.
        threshold_value: Cut-off for thresholding (0-255).
        linear_a: Multiplier of the linear stretch.
        linear_b: Offset of the linear stretch.
    """

    def __init__(
        self,
        width: int = 2000,
        threshold: bool = False,
        threshold_value: int = 185,
        linear_a: float = 1.25,
        linear_b: float = -12.0,
    ) -> None:
        self._width = width
        self._threshold = threshold
        self._threshold_value = threshold_value
        self._linear_a = linear_a
        self._linear_b = linear_b

    def prepare_for_ocr(self, image_bytes: bytes) -> Image.Image:
        """Run the full preprocessing pipeline on raw image bytes.

        Returns:
            Preprocessed single-channel ("L") PIL Image.
        """
        image = Image.open(io.BytesIO(image_bytes))
        image = ImageOps.exif_transpose(image)
        image = self.resize_for_ocr(image)
        image = image.convert("L")
        image = ImageOps.autocontrast(image)

        if self._threshold:
            return self.binarize(image, self._threshold_value)
        return self.linear_stretch(image, self._linear_a, self._linear_b).filter(
            ImageFilter.SHARPEN
        )

    def resize_for_ocr(self, image: Image.Image, width: int | None = None) -> Image.Image:
        """Shrink *image* to *width* pixels wide, preserving aspect ratio.

        Images already narrower than *width* are returned unchanged.
        """
        max_width = width or self._width
        current_width, current_height = image.size
        if current_width <= max_width:
            return image

        scale = max_width / current_width
        new_height = max(1, int(current_height * scale))
        return image.resize((max_width, new_height), Image.LANCZOS)

    def binarize(self, image: Image.Image, threshold: int) -> Image.Image:
        """Pixels at or above *threshold* become white, the rest black."""
        return image.point(lambda px: 255 if px >= threshold else 0)

    def linear_stretch(self, image: Image.Image, a: float, b: float) -> Image.Image:
        """Apply ``a * px + b`` per pixel, clamped to 0-255."""
        arr = np.asarray(image, dtype=np.float32)
        stretched = np.clip(arr * a + b, 0, 255).astype(np.uint8)
        return Image.fromarray(stretched, mode="L")
