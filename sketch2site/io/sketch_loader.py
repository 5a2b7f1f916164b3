"""
Utilities for loading hand-drawn sketches and encoding them for the vision model.
"""

import base64
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from PIL import Image


DATA_URL_MARKER = "base64,"

MEDIA_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}


class SketchLoader:
    """Loads and normalizes sketch images."""

    def __init__(self, max_edge: Optional[int] = 2048):
        """
        Initialize sketch loader.

        Args:
            max_edge: Longest allowed image edge in pixels; None disables downscaling.
        """
        self.max_edge = max_edge

    def load_image(self, image_path: Union[str, Path]) -> Image.Image:
        """
        Load an image from disk.

        Args:
            image_path: Path to the image file.

        Returns:
            PIL Image object in RGB mode.
        """
        image_path = Path(image_path)
        if not image_path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")

        return Image.open(image_path).convert("RGB")

    def normalize_sketch(self, image: Image.Image) -> Image.Image:
        """
        Downscale the sketch so its longest edge fits ``max_edge``.

        Aspect ratio is kept; smaller images are returned unchanged.
        """
        if self.max_edge and max(image.size) > self.max_edge:
            image = image.copy()
            image.thumbnail((self.max_edge, self.max_edge), Image.Resampling.LANCZOS)
        return image

    def image_to_base64(self, image: Image.Image, format: str = "PNG") -> str:
        """
        Convert PIL Image to base64 string.

        Args:
            image: PIL Image object.
            format: Image format (PNG, JPEG, etc.).

        Returns:
            Base64-encoded string.
        """
        buffer = BytesIO()
        image.save(buffer, format=format)
        return base64.b64encode(buffer.getvalue()).decode("utf-8")

    def load_base64(self, image_path: Union[str, Path], format: str = "PNG") -> str:
        """Load, normalize and encode a sketch in one step."""
        image = self.normalize_sketch(self.load_image(image_path))
        return self.image_to_base64(image, format=format)

    @staticmethod
    def media_type(format: str = "PNG") -> str:
        return MEDIA_TYPES.get(format.upper(), "image/png")

    @staticmethod
    def to_data_url(image_base64: str, format: str = "PNG") -> str:
        return f"data:{SketchLoader.media_type(format)};base64,{image_base64}"

    @staticmethod
    def strip_data_url(value: str) -> str:
        """
        Return the bare base64 payload of a canvas export.

        ``data:image/png;base64,AAAA`` becomes ``AAAA``; anything else is
        returned stripped of surrounding whitespace.
        """
        value = value.strip()
        if value.startswith("data:") and DATA_URL_MARKER in value:
            return value.split(DATA_URL_MARKER, 1)[1]
        return value
