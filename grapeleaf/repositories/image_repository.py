from __future__ import annotations
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Union
import logging

import numpy as np
from PIL import Image as PILImage, ImageOps, UnidentifiedImageError

from ..exceptions import ContextError, DecodeError
from ..models.image import LeafImage

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path, BinaryIO]

# Pillow modes that can carry transparency
_ALPHA_MODES = {"RGBA", "LA", "PA", "RGBa", "La"}


class ImageRepository:
    """
    Handles decoding and encoding for LeafImage entities.
    """

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> LeafImage:
        if path is None:
            return LeafImage(pixels)
        return LeafImage(pixels=pixels, path=Path(path))

    @staticmethod
    def read_source(source: ImageSource) -> tuple[bytes, Path | None]:
        """Return the raw bytes of *source* plus its path when it has one."""
        if isinstance(source, (bytes, bytearray)):
            return bytes(source), None
        if isinstance(source, (str, Path)):
            path = Path(source)
            try:
                return path.read_bytes(), path
            except OSError as err:
                raise DecodeError(f"Image not found or unreadable: {path}") from err
        if hasattr(source, "read"):
            data = source.read()
            if not isinstance(data, (bytes, bytearray)):
                raise TypeError(f"Image stream must be opened in binary mode, got {type(data).__name__}")
            return bytes(data), None
        raise TypeError(f"Unsupported image source: {type(source).__name__}")

    @staticmethod
    def _decode(data: bytes) -> PILImage.Image:
        if not data:
            raise DecodeError("Empty image data")
        try:
            pil_img = PILImage.open(BytesIO(data))
            pil_img.load()
        except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, SyntaxError, ValueError) as err:
            raise DecodeError(f"Cannot decode image: {err}") from err
        return pil_img

    @staticmethod
    def _to_surface(pil_img: PILImage.Image) -> np.ndarray:
        """
        Draw the decoded image onto an 8-bit RGB(A) working array.
        EXIF orientation is applied the same way a browser does.
        RGB under alpha 0 is not kept.
        """
        try:
            pil_img = ImageOps.exif_transpose(pil_img)
            has_alpha = pil_img.mode in _ALPHA_MODES or "transparency" in pil_img.info
            surface = pil_img.convert("RGBA" if has_alpha else "RGB")
            pixels = np.array(surface, dtype=np.uint8)
            if has_alpha:
                # fully transparent pixels read back as black, like a canvas
                pixels[pixels[:, :, 3] == 0, :3] = 0
        except (OSError, ValueError, MemoryError) as err:
            raise ContextError(f"Cannot build RGB working surface: {err}") from err

        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4) or pixels.size == 0:
            raise ContextError(f"Unexpected surface shape {pixels.shape}")
        return pixels

    def load(self, source: ImageSource) -> LeafImage:
        data, path = self.read_source(source)
        pixels = self._to_surface(self._decode(data))
        logger.debug(f"Decoded image {pixels.shape[1]}x{pixels.shape[0]} ({pixels.shape[2]} channels)")
        return self.create_image(pixels, path)

    @staticmethod
    def encode_png(image: LeafImage) -> bytes:
        buffer = BytesIO()
        PILImage.fromarray(image.pixels).save(buffer, format="PNG")
        return buffer.getvalue()
