import os
from pathlib import Path

import cv2
import numpy as np

from blurguard.core.exceptions import ImageDecodeError, ImageEncodeError

class ImageBuffer:
    """
    Decoded image held as a numpy array (BGR, BGRA or grayscale).
    Alpha channels are kept so PNG screenshots round-trip unchanged.
    """

    def __init__(self, pixels: np.ndarray):
        self.pixels = pixels

    @classmethod
    def decode(cls, path) -> "ImageBuffer":
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ImageDecodeError(f"Failed to read image from {path}: {e}") from e

        nparr = np.frombuffer(data, np.uint8)
        try:
            pixels = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
        except cv2.error as e:
            raise ImageDecodeError(f"Failed to decode image {path}: {e}") from e
        if pixels is None:
            raise ImageDecodeError(f"Failed to decode image {path}")

        # IMREAD_UNCHANGED skips EXIF orientation; 8-bit images without alpha
        # are decoded again upright so box coordinates match what the model saw
        if pixels.dtype == np.uint8 and (pixels.ndim == 2 or pixels.shape[2] == 3):
            flags = cv2.IMREAD_GRAYSCALE if pixels.ndim == 2 else cv2.IMREAD_COLOR
            upright = cv2.imdecode(nparr, flags)
            if upright is not None:
                pixels = upright
        return cls(pixels)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def crop(self, x: int, y: int, w: int, h: int) -> "ImageBuffer":
        return ImageBuffer(self.pixels[y:y+h, x:x+w].copy())

    def blur(self, radius: int) -> "ImageBuffer":
        k = 2 * radius + 1
        return ImageBuffer(cv2.GaussianBlur(self.pixels, (k, k), 0))

    def composite(self, other: "ImageBuffer", x: int, y: int) -> None:
        """Pastes other over this buffer in place, with its top-left at (x, y)."""
        h, w = other.pixels.shape[:2]
        self.pixels[y:y+h, x:x+w] = other.pixels

    def encode(self, ext: str) -> bytes:
        try:
            success, encoded_img = cv2.imencode(ext, self.pixels)
        except cv2.error as e:
            raise ImageEncodeError(f"Failed to encode image as {ext}: {e}") from e
        if not success:
            raise ImageEncodeError(f"Failed to encode image as {ext}")
        return encoded_img.tobytes()

    def encode_and_write(self, path) -> None:
        """
        Encodes in the format given by the path's extension and replaces the
        file atomically. The target is untouched if anything fails.
        """
        path = Path(path)
        data = self.encode(path.suffix.lower())

        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise ImageEncodeError(f"Failed to write image to {path}: {e}") from e
