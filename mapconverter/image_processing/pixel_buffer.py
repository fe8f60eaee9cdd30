"""RGBA pixel buffer passed between pipeline stages.

AIDEV-NOTE: Stages take ownership of the buffer they are given and return a
buffer of identical dimensions (often the same object, mutated in place).
Callers must use the returned buffer and drop the one they passed in.
"""

from dataclasses import dataclass

import numpy as np
from PIL import Image


@dataclass
class PixelBuffer:
    """8-bit RGBA pixels stored as a (height, width, 4) uint8 array."""

    data: np.ndarray

    def __post_init__(self):
        if self.data.ndim != 3 or self.data.shape[2] != 4:
            raise ValueError(
                f"Pixel data must have shape (height, width, 4), got {self.data.shape}"
            )
        if self.data.dtype != np.uint8:
            self.data = self.data.astype(np.uint8)

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @classmethod
    def blank(cls, width: int, height: int, value: int = 0) -> "PixelBuffer":
        """Create a buffer with every RGB channel set to value and opaque alpha."""
        data = np.full((height, width, 4), value, dtype=np.uint8)
        data[:, :, 3] = 255
        return cls(data)

    @classmethod
    def from_rgba(cls, width: int, height: int, data: bytes) -> "PixelBuffer":
        """Build a buffer from a flat R,G,B,A byte sequence.

        Raises:
            ValueError: If the byte count does not match width*height*4
        """
        expected = width * height * 4
        if len(data) != expected:
            raise ValueError(
                f"Expected {expected} bytes for {width}x{height} RGBA, got {len(data)}"
            )
        array = np.frombuffer(bytes(data), dtype=np.uint8)
        return cls(array.reshape(height, width, 4).copy())

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        """Build a buffer from a PIL image, converting to RGBA if needed."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.array(image, dtype=np.uint8))

    def to_image(self) -> Image.Image:
        """Return a PIL RGBA image with a copy of the pixels."""
        return Image.fromarray(self.data.copy())

    def to_bytes(self) -> bytes:
        """Return the flat R,G,B,A channel array."""
        return self.data.tobytes()

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.data.copy())
