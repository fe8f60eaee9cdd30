"""Sobel edge detection and binarization.

AIDEV-NOTE: After these stages the buffer is strictly black/white in its
color channels. With the default invert step, edges end up black and the
regions between them white, which is what the contour tracer walks around.
"""

import numpy as np

from .pixel_buffer import PixelBuffer
from .preprocessing import store_channels

SOBEL_X = np.array(
    [
        [-1, 0, 1],
        [-2, 0, 2],
        [-1, 0, 1],
    ],
    dtype=np.float64,
)
SOBEL_Y = np.array(
    [
        [-1, -2, -1],
        [0, 0, 0],
        [1, 2, 1],
    ],
    dtype=np.float64,
)


def detect_edges(buffer: PixelBuffer, radius: int = 1) -> PixelBuffer:
    """Sobel gradient magnitude of the grayscale channel.

    Args:
        buffer: Input buffer; channel 0 is read as the gray value
        radius: Accepted for configuration compatibility. The kernels are
            always 3x3.

    Returns:
        New buffer with the clamped magnitude in R, G, B and opaque alpha.
        The 1-pixel border is left as zeros (alpha included).
    """
    height, width = buffer.height, buffer.width
    result = np.zeros_like(buffer.data)
    if height < 3 or width < 3:
        return PixelBuffer(result)

    gray = buffer.data[:, :, 0].astype(np.float64)
    gx = np.zeros((height - 2, width - 2), dtype=np.float64)
    gy = np.zeros_like(gx)

    for dy in range(3):
        for dx in range(3):
            window = gray[dy : height - 2 + dy, dx : width - 2 + dx]
            gx += SOBEL_X[dy, dx] * window
            gy += SOBEL_Y[dy, dx] * window

    magnitude = np.minimum(255.0, np.sqrt(gx * gx + gy * gy))
    result[1:-1, 1:-1, :3] = store_channels(magnitude)[:, :, np.newaxis]
    result[1:-1, 1:-1, 3] = 255
    return PixelBuffer(result)


def invert_image(buffer: PixelBuffer) -> PixelBuffer:
    """value := 255 - value on R, G and B. Alpha is untouched."""
    buffer.data[:, :, :3] = 255 - buffer.data[:, :, :3]
    return buffer


def threshold(buffer: PixelBuffer, level: float) -> PixelBuffer:
    """Binarize the buffer at a percentage level.

    Args:
        buffer: Input buffer, modified in place
        level: Threshold as a percentage (0-100) of full intensity

    Returns:
        Buffer whose R, G, B are 255 where channel 0 is strictly above
        level * 2.55, else 0
    """
    cutoff = level * 2.55
    values = np.where(buffer.data[:, :, 0] > cutoff, 255, 0).astype(np.uint8)
    buffer.data[:, :, :3] = values[:, :, np.newaxis]
    return buffer
