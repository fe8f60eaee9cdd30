"""Preprocessing stages applied before edge detection.

AIDEV-NOTE: Every stage writes channel values the way a clamped byte store
does: clip to [0, 255] and round half to even (np.rint). Keep it that way so
stage outputs stay bit-compatible with the browser converter.
"""

import numpy as np

from .pixel_buffer import PixelBuffer


def store_channels(values: np.ndarray) -> np.ndarray:
    """Convert float channel values to bytes with clamped-store rounding."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def to_grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """Replace R, G and B with the luminosity value. Alpha is untouched."""
    rgb = buffer.data[:, :, :3].astype(np.float64)
    gray = 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
    buffer.data[:, :, :3] = store_channels(gray)[:, :, np.newaxis]
    return buffer


def apply_box_blur(buffer: PixelBuffer, radius: int) -> PixelBuffer:
    """Unweighted box blur over a (2*radius+1) x (2*radius+1) window.

    Args:
        buffer: Input buffer, modified in place
        radius: Window half-width in pixels

    Returns:
        The blurred buffer

    AIDEV-NOTE: Only pixels whose whole window lies inside the image are
    blurred. The radius-wide border keeps its original values; there is no
    mirroring or clamping at the edges.
    """
    height, width = buffer.height, buffer.width
    if radius <= 0 or height <= 2 * radius or width <= 2 * radius:
        return buffer

    size = 2 * radius + 1
    rgb = buffer.data[:, :, :3].astype(np.int64)

    # Summed-area table with a leading row and column of zeros
    table = np.zeros((height + 1, width + 1, 3), dtype=np.int64)
    table[1:, 1:] = rgb.cumsum(axis=0).cumsum(axis=1)

    sums = (
        table[size:, size:]
        - table[:-size, size:]
        - table[size:, :-size]
        + table[:-size, :-size]
    )
    buffer.data[radius : height - radius, radius : width - radius, :3] = (
        store_channels(sums / (size * size))
    )
    return buffer


def posterize(buffer: PixelBuffer, levels: int) -> PixelBuffer:
    """Quantize each color channel to multiples of 255/levels.

    Callers must skip this stage when levels <= 0.
    """
    step = 255 / levels
    rgb = buffer.data[:, :, :3].astype(np.float64)
    # Half-up rounding of the quotient, then a clamped byte store
    quantized = np.floor(rgb / step + 0.5) * step
    buffer.data[:, :, :3] = store_channels(quantized)
    return buffer
