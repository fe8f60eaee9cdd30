"""Image processing pipeline for image-to-map conversion.

AIDEV-NOTE: This package handles the complete pipeline from raster image
to SVG map. Organized into modular components:
- processor: Main ImageConverter orchestrator and image decoding
- pixel_buffer: RGBA buffer passed between stages
- preprocessing: Grayscale, box blur, posterize
- edges: Sobel edge detection, invert, threshold
- contours: Moore-neighbor boundary tracing
- simplification: Douglas-Peucker and moving-average smoothing
- regions: Area filter and sort
- svg_export: SVG map generation
- utils: Geometric helpers
"""

from .pixel_buffer import PixelBuffer
from .processor import ImageConverter, load_image
from .svg_export import regions_to_svg

__all__ = ["ImageConverter", "PixelBuffer", "load_image", "regions_to_svg"]
