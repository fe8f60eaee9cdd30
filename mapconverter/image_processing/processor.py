"""Main image converter orchestrating the complete pipeline.

AIDEV-NOTE: This module runs the pipeline from raster image to SVG map.
Stages run strictly in order and each one takes ownership of the buffer
returned by the previous one:

    decode -> grayscale? -> blur? -> posterize? -> edges -> invert? ->
    threshold -> contours -> regions -> svg

Stage boundaries are the only points where a run can be cancelled.
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Callable

from PIL import Image

from mapconverter.errors import ConversionCancelled, ImageDecodeError
from mapconverter.models import ConversionResult, ConversionSettings, StageSnapshot

from .contours import find_contours
from .edges import detect_edges, invert_image, threshold
from .pixel_buffer import PixelBuffer
from .preprocessing import apply_box_blur, posterize, to_grayscale
from .regions import process_contours
from .svg_export import regions_to_svg
from .utils import contour_length

logger = logging.getLogger(__name__)


def load_image(source: "str | Path | bytes | BinaryIO") -> PixelBuffer:
    """Load and decode an image into an RGBA pixel buffer.

    Args:
        source: Path to an image file (PNG, JPG, etc.), encoded image
            bytes, or a binary file object

    Returns:
        PixelBuffer with the decoded pixels

    Raises:
        ImageDecodeError: If the image cannot be read or decoded
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        with Image.open(source) as image:
            # AIDEV-NOTE: Always convert to RGBA for consistent processing
            image.load()
            return PixelBuffer.from_image(image)
    except Exception as e:
        raise ImageDecodeError(f"Failed to load image: {e}") from e


class ImageConverter:
    """Converts raster images into SVG maps of closed regions."""

    def __init__(self, settings: ConversionSettings | None = None):
        self.settings = settings or ConversionSettings()

    def process(
        self,
        source: "str | Path | bytes | BinaryIO",
        settings: "ConversionSettings | dict | None" = None,
        should_cancel: "Callable[[], bool] | None" = None,
    ) -> ConversionResult:
        """Decode an image and run the complete pipeline.

        Args:
            source: Image path, encoded bytes or binary file object
            settings: Full settings, or a partial mapping merged over the
                converter's settings for this run only
            should_cancel: Checked between stages; returning True stops the
                run with ConversionCancelled

        Returns:
            ConversionResult with SVG, regions and preview steps

        Raises:
            ImageDecodeError: If the image cannot be decoded
            ConversionCancelled: If should_cancel returned True
        """
        logger.info("Loading image...")
        buffer = load_image(source)
        return self.process_buffer(buffer, settings, should_cancel)

    def process_buffer(
        self,
        buffer: PixelBuffer,
        settings: "ConversionSettings | dict | None" = None,
        should_cancel: "Callable[[], bool] | None" = None,
    ) -> ConversionResult:
        """Run the pipeline on an already decoded buffer.

        The buffer is consumed: stages may modify it in place.
        """
        settings = self._resolve_settings(settings)
        width, height = buffer.width, buffer.height
        steps: list[StageSnapshot] = []

        def checkpoint(stage: str):
            if should_cancel is not None and should_cancel():
                logger.info("Conversion cancelled before %s", stage)
                raise ConversionCancelled(stage)

        def snapshot(name: str):
            steps.append(StageSnapshot(name=name, image=buffer.copy()))

        logger.info("Processing %dx%d image", width, height)

        # Step 1: Grayscale
        if settings.grayscale:
            checkpoint("Grayscale")
            buffer = to_grayscale(buffer)
            snapshot("Grayscale")

        # Step 2: Optional blur
        if settings.blur > 0:
            checkpoint("Blur")
            buffer = apply_box_blur(buffer, settings.blur)
            snapshot("Blur")

        # Step 3: Optional posterize
        if settings.posterize > 0:
            checkpoint("Posterize")
            buffer = posterize(buffer, settings.posterize)
            snapshot("Posterize")

        # Step 4: Edge detection
        checkpoint("Edges")
        buffer = detect_edges(buffer, settings.edge_radius)
        snapshot("Edges")

        # Step 5: Invert (black edges on white regions)
        if settings.invert:
            checkpoint("Invert")
            buffer = invert_image(buffer)
            snapshot("Invert")

        # Step 6: Threshold
        checkpoint("Threshold")
        buffer = threshold(buffer, settings.edge_threshold)
        snapshot("Threshold")

        # Step 7: Find contours
        checkpoint("Contours")
        contours = find_contours(buffer)
        steps.append(StageSnapshot(name="Contours", count=len(contours)))
        logger.info("Found %d contours", len(contours))

        # Step 8: Filter and simplify contours
        checkpoint("Regions")
        regions = process_contours(contours, settings)
        logger.info("Kept %d regions", len(regions))

        # Step 9: Generate SVG
        checkpoint("SVG")
        svg_content = regions_to_svg(regions, width, height, settings)

        total_length = sum(contour_length(region.points) for region in regions)
        logger.info("Total outline length: %.2f px", total_length)

        return ConversionResult(
            svg=svg_content,
            regions=regions,
            width=width,
            height=height,
            steps=steps,
        )

    def _resolve_settings(
        self, settings: "ConversionSettings | dict | None"
    ) -> ConversionSettings:
        if settings is None:
            return self.settings
        if isinstance(settings, ConversionSettings):
            return settings
        return self.settings.with_overrides(**settings)
