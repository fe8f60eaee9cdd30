"""Turn traced contours into filtered, sorted regions."""

import logging
from typing import TYPE_CHECKING

from mapconverter.models import Region

from .simplification import simplify_contour, smooth_contour
from .utils import polygon_area

if TYPE_CHECKING:
    from mapconverter.models import ConversionSettings

logger = logging.getLogger(__name__)


def contour_to_region(
    contour: "list[tuple[int, int]]",
    settings: "ConversionSettings",
) -> Region:
    """Measure, simplify and smooth one contour.

    AIDEV-NOTE: Area is taken from the raw traced contour, before
    simplification, so the area filter does not depend on the tolerance.
    """
    area = polygon_area(contour)
    simplified = simplify_contour(contour, settings.simplify_tolerance)
    if settings.smoothing > 0:
        points = smooth_contour(simplified, settings.smoothing)
    else:
        points = simplified

    return Region(
        points=points,
        area=area,
        original_length=len(contour),
        simplified_length=len(points),
    )


def process_contours(
    contours: "list[list[tuple[int, int]]]",
    settings: "ConversionSettings",
) -> "list[Region]":
    """Convert contours to regions, drop small ones and sort by area.

    Args:
        contours: Traced contours in discovery order
        settings: Conversion settings (tolerance, smoothing, min area)

    Returns:
        Regions with area >= min_region_area, largest first. Equal areas
        keep their discovery order.
    """
    regions = [contour_to_region(contour, settings) for contour in contours]
    kept = [region for region in regions if region.area >= settings.min_region_area]
    # list.sort is stable
    kept.sort(key=lambda region: region.area, reverse=True)

    logger.debug(
        "Kept %d of %d regions (min area %s)",
        len(kept),
        len(regions),
        settings.min_region_area,
    )
    return kept
