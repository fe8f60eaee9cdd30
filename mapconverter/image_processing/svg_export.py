"""SVG map generation from regions."""

from typing import TYPE_CHECKING

import svg

if TYPE_CHECKING:
    from mapconverter.models import ConversionSettings, Region


def format_number(value: float) -> str:
    """Plain decimal form, without a trailing .0 for whole numbers."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def points_to_path(points: "list[tuple[float, float]]") -> str:
    """Convert points to closed SVG path data: "M x0,y0 L x1,y1 ... Z".

    Returns an empty string for an empty point list.
    """
    if not points:
        return ""

    x0, y0 = points[0]
    d = f"M {format_number(x0)},{format_number(y0)}"
    for x, y in points[1:]:
        d += f" L {format_number(x)},{format_number(y)}"
    return d + " Z"


def region_style(settings: "ConversionSettings") -> str:
    stroke_width = format_number(settings.stroke_width)
    fill_opacity = format_number(settings.fill_opacity)
    return (
        f"stroke: rgb(51, 51, 51); stroke-width: {stroke_width}; "
        f"cursor: pointer; pointer-events: auto; "
        f"fill: rgba(200, 200, 200, {fill_opacity}); fill-opacity: {fill_opacity};"
    )


def regions_to_svg(
    regions: "list[Region]",
    width: int,
    height: int,
    settings: "ConversionSettings",
) -> str:
    """Serialize regions as an SVG map document.

    Args:
        regions: Regions in output order
        width: Source image width in pixels
        height: Source image height in pixels
        settings: Supplies the cosmetic stroke width and fill opacity

    Returns:
        SVG content as string

    AIDEV-NOTE: Each path's id and data-index are its 0-based position in
    regions. The map UI looks regions up by that index, so never renumber.
    Coordinates are written in source pixel space with no transform.
    """
    style = region_style(settings)
    elements: list[svg.Element] = []

    for index, region in enumerate(regions):
        elements.append(
            svg.Path(
                id=str(index),
                class_=["region"],
                # Pre-built path data keeps the "x,y" coordinate syntax
                d=points_to_path(region.points),  # type: ignore[arg-type]
                fill="none",
                stroke="#000",
                stroke_width=settings.stroke_width,
                style=style,
                extra={"data-index": str(index)},
            )
        )

    document = svg.SVG(
        id="mapSvg",
        viewBox=svg.ViewBoxSpec(0, 0, width, height),
        elements=[svg.G(id="map", elements=elements)],
    )
    return document.as_str()
