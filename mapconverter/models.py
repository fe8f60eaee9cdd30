"""Data models and constants for the image-to-map converter."""

import base64
import io
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from PIL import Image

    from mapconverter.image_processing.pixel_buffer import PixelBuffer

# Settings file path
CONFIG_FILE = Path.home() / ".mapconverter_settings.json"

# AIDEV-NOTE: Contours with fewer traced points than this are noise, not
# boundaries. Applied by the tracer, before (and independent of) the area filter.
MIN_CONTOUR_POINTS = 10


# AIDEV-NOTE: Keys of the settings object as stored by the browser tool.
# Saved settings files use these; snake_case keys are accepted too.
SETTINGS_KEYS = {
    "edgeThreshold": "edge_threshold",
    "edgeRadius": "edge_radius",
    "grayscale": "grayscale",
    "invert": "invert",
    "blur": "blur",
    "posterize": "posterize",
    "minRegionArea": "min_region_area",
    "simplifyTolerance": "simplify_tolerance",
    "smoothing": "smoothing",
    "strokeWidth": "stroke_width",
    "fillOpacity": "fill_opacity",
}


@dataclass(frozen=True)
class ConversionSettings:
    """Configuration consumed once per conversion run."""

    # Edge detection
    edge_threshold: float = 50  # 0-100, percentage of full intensity
    edge_radius: int = 2  # Sobel kernel stays 3x3 regardless

    # Preprocessing
    grayscale: bool = True
    invert: bool = True  # Black edges on white regions
    blur: int = 1  # Box blur radius, 0 = skip
    posterize: int = 0  # Levels per channel, 0 = skip

    # Contour settings
    min_region_area: float = 100  # Square pixels, inclusive lower bound
    simplify_tolerance: float = 2  # px, Douglas-Peucker tolerance
    smoothing: float = 0.5  # Moving-average factor, 0 = skip

    # Output (cosmetic only)
    stroke_width: float = 1
    fill_opacity: float = 0.1

    def with_overrides(self, **changes: Any) -> "ConversionSettings":
        """Return a copy with the given settings replaced.

        Args:
            **changes: Settings to replace, by snake_case or camelCase name

        Returns:
            New ConversionSettings

        Raises:
            ValueError: If a key is not a known setting
        """
        return replace(self, **_normalize_keys(changes))

    def to_dict(self) -> "dict[str, Any]":
        """Serialize using the camelCase keys of saved settings files."""
        values = asdict(self)
        return {key: values[name] for key, name in SETTINGS_KEYS.items()}

    @classmethod
    def from_dict(cls, data: "dict[str, Any]") -> "ConversionSettings":
        """Build settings from a (possibly partial) mapping.

        Missing keys fall back to defaults.
        """
        return cls(**_normalize_keys(data))


def _normalize_keys(data: "dict[str, Any]") -> "dict[str, Any]":
    field_types = {f.name: f.type for f in fields(ConversionSettings)}
    normalized = {}
    for key, value in data.items():
        name = SETTINGS_KEYS.get(key, key)
        if name not in field_types:
            raise ValueError(f"Unknown setting: {key}")
        if not _matches_type(value, field_types[name]):
            raise ValueError(
                f"Setting {key} must be {field_types[name].__name__}, got {value!r}"
            )
        normalized[name] = value
    return normalized


def _matches_type(value: Any, expected: type) -> bool:
    # bool is a subclass of int, so flags are only valid for bool fields
    if expected is bool or isinstance(value, bool):
        return expected is bool and isinstance(value, bool)
    if expected is int:
        return isinstance(value, int)
    return isinstance(value, (int, float))


@dataclass
class Region:
    """A traced, simplified and filtered closed region.

    AIDEV-NOTE: Regions have no identity beyond their position in the sorted
    output list. That position is the index used by the SVG and the UI.
    """

    points: "list[tuple[float, float]]"  # (x, y) in image pixel space
    area: float  # Shoelace area of the unsimplified contour
    original_length: int  # Point count as traced
    simplified_length: int  # Point count after simplify + smooth

    def to_dict(self) -> "dict[str, Any]":
        return {
            "points": [[x, y] for x, y in self.points],
            "area": self.area,
            "originalLength": self.original_length,
            "simplifiedLength": self.simplified_length,
        }


@dataclass
class StageSnapshot:
    """Intermediate pipeline output kept for previews."""

    name: str
    image: "PixelBuffer | None" = None
    count: int | None = None  # Set by non-buffer steps (e.g. contour count)

    def to_image(self) -> "Image.Image | None":
        """Preview as a PIL image, or None for non-buffer steps."""
        if self.image is None:
            return None
        return self.image.to_image()

    def to_data_url(self) -> str | None:
        """Preview as a base64 PNG data URL, or None for non-buffer steps."""
        image = self.to_image()
        if image is None:
            return None
        out = io.BytesIO()
        image.save(out, format="PNG")
        encoded = base64.b64encode(out.getvalue()).decode("ascii")
        return f"data:image/png;base64,{encoded}"


@dataclass
class ConversionResult:
    """Result of the image-to-map pipeline."""

    # Serialized vector document
    svg: str

    # Surviving regions, sorted by descending area
    regions: "list[Region]"

    # Source image dimensions (pixels)
    width: int
    height: int

    # Preview snapshots, in pipeline order
    steps: "list[StageSnapshot]" = field(default_factory=list)

    def to_dict(self) -> "dict[str, Any]":
        return {
            "dimensions": {"width": self.width, "height": self.height},
            "regions": [region.to_dict() for region in self.regions],
            "steps": [
                {"name": step.name, "count": step.count} for step in self.steps
            ],
        }
