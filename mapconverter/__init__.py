"""Map Converter: turns raster images into SVG maps of closed regions."""

from mapconverter.errors import ConversionCancelled, ImageDecodeError, MapConverterError
from mapconverter.image_processing import ImageConverter, PixelBuffer, load_image
from mapconverter.models import ConversionResult, ConversionSettings, Region, StageSnapshot

__version__ = "0.1.0"

__all__ = [
    "ConversionCancelled",
    "ConversionResult",
    "ConversionSettings",
    "ImageConverter",
    "ImageDecodeError",
    "MapConverterError",
    "PixelBuffer",
    "Region",
    "StageSnapshot",
    "load_image",
]
