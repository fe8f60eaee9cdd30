"""Exceptions raised by the image-to-map conversion pipeline."""


class MapConverterError(Exception):
    """Base class for conversion errors."""


class ImageDecodeError(MapConverterError, ValueError):
    """The input image could not be read or decoded."""


class ConversionCancelled(MapConverterError):
    """The caller asked to stop the pipeline between two stages."""

    def __init__(self, stage: str):
        super().__init__(f"Conversion cancelled before stage '{stage}'")
        self.stage = stage
