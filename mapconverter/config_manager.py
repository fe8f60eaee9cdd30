"""Settings persistence manager for the image-to-map converter.

This module handles loading and saving of conversion settings to/from JSON files.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

from mapconverter.models import CONFIG_FILE, ConversionSettings

logger = logging.getLogger(__name__)


class ConfigManager:
    """Handles loading and saving of conversion settings."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to settings file (defaults to ~/.mapconverter_settings.json)
        """
        self.config_path = Path(config_path)

    def load(self) -> ConversionSettings:
        """Load settings from file, returning defaults if not found.

        Returns:
            ConversionSettings with loaded or default values

        AIDEV-NOTE: A missing or unreadable file is not fatal; the converter
        always has usable defaults. Missing keys fall back to defaults too.
        """
        if not self.config_path.exists():
            return ConversionSettings()

        try:
            with open(self.config_path, "r") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings file must contain a JSON object")
            settings = ConversionSettings.from_dict(data)
        except (OSError, ValueError) as e:
            logger.warning("Could not load settings file %s: %s", self.config_path, e)
            return ConversionSettings()

        logger.info("Loaded settings from %s", self.config_path)
        return settings

    def save(self, settings: ConversionSettings) -> Tuple[bool, Optional[str]]:
        """Save settings to file.

        Args:
            settings: ConversionSettings to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w") as f:
                json.dump(settings.to_dict(), f, indent=2)
            return True, None
        except OSError as e:
            return False, str(e)
