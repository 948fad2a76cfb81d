"""Configuration management for epl2label.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults. Every model
except LoggingConfig is frozen, so one settings value can be shared by
concurrent jobs.

Key classes:
- RenderConfig: Rasterization and shaping settings
- PrinterProfile: Printer calibration and quirks
- LayoutConfig: Label arrangement geometry
- LoggingConfig: Logging settings
- ComposerSettings: Main application settings
"""

from epl2label.config.settings import (
    ComposerSettings,
    LayoutConfig,
    LoggingConfig,
    Orientation,
    Polarity,
    PrinterProfile,
    RenderConfig,
    get_default_settings,
)

__all__ = [
    "ComposerSettings",
    "LayoutConfig",
    "LoggingConfig",
    "Orientation",
    "Polarity",
    "PrinterProfile",
    "RenderConfig",
    "get_default_settings",
]
