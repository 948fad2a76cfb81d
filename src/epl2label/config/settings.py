"""Configuration settings for epl2label."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Polarity(str, Enum):
    """Raster polarity of the GW payload."""

    NORMAL = "normal"
    INVERTED = "inverted"


class Orientation(str, Enum):
    """Orientation of the planned content on the physical label."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class RenderConfig(BaseModel):
    """Configuration for glyph rasterization and text shaping."""

    model_config = ConfigDict(frozen=True)

    bold_passes: int = Field(
        default=2,
        ge=1,
        le=4,
        description="Draw passes at 1px horizontal offsets OR-ed together (1 = regular weight)",
    )
    coverage_threshold: float = Field(
        default=0.65,
        gt=0.0,
        lt=1.0,
        description="Anti-aliased coverage above which a pixel is black",
    )
    min_line_height: int = Field(
        default=30,
        ge=1,
        le=512,
        description="Floor for rendered line height in dots",
    )
    arabic_ligatures: bool = Field(
        default=True,
        description="Substitute Arabic ligatures (e.g. lam-alef) while shaping",
    )


class PrinterProfile(BaseModel):
    """Calibration and quirks of one target printer."""

    model_config = ConfigDict(frozen=True)

    darkness: int = Field(default=8, ge=0, le=15, description="D directive (print head heat)")
    speed: int = Field(default=2, ge=1, le=6, description="S directive (feed rate)")
    gap: int = Field(default=24, ge=0, description="Gap between labels in dots")
    narrow: int = Field(default=2, ge=1, le=10, description="Barcode narrow module width in dots")
    wide: int = Field(default=3, ge=2, le=30, description="Barcode wide bar width in dots")
    hri_visible: bool = Field(default=True, description="Print human readable digits under bars")
    hri_height: int = Field(
        default=20,
        ge=0,
        description="Vertical room reserved for the human readable digits",
    )
    polarity: Polarity = Field(
        default=Polarity.INVERTED,
        description="EPL2 firmware prints a dot for every zero bit of a GW block",
    )
    orientation: Orientation = Field(default=Orientation.PORTRAIT)
    firmware_checksum: bool = Field(
        default=False,
        description="Send only the 12-digit payload and let firmware add the check digit",
    )


class LayoutConfig(BaseModel):
    """Geometry of the supported label arrangements, in dots."""

    model_config = ConfigDict(frozen=True)

    canvas_width: int = Field(default=440, ge=1)
    canvas_height: int = Field(default=320, ge=1)
    currency: str = Field(default="ج.م", description="Suffix appended to every price")

    pair_font_px: int = Field(default=36, ge=4)
    pair_barcode_height: int = Field(default=52, ge=1)
    grid_font_px: int = Field(default=24, ge=4)
    caption_font_px: int = Field(default=20, ge=4)
    grid_barcode_height: int = Field(default=35, ge=1)

    text_padding: int = Field(default=10, ge=0, description="Horizontal padding around text blocks")
    top_margin: int = Field(default=8, ge=0, description="Distance from band/quadrant top to first element")
    element_gap: int = Field(default=6, ge=1, description="Vertical gap between stacked elements")

    grid_gap: int = Field(default=8, ge=0, description="Gap separating the four quadrants")
    grid_barcode_nudge: int = Field(
        default=6,
        ge=0,
        description="Rightward shift keeping the leading HRI digit inside its quadrant",
    )
    separators: bool = Field(default=True, description="Draw rules between grid quadrants")
    rule_margin: int = Field(default=10, ge=0)
    rule_thickness: int = Field(default=1, ge=1)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class ComposerSettings(BaseModel):
    """Main application settings."""

    model_config = ConfigDict(frozen=True)

    render: RenderConfig = Field(default_factory=RenderConfig)
    printer: PrinterProfile = Field(default_factory=PrinterProfile)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> ComposerSettings:
    """Get default application settings."""
    return ComposerSettings()
