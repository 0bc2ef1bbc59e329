"""
svg2png Configuration
=====================

This module handles configuration loading for the conversion service.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    SVG2PNG_CONFIG            -> path to config.yaml
    SVG2PNG_HOST              -> server.host
    SVG2PNG_PORT              -> server.port
    SVG2PNG_LOG_LEVEL         -> logging.level
    SVG2PNG_LOG_FORMAT        -> logging.format
    SVG2PNG_FONT_FAMILY       -> conversion.font_family
    SVG2PNG_MAX_CANVAS_PIXELS -> conversion.max_canvas_pixels
    SVG2PNG_MAGICK_BINARY     -> background.binary

Example:
    from svg2png.config import settings

    print(settings.server.port)
    print(settings.conversion.font_family)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class ServiceConfig(BaseModel):
    """Service identification."""

    name: str = Field(default="svg2png", description="Service name")
    version: str = Field(default="0.2.2", description="Service version")


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=3000, ge=1, le=65535, description="Bind port")


class ConversionConfig(BaseModel):
    """SVG to PNG conversion configuration."""

    font_family: str = Field(
        default="Times New Roman",
        description="Font used for text that does not declare a font-family",
    )
    max_canvas_pixels: int = Field(
        default=16384 * 16384,
        gt=0,
        description="Largest canvas (width * height) that will be rendered",
    )
    compression_level: int = Field(
        default=6,
        ge=0,
        le=9,
        description="zlib compression level for PNG image data",
    )
    unsafe: bool = Field(
        default=False,
        description="Allow XML entities and external resources in SVG input",
    )


class BackgroundConfig(BaseModel):
    """ImageMagick background removal configuration."""

    binary: str = Field(
        default="convert",
        description="ImageMagick executable ('convert' or 'magick')",
    )
    fuzz_percent: float = Field(
        default=10.0,
        ge=0,
        le=100,
        description="Colour tolerance of the flood fill in percent",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Maximum runtime of one ImageMagick invocation",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for svg2png.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    conversion: ConversionConfig = Field(default_factory=ConversionConfig)
    background: BackgroundConfig = Field(default_factory=BackgroundConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, uses SVG2PNG_CONFIG
            or searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        config_path = os.environ.get("SVG2PNG_CONFIG")

    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path("/app/config.yaml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.info("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Server settings
    if env_host := os.environ.get("SVG2PNG_HOST"):
        config_data.setdefault("server", {})["host"] = env_host
    if env_port := os.environ.get("SVG2PNG_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Conversion settings
    if env_font := os.environ.get("SVG2PNG_FONT_FAMILY"):
        config_data.setdefault("conversion", {})["font_family"] = env_font
    if env_pixels := os.environ.get("SVG2PNG_MAX_CANVAS_PIXELS"):
        config_data.setdefault("conversion", {})["max_canvas_pixels"] = int(env_pixels)

    # Background removal
    if env_binary := os.environ.get("SVG2PNG_MAGICK_BINARY"):
        config_data.setdefault("background", {})["binary"] = env_binary

    # Logging settings
    if env_log := os.environ.get("SVG2PNG_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_format := os.environ.get("SVG2PNG_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_format


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
