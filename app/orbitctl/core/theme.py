"""Colour theme for orbitctl console output.

The bundled palette lives in ``orbitctl/data/theme.toml``; a partial or
full override can be placed at ``~/.config/orbitctl/theme.toml``.
"""

import logging
import sys
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, field_validator
from rich.theme import Theme

from orbitctl.core.paths import get_config_dir

logger = logging.getLogger(__name__)


class ThemeColors(BaseModel):
    """Palette used by the Rich consoles.

    Every value must be a hex colour (#RGB or #RRGGBB).
    """

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Cleanup outcomes
    removed: str = "#f53263"
    stopped: str = "#f5b332"
    dry_run: str = "#0e8ac8"
    skipped: str = "#636e72"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        if not isinstance(v, str):
            msg = f"{info.field_name}: color must be a string"
            raise ValueError(msg)
        color = v.strip()
        if not color.startswith("#"):
            msg = f"{info.field_name}: color must start with '#'"
            raise ValueError(msg)
        digits = color[1:]
        if len(digits) not in (3, 6):
            msg = f"{info.field_name}: color must be #RGB or #RRGGBB format"
            raise ValueError(msg)
        try:
            int(digits, 16)
        except ValueError:
            msg = f"{info.field_name}: invalid hex color '{color}'"
            raise ValueError(msg) from None
        return color


def get_user_theme_path() -> Path:
    """Return the user override path (~/.config/orbitctl/theme.toml)."""
    return get_config_dir() / "theme.toml"


def get_bundled_theme_path() -> Path:
    """Return the path of the theme shipped inside the package."""
    return resources.files("orbitctl.data").joinpath("theme.toml")  # type: ignore[return-value]


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a TOML file.

    Returns None when the file is missing, unreadable, or malformed.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except tomllib.TOMLDecodeError as e:
        logger.warning("Failed to parse theme file %s: %s", path, e)
        return None
    except OSError as e:
        logger.warning("Failed to read theme file %s: %s", path, e)
        return None

    colors_raw: object = data.get("colors", {})
    if not isinstance(colors_raw, dict):
        logger.warning("Invalid 'colors' section in %s", path)
        return None
    return {
        key: value
        for key, value in cast(dict[str, object], colors_raw).items()
        if isinstance(value, str)
    }


def load_theme() -> ThemeColors:
    """Load the bundled palette and apply user overrides on top.

    Falls back to ThemeColors defaults if the merged palette is invalid.
    """
    bundled = _load_toml_colors(Path(get_bundled_theme_path()))
    if bundled is None:
        logger.error("Bundled theme is missing; installation may be corrupted")
        bundled = {}

    user_path = get_user_theme_path()
    overrides = _load_toml_colors(user_path)
    if overrides is not None:
        logger.debug("Applying theme overrides from %s", user_path)
        merged = {**bundled, **overrides}
    else:
        merged = bundled

    try:
        return ThemeColors(**merged)
    except ValueError as e:
        logger.warning("Theme validation failed, using defaults: %s", e)
        print(f"Warning: Invalid theme configuration: {e}", file=sys.stderr)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich Theme from a palette (loaded on demand)."""
    if colors is None:
        colors = load_theme()

    return Theme(
        {
            "text": colors.text,
            "muted": colors.muted,
            "header": colors.header,
            "border": colors.border,
            "success": colors.success,
            "warning": colors.warning,
            "error": f"bold {colors.error}",
            "info": colors.info,
            "removed": colors.removed,
            "stopped": colors.stopped,
            "dry_run": colors.dry_run,
            "skipped": colors.skipped,
            "bold_header": f"bold {colors.header}",
            "dim": colors.muted,
        }
    )


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the process-wide Rich theme, loading it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
