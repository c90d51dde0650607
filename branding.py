"""
Color and club-icon resolution.

Colors follow a strict precedence: explicit request colors, then the selected
club preset, then the template default. A preset that was asked for but does
not exist is an error, never a quiet fallback to the template colors.
"""

from __future__ import annotations

import logging
import re
from io import BytesIO
from typing import Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from config import ALLOWED_ICON_FORMATS
from errors import IconNotFound, InvalidColor, PresetNotFound, UnsupportedIconFormat
from models import ColorScheme, PresetIcon, UploadIcon
from repository import ClubPresetLookup, LogoStore

log = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")

ClubIcon = Union[UploadIcon, PresetIcon]


def normalize_hex(value, field: str = "color") -> str:
    """Return '#rrggbb' for a 6-digit hex string (leading '#' optional)."""
    m = _HEX_RE.match(str(value or "").strip())
    if not m:
        raise InvalidColor(f"{field} must be a 6-digit hex color like #1e40af, got {value!r}", field=field)
    return "#" + m.group(1).lower()


def parse_hex_color(value, alpha: Optional[int] = None) -> Tuple[int, ...]:
    """'#1e40af' -> (30, 64, 175); with alpha -> (30, 64, 175, alpha)."""
    h = normalize_hex(value)[1:]
    rgb = tuple(int(h[i : i + 2], 16) for i in (0, 2, 4))
    return rgb if alpha is None else rgb + (alpha,)


def resolve_colors(
    explicit: Optional[ColorScheme],
    preset_id,
    template_default: ColorScheme,
    presets: Optional[ClubPresetLookup] = None,
) -> ColorScheme:
    preset = None
    if preset_id is not None and str(preset_id).strip() != "":
        preset = presets.get(preset_id) if presets is not None else None
        if preset is None:
            raise PresetNotFound(preset_id)

    if explicit is not None:
        return ColorScheme(
            primary=normalize_hex(explicit.primary, "colors.primary"),
            secondary=normalize_hex(explicit.secondary, "colors.secondary"),
            source="explicit",
        )
    if preset is not None:
        return ColorScheme(
            primary=normalize_hex(preset.primary_color, "preset.primary_color"),
            secondary=normalize_hex(preset.secondary_color, "preset.secondary_color"),
            source="preset",
        )
    return ColorScheme(
        primary=normalize_hex(template_default.primary, "template.primary"),
        secondary=normalize_hex(template_default.secondary, "template.secondary"),
        source="template",
    )


def decode_icon(data: bytes, filename: str = "") -> Image.Image:
    """Sniff and decode icon bytes into an RGBA bitmap."""
    if not data:
        raise UnsupportedIconFormat(f"Club icon {filename!r} is empty", field="clubIcon")
    try:
        img = Image.open(BytesIO(data))
        fmt = img.format
        if fmt not in ALLOWED_ICON_FORMATS:
            raise UnsupportedIconFormat(
                f"Club icon format {fmt} is not supported (use {', '.join(ALLOWED_ICON_FORMATS)})",
                field="clubIcon",
            )
        img.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise UnsupportedIconFormat(
            f"Club icon {filename!r} is not a readable image", field="clubIcon"
        ) from e
    return img.convert("RGBA")


def resolve_icon(icon: Optional[ClubIcon], logos: Optional[LogoStore] = None) -> Optional[Image.Image]:
    if icon is None:
        return None
    if isinstance(icon, UploadIcon):
        return decode_icon(icon.file_bytes, icon.filename)

    data = logos.read(icon.filename) if logos is not None else None
    if data is None:
        raise IconNotFound(icon.filename)
    log.debug("Loaded preset club logo %s (%d bytes)", icon.filename, len(data))
    return decode_icon(data, icon.filename)
