"""
Font loading and fit-to-width sizing.

A FontBook is created per render and thrown away afterwards. Fonts are looked
up from the candidate lists in config; when none of them exist Pillow's
bundled default font is used at the requested size.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional, Tuple

from PIL import ImageDraw, ImageFont

from config import (
    MIN_FONT_PX,
    SANS_BOLD_FONTS,
    SANS_REGULAR_FONTS,
    SERIF_BOLD_FONTS,
    SERIF_REGULAR_FONTS,
)

log = logging.getLogger(__name__)

_FAMILIES: Dict[Tuple[bool, bool], List[str]] = {
    (False, False): SANS_REGULAR_FONTS,
    (True, False): SANS_BOLD_FONTS,
    (False, True): SERIF_REGULAR_FONTS,
    (True, True): SERIF_BOLD_FONTS,
}


class FontBook:
    """Loads and caches fonts for the lifetime of one render."""

    def __init__(self, families: Optional[Dict[Tuple[bool, bool], List[str]]] = None):
        self._families = families or _FAMILIES
        self._paths: Dict[Tuple[bool, bool], Optional[str]] = {}
        self._fonts: Dict[Tuple[int, bool, bool], ImageFont.ImageFont] = {}

    def _path_for(self, bold: bool, serif: bool) -> Optional[str]:
        key = (bold, serif)
        if key not in self._paths:
            found = None
            for path in self._families.get(key, []):
                p = os.path.expanduser(path)
                if os.path.exists(p):
                    found = p
                    break
            if found is None and bold:
                # A regular face beats the bitmap default.
                found = self._path_for(False, serif)
            self._paths[key] = found
        return self._paths[key]

    def get(self, size: int, bold: bool = False, serif: bool = False):
        size = max(MIN_FONT_PX, int(size))
        key = (size, bold, serif)
        font = self._fonts.get(key)
        if font is None:
            path = self._path_for(bold, serif)
            if path:
                font = ImageFont.truetype(path, size)
            else:
                font = ImageFont.load_default(size=size)
            self._fonts[key] = font
        return font


def text_width(draw: ImageDraw.ImageDraw, text: str, font) -> int:
    if not text:
        return 0
    bbox = draw.textbbox((0, 0), text, font=font)
    return bbox[2] - bbox[0]


def text_height(draw: ImageDraw.ImageDraw, text: str, font) -> int:
    bbox = draw.textbbox((0, 0), text or "Ag", font=font)
    return bbox[3] - bbox[1]


def fit_font(
    fonts: FontBook,
    draw: ImageDraw.ImageDraw,
    text: str,
    size: int,
    max_width: float,
    bold: bool = False,
    serif: bool = False,
):
    """
    Largest font (starting at ``size``) whose rendering of ``text`` fits ``max_width``.

    Shrinks proportionally to the overflow, then one pixel at a time, so the same
    text and box always produce the same size. Text is never cut.
    """
    size = max(MIN_FONT_PX, int(size))
    max_width = max(1.0, float(max_width))
    font = fonts.get(size, bold, serif)
    width = text_width(draw, text, font)
    while width > max_width and size > MIN_FONT_PX:
        proportional = int(size * max_width / width)
        size = max(MIN_FONT_PX, min(size - 1, proportional))
        font = fonts.get(size, bold, serif)
        width = text_width(draw, text, font)
    if width > max_width:
        log.debug("Text %r still %dpx wide at minimum font size", text, width)
    return font
