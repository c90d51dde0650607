"""
Central configuration for crew-graphics.

Keep runtime-safe (no secrets).
"""

import os
from pathlib import Path

_APP_DIR = Path(__file__).resolve().parent

# UI
MAX_INDIVIDUAL_DOWNLOADS = 10  # <= this: individual PNG downloads + previews; > this: ZIP download
ZIP_SPOOL_MAX_BYTES = 25 * 1024 * 1024  # spill ZIP to disk after ~25MB

PREVIEW_COLUMNS_DESKTOP = 4
PREVIEW_COLUMNS_MOBILE = 2
PREVIEW_WIDTH_DESKTOP = 220
PREVIEW_WIDTH_MOBILE = 300

# Output
DEFAULT_WIDTH = 1080
DEFAULT_HEIGHT = 1080
MAX_DIMENSION_PX = 4096
DEFAULT_PRIMARY_COLOR = "#2563eb"
DEFAULT_SECONDARY_COLOR = "#1e40af"
OUTPUT_DIR = "output"

# Template config option ids
STYLE_OPTIONS = {
    "background": ("gradient", "geometric", "diagonal", "radial-burst", "solid", "plain", "parchment"),
    "name_display": ("labeled", "basic"),
    "boat_style": ("centered", "showcase", "none"),
    "text_layout": ("header-center", "header-left", "minimal"),
    "logo": ("top-left", "top-right", "bottom-left", "bottom-right", "none"),
}

# Club icon
ALLOWED_ICON_FORMATS = ("PNG", "JPEG", "GIF", "WEBP", "BMP")
ICON_SIZE_RATIO = 0.14  # of min(width, height)
ICON_MARGIN_RATIO = 0.03
LOGO_DIR = _APP_DIR / "assets" / "club-logos"

# Typography
MIN_FONT_PX = 1
FONT_DIR = _APP_DIR / "fonts"
SANS_REGULAR_FONTS = [
    str(FONT_DIR / "Sans-Regular.ttf"),
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "/Library/Fonts/Arial.ttf",
    os.path.expanduser("~/Library/Fonts/Arial.ttf"),
    "C:/Windows/Fonts/arial.ttf",
]
SANS_BOLD_FONTS = [
    str(FONT_DIR / "Sans-Bold.ttf"),
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
]
SERIF_REGULAR_FONTS = [
    str(FONT_DIR / "Serif-Regular.ttf"),
    "/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf",
    "/usr/share/fonts/dejavu/DejaVuSerif.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSerif-Regular.ttf",
    "/System/Library/Fonts/Supplemental/Times New Roman.ttf",
    "C:/Windows/Fonts/times.ttf",
]
SERIF_BOLD_FONTS = [
    str(FONT_DIR / "Serif-Bold.ttf"),
    "/usr/share/fonts/truetype/dejavu/DejaVuSerif-Bold.ttf",
    "/usr/share/fonts/dejavu/DejaVuSerif-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSerif-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Times New Roman Bold.ttf",
    "C:/Windows/Fonts/timesbd.ttf",
]

# Club preset API
PRESET_API_TIMEOUT_S = 15
PRESET_API_MAX_ATTEMPTS = 2
