"""
Shared drawing primitives for the template variants.

All geometry is expressed as fractions of the output size so a template
scales to any configured dimensions. Text goes through ``put_text`` /
``fitted_text``; names are never cut, the font shrinks instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from branding import parse_hex_color
from fonts import FontBook, fit_font
from models import ColorScheme, Crew, SeatAssignment, SeatEntry, TemplateConfig

Box = Tuple[float, float, float, float]  # left, top, right, bottom

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
GOLD = (255, 215, 0)
COX_RED = (239, 68, 68)
COACH_GREEN = (16, 185, 129)


@dataclass
class RenderContext:
    """Everything a variant may read while drawing one image."""
    image: Image.Image
    config: TemplateConfig
    colors: ColorScheme
    seats: SeatAssignment
    fonts: FontBook
    drawn_text: List[str] = field(default_factory=list)

    def __post_init__(self):
        # RGBA draw mode blends translucent fills onto the RGB surface.
        self.draw = ImageDraw.Draw(self.image, "RGBA")

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def x(self, frac: float) -> float:
        return self.width * frac

    def y(self, frac: float) -> float:
        return self.height * frac

    def u(self, frac: float) -> int:
        """Size unit relative to the short side (fonts, radii, strokes)."""
        return max(1, int(round(min(self.width, self.height) * frac)))

    @property
    def primary(self) -> Tuple[int, ...]:
        return parse_hex_color(self.colors.primary)

    @property
    def secondary(self) -> Tuple[int, ...]:
        return parse_hex_color(self.colors.secondary)


def lerp_color(a: Sequence[int], b: Sequence[int], t: float) -> Tuple[int, ...]:
    t = min(1.0, max(0.0, t))
    return tuple(int(round(a[i] + (b[i] - a[i]) * t)) for i in range(3))


def with_alpha(rgb: Sequence[int], alpha: int) -> Tuple[int, int, int, int]:
    return (rgb[0], rgb[1], rgb[2], alpha)


# --- text ---

def put_text(ctx: RenderContext, x: float, y: float, text: str, font, fill, align: str = "center") -> None:
    """Draw ``text`` vertically centred on ``y``; ``x`` is the left, centre or right edge per ``align``."""
    if not text:
        return
    draw = ctx.draw
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    w, h = right - left, bottom - top
    if align == "left":
        x0 = x - left
    elif align == "right":
        x0 = x - w - left
    else:
        x0 = x - w / 2 - left
    y0 = y - h / 2 - top
    draw.text((int(round(x0)), int(round(y0))), text, font=font, fill=fill)
    ctx.drawn_text.append(text)


def fitted_text(
    ctx: RenderContext,
    x: float,
    y: float,
    text: str,
    size: int,
    max_width: float,
    fill,
    align: str = "center",
    bold: bool = False,
    serif: bool = False,
) -> None:
    font = fit_font(ctx.fonts, ctx.draw, text, size, max_width, bold=bold, serif=serif)
    put_text(ctx, x, y, text, font, fill, align)


def entry_text(ctx: RenderContext, entry: SeatEntry) -> str:
    if ctx.config.name_display == "basic":
        return entry.name
    return f"{entry.label}: {entry.name}" if entry.name else entry.label


# --- shapes ---

def panel(ctx: RenderContext, box: Box, fill=None, radius: int = 0, outline=None, width: int = 1) -> None:
    box = tuple(int(round(v)) for v in box)
    if box[2] < box[0] or box[3] < box[1]:
        return
    if radius > 0:
        ctx.draw.rounded_rectangle(box, radius=radius, fill=fill, outline=outline, width=width)
    else:
        ctx.draw.rectangle(box, fill=fill, outline=outline, width=width)


def border(ctx: RenderContext, inset_frac: float, color, width_frac: float = 0.004) -> None:
    inset = ctx.u(inset_frac)
    panel(ctx, (inset, inset, ctx.width - 1 - inset, ctx.height - 1 - inset), outline=color, width=ctx.u(width_frac))


def ornament_line(ctx: RenderContext, cx: float, y: float, half_width: float, color) -> None:
    """Horizontal rule with a diamond in the middle and dots at the ends."""
    lw = ctx.u(0.002)
    d = ctx.u(0.008)
    ctx.draw.line([(cx - half_width, y), (cx - d * 2, y)], fill=color, width=lw)
    ctx.draw.line([(cx + d * 2, y), (cx + half_width, y)], fill=color, width=lw)
    ctx.draw.polygon([(cx, y - d), (cx + d, y), (cx, y + d), (cx - d, y)], fill=color)
    for ex in (cx - half_width, cx + half_width):
        ctx.draw.ellipse([ex - d / 2, y - d / 2, ex + d / 2, y + d / 2], fill=color)


def corner_flourishes(ctx: RenderContext, inset_frac: float, length_frac: float, color) -> None:
    inset = ctx.u(inset_frac)
    length = ctx.u(length_frac)
    lw = ctx.u(0.004)
    w, h = ctx.width - 1, ctx.height - 1
    for (x, y, dx, dy) in ((inset, inset, 1, 1), (w - inset, inset, -1, 1), (inset, h - inset, 1, -1), (w - inset, h - inset, -1, -1)):
        ctx.draw.line([(x, y), (x + dx * length, y)], fill=color, width=lw)
        ctx.draw.line([(x, y), (x, y + dy * length)], fill=color, width=lw)
        r = ctx.u(0.006)
        cx, cy = x + dx * r * 2, y + dy * r * 2
        ctx.draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=color)


# --- backgrounds ---

def linear_gradient(ctx: RenderContext, top, bottom, box: Optional[Box] = None) -> None:
    left, t, right, b = box or (0, 0, ctx.width, ctx.height)
    t, b = int(t), int(b)
    span = max(1, b - t - 1)
    for yy in range(t, b):
        ctx.draw.line([(left, yy), (right, yy)], fill=lerp_color(top, bottom, (yy - t) / span))


def radial_gradient(ctx: RenderContext, stops: Sequence[Tuple[float, Sequence[int]]], rings: int = 64) -> None:
    """Concentric ellipses from the outside in; ``stops`` are (offset 0..1, rgb) pairs."""
    cx, cy = ctx.width / 2, ctx.height / 2
    radius = max(ctx.width, ctx.height) * 0.75
    for k in range(rings, 0, -1):
        t = k / rings
        color = stops[-1][1]
        for (o1, c1), (o2, c2) in zip(stops, stops[1:]):
            if o1 <= t <= o2:
                color = lerp_color(c1, c2, (t - o1) / ((o2 - o1) or 1))
                break
        r = radius * t
        ctx.draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=tuple(color))


def paint_background(ctx: RenderContext) -> None:
    """Fill the whole surface according to ``config.background``."""
    style = ctx.config.background
    w, h = ctx.width, ctx.height
    primary, secondary = ctx.primary, ctx.secondary

    if style == "plain":
        panel(ctx, (0, 0, w, h), fill=WHITE)
    elif style == "solid":
        panel(ctx, (0, 0, w, h), fill=primary)
    elif style == "gradient":
        linear_gradient(ctx, primary, secondary)
    elif style == "geometric":
        panel(ctx, (0, 0, w, h), fill=secondary)
        shapes = [
            [(0, 0), (w * 0.55, 0), (0, h * 0.45)],
            [(w, h), (w * 0.35, h), (w, h * 0.5)],
            [(w * 0.7, 0), (w, 0), (w, h * 0.3)],
        ]
        for pts in shapes:
            ctx.draw.polygon(pts, fill=with_alpha(primary, 110))
        ctx.draw.ellipse([w * 0.62, h * 0.58, w * 1.1, h * 1.06], fill=with_alpha(WHITE, 18))
    elif style == "diagonal":
        panel(ctx, (0, 0, w, h), fill=primary)
        stripe = max(2, int(w * 0.04))
        for i in range(0, w + h, stripe * 2):
            ctx.draw.polygon([(i - h, 0), (i, h), (i + stripe, h), (i + stripe - h, 0)], fill=secondary)
    elif style == "radial-burst":
        radial_gradient(ctx, [(0.0, (253, 244, 196)), (0.3, primary), (1.0, secondary)])
    elif style == "parchment":
        paper = (245, 241, 232)
        panel(ctx, (0, 0, w, h), fill=paper)
        # Fixed speckle pattern; same size in, same pixels out.
        count = (w * h) // 1500
        for i in range(count):
            px = (i * 7919) % w
            py = (i * 6271 + i // 7) % h
            ctx.draw.point((px, py), fill=(139, 125, 107, 8 + (i * 37) % 18))
    else:
        linear_gradient(ctx, primary, secondary)


# --- text blocks ---

def draw_header(
    ctx: RenderContext,
    crew: Crew,
    box: Box,
    fill,
    accent=None,
    serif: bool = False,
    title: Optional[str] = None,
) -> float:
    """
    Club name, crew name and "boat • race" inside ``box``, honouring
    ``config.text_layout``. Returns the y just below the last line.
    """
    left, top, right, bottom = box
    layout = ctx.config.text_layout
    lines = [(title or crew.club_name, 1.0, True, fill), (crew.name, 0.66, False, accent or fill)]
    if layout != "minimal":
        lines.append((f"{crew.boat_type.name} • {crew.race_name}", 0.46, False, fill))

    height = bottom - top
    weights = sum(s for _, s, _, _ in lines)
    unit = height / (weights * 1.35)
    align = "left" if layout == "header-left" else "center"
    pad = (right - left) * 0.04
    x = left + pad if align == "left" else (left + right) / 2
    max_w = (right - left) - pad * 2

    y = top
    for text, scale, bold, color in lines:
        line_h = unit * scale * 1.35
        fitted_text(ctx, x, y + line_h / 2, text, int(unit * scale), max_w, color, align=align, bold=bold, serif=serif)
        y += line_h
    return y


def layout_entries(
    ctx: RenderContext,
    box: Box,
    columns: int,
    size: int,
    fill,
    bold: bool = False,
    serif: bool = False,
    entries: Optional[Sequence[SeatEntry]] = None,
) -> float:
    """
    Lay rower entries out in ``box``.

    One column is left-aligned. Two columns alternate by index (even indices on
    the left, odd on the right); the left column is left-aligned and the right
    column right-aligned. Returns the y below the last row.
    """
    items = list(ctx.seats.seats if entries is None else entries)
    if not items:
        return box[1]
    left, top, right, bottom = box
    rows = math.ceil(len(items) / columns) if columns > 1 else len(items)
    row_h = min((bottom - top) / rows, size * 1.7)
    size = min(size, int(row_h * 0.62))
    col_w = (right - left) if columns == 1 else (right - left) * 0.48

    for index, entry in enumerate(items):
        if columns > 1:
            row, col = divmod(index, 2)
            x, align = (left, "left") if col == 0 else (right, "right")
        else:
            row, x, align = index, left, "left"
        y = top + row * row_h + row_h / 2
        fitted_text(ctx, x, y, entry_text(ctx, entry), size, col_w, fill, align=align, bold=bold, serif=serif)
    return top + rows * row_h


def role_lines(ctx: RenderContext, crew: Crew) -> List[Tuple[str, Tuple[int, int, int]]]:
    """Cox (from the resolved seat assignment) and coach texts with their badge colors."""
    out = []
    if ctx.seats.cox is not None:
        cox = ctx.seats.cox
        out.append((f"{cox.label}: {cox.name}" if cox.name else cox.label, COX_RED))
    if crew.coach_name:
        out.append((f"Coach: {crew.coach_name}", COACH_GREEN))
    return out


def role_badges(
    ctx: RenderContext,
    crew: Crew,
    cx: float,
    y: float,
    width: float,
    height: float,
    text_fill=WHITE,
    alpha: int = 230,
    fills=None,
    outline=None,
    serif: bool = False,
    upper: bool = False,
) -> float:
    """Stack one rounded badge per special role centred on ``cx``; returns the y below them."""
    for i, (text, badge) in enumerate(role_lines(ctx, crew)):
        fill = fills[i % len(fills)] if fills else with_alpha(badge, alpha)
        panel(ctx, (cx - width / 2, y, cx + width / 2, y + height), fill=fill, radius=int(height * 0.25), outline=outline, width=ctx.u(0.002))
        label = text.upper() if upper else text
        fitted_text(ctx, cx, y + height / 2, label, int(height * 0.5), width * 0.9, text_fill, bold=True, serif=serif)
        y += height * 1.3
    return y


# --- boat emblem ---

def draw_boat(ctx: RenderContext, crew: Crew, box: Box, color, seat_color=None) -> None:
    """Shell silhouette with one dot per seat (bow on the left, cox at the stern)."""
    style = ctx.config.boat_style
    if style == "none":
        return
    left, top, right, bottom = box
    cx, cy = (left + right) / 2, (top + bottom) / 2
    length = (right - left) * (0.85 if style == "showcase" else 0.6)
    half_h = (bottom - top) * (0.16 if style == "showcase" else 0.12)
    l, r = cx - length / 2, cx + length / 2
    taper = length * 0.12
    hull = [(l, cy), (l + taper, cy - half_h), (r - taper, cy - half_h), (r, cy), (r - taper, cy + half_h), (l + taper, cy + half_h)]
    ctx.draw.polygon(hull, fill=color)

    seat_color = seat_color or WHITE
    rowers = len(ctx.seats.seats)
    dot = max(2, half_h * 0.55)
    first, last = l + taper * 1.4, r - taper * (2.6 if ctx.seats.cox is not None else 1.4)
    step = (last - first) / max(1, rowers - 1) if rowers > 1 else 0
    sculling = "x" in crew.boat_type.code
    oar = (bottom - top) * 0.38
    lw = max(1, ctx.u(0.003))
    for i in range(rowers):
        # index 0 is Stroke, nearest the stern on the right
        sx = last - i * step if rowers > 1 else cx
        if style == "showcase":
            if sculling or i % 2 == 0:
                ctx.draw.line([(sx, cy), (sx - oar * 0.4, cy - oar)], fill=color, width=lw)
            if sculling or i % 2 == 1:
                ctx.draw.line([(sx, cy), (sx - oar * 0.4, cy + oar)], fill=color, width=lw)
        ctx.draw.ellipse([sx - dot, cy - dot, sx + dot, cy + dot], fill=seat_color)
    if ctx.seats.cox is not None:
        sx = r - taper * 1.2
        ctx.draw.ellipse([sx - dot * 0.8, cy - dot * 0.8, sx + dot * 0.8, cy + dot * 0.8], fill=COX_RED)


# --- club icon ---

def paste_icon(image: Image.Image, icon: Image.Image, position: str, size_ratio: float, margin_ratio: float) -> None:
    """Scale ``icon`` into a square slot at a corner of ``image`` keeping its aspect ratio."""
    if icon is None or position == "none":
        return
    short = min(image.width, image.height)
    slot = max(1, int(short * size_ratio))
    margin = int(short * margin_ratio)
    scale = slot / max(icon.width, icon.height)
    w, h = max(1, int(icon.width * scale)), max(1, int(icon.height * scale))
    scaled = icon.resize((w, h), Image.Resampling.LANCZOS)

    x = margin if position.endswith("left") else image.width - margin - slot
    y = margin if position.startswith("top") else image.height - margin - slot
    x += (slot - w) // 2
    y += (slot - h) // 2
    image.paste(scaled, (x, y), scaled)
