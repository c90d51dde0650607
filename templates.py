"""
Template variant registry.

Each variant is a plain function ``draw(ctx, crew)`` registered once in
``TEMPLATES`` with its display metadata and default config. Variants only
decide geometry, typography and decoration: seat labels and colors arrive
already resolved on the RenderContext.

Geometry is written as fractions of width/height (``ctx.x``/``ctx.y``) or of
the short side (``ctx.u``) so every template scales to the requested size.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, List

from drawing import (
    BLACK,
    COACH_GREEN,
    COX_RED,
    GOLD,
    WHITE,
    RenderContext,
    border,
    corner_flourishes,
    draw_boat,
    draw_header,
    entry_text,
    fitted_text,
    layout_entries,
    ornament_line,
    paint_background,
    panel,
    role_badges,
    role_lines,
    with_alpha,
)
from errors import TemplateNotFound
from models import Crew, TemplateConfig

DrawFn = Callable[[RenderContext, Crew], None]


@dataclass(frozen=True)
class TemplateVariant:
    id: str
    name: str
    description: str
    category: str
    draw: DrawFn
    defaults: TemplateConfig


def _classic_lineup(ctx: RenderContext, crew: Crew) -> None:
    paint_background(ctx)
    w, h = ctx.width, ctx.height

    bottom = draw_header(ctx, crew, (ctx.x(0.06), ctx.y(0.04), ctx.x(0.94), ctx.y(0.2)), WHITE)
    rule_y = max(bottom, ctx.y(0.2)) + ctx.y(0.012)
    ctx.draw.line([(ctx.x(0.08), rule_y), (w - ctx.x(0.08), rule_y)], fill=WHITE, width=ctx.u(0.003))

    end = layout_entries(ctx, (ctx.x(0.12), ctx.y(0.25), ctx.x(0.88), ctx.y(0.66)), 1, ctx.u(0.034), WHITE)
    role_badges(ctx, crew, w / 2, end + ctx.y(0.02), ctx.x(0.5), ctx.y(0.05), alpha=200)
    draw_boat(ctx, crew, (ctx.x(0.1), ctx.y(0.84), ctx.x(0.9), h - ctx.y(0.03)), WHITE, seat_color=ctx.primary)


def _modern_card(ctx: RenderContext, crew: Crew) -> None:
    paint_background(ctx)
    w, h = ctx.width, ctx.height
    m = ctx.u(0.04)
    panel(ctx, (m, m, w - m, h - m), fill=WHITE, radius=ctx.u(0.02))
    panel(ctx, (m, m, w - m, m + ctx.u(0.008)), fill=ctx.primary)

    header = (m + ctx.x(0.02), m + ctx.y(0.03), w - m - ctx.x(0.02), m + ctx.y(0.16))
    panel(ctx, header, fill=ctx.secondary, radius=ctx.u(0.012))
    draw_header(ctx, crew, (header[0], header[1] + ctx.y(0.01), header[2], header[3] - ctx.y(0.01)), WHITE)

    # Member cards, two per row alternating left/right by index.
    top = header[3] + ctx.y(0.035)
    card_h = ctx.y(0.05)
    gap = ctx.y(0.012)
    inner_l, inner_r = m + ctx.x(0.03), w - m - ctx.x(0.03)
    card_w = (inner_r - inner_l) * 0.48
    badge = card_h * 0.8
    labeled = ctx.config.name_display != "basic"
    for i, entry in enumerate(ctx.seats.seats):
        row, col = divmod(i, 2)
        y = top + row * (card_h + gap)
        x0 = inner_l if col == 0 else inner_r - card_w
        panel(ctx, (x0, y, x0 + card_w, y + card_h), fill=(241, 245, 249), radius=ctx.u(0.008))
        pad = card_h * 0.1
        text_w = card_w - pad * 3 - (badge * 1.6 if labeled else 0)
        if col == 0:
            if labeled:
                bx = x0 + pad
                panel(ctx, (bx, y + pad, bx + badge * 1.6, y + card_h - pad), fill=ctx.primary, radius=ctx.u(0.004))
                fitted_text(ctx, bx + badge * 0.8, y + card_h / 2, entry.label, int(card_h * 0.36), badge * 1.4, WHITE, bold=True)
            name_x = x0 + pad * 2 + (badge * 1.6 if labeled else 0)
            fitted_text(ctx, name_x, y + card_h / 2, entry.name, int(card_h * 0.42), text_w, (30, 41, 59), align="left")
        else:
            if labeled:
                bx = x0 + card_w - pad - badge * 1.6
                panel(ctx, (bx, y + pad, bx + badge * 1.6, y + card_h - pad), fill=ctx.primary, radius=ctx.u(0.004))
                fitted_text(ctx, bx + badge * 0.8, y + card_h / 2, entry.label, int(card_h * 0.36), badge * 1.4, WHITE, bold=True)
            name_x = x0 + card_w - pad * 2 - (badge * 1.6 if labeled else 0)
            fitted_text(ctx, name_x, y + card_h / 2, entry.name, int(card_h * 0.42), text_w, (30, 41, 59), align="right")

    rows = (len(ctx.seats.seats) + 1) // 2
    y = top + rows * (card_h + gap) + ctx.y(0.01)
    role_badges(ctx, crew, w / 2, y, inner_r - inner_l, ctx.y(0.045), alpha=255)
    draw_boat(ctx, crew, (m + ctx.x(0.05), h - m - ctx.y(0.12), w - m - ctx.x(0.05), h - m - ctx.y(0.02)), ctx.secondary)


def _race_day(ctx: RenderContext, crew: Crew) -> None:
    paint_background(ctx)
    w, h = ctx.width, ctx.height
    panel(ctx, (0, 0, w, h), fill=(0, 0, 0, 77))

    band_t, band_b = ctx.y(0.055), ctx.y(0.15)
    panel(ctx, (0, band_t, w, band_b), fill=WHITE)
    mid = (band_t + band_b) / 2
    fitted_text(ctx, w / 2, mid - ctx.y(0.02), "RACE DAY", ctx.u(0.04), w * 0.9, ctx.primary, bold=True)
    fitted_text(ctx, w / 2, mid + ctx.y(0.022), crew.race_name.upper(), ctx.u(0.03), w * 0.9, ctx.primary, bold=True)

    bottom = draw_header(ctx, crew, (ctx.x(0.05), ctx.y(0.17), ctx.x(0.95), ctx.y(0.3)), WHITE)
    title_y = max(bottom, ctx.y(0.3)) + ctx.y(0.03)
    fitted_text(ctx, w / 2, title_y, "CREW LINEUP", ctx.u(0.03), w * 0.8, WHITE, bold=True)

    end = layout_entries(ctx, (ctx.x(0.1), title_y + ctx.y(0.04), ctx.x(0.9), ctx.y(0.66)), 2, ctx.u(0.026), WHITE)
    role_badges(ctx, crew, w / 2, end + ctx.y(0.02), ctx.x(0.4), ctx.y(0.04), alpha=230, upper=True)

    draw_boat(ctx, crew, (ctx.x(0.1), ctx.y(0.8), ctx.x(0.9), ctx.y(0.9)), WHITE, seat_color=ctx.secondary)
    panel(ctx, (0, h - ctx.y(0.075), w, h), fill=(255, 255, 255, 26))
    fitted_text(ctx, w / 2, h - ctx.y(0.0375), "READY • SET • ROW", ctx.u(0.022), w * 0.8, WHITE, bold=True)


def _minimal_clean(ctx: RenderContext, crew: Crew) -> None:
    paint_background(ctx)
    w, h = ctx.width, ctx.height
    ink, muted = (31, 41, 55), (107, 114, 128)

    panel(ctx, (0, 0, w, ctx.u(0.006)), fill=ctx.primary)
    bottom = draw_header(ctx, crew, (ctx.x(0.1), ctx.y(0.05), ctx.x(0.9), ctx.y(0.16)), ink, accent=ctx.primary)
    div_y = max(bottom, ctx.y(0.16)) + ctx.y(0.01)
    ctx.draw.line([(w / 2 - ctx.x(0.1), div_y), (w / 2 + ctx.x(0.1), div_y)], fill=(229, 231, 235), width=1)

    # Two-part rows: label right-aligned against a gutter, name left-aligned after it.
    rows = list(ctx.seats.seats)
    extras = role_lines(ctx, crew)
    total = len(rows) + len(extras)
    top, limit = div_y + ctx.y(0.04), ctx.y(0.88)
    row_h = min((limit - top) / max(1, total), ctx.u(0.055))
    gutter = w * 0.4
    size = int(row_h * 0.55)
    for i, entry in enumerate(rows):
        y = top + i * row_h + row_h / 2
        if ctx.config.name_display == "basic":
            fitted_text(ctx, w / 2, y, entry.name, size, w * 0.7, (55, 65, 81))
            continue
        fitted_text(ctx, gutter - ctx.x(0.015), y, entry.label, size, gutter - ctx.x(0.1), ctx.primary, align="right", bold=True)
        fitted_text(ctx, gutter + ctx.x(0.015), y, entry.name, size, w * 0.5, (55, 65, 81), align="left")
    for j, (text, color) in enumerate(extras):
        y = top + (len(rows) + j) * row_h + row_h / 2 + row_h * 0.3
        label, _, name = text.partition(": ")
        fitted_text(ctx, gutter - ctx.x(0.015), y, label, size, gutter - ctx.x(0.1), color, align="right", bold=True)
        fitted_text(ctx, gutter + ctx.x(0.015), y, name, size, w * 0.5, (55, 65, 81), align="left")

    draw_boat(ctx, crew, (ctx.x(0.3), ctx.y(0.9), ctx.x(0.7), ctx.y(0.97)), muted)
    panel(ctx, (w / 2 - ctx.x(0.05), h - ctx.u(0.02), w / 2 + ctx.x(0.05), h - ctx.u(0.017)), fill=ctx.primary)


def _championship_gold(ctx: RenderContext, crew: Crew) -> None:
    paint_background(ctx)
    w, h = ctx.width, ctx.height

    t, b = ctx.y(0.037), ctx.y(0.148)
    panel(ctx, (0, t, w, b), fill=(0, 0, 0, 204))
    panel(ctx, (0, t, w, t + ctx.u(0.007)), fill=GOLD)
    panel(ctx, (0, b - ctx.u(0.007), w, b), fill=GOLD)
    fitted_text(ctx, w / 2, t + (b - t) * 0.3, "CHAMPIONSHIP", ctx.u(0.03), w * 0.9, GOLD, bold=True, serif=True)
    fitted_text(ctx, w / 2, t + (b - t) * 0.58, crew.race_name.upper(), ctx.u(0.026), w * 0.9, WHITE, bold=True, serif=True)
    fitted_text(ctx, w / 2, t + (b - t) * 0.82, "REPRESENTING", ctx.u(0.016), w * 0.9, WHITE, serif=True)

    bottom = draw_header(ctx, crew, (ctx.x(0.06), ctx.y(0.165), ctx.x(0.94), ctx.y(0.27)), WHITE, accent=GOLD, serif=True)
    badge_t = max(bottom, ctx.y(0.27)) + ctx.y(0.005)
    panel(ctx, (w / 2 - ctx.x(0.09), badge_t, w / 2 + ctx.x(0.09), badge_t + ctx.y(0.037)), fill=(255, 215, 0, 51), outline=GOLD, width=ctx.u(0.002))
    fitted_text(ctx, w / 2, badge_t + ctx.y(0.0185), crew.boat_type.code, ctx.u(0.02), ctx.x(0.16), WHITE, bold=True, serif=True)

    # Gold seat markers on the outer edge of each column.
    top = badge_t + ctx.y(0.07)
    box = (ctx.x(0.16), top, ctx.x(0.84), ctx.y(0.7))
    end = layout_entries(ctx, box, 2, ctx.u(0.022), WHITE, serif=True)
    rows = (len(ctx.seats.seats) + 1) // 2
    row_h = (end - top) / max(1, rows)
    r = ctx.u(0.008)
    for i in range(len(ctx.seats.seats)):
        row, col = divmod(i, 2)
        cy = top + row * row_h + row_h / 2
        mx = box[0] - r * 2.5 if col == 0 else box[2] + r * 2.5
        ctx.draw.ellipse([mx - r, cy - r, mx + r, cy + r], fill=GOLD)

    frame_w, frame_h = ctx.x(0.24), ctx.y(0.035)
    role_badges(ctx, crew, w / 2, end + ctx.y(0.03), frame_w, frame_h, fills=[(0, 0, 0, 150)], outline=GOLD, serif=True)

    draw_boat(ctx, crew, (ctx.x(0.15), ctx.y(0.84), ctx.x(0.85), ctx.y(0.94)), GOLD, seat_color=BLACK)
    panel(ctx, (0, h - ctx.u(0.012), w, h), fill=GOLD)


def _vintage_classic(ctx: RenderContext, crew: Crew) -> None:
    paint_background(ctx)
    w, h = ctx.width, ctx.height
    ink = (44, 24, 16)

    border(ctx, 0.02, ctx.primary, 0.006)
    border(ctx, 0.035, ctx.secondary, 0.002)
    corner_flourishes(ctx, 0.05, 0.08, ctx.primary)

    fitted_text(ctx, w / 2, ctx.y(0.075), "ROWING CLUB", ctx.u(0.022), w * 0.6, ctx.secondary, bold=True, serif=True)
    ornament_line(ctx, w / 2, ctx.y(0.095), ctx.x(0.14), ctx.primary)
    fitted_text(ctx, w / 2, ctx.y(0.13), crew.club_name, ctx.u(0.037), w * 0.8, ink, bold=True, serif=True)

    # Ribbon banner with notched ends.
    bt, bb = ctx.y(0.158), ctx.y(0.204)
    bl, br = w / 2 - ctx.x(0.2), w / 2 + ctx.x(0.2)
    notch = (bb - bt) / 2
    ctx.draw.polygon([(bl - notch * 2, bt), (bl, bt), (bl, bb), (bl - notch * 2, bb), (bl - notch, bt + notch)], fill=ctx.secondary)
    ctx.draw.polygon([(br + notch * 2, bt), (br, bt), (br, bb), (br + notch * 2, bb), (br + notch, bt + notch)], fill=ctx.secondary)
    panel(ctx, (bl, bt, br, bb), fill=ctx.primary)
    fitted_text(ctx, w / 2, (bt + bb) / 2, crew.name, ctx.u(0.026), br - bl - ctx.x(0.02), WHITE, bold=True, serif=True)

    if ctx.config.text_layout != "minimal":
        fitted_text(ctx, w / 2, ctx.y(0.232), f"{crew.boat_type.name} • {crew.race_name}", ctx.u(0.019), w * 0.8, ctx.secondary, serif=True)
    ornament_line(ctx, w / 2, ctx.y(0.255), ctx.x(0.19), ctx.primary)

    end = layout_entries(ctx, (ctx.x(0.28), ctx.y(0.29), ctx.x(0.72), ctx.y(0.7)), 1, ctx.u(0.026), ink, serif=True)
    y = end + ctx.y(0.02)
    for text, _ in role_lines(ctx, crew):
        fitted_text(ctx, w / 2, y, text, ctx.u(0.022), w * 0.6, ctx.secondary, bold=True, serif=True)
        y += ctx.y(0.04)

    ornament_line(ctx, w / 2, ctx.y(0.83), ctx.x(0.25), ctx.primary)
    draw_boat(ctx, crew, (ctx.x(0.2), ctx.y(0.85), ctx.x(0.8), ctx.y(0.93)), ctx.secondary, seat_color=(245, 241, 232))


def _elite_performance(ctx: RenderContext, crew: Crew) -> None:
    paint_background(ctx)
    w, h = ctx.width, ctx.height
    panel(ctx, (0, 0, w, h), fill=(15, 23, 42, 200))

    # Grid lines every tenth of each side.
    for i in range(1, 10):
        ctx.draw.line([(ctx.x(i / 10), 0), (ctx.x(i / 10), h)], fill=with_alpha(ctx.primary, 28), width=1)
        ctx.draw.line([(0, ctx.y(i / 10)), (w, ctx.y(i / 10))], fill=with_alpha(ctx.primary, 28), width=1)

    panel(ctx, (0, 0, ctx.u(0.012), h), fill=ctx.primary)
    fitted_text(ctx, ctx.x(0.07), ctx.y(0.05), "ELITE PERFORMANCE", ctx.u(0.018), w * 0.5, ctx.primary, align="left", bold=True)
    bottom = draw_header(ctx, crew, (ctx.x(0.04), ctx.y(0.08), ctx.x(0.96), ctx.y(0.22)), WHITE, accent=ctx.primary)
    line_y = max(bottom, ctx.y(0.22)) + ctx.y(0.01)
    ctx.draw.line([(ctx.x(0.07), line_y), (ctx.x(0.6), line_y)], fill=ctx.primary, width=ctx.u(0.004))
    ctx.draw.line([(ctx.x(0.6), line_y), (ctx.x(0.65), line_y - ctx.y(0.02))], fill=ctx.primary, width=ctx.u(0.004))

    box = (ctx.x(0.08), line_y + ctx.y(0.04), ctx.x(0.92), ctx.y(0.68))
    end = layout_entries(ctx, box, 2, ctx.u(0.026), WHITE, bold=True)
    rows = (len(ctx.seats.seats) + 1) // 2
    row_h = (end - box[1]) / max(1, rows)
    for row in range(rows):
        y = box[1] + (row + 1) * row_h
        ctx.draw.line([(box[0], y), (box[2], y)], fill=with_alpha(ctx.secondary, 90), width=1)

    role_badges(ctx, crew, w / 2, end + ctx.y(0.025), ctx.x(0.5), ctx.y(0.042), fills=[with_alpha(COX_RED, 220), with_alpha(COACH_GREEN, 220)], upper=True)
    draw_boat(ctx, crew, (ctx.x(0.08), ctx.y(0.84), ctx.x(0.92), ctx.y(0.96)), ctx.primary, seat_color=WHITE)


def _henley_poster(ctx: RenderContext, crew: Crew) -> None:
    paint_background(ctx)
    w, h = ctx.width, ctx.height
    cream, ink = (250, 246, 235), (30, 30, 46)

    m = ctx.u(0.05)
    panel(ctx, (m, m, w - m, h - m), fill=cream)
    border(ctx, 0.065, ctx.primary, 0.003)

    fitted_text(ctx, w / 2, ctx.y(0.1), crew.race_name.upper(), ctx.u(0.05), w - m * 4, ctx.primary, bold=True, serif=True)
    ornament_line(ctx, w / 2, ctx.y(0.14), ctx.x(0.3), ctx.secondary)
    bottom = draw_header(ctx, crew, (m * 2, ctx.y(0.16), w - m * 2, ctx.y(0.28)), ink, accent=ctx.secondary, serif=True)

    band_t = max(bottom, ctx.y(0.28)) + ctx.y(0.01)
    draw_boat(ctx, crew, (m * 2, band_t, w - m * 2, band_t + ctx.y(0.11)), ctx.primary, seat_color=cream)

    # Centred single column; each line carries label and name.
    top = band_t + ctx.y(0.13)
    entries = list(ctx.seats.seats)
    row_h = min((ctx.y(0.78) - top) / max(1, len(entries)), ctx.u(0.05))
    for i, entry in enumerate(entries):
        fitted_text(ctx, w / 2, top + i * row_h + row_h / 2, entry_text(ctx, entry), int(row_h * 0.6), w - m * 5, ink, serif=True)
    y = top + len(entries) * row_h + ctx.y(0.015)
    for text, _ in role_lines(ctx, crew):
        fitted_text(ctx, w / 2, y, text, ctx.u(0.024), w - m * 5, ctx.secondary, bold=True, serif=True)
        y += ctx.y(0.035)

    panel(ctx, (m * 2, h - m * 2 - ctx.y(0.05), w - m * 2, h - m * 2), fill=ctx.primary)
    fitted_text(ctx, w / 2, h - m * 2 - ctx.y(0.025), crew.club_name.upper(), ctx.u(0.022), w - m * 5, cream, bold=True, serif=True)


def _shield(ctx: RenderContext, box, fill, outline=GOLD, pointed: bool = False) -> None:
    """Heraldic shield: a rounded lozenge, or a six-sided crest when ``pointed``."""
    left, top, right, bottom = box
    w, h = right - left, bottom - top
    cx = left + w / 2
    if pointed:
        pts = [(cx, top), (right, top + h / 4), (right, top + h * 3 / 4), (cx, bottom), (left, top + h * 3 / 4), (left, top + h / 4)]
    else:
        bevel = min(w, h) / 3
        pts = [(cx, top), (right - bevel, top), (right, top + bevel), (right, bottom - bevel), (right - bevel, bottom),
               (left + bevel, bottom), (left, bottom - bevel), (left, top + bevel), (left + bevel, top)]
    ctx.draw.polygon(pts, fill=fill)
    ctx.draw.line(pts + [pts[0]], fill=outline, width=ctx.u(0.003), joint="curve")


def _crown(ctx: RenderContext, cx: float, base_y: float) -> None:
    unit = ctx.u(0.005)
    ctx.draw.rectangle([cx - unit * 6, base_y, cx + unit * 6, base_y + unit * 1.6], fill=GOLD)
    for dx, tall in ((-4, 3), (-2, 4), (0, 5), (2, 4), (4, 3)):
        px = cx + dx * unit
        ctx.draw.polygon([(px - unit * 0.8, base_y), (px, base_y - tall * unit), (px + unit * 0.8, base_y)], fill=GOLD)
    jewel = unit * 0.6
    ctx.draw.ellipse([cx - jewel, base_y - unit * 2 - jewel, cx + jewel, base_y - unit * 2 + jewel], fill=(220, 38, 38))


def _fleur_pattern(ctx: RenderContext) -> None:
    """Faint fleur-de-lis grid over the background."""
    petal = ctx.u(0.004)
    tint = with_alpha(GOLD, 20)
    step_x, step_y = max(4, ctx.x(0.185)), max(4, ctx.y(0.14))
    x = step_x / 2
    while x < ctx.width:
        y = step_y / 2
        while y < ctx.height:
            ctx.draw.ellipse([x - petal, y - petal * 5.5, x + petal, y + petal * 0.5], fill=tint)
            ctx.draw.ellipse([x - petal * 3, y - petal * 3.5, x - petal, y + petal], fill=tint)
            ctx.draw.ellipse([x + petal, y - petal * 3.5, x + petal * 3, y + petal], fill=tint)
            ctx.draw.rectangle([x - petal / 2, y + petal / 2, x + petal / 2, y + petal * 2.5], fill=tint)
            y += step_y
        x += step_x


def _dotted_rule(ctx: RenderContext, cx: float, y: float, half_width: float, color, dots: int = 5) -> None:
    ctx.draw.line([(cx - half_width, y), (cx + half_width, y)], fill=color, width=ctx.u(0.002))
    r = ctx.u(0.002)
    spacing = half_width * 0.4
    for i in range(dots):
        dx = cx + (i - dots // 2) * spacing / 2
        ctx.draw.ellipse([dx - r, y - r, dx + r, y + r], fill=color)


def _regatta_royal(ctx: RenderContext, crew: Crew) -> None:
    paint_background(ctx)
    _fleur_pattern(ctx)
    w, h = ctx.width, ctx.height

    bt, bb = ctx.y(0.037), ctx.y(0.111)
    panel(ctx, (ctx.x(0.055), bt, ctx.x(0.945), bb), fill=(255, 255, 255, 242), radius=ctx.u(0.018), outline=GOLD, width=ctx.u(0.003))
    _crown(ctx, w / 2, bt + (bb - bt) * 0.35)
    fitted_text(ctx, w / 2, bt + (bb - bt) * 0.7, "ROYAL REGATTA", ctx.u(0.03), ctx.x(0.8), ctx.primary, bold=True, serif=True)

    bottom = draw_header(ctx, crew, (ctx.x(0.06), ctx.y(0.125), ctx.x(0.94), ctx.y(0.215)), WHITE, accent=GOLD, serif=True)
    st = max(bottom, ctx.y(0.215)) + ctx.y(0.008)
    _shield(ctx, (w / 2 - ctx.x(0.09), st, w / 2 + ctx.x(0.09), st + ctx.y(0.045)), (255, 215, 0, 51))
    fitted_text(ctx, w / 2, st + ctx.y(0.0225), crew.boat_type.code, ctx.u(0.02), ctx.x(0.15), WHITE, bold=True, serif=True)

    title_y = st + ctx.y(0.08)
    fitted_text(ctx, w / 2, title_y, "CREW PRESENTATION", ctx.u(0.022), w * 0.8, GOLD, bold=True, serif=True)
    _dotted_rule(ctx, w / 2, title_y + ctx.y(0.02), ctx.x(0.09), GOLD)

    # Gold pennant markers on the outer edge of each column.
    top = title_y + ctx.y(0.045)
    box = (ctx.x(0.2), top, ctx.x(0.8), ctx.y(0.7))
    end = layout_entries(ctx, box, 2, ctx.u(0.021), WHITE, serif=True)
    rows = (len(ctx.seats.seats) + 1) // 2
    row_h = (end - top) / max(1, rows)
    m = ctx.u(0.007)
    for i in range(len(ctx.seats.seats)):
        row, col = divmod(i, 2)
        cy = top + row * row_h + row_h / 2
        mx = box[0] - m * 2.5 if col == 0 else box[2] + m * 2.5
        ctx.draw.polygon([(mx - m, cy - m / 2), (mx + m, cy), (mx - m, cy + m / 2)], fill=GOLD)

    y = end + ctx.y(0.02)
    frame_w, frame_h = ctx.x(0.3), ctx.y(0.035)
    for text, _ in role_lines(ctx, crew):
        _shield(ctx, (w / 2 - frame_w / 2, y, w / 2 + frame_w / 2, y + frame_h), (255, 215, 0, 77))
        fitted_text(ctx, w / 2, y + frame_h / 2, text, int(frame_h * 0.5), frame_w * 0.85, WHITE, bold=True, serif=True)
        y += frame_h * 1.35

    draw_boat(ctx, crew, (ctx.x(0.15), ctx.y(0.8), ctx.x(0.85), ctx.y(0.88)), GOLD, seat_color=ctx.primary)

    # Seal: gold ring, gold disc, white cross.
    cx, cy = w / 2, h - ctx.y(0.055)
    outer, inner = ctx.u(0.028), ctx.u(0.019)
    ctx.draw.ellipse([cx - outer, cy - outer, cx + outer, cy + outer], outline=GOLD, width=ctx.u(0.003))
    ctx.draw.ellipse([cx - inner, cy - inner, cx + inner, cy + inner], fill=GOLD)
    arm = inner * 0.6
    ctx.draw.line([(cx - arm, cy), (cx + arm, cy)], fill=WHITE, width=ctx.u(0.002))
    ctx.draw.line([(cx, cy - arm), (cx, cy + arm)], fill=WHITE, width=ctx.u(0.002))


def _oxbridge_herald(ctx: RenderContext, crew: Crew) -> None:
    paint_background(ctx)
    w, h = ctx.width, ctx.height
    ink, muted = (44, 24, 16), (107, 114, 128)

    border(ctx, 0.028, ctx.primary, 0.006)
    border(ctx, 0.042, ctx.primary, 0.002)
    inset, arm = ctx.u(0.042), ctx.u(0.023)
    lw = ctx.u(0.002)
    for x, y in ((inset, inset), (w - 1 - inset, inset), (inset, h - 1 - inset), (w - 1 - inset, h - 1 - inset)):
        ctx.draw.line([(x - arm, y), (x + arm, y)], fill=ctx.primary, width=lw)
        ctx.draw.line([(x, y - arm), (x, y + arm)], fill=ctx.primary, width=lw)
        ctx.draw.line([(x - arm / 2, y - arm / 2), (x + arm / 2, y + arm / 2)], fill=ctx.primary, width=lw)
        ctx.draw.line([(x + arm / 2, y - arm / 2), (x - arm / 2, y + arm / 2)], fill=ctx.primary, width=lw)

    st, sb = ctx.y(0.05), ctx.y(0.16)
    _shield(ctx, (w / 2 - ctx.x(0.075), st, w / 2 + ctx.x(0.075), sb), ctx.primary, pointed=True)
    crest_w = ctx.x(0.12)
    fitted_text(ctx, w / 2, st + (sb - st) * 0.3, "UNIVERSITAS", ctx.u(0.017), crest_w, WHITE, bold=True, serif=True)
    fitted_text(ctx, w / 2, st + (sb - st) * 0.48, "REGIUM COLLEGIUM", ctx.u(0.013), crest_w, WHITE, bold=True, serif=True)
    fitted_text(ctx, w / 2, st + (sb - st) * 0.65, "ROWING CLUB", ctx.u(0.012), crest_w, WHITE, serif=True)

    fitted_text(ctx, w / 2, ctx.y(0.18), "Per Mare Per Terram", ctx.u(0.017), w * 0.6, ctx.secondary, serif=True)
    div_y = ctx.y(0.198)
    _dotted_rule(ctx, w / 2, div_y, ctx.x(0.09), ctx.primary)
    star = ctx.u(0.006)
    ctx.draw.regular_polygon((w / 2, div_y, star), 8, fill=ctx.primary)

    fitted_text(ctx, w / 2, ctx.y(0.235), crew.club_name, ctx.u(0.038), w * 0.8, ink, bold=True, serif=True)
    fitted_text(ctx, w / 2, ctx.y(0.272), f"The {crew.name}", ctx.u(0.026), w * 0.8, ctx.primary, serif=True)
    if ctx.config.text_layout != "minimal":
        fitted_text(ctx, w / 2, ctx.y(0.302), f"{crew.boat_type.name} • {crew.race_name}", ctx.u(0.02), w * 0.8, ctx.secondary, serif=True)
    fitted_text(ctx, w / 2, ctx.y(0.34), "COLLEGIUM REMIGUM", ctx.u(0.022), w * 0.7, ink, bold=True, serif=True)

    # Numbered single column: "n." then label then name.
    entries = list(ctx.seats.seats)
    top = ctx.y(0.37)
    row_h = min((ctx.y(0.7) - top) / max(1, len(entries)), ctx.u(0.042))
    size = int(row_h * 0.55)
    num_x, label_x = w / 2 - ctx.x(0.185), w / 2 - ctx.x(0.167)
    labeled = ctx.config.name_display != "basic"
    name_x = label_x + (ctx.x(0.1) if labeled else 0)
    for i, entry in enumerate(entries):
        y = top + i * row_h + row_h / 2
        fitted_text(ctx, num_x, y, f"{i + 1}.", size, ctx.x(0.06), ctx.primary, align="right", bold=True, serif=True)
        if labeled:
            fitted_text(ctx, label_x, y, entry.label, size, ctx.x(0.09), ctx.secondary, align="left", serif=True)
        fitted_text(ctx, name_x, y, entry.name, size, w / 2 + ctx.x(0.2) - name_x, ink, align="left", serif=True)

    y = top + len(entries) * row_h + ctx.y(0.02)
    scroll_w, scroll_h = ctx.x(0.28), ctx.y(0.028)
    for j, (text, _) in enumerate(role_lines(ctx, crew)):
        color = ctx.primary if j == 0 else ctx.secondary
        panel(ctx, (w / 2 - scroll_w / 2, y, w / 2 + scroll_w / 2, y + scroll_h), fill=(255, 255, 255, 204), outline=color, width=lw)
        fitted_text(ctx, w / 2, y + scroll_h / 2, text, int(scroll_h * 0.55), scroll_w * 0.9, color, bold=True, serif=True)
        y += scroll_h * 1.4

    draw_boat(ctx, crew, (ctx.x(0.25), ctx.y(0.8), ctx.x(0.75), ctx.y(0.85)), ctx.secondary, seat_color=(247, 243, 233))

    # Seal: ring, book, inner ring and twelve marks.
    cx, cy = w / 2, h - ctx.y(0.085)
    ring, inner, mark = ctx.u(0.032), ctx.u(0.023), ctx.u(0.042)
    ctx.draw.ellipse([cx - ring, cy - ring, cx + ring, cy + ring], outline=ctx.primary, width=ctx.u(0.004))
    ctx.draw.ellipse([cx - inner, cy - inner, cx + inner, cy + inner], outline=ctx.primary, width=1)
    book = ctx.u(0.014)
    ctx.draw.rectangle([cx - book, cy - book * 0.66, cx + book, cy + book * 0.66], fill=ctx.primary)
    ctx.draw.line([(cx - book * 0.5, cy), (cx + book * 0.5, cy)], fill=WHITE, width=lw)
    ctx.draw.line([(cx, cy - book * 0.4), (cx, cy + book * 0.4)], fill=WHITE, width=lw)
    dot = max(1, ctx.u(0.001))
    for i in range(12):
        angle = i * math.pi / 6
        mx, my = cx + math.cos(angle) * mark, cy + math.sin(angle) * mark
        ctx.draw.ellipse([mx - dot, my - dot, mx + dot, my + dot], fill=ctx.primary)

    fitted_text(ctx, w / 2, h - ctx.y(0.028), "Pro Gloria Et Honore", ctx.u(0.015), w * 0.6, muted, serif=True)


TEMPLATES: Dict[str, TemplateVariant] = {
    t.id: t
    for t in (
        TemplateVariant(
            "classic-lineup", "Classic Lineup", "Traditional roster layout with clean presentation", "classic",
            _classic_lineup, TemplateConfig(background="gradient", name_display="labeled", boat_style="centered"),
        ),
        TemplateVariant(
            "modern-card", "Modern Card", "Contemporary card-based design with member highlights", "modern",
            _modern_card, TemplateConfig(background="diagonal", boat_style="showcase", logo="top-right"),
        ),
        TemplateVariant(
            "race-day", "Race Day", "Bold event-focused template with dynamic styling", "event",
            _race_day, TemplateConfig(background="diagonal", boat_style="centered"),
        ),
        TemplateVariant(
            "minimal-clean", "Minimal Clean", "Simple, elegant layout with clean typography", "minimal",
            _minimal_clean, TemplateConfig(background="plain", text_layout="header-center", logo="none"),
        ),
        TemplateVariant(
            "championship-gold", "Championship Gold", "Luxurious golden design for major competitions", "championship",
            _championship_gold, TemplateConfig(background="radial-burst", boat_style="showcase"),
        ),
        TemplateVariant(
            "vintage-classic", "Vintage Classic", "Traditional parchment style with ornate decorations", "vintage",
            _vintage_classic, TemplateConfig(background="parchment", boat_style="centered", logo="top-left"),
        ),
        TemplateVariant(
            "elite-performance", "Elite Performance", "High-tech performance styling for elite crews", "elite",
            _elite_performance, TemplateConfig(background="geometric", text_layout="header-left", boat_style="showcase", logo="top-right"),
        ),
        TemplateVariant(
            "regatta-royal", "Regatta Royal", "Royal regatta styling with heraldic elements", "royal",
            _regatta_royal, TemplateConfig(background="gradient", boat_style="centered", logo="top-right"),
        ),
        TemplateVariant(
            "oxbridge-herald", "Oxbridge Herald", "Academic heraldic design with Latin styling", "academic",
            _oxbridge_herald, TemplateConfig(background="parchment", boat_style="none", logo="top-left"),
        ),
        TemplateVariant(
            "henley-poster", "Henley Poster", "Traditional Henley Royal Regatta poster style", "traditional",
            _henley_poster, TemplateConfig(background="solid", boat_style="showcase", logo="none"),
        ),
    )
}


def get_template(template_id: str) -> TemplateVariant:
    try:
        return TEMPLATES[str(template_id)]
    except KeyError:
        raise TemplateNotFound(str(template_id)) from None


def render(template_id: str, ctx: RenderContext, crew: Crew) -> None:
    get_template(template_id).draw(ctx, crew)


def list_templates() -> List[dict]:
    """Catalog metadata for pickers."""
    return [
        {"id": t.id, "name": t.name, "description": t.description, "category": t.category}
        for t in TEMPLATES.values()
    ]
