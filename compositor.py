"""
Canvas compositor: one fresh surface per render, drawn, encoded, released.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from io import BytesIO
from typing import Callable, Iterator, Optional

from PIL import Image

from config import ICON_MARGIN_RATIO, ICON_SIZE_RATIO
from drawing import WHITE, RenderContext, paste_icon
from errors import CrewImageError, RenderFailure
from fonts import FontBook
from models import ColorScheme, Crew, Dimensions, SeatAssignment, TemplateConfig
from templates import get_template, render

log = logging.getLogger(__name__)

SurfaceFactory = Callable[[Dimensions], Image.Image]


def new_surface(dimensions: Dimensions) -> Image.Image:
    # RGB so translucent RGBA fills blend into what is already drawn.
    return Image.new("RGB", (dimensions.width, dimensions.height), WHITE)


@contextmanager
def acquire_surface(dimensions: Dimensions, factory: SurfaceFactory = new_surface) -> Iterator[Image.Image]:
    """Yield a surface that is closed on every exit path."""
    surface = factory(dimensions)
    try:
        yield surface
    finally:
        surface.close()


def encode_png(image: Image.Image) -> bytes:
    # No text chunks or timestamps: identical pixels give identical bytes.
    flat = image.convert("RGB") if image.mode != "RGB" else image
    buf = BytesIO()
    try:
        flat.save(buf, format="PNG")
    finally:
        if flat is not image:
            flat.close()
    return buf.getvalue()


def compose(
    template_id: str,
    crew: Crew,
    config: TemplateConfig,
    icon: Optional[Image.Image],
    *,
    seats: SeatAssignment,
    colors: ColorScheme,
    surface_factory: SurfaceFactory = new_surface,
) -> bytes:
    """
    Draw ``crew`` with the given template and return PNG bytes.

    Unknown templates raise TemplateNotFound before any surface is acquired.
    Anything that goes wrong while drawing or encoding becomes RenderFailure,
    with the original exception chained and logged.
    """
    get_template(template_id)
    try:
        with acquire_surface(config.dimensions, surface_factory) as surface:
            ctx = RenderContext(image=surface, config=config, colors=colors, seats=seats, fonts=FontBook())
            render(template_id, ctx, crew)
            paste_icon(surface, icon, config.logo, ICON_SIZE_RATIO, ICON_MARGIN_RATIO)
            data = encode_png(surface)
    except CrewImageError:
        raise
    except Exception as e:
        log.exception("Rendering template %s failed for crew %r", template_id, crew.name)
        raise RenderFailure(f"Rendering {template_id} failed: {type(e).__name__}: {e}") from e
    log.debug("Rendered %s for crew %r (%d bytes)", template_id, crew.name, len(data))
    return data
