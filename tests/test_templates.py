import pytest

from boats import get_boat_type, resolve_seats
from compositor import new_surface
from drawing import RenderContext, entry_text, paint_background
from errors import TemplateNotFound
from fonts import FontBook
from models import ColorScheme, Crew, Dimensions, SeatEntry, TemplateConfig
from templates import TEMPLATES, get_template, list_templates, render

from conftest import EIGHT

TEMPLATE_IDS = [
    "classic-lineup",
    "modern-card",
    "race-day",
    "minimal-clean",
    "championship-gold",
    "vintage-classic",
    "elite-performance",
    "regatta-royal",
    "oxbridge-herald",
    "henley-poster",
]


def _crew(code="8+", names=EIGHT, cox="Ivy Jones", coach="Kate Lowe"):
    return Crew(
        name="Men's First Eight",
        club_name="Riverside RC",
        race_name="Head of the River",
        boat_type=get_boat_type(code),
        crew_names=tuple(names),
        cox_name=cox,
        coach_name=coach,
    )


def _render(template_id, crew, config=None, size=(540, 540), colors=None):
    variant = get_template(template_id)
    config = config or variant.defaults.merged(dimensions=Dimensions(*size))
    image = new_surface(Dimensions(*size))
    ctx = RenderContext(
        image=image,
        config=config,
        colors=colors or ColorScheme(),
        seats=resolve_seats(crew.boat_type, crew.crew_names, crew.cox_name),
        fonts=FontBook(),
    )
    render(template_id, ctx, crew)
    return ctx


def test_catalog_has_every_variant():
    assert sorted(TEMPLATES) == sorted(TEMPLATE_IDS)
    ids = [t["id"] for t in list_templates()]
    assert sorted(ids) == sorted(TEMPLATE_IDS)


def test_unknown_template():
    with pytest.raises(TemplateNotFound) as exc:
        get_template("neon-nights")
    assert exc.value.field == "templateId"


def test_classic_lineup_draws_every_seat_and_cox():
    ctx = _render("classic-lineup", _crew())
    text = ctx.drawn_text
    assert "Stroke: Adams" in text
    assert "7: Baker" in text
    assert "2: Grant" in text
    assert "Bow: Hughes" in text
    assert "Cox: Ivy Jones" in text
    assert "Coach: Kate Lowe" in text
    assert "Riverside RC" in text


@pytest.mark.parametrize("template_id", TEMPLATE_IDS)
def test_every_template_renders_every_rower(template_id):
    ctx = _render(template_id, _crew())
    joined = "\n".join(ctx.drawn_text).lower()
    for name in EIGHT + ["Ivy Jones"]:
        assert name.lower() in joined


@pytest.mark.parametrize("template_id", TEMPLATE_IDS)
@pytest.mark.parametrize("size", [(1080, 1350), (1200, 630), (120, 80)])
def test_templates_render_at_other_sizes(template_id, size):
    ctx = _render(template_id, _crew("2x", ["Wade", "Young"], cox=None), size=size)
    assert ctx.image.size == size


def test_single_scull_uses_single_label():
    ctx = _render("classic-lineup", _crew("1x", ["Ben Carter"], cox=None, coach=None))
    assert "Single: Ben Carter" in ctx.drawn_text
    assert not any(t.startswith("Cox") for t in ctx.drawn_text)


def test_basic_name_display_hides_seat_labels():
    config = get_template("classic-lineup").defaults.merged(name_display="basic", dimensions=Dimensions(540, 540))
    ctx = _render("classic-lineup", _crew(), config=config)
    assert "Adams" in ctx.drawn_text
    assert "Stroke: Adams" not in ctx.drawn_text


def test_minimal_text_layout_drops_boat_and_race_line():
    config = get_template("classic-lineup").defaults.merged(text_layout="minimal", dimensions=Dimensions(540, 540))
    ctx = _render("classic-lineup", _crew(), config=config)
    assert not any("Head of the River" in t for t in ctx.drawn_text)


def test_entry_text_blank_name_shows_label_only():
    ctx = _render("classic-lineup", _crew("4+", ["A", "B", "C", "D"], cox=""))
    assert entry_text(ctx, SeatEntry("Cox", "")) == "Cox"
    assert "Cox" in ctx.drawn_text


RED, BLUE = (204, 0, 0), (0, 0, 204)
PAPER = (245, 241, 232)


def _background(style, size=(200, 200)):
    ctx = RenderContext(
        image=new_surface(Dimensions(*size)),
        config=TemplateConfig(background=style, dimensions=Dimensions(*size)),
        colors=ColorScheme(primary="#cc0000", secondary="#0000cc"),
        seats=resolve_seats(get_boat_type("2x"), ["Wade", "Young"]),
        fonts=FontBook(),
    )
    paint_background(ctx)
    return ctx.image


def _colors(image):
    return {c for _, c in image.getcolors(maxcolors=image.width * image.height)}


def test_translucent_fill_blends_into_surface():
    image = new_surface(Dimensions(10, 10))
    ctx = RenderContext(image=image, config=TemplateConfig(), colors=ColorScheme(), seats=None, fonts=FontBook())
    ctx.draw.rectangle((0, 0, 9, 9), fill=(0, 0, 0, 77))
    r, g, b = image.getpixel((5, 5))
    assert 160 < r < 195 and r == g == b


def test_solid_and_plain_fill_everything():
    assert _colors(_background("solid")) == {RED}
    assert _colors(_background("plain")) == {(255, 255, 255)}


def test_gradient_runs_primary_to_secondary():
    image = _background("gradient")
    assert image.getpixel((100, 0)) == RED
    assert image.getpixel((100, 199)) == BLUE


def test_diagonal_shows_both_colors():
    assert _colors(_background("diagonal")) == {RED, BLUE}


def test_geometric_shapes_tint_the_secondary():
    image = _background("geometric")
    corner = image.getpixel((5, 5))
    assert corner not in (RED, BLUE)
    assert corner[0] > 0 and corner[2] > 0
    assert image.getpixel((100, 100)) == BLUE


def test_radial_burst_centre_differs_from_edge():
    image = _background("radial-burst")
    assert image.getpixel((100, 100)) != image.getpixel((0, 0))


def test_parchment_speckle_stays_faint():
    image = _background("parchment")
    assert PAPER in _colors(image)
    for color in _colors(image):
        assert all(abs(a - b) <= 12 for a, b in zip(color, PAPER))


def test_race_day_overlay_darkens_instead_of_replacing():
    ctx = _render("race-day", _crew(), colors=ColorScheme(primary="#cc0000", secondary="#0000cc"))
    w, h = ctx.image.size
    edge = ctx.image.getpixel((2, int(h * 0.7)))
    assert edge != (0, 0, 0)
    assert max(edge) > 100
    footer = ctx.image.crop((0, int(h * 0.93), w, h))
    assert len(_colors(footer)) > 1
    assert (255, 255, 255) not in {ctx.image.getpixel((x, h - 2)) for x in range(0, w, 40)}


def test_elite_performance_keeps_geometric_background_visible():
    ctx = _render("elite-performance", _crew(), colors=ColorScheme(primary="#cc0000", secondary="#0000cc"))
    w, h = ctx.image.size
    # Upper-left triangle vs. plain secondary, both under the dark overlay.
    assert ctx.image.getpixel((int(w * 0.15), 2)) != ctx.image.getpixel((int(w * 0.04), int(h * 0.75)))


def test_heraldic_variants_draw_their_titles():
    royal = _render("regatta-royal", _crew())
    assert "ROYAL REGATTA" in royal.drawn_text
    assert "CREW PRESENTATION" in royal.drawn_text
    herald = _render("oxbridge-herald", _crew())
    assert "The Men's First Eight" in herald.drawn_text
    assert "Stroke" in herald.drawn_text and "Adams" in herald.drawn_text
    assert "Cox: Ivy Jones" in herald.drawn_text
