from PIL import Image, ImageDraw

from fonts import FontBook, fit_font, text_width


def _draw():
    return ImageDraw.Draw(Image.new("RGB", (400, 100)))


def test_fit_font_keeps_size_when_text_fits():
    fonts, draw = FontBook(), _draw()
    font = fit_font(fonts, draw, "Cox", 20, 1000)
    assert font is fonts.get(20)


def test_fit_font_shrinks_instead_of_truncating():
    fonts, draw = FontBook(), _draw()
    text = "Bartholomew Fitzwilliam-Montgomery"
    full = text_width(draw, text, fonts.get(40))
    font = fit_font(fonts, draw, text, 40, full / 2)
    assert text_width(draw, text, font) <= full / 2
    assert font.size < 40


def test_fit_font_is_deterministic():
    draw = _draw()
    a = fit_font(FontBook(), draw, "Head of the River Race", 48, 150)
    b = fit_font(FontBook(), draw, "Head of the River Race", 48, 150)
    assert a.size == b.size


def test_missing_font_files_fall_back_to_default():
    fonts = FontBook(families={(False, False): ["/nope/none.ttf"], (True, False): ["/nope/bold.ttf"]})
    font = fonts.get(18, bold=True)
    assert text_width(_draw(), "Stroke", font) > 0
