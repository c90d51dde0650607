from utils import next_free_filename, safe_png_filename


def test_safe_png_filename_basic():
    assert safe_png_filename("Men's First Eight") == "Mens_First_Eight.png"


def test_safe_png_filename_strips_weird_chars():
    assert safe_png_filename("  A/B:C*D?  ") == "ABCD.png"


def test_safe_png_filename_empty_fallback():
    assert safe_png_filename("") == "crew.png"
    assert safe_png_filename("   ") == "crew.png"
    assert safe_png_filename(None) == "crew.png"


def test_next_free_filename(tmp_path):
    assert next_free_filename(tmp_path, "eight.png") == tmp_path / "eight.png"
    (tmp_path / "eight.png").write_bytes(b"")
    assert next_free_filename(tmp_path, "eight.png") == tmp_path / "eight_1.png"
    (tmp_path / "eight_1.png").write_bytes(b"")
    assert next_free_filename(tmp_path, "eight.png") == tmp_path / "eight_2.png"
