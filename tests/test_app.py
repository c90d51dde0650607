from PIL import Image

import app


ROSTER = (
    "Name,Club,Race,Boat,Crew,Cox,Coach\n"
    "Double,Riverside RC,Regatta,2x,Wade; Young,,\n"
    "Double,Riverside RC,Regatta,2x,Adams; Baker,,\n"
    "Short Four,Riverside RC,Regatta,4+,Only; Three; Names,Cox,\n"
)


def test_batch_writes_one_png_per_valid_crew(tmp_path, capsys):
    roster = tmp_path / "crews.csv"
    roster.write_text(ROSTER)
    out = tmp_path / "out"

    written = app.CrewImageBatch(
        str(roster), "minimal-clean", str(out), template_config={"dimensions": {"width": 320, "height": 400}}
    ).generate_all()

    assert sorted(p.name for p in written) == ["Double.png", "Double_1.png"]
    with Image.open(written[0]) as img:
        assert img.size == (320, 400)
    printed = capsys.readouterr().out
    assert "Generating image 3/3: Short Four" in printed
    assert "Error generating image for Short Four" in printed


def test_main_lists_templates(capsys):
    assert app.main(["--list-templates"]) == 0
    assert "henley-poster" in capsys.readouterr().out


def test_main_rejects_unknown_template(tmp_path):
    roster = tmp_path / "crews.csv"
    roster.write_text(ROSTER)
    assert app.main([str(roster), "-t", "neon-nights", "-o", str(tmp_path / "out")]) == 2


def test_main_renders_roster(tmp_path):
    roster = tmp_path / "crews.csv"
    roster.write_text(ROSTER)
    out = tmp_path / "out"
    code = app.main([str(roster), "-t", "race-day", "-o", str(out), "--width", "300", "--height", "300", "--primary", "#003366", "--secondary", "#ffcc00"])
    assert code == 0
    assert len(list(out.glob("*.png"))) == 2


def test_main_reports_unreachable_preset_api(tmp_path, monkeypatch, capsys):
    roster = tmp_path / "crews.csv"
    roster.write_text(ROSTER)

    def fail(self, preset_id):
        raise RuntimeError("Club preset API error (HTTP 503).")

    monkeypatch.setattr(app.HttpClubPresetLookup, "get", fail)
    code = app.main([str(roster), "-o", str(tmp_path / "out"), "--preset-id", "riverside", "--preset-url", "http://presets.test"])
    assert code == 1
    assert "HTTP 503" in capsys.readouterr().out


def test_main_requires_both_colors(tmp_path):
    roster = tmp_path / "crews.csv"
    roster.write_text(ROSTER)
    assert app.main([str(roster), "-o", str(tmp_path / "out"), "--primary", "#003366"]) == 2
