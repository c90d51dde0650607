import base64
import json
from io import BytesIO

import pytest
from PIL import Image

from config import STYLE_OPTIONS
from errors import (
    IconNotFound,
    InvalidClubIcon,
    InvalidColor,
    InvalidDimensions,
    InvalidOption,
    MissingField,
    PresetNotFound,
    RenderFailure,
    RosterSizeMismatch,
    TemplateNotFound,
)
from generator import CrewImageGenerator, Stage, handle_generation_request, parse_request
from models import ClubPreset
from repository import InMemoryLogoStore, InMemoryPresetStore
from templates import TEMPLATES, TemplateVariant

from conftest import png_bytes


def _size(data):
    with Image.open(BytesIO(data)) as img:
        return img.size, img.format


def test_scenario_a_eight_with_cox(eight_payload, counting_factory):
    gen = CrewImageGenerator(surface_factory=counting_factory)
    image = gen.generate_from_payload(eight_payload())
    assert _size(image.data) == ((1080, 1080), "PNG")
    assert image.seats.labels == ["Stroke", "7", "6", "5", "4", "3", "2", "Bow", "Cox"]
    assert image.colors.source == "template"
    assert image.stage is Stage.RETURNED
    assert len(counting_factory.surfaces) == 1
    assert counting_factory.closed == 1


def test_identical_requests_give_identical_bytes(eight_payload):
    payload = eight_payload(templateId="championship-gold", clubIcon={"type": "upload", "fileBytes": png_bytes()})
    gen = CrewImageGenerator()
    assert gen.generate_from_payload(payload).data == gen.generate_from_payload(payload).data


@pytest.mark.parametrize("background", STYLE_OPTIONS["background"])
@pytest.mark.parametrize("template_id", sorted(TEMPLATES))
def test_every_template_and_background_is_deterministic(eight_payload, template_id, background):
    payload = eight_payload(
        templateId=template_id,
        templateConfig={"background": background, "dimensions": {"width": 160, "height": 200}},
    )
    gen = CrewImageGenerator()
    assert gen.generate_from_payload(payload).data == gen.generate_from_payload(payload).data


def test_encoded_race_day_keeps_translucent_layers(eight_payload):
    payload = eight_payload(
        templateId="race-day",
        templateConfig={"dimensions": {"width": 400, "height": 400}, "colors": {"primary": "#cc0000", "secondary": "#0000cc"}},
    )
    data = CrewImageGenerator().generate_from_payload(payload).data
    with Image.open(BytesIO(data)) as img:
        assert img.mode == "RGB"
        assert img.getpixel((2, 280)) != (0, 0, 0)
        footer = img.crop((0, 372, 400, 400))
        assert len(footer.getcolors(maxcolors=400 * 28)) > 1


def test_scenario_b_single_with_no_names(eight_payload, counting_factory):
    payload = eight_payload(crew={"boatType": "1x", "crewNames": [], "coxName": None})
    gen = CrewImageGenerator(surface_factory=counting_factory)
    with pytest.raises(RosterSizeMismatch) as exc:
        gen.generate_from_payload(payload)
    assert exc.value.stage is Stage.FAILED
    assert exc.value.failed_after is Stage.RECEIVED
    assert counting_factory.surfaces == []


def test_scenario_c_missing_preset_icon(eight_payload, counting_factory):
    payload = eight_payload(clubIcon={"type": "preset", "filename": "missing.png"})
    gen = CrewImageGenerator(logos=InMemoryLogoStore(), surface_factory=counting_factory)
    with pytest.raises(IconNotFound) as exc:
        gen.generate_from_payload(payload)
    assert exc.value.failed_after is Stage.SEATS_RESOLVED
    assert counting_factory.surfaces == []


def test_scenario_d_unknown_template(eight_payload, counting_factory):
    gen = CrewImageGenerator(surface_factory=counting_factory)
    with pytest.raises(TemplateNotFound):
        gen.generate_from_payload(eight_payload(templateId="neon-nights"))
    assert counting_factory.surfaces == []


@pytest.mark.parametrize("dims", [{"width": 0, "height": 1080}, {"width": 1080, "height": 0}, {"width": -5, "height": 10}, {"width": 4097, "height": 100}, {"width": "1080", "height": 1080}, {"width": True, "height": 1080}])
def test_invalid_dimensions_rejected(eight_payload, dims):
    with pytest.raises(InvalidDimensions):
        parse_request(eight_payload(templateConfig={"dimensions": dims}))


def test_portrait_dimensions_render(eight_payload):
    image = CrewImageGenerator().generate_from_payload(eight_payload(templateConfig={"dimensions": {"width": 1080, "height": 1350}}))
    assert _size(image.data)[0] == (1080, 1350)
    assert (image.width, image.height) == (1080, 1350)


def test_max_dimension_accepted_by_validation(eight_payload):
    request = parse_request(eight_payload(templateConfig={"dimensions": {"width": 4096, "height": 4096}}))
    assert request.config.dimensions.short_side == 4096


@pytest.mark.parametrize("field", ["name", "clubName", "raceName", "boatType", "crewNames"])
def test_missing_crew_fields(eight_payload, field):
    payload = eight_payload()
    payload["crew"][field] = None
    with pytest.raises(MissingField) as exc:
        parse_request(payload)
    assert exc.value.field == f"crew.{field}"


def test_blank_club_name_is_missing(eight_payload):
    with pytest.raises(MissingField):
        parse_request(eight_payload(crew={"clubName": "   "}))


def test_request_config_overrides_template_defaults(eight_payload):
    request = parse_request(eight_payload(templateId="modern-card", templateConfig={"background": "solid"}))
    assert request.config.background == "solid"
    assert request.config.boat_style == TEMPLATES["modern-card"].defaults.boat_style
    assert request.config.logo == "top-right"


def test_invalid_style_option(eight_payload):
    with pytest.raises(InvalidOption) as exc:
        parse_request(eight_payload(templateConfig={"boatStyle": "floating"}))
    assert exc.value.field == "templateConfig.boatStyle"


def test_invalid_explicit_color(eight_payload):
    with pytest.raises(InvalidColor):
        parse_request(eight_payload(templateConfig={"colors": {"primary": "#123", "secondary": "#1e40af"}}))


def test_preset_colors_are_used(eight_payload):
    presets = InMemoryPresetStore([ClubPreset(id=3, club_name="Riverside RC", primary_color="#003366", secondary_color="#ffcc00")])
    image = CrewImageGenerator(presets=presets).generate_from_payload(eight_payload(presetId=3))
    assert (image.colors.primary, image.colors.secondary, image.colors.source) == ("#003366", "#ffcc00", "preset")


def test_unknown_preset(eight_payload):
    with pytest.raises(PresetNotFound):
        CrewImageGenerator(presets=InMemoryPresetStore()).generate_from_payload(eight_payload(presetId=42))


def test_upload_icon_accepts_base64(eight_payload):
    encoded = base64.b64encode(png_bytes()).decode("ascii")
    request = parse_request(eight_payload(clubIcon={"type": "upload", "fileBytes": encoded, "filename": "club.png"}))
    assert request.club_icon.file_bytes == png_bytes()


@pytest.mark.parametrize(
    "icon",
    [
        {"type": "upload"},
        {"type": "upload", "fileBytes": "***not base64***"},
        {"type": "preset"},
        {"type": "preset", "filename": "club.png", "fileBytes": b"abc"},
        {"type": "sticker", "filename": "club.png"},
        {"type": "upload", "fileBytes": {"a": 1}},
        {"type": "upload", "fileBytes": [300]},
        {"type": "upload", "fileBytes": 3.5},
        {"type": "upload", "fileBytes": 12},
        "club.png",
    ],
)
def test_malformed_club_icon(eight_payload, icon):
    with pytest.raises(InvalidClubIcon):
        parse_request(eight_payload(clubIcon=icon))


def test_icon_changes_output(eight_payload):
    gen = CrewImageGenerator(logos=InMemoryLogoStore({"club.png": png_bytes()}))
    plain = gen.generate_from_payload(eight_payload())
    with_icon = gen.generate_from_payload(eight_payload(clubIcon={"type": "preset", "filename": "club.png"}))
    assert plain.data != with_icon.data


def _broken_draw(ctx, crew):
    raise ZeroDivisionError("layout bug")


def test_draw_error_becomes_render_failure_and_surface_is_released(eight_payload, counting_factory, monkeypatch):
    broken = TemplateVariant("broken", "Broken", "", "test", _broken_draw, TEMPLATES["classic-lineup"].defaults)
    monkeypatch.setitem(TEMPLATES, "broken", broken)
    gen = CrewImageGenerator(surface_factory=counting_factory)
    with pytest.raises(RenderFailure) as exc:
        gen.generate_from_payload(eight_payload(templateId="broken"))
    assert isinstance(exc.value.__cause__, ZeroDivisionError)
    assert exc.value.failed_after is Stage.BRANDING_RESOLVED
    assert counting_factory.closed == 1


def test_handler_success(eight_payload):
    resp = handle_generation_request(eight_payload(templateId="henley-poster"), CrewImageGenerator())
    assert resp.status == 200
    assert resp.content_type == "image/png"
    assert resp.body.startswith(b"\x89PNG")


@pytest.mark.parametrize(
    "overrides,status,code",
    [
        ({"templateId": "neon-nights"}, 400, "TEMPLATE_NOT_FOUND"),
        ({"crew": {"crewNames": ["Only One"]}}, 400, "ROSTER_SIZE_MISMATCH"),
        ({"presetId": 99}, 404, "PRESET_NOT_FOUND"),
        ({"clubIcon": {"type": "preset", "filename": "missing.png"}}, 404, "ICON_NOT_FOUND"),
        ({"clubIcon": {"type": "upload", "fileBytes": b"not an image at all"}}, 415, "UNSUPPORTED_ICON_FORMAT"),
        ({"clubIcon": {"type": "upload", "fileBytes": [300]}}, 400, "INVALID_CLUB_ICON"),
    ],
)
def test_handler_error_envelope(eight_payload, overrides, status, code):
    gen = CrewImageGenerator(presets=InMemoryPresetStore(), logos=InMemoryLogoStore())
    resp = handle_generation_request(eight_payload(**overrides), gen)
    assert resp.status == status
    assert resp.content_type == "application/json"
    body = json.loads(resp.body)
    assert body["error"]["code"] == code
    assert body["error"]["message"]


def test_handler_hides_render_failure_details(eight_payload, monkeypatch):
    broken = TemplateVariant("broken", "Broken", "", "test", _broken_draw, TEMPLATES["classic-lineup"].defaults)
    monkeypatch.setitem(TEMPLATES, "broken", broken)
    resp = handle_generation_request(eight_payload(templateId="broken"), CrewImageGenerator())
    body = json.loads(resp.body)
    assert resp.status == 500
    assert body == {"error": {"code": "RENDER_FAILURE", "message": "Image rendering failed"}}


def test_handler_rejects_non_object_body():
    resp = handle_generation_request(["not", "a", "dict"], CrewImageGenerator())
    assert resp.status == 400
