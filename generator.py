"""
Crew image generation requests.

A request moves through a fixed sequence of stages:

    Received -> Validated -> SeatsResolved -> BrandingResolved
             -> Rendered -> Encoded -> Returned

and stops at Failed with a typed error from any of them. Everything a caller
can get wrong is checked during validation, before a drawing surface exists.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from boats import parse_boat_type, resolve_seats
from branding import ClubIcon, normalize_hex, resolve_colors, resolve_icon
from compositor import SurfaceFactory, compose, new_surface
from config import MAX_DIMENSION_PX, STYLE_OPTIONS
from errors import (
    CrewImageError,
    InvalidClubIcon,
    InvalidDimensions,
    InvalidOption,
    MissingField,
    RenderFailure,
    RosterSizeMismatch,
    ValidationError,
)
from models import (
    ColorScheme,
    Crew,
    Dimensions,
    PresetIcon,
    SeatAssignment,
    TemplateConfig,
    UploadIcon,
)
from repository import ClubPresetLookup, LogoStore
from templates import get_template

log = logging.getLogger(__name__)


class Stage(str, Enum):
    RECEIVED = "Received"
    VALIDATED = "Validated"
    SEATS_RESOLVED = "SeatsResolved"
    BRANDING_RESOLVED = "BrandingResolved"
    RENDERED = "Rendered"
    ENCODED = "Encoded"
    RETURNED = "Returned"
    FAILED = "Failed"


@dataclass(frozen=True)
class GenerationRequest:
    crew: Crew
    template_id: str
    config: TemplateConfig
    preset_id: Optional[Union[int, str]] = None
    club_icon: Optional[ClubIcon] = None


@dataclass(frozen=True)
class GeneratedImage:
    data: bytes
    width: int
    height: int
    template_id: str
    seats: SeatAssignment
    colors: ColorScheme
    content_type: str = "image/png"
    stage: Stage = Stage.RETURNED


@dataclass(frozen=True)
class Response:
    status: int
    content_type: str
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)


# --- payload parsing ---

def _text(raw: Dict[str, Any], key: str, path: str, required: bool = True) -> Optional[str]:
    value = raw.get(key)
    if value is None or (isinstance(value, float) and str(value) == "nan"):
        value = ""
    value = str(value).strip()
    if required and not value:
        raise MissingField(path)
    return value or None


def parse_crew(raw: Any) -> Crew:
    if not isinstance(raw, dict):
        raise MissingField("crew")
    name = _text(raw, "name", "crew.name")
    club_name = _text(raw, "clubName", "crew.clubName")
    race_name = _text(raw, "raceName", "crew.raceName")
    if raw.get("boatType") in (None, "", {}):
        raise MissingField("crew.boatType")
    boat_type = parse_boat_type(raw["boatType"])

    names = raw.get("crewNames")
    if names is None:
        raise MissingField("crew.crewNames")
    if isinstance(names, (str, bytes)) or not hasattr(names, "__iter__"):
        raise ValidationError("crew.crewNames must be a list of names", field="crew.crewNames")
    crew_names = tuple("" if n is None else str(n).strip() for n in names)

    return Crew(
        id=_text(raw, "id", "crew.id", required=False),
        name=name,
        club_name=club_name,
        race_name=race_name,
        boat_type=boat_type,
        crew_names=crew_names,
        cox_name=_text(raw, "coxName", "crew.coxName", required=False),
        coach_name=_text(raw, "coachName", "crew.coachName", required=False),
    )


def _dimension(raw: Dict[str, Any], key: str) -> int:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDimensions(f"dimensions.{key} must be a whole number of pixels, got {value!r}", field=f"dimensions.{key}")
    if value <= 0 or value > MAX_DIMENSION_PX:
        raise InvalidDimensions(
            f"dimensions.{key} must be between 1 and {MAX_DIMENSION_PX}, got {value}", field=f"dimensions.{key}"
        )
    return value


def parse_template_config(raw: Any, defaults: TemplateConfig) -> TemplateConfig:
    """Overlay request fields on a template's defaults, validating each one."""
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ValidationError("templateConfig must be an object", field="templateConfig")

    keys = {
        "background": "background",
        "nameDisplay": "name_display",
        "boatStyle": "boat_style",
        "textLayout": "text_layout",
        "logo": "logo",
    }
    overrides: Dict[str, Any] = {}
    for json_key, attr in keys.items():
        value = raw.get(json_key)
        if value is None or value == "":
            continue
        if value not in STYLE_OPTIONS[attr]:
            raise InvalidOption(
                f"templateConfig.{json_key} must be one of {', '.join(STYLE_OPTIONS[attr])}, got {value!r}",
                field=f"templateConfig.{json_key}",
            )
        overrides[attr] = value

    dims = raw.get("dimensions")
    if dims is not None:
        if not isinstance(dims, dict):
            raise InvalidDimensions("dimensions must be {width, height}", field="dimensions")
        overrides["dimensions"] = Dimensions(width=_dimension(dims, "width"), height=_dimension(dims, "height"))

    colors = raw.get("colors")
    if colors:
        if not isinstance(colors, dict):
            raise ValidationError("colors must be {primary, secondary}", field="colors")
        overrides["colors"] = ColorScheme(
            primary=normalize_hex(colors.get("primary"), "colors.primary"),
            secondary=normalize_hex(colors.get("secondary"), "colors.secondary"),
            source="explicit",
        )
    return defaults.merged(**overrides)


def parse_club_icon(raw: Any) -> Optional[ClubIcon]:
    if raw in (None, "", {}):
        return None
    if not isinstance(raw, dict):
        raise InvalidClubIcon("clubIcon must be an object", field="clubIcon")
    kind = raw.get("type")
    file_bytes = raw.get("fileBytes")
    filename = str(raw.get("filename") or "").strip()

    if kind == "upload":
        if not file_bytes:
            raise InvalidClubIcon("Upload club icon needs fileBytes", field="clubIcon.fileBytes")
        if isinstance(file_bytes, str):
            try:
                file_bytes = base64.b64decode(file_bytes, validate=True)
            except (binascii.Error, ValueError) as e:
                raise InvalidClubIcon("clubIcon.fileBytes is not valid base64", field="clubIcon.fileBytes") from e
        elif not isinstance(file_bytes, (bytes, bytearray, memoryview)):
            raise InvalidClubIcon(
                f"clubIcon.fileBytes must be bytes or base64 text, got {type(file_bytes).__name__}",
                field="clubIcon.fileBytes",
            )
        return UploadIcon(file_bytes=bytes(file_bytes), filename=filename)
    if kind == "preset":
        if file_bytes:
            raise InvalidClubIcon("Preset club icon must not carry fileBytes", field="clubIcon")
        if not filename:
            raise InvalidClubIcon("Preset club icon needs a filename", field="clubIcon.filename")
        return PresetIcon(filename=filename)
    raise InvalidClubIcon(f"clubIcon.type must be 'upload' or 'preset', got {kind!r}", field="clubIcon.type")


def parse_request(payload: Any) -> GenerationRequest:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be an object")
    crew = parse_crew(payload.get("crew"))
    template_id = _text(payload, "templateId", "templateId")
    variant = get_template(template_id)
    config = parse_template_config(payload.get("templateConfig"), variant.defaults)
    preset_id = payload.get("presetId")
    if preset_id == "":
        preset_id = None
    return GenerationRequest(
        crew=crew,
        template_id=template_id,
        config=config,
        preset_id=preset_id,
        club_icon=parse_club_icon(payload.get("clubIcon")),
    )


def validate_request(request: GenerationRequest) -> None:
    """Checks that need the whole request; raises before any rendering work."""
    get_template(request.template_id)
    crew = request.crew
    if len(crew.crew_names) != crew.boat_type.seats:
        raise RosterSizeMismatch(crew.boat_type.code, crew.boat_type.seats, len(crew.crew_names))
    dims = request.config.dimensions
    for key, value in (("width", dims.width), ("height", dims.height)):
        if value <= 0 or value > MAX_DIMENSION_PX:
            raise InvalidDimensions(f"dimensions.{key} must be between 1 and {MAX_DIMENSION_PX}", field=f"dimensions.{key}")
    for attr, options in STYLE_OPTIONS.items():
        value = getattr(request.config, attr)
        if value not in options:
            raise InvalidOption(f"{attr} must be one of {', '.join(options)}, got {value!r}", field=attr)


# --- orchestration ---

class CrewImageGenerator:
    """Turns generation requests into PNG bytes using injected preset/logo stores."""

    def __init__(
        self,
        presets: Optional[ClubPresetLookup] = None,
        logos: Optional[LogoStore] = None,
        surface_factory: SurfaceFactory = new_surface,
    ):
        self.presets = presets
        self.logos = logos
        self.surface_factory = surface_factory

    def _advance(self, request: GenerationRequest, current: Stage, nxt: Stage) -> Stage:
        log.debug("crew %r / %s: %s -> %s", request.crew.name, request.template_id, current.value, nxt.value)
        return nxt

    def generate(self, request: GenerationRequest) -> GeneratedImage:
        stage = Stage.RECEIVED
        try:
            validate_request(request)
            stage = self._advance(request, stage, Stage.VALIDATED)

            crew = request.crew
            seats = resolve_seats(crew.boat_type, crew.crew_names, crew.cox_name)
            stage = self._advance(request, stage, Stage.SEATS_RESOLVED)

            variant = get_template(request.template_id)
            colors = resolve_colors(request.config.colors, request.preset_id, ColorScheme(), self.presets)
            icon = resolve_icon(request.club_icon, self.logos)
            stage = self._advance(request, stage, Stage.BRANDING_RESOLVED)

            data = compose(
                variant.id,
                crew,
                request.config,
                icon,
                seats=seats,
                colors=colors,
                surface_factory=self.surface_factory,
            )
            stage = self._advance(request, stage, Stage.RENDERED)
            stage = self._advance(request, stage, Stage.ENCODED)

            dims = request.config.dimensions
            result = GeneratedImage(
                data=data,
                width=dims.width,
                height=dims.height,
                template_id=variant.id,
                seats=seats,
                colors=colors,
            )
            self._advance(request, stage, Stage.RETURNED)
            return result
        except CrewImageError as e:
            e.stage = Stage.FAILED
            e.failed_after = stage
            log.info(
                "crew %r / %s: %s -> %s (%s: %s)",
                request.crew.name, request.template_id, stage.value, Stage.FAILED.value, e.code, e.message,
            )
            raise

    def generate_from_payload(self, payload: Any) -> GeneratedImage:
        try:
            request = parse_request(payload)
        except CrewImageError as e:
            e.stage = Stage.FAILED
            e.failed_after = Stage.RECEIVED
            raise
        return self.generate(request)


def error_response(error: CrewImageError) -> Response:
    body = json.dumps(error.to_dict()).encode("utf-8")
    return Response(status=error.status, content_type="application/json", body=body)


def handle_generation_request(payload: Any, generator: CrewImageGenerator) -> Response:
    """Request boundary: PNG bytes on success, a JSON error envelope otherwise."""
    try:
        image = generator.generate_from_payload(payload)
    except CrewImageError as e:
        return error_response(e)
    except Exception as e:
        log.exception("Unhandled error while generating crew image")
        return error_response(RenderFailure(f"{type(e).__name__}: {e}"))
    return Response(status=200, content_type=image.content_type, body=image.data)
