"""
Typed errors raised by the composition engine.

Every error carries a stable ``code`` and an HTTP-equivalent ``status`` so the
request boundary can turn it into a small JSON envelope without inspecting
the exception type.
"""

from __future__ import annotations

from typing import Optional


class CrewImageError(Exception):
    code = "CREW_IMAGE_ERROR"
    status = 500

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        # Set by the generator: always "Failed", plus the last stage reached.
        self.stage = None
        self.failed_after = None

    def public_message(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        body = {"code": self.code, "message": self.public_message()}
        if self.field:
            body["field"] = self.field
        return {"error": body}


# --- client-caused (400) ---

class ValidationError(CrewImageError):
    code = "VALIDATION_ERROR"
    status = 400


class MissingField(ValidationError):
    code = "MISSING_FIELD"

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}", field=field)


class RosterSizeMismatch(ValidationError):
    code = "ROSTER_SIZE_MISMATCH"

    def __init__(self, boat_code: str, expected: int, actual: int):
        super().__init__(
            f"Boat type {boat_code} needs {expected} crew name(s), got {actual}",
            field="crewNames",
        )
        self.expected = expected
        self.actual = actual


class UnknownBoatType(ValidationError):
    code = "UNKNOWN_BOAT_TYPE"


class TemplateNotFound(ValidationError):
    code = "TEMPLATE_NOT_FOUND"

    def __init__(self, template_id: str):
        super().__init__(f"Unknown template: {template_id!r}", field="templateId")
        self.template_id = template_id


class InvalidColor(ValidationError):
    code = "INVALID_COLOR"


class InvalidDimensions(ValidationError):
    code = "INVALID_DIMENSIONS"


class InvalidOption(ValidationError):
    code = "INVALID_OPTION"


class InvalidClubIcon(ValidationError):
    code = "INVALID_CLUB_ICON"


# --- missing resources (404) ---

class ResourceNotFound(CrewImageError):
    code = "RESOURCE_NOT_FOUND"
    status = 404


class PresetNotFound(ResourceNotFound):
    code = "PRESET_NOT_FOUND"

    def __init__(self, preset_id):
        super().__init__(f"Club preset not found: {preset_id}", field="presetId")
        self.preset_id = preset_id


class IconNotFound(ResourceNotFound):
    code = "ICON_NOT_FOUND"

    def __init__(self, filename: str):
        super().__init__(f"Club logo not found: {filename}", field="clubIcon")
        self.filename = filename


# --- undecodable uploads (415) ---

class UnsupportedFormat(CrewImageError):
    code = "UNSUPPORTED_FORMAT"
    status = 415


class UnsupportedIconFormat(UnsupportedFormat):
    code = "UNSUPPORTED_ICON_FORMAT"


# --- engine-internal (500) ---

class RenderFailure(CrewImageError):
    code = "RENDER_FAILURE"
    status = 500

    def public_message(self) -> str:
        # Internal details stay in the logs.
        return "Image rendering failed"
