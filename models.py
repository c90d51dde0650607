"""Data models for crew rosters, branding and render configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from config import (
    DEFAULT_HEIGHT,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    DEFAULT_WIDTH,
)


@dataclass(frozen=True)
class BoatType:
    """A rowing shell configuration from the supported catalog."""
    id: int
    code: str                 # "8+", "4x", "1x"
    name: str                 # "Eight with Coxswain"
    seats: int                # rowers only, cox never counted
    has_cox: bool


@dataclass(frozen=True)
class Crew:
    """A saved crew roster. crew_names[0] sits at Stroke, crew_names[-1] at Bow."""
    name: str
    club_name: str
    race_name: str
    boat_type: BoatType
    crew_names: Tuple[str, ...]
    cox_name: Optional[str] = None
    coach_name: Optional[str] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class Dimensions:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT

    @property
    def short_side(self) -> int:
        return min(self.width, self.height)


@dataclass(frozen=True)
class ColorScheme:
    primary: str = DEFAULT_PRIMARY_COLOR
    secondary: str = DEFAULT_SECONDARY_COLOR
    source: str = "template"  # "explicit", "preset" or "template"


@dataclass(frozen=True)
class TemplateConfig:
    background: str = "gradient"
    name_display: str = "labeled"
    boat_style: str = "centered"
    text_layout: str = "header-center"
    logo: str = "bottom-right"
    dimensions: Dimensions = field(default_factory=Dimensions)
    colors: Optional[ColorScheme] = None  # explicit per-request colors only

    def merged(self, **overrides) -> "TemplateConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


@dataclass(frozen=True)
class UploadIcon:
    file_bytes: bytes
    filename: str = ""
    type: str = "upload"


@dataclass(frozen=True)
class PresetIcon:
    filename: str
    type: str = "preset"


@dataclass(frozen=True)
class ClubPreset:
    id: int
    club_name: str
    primary_color: str
    secondary_color: str
    logo_filename: Optional[str] = None
    is_default: bool = False


@dataclass(frozen=True)
class SeatEntry:
    label: str
    name: str


@dataclass(frozen=True)
class SeatAssignment:
    """Rowers in stroke-to-bow order plus a separate cox slot when the boat has one."""
    seats: Tuple[SeatEntry, ...]
    cox: Optional[SeatEntry] = None

    def entries(self) -> List[SeatEntry]:
        """All labeled entries, rowers first, cox last."""
        out = list(self.seats)
        if self.cox is not None:
            out.append(self.cox)
        return out

    @property
    def labels(self) -> List[str]:
        return [e.label for e in self.entries()]
