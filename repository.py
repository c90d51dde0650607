"""
Stores the engine reads from, passed in by the caller.

Nothing here is module-level state: every store is an instance, so two
requests holding different stores never see each other's data.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from models import ClubPreset, Crew


class ClubPresetLookup:
    def get(self, preset_id) -> Optional[ClubPreset]:
        raise NotImplementedError

    def list_presets(self) -> List[ClubPreset]:
        """Every preset, the default one first, then by club name."""
        raise NotImplementedError


def preset_order(preset: ClubPreset):
    return (not preset.is_default, preset.club_name.lower(), str(preset.id))


class LogoStore:
    def read(self, filename: str) -> Optional[bytes]:
        raise NotImplementedError


class CrewRepository:
    def create(self, crew: Crew) -> Crew:
        raise NotImplementedError

    def get(self, crew_id: str) -> Optional[Crew]:
        raise NotImplementedError

    def list(self) -> List[Crew]:
        raise NotImplementedError

    def update(self, crew_id: str, crew: Crew) -> Optional[Crew]:
        raise NotImplementedError

    def delete(self, crew_id: str) -> bool:
        raise NotImplementedError


class InMemoryPresetStore(ClubPresetLookup):
    def __init__(self, presets: Iterable[ClubPreset] = ()):
        self._presets = {str(p.id): p for p in presets}

    def get(self, preset_id) -> Optional[ClubPreset]:
        return self._presets.get(str(preset_id))

    def list_presets(self) -> List[ClubPreset]:
        return sorted(self._presets.values(), key=preset_order)

    def default(self) -> Optional[ClubPreset]:
        return next((p for p in self._presets.values() if p.is_default), None)


@dataclass(frozen=True)
class DirectoryLogoStore(LogoStore):
    root: Path

    def read(self, filename: str) -> Optional[bytes]:
        name = str(filename or "").strip()
        # Only bare filenames; "../x.png" or "a/b.png" never leave the logo dir.
        if not name or Path(name).name != name or name in (".", ".."):
            return None
        p = Path(self.root) / name
        if not p.is_file():
            return None
        return p.read_bytes()


@dataclass(frozen=True)
class InMemoryLogoStore(LogoStore):
    files: Dict[str, bytes] = field(default_factory=dict)

    def read(self, filename: str) -> Optional[bytes]:
        return self.files.get(filename)


class InMemoryCrewRepository(CrewRepository):
    """Crew CRUD backed by a per-instance dict."""

    def __init__(self, crews: Iterable[Crew] = ()):
        self._lock = threading.Lock()
        self._crews: Dict[str, Crew] = {}
        for crew in crews:
            self.create(crew)

    def create(self, crew: Crew) -> Crew:
        crew_id = crew.id or uuid.uuid4().hex
        stored = replace(crew, id=crew_id)
        with self._lock:
            self._crews[crew_id] = stored
        return stored

    def get(self, crew_id: str) -> Optional[Crew]:
        with self._lock:
            return self._crews.get(crew_id)

    def list(self) -> List[Crew]:
        with self._lock:
            return list(self._crews.values())

    def update(self, crew_id: str, crew: Crew) -> Optional[Crew]:
        with self._lock:
            if crew_id not in self._crews:
                return None
            stored = replace(crew, id=crew_id)
            self._crews[crew_id] = stored
            return stored

    def delete(self, crew_id: str) -> bool:
        with self._lock:
            return self._crews.pop(crew_id, None) is not None
