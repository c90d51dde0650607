# Ensures `import generator` works when running `pytest` from repo root or a parent folder.
import sys
from io import BytesIO
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

EIGHT = ["Adams", "Baker", "Clarke", "Dutta", "Evans", "Fisher", "Grant", "Hughes"]


def png_bytes(size=(40, 20), color=(200, 30, 30, 255), fmt="PNG"):
    from PIL import Image

    img = Image.new("RGBA" if fmt == "PNG" else "RGB", size, color if fmt == "PNG" else color[:3])
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def eight_payload():
    def _make(**overrides):
        crew = {
            "name": "Men's First Eight",
            "clubName": "Riverside RC",
            "raceName": "Head of the River",
            "boatType": "8+",
            "crewNames": list(EIGHT),
            "coxName": "Ivy Jones",
            "coachName": "Kate Lowe",
        }
        crew.update(overrides.pop("crew", {}))
        payload = {"crew": crew, "templateId": "classic-lineup"}
        payload.update(overrides)
        return payload

    return _make


class CountingFactory:
    """Surface factory that records every surface it hands out and whether it was closed."""

    def __init__(self):
        self.surfaces = []
        self.closed = 0

    def __call__(self, dimensions):
        from compositor import new_surface

        surface = new_surface(dimensions)
        original_close = surface.close

        def _close():
            self.closed += 1
            original_close()

        surface.close = _close
        self.surfaces.append(surface)
        return surface


@pytest.fixture
def counting_factory():
    return CountingFactory()
