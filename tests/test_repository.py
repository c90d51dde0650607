from dataclasses import replace

from boats import get_boat_type
from models import ClubPreset, Crew
from repository import DirectoryLogoStore, InMemoryCrewRepository, InMemoryPresetStore


def _crew(name="First Eight"):
    return Crew(
        name=name,
        club_name="Riverside RC",
        race_name="Spring Regatta",
        boat_type=get_boat_type("2x"),
        crew_names=("Wade", "Young"),
    )


def test_crew_crud():
    repo = InMemoryCrewRepository()
    created = repo.create(_crew())
    assert created.id
    assert repo.get(created.id) == created
    assert repo.list() == [created]

    updated = repo.update(created.id, replace(created, race_name="Head Race"))
    assert updated.race_name == "Head Race"
    assert repo.get(created.id).race_name == "Head Race"

    assert repo.delete(created.id) is True
    assert repo.delete(created.id) is False
    assert repo.get(created.id) is None


def test_update_missing_crew_returns_none():
    assert InMemoryCrewRepository().update("nope", _crew()) is None


def test_repositories_do_not_share_state():
    a, b = InMemoryCrewRepository(), InMemoryCrewRepository()
    a.create(_crew())
    assert b.list() == []


def test_preset_store_lookup_and_default():
    presets = InMemoryPresetStore(
        [
            ClubPreset(id=1, club_name="A", primary_color="#000000", secondary_color="#ffffff"),
            ClubPreset(id=2, club_name="B", primary_color="#111111", secondary_color="#eeeeee", is_default=True),
        ]
    )
    assert presets.get(1).club_name == "A"
    assert presets.get("2").club_name == "B"
    assert presets.get(3) is None
    assert presets.default().id == 2
    assert [p.id for p in presets.list_presets()] == [2, 1]


def test_directory_logo_store(tmp_path):
    (tmp_path / "club.png").write_bytes(b"logo")
    (tmp_path.parent / "secret.png").write_bytes(b"secret")
    store = DirectoryLogoStore(tmp_path)
    assert store.read("club.png") == b"logo"
    assert store.read("missing.png") is None
    assert store.read("../secret.png") is None
    assert store.read("") is None
