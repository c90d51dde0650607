import pytest

import data_loaders as loaders


def _write_roster(tmp_path, body):
    path = tmp_path / "crews.csv"
    path.write_text(body)
    return str(path)


def test_load_crews_dataframe_csv_basic(tmp_path):
    path = _write_roster(
        tmp_path,
        "Name,Club,Race,Boat,Crew,Cox,Coach\n"
        "First Eight,Riverside RC,Head Race,8+,A; B; C; D; E; F; G; H,Ivy,Kate\n"
        "Double,Riverside RC,Regatta,2x,Wade | Young,,\n",
    )
    df = loaders.load_crews_dataframe(path)
    assert list(df.columns) == loaders.CREW_COLUMNS
    assert len(df) == 2
    assert df.iloc[0]["Cox"] == "Ivy"
    assert df.iloc[1]["Coach"] == ""
    assert df.attrs["load_stats"]["loaded_rows"] == 2


def test_loader_matches_loose_column_names_and_skips_blank_rows(tmp_path):
    path = _write_roster(
        tmp_path,
        "Crew Name,Club Name,Event,Boat Type,Rowers\n"
        "Quad,Riverside RC,Sprints,4x,A;B;C;D\n"
        ",Riverside RC,Sprints,4x,A;B;C;D\n"
        "Empty Boat,Riverside RC,Sprints,4x,\n",
    )
    df = loaders.load_crews_dataframe(path)
    assert df["Name"].tolist() == ["Quad"]
    stats = df.attrs["load_stats"]
    assert stats["skipped_missing_name"] == 1
    assert stats["skipped_missing_crew"] == 1


def test_loader_reports_missing_columns(tmp_path):
    path = _write_roster(tmp_path, "Name,Club\nFirst Eight,Riverside RC\n")
    with pytest.raises(ValueError) as exc:
        loaders.load_crews_dataframe(path)
    assert "Boat" in str(exc.value)


def test_crew_payloads_split_names_stroke_first(tmp_path):
    path = _write_roster(
        tmp_path,
        "Name,Club,Race,Boat,Crew,Cox,Coach\n"
        "Coxed Four,Riverside RC,Regatta,4+,Nolan; Park; Reyes; Singh,Udall,\n",
    )
    payload = next(loaders.crew_payloads(loaders.load_crews_dataframe(path)))
    assert payload == {
        "name": "Coxed Four",
        "clubName": "Riverside RC",
        "raceName": "Regatta",
        "boatType": "4+",
        "crewNames": ["Nolan", "Park", "Reyes", "Singh"],
        "coxName": "Udall",
        "coachName": None,
    }


def test_load_crews_dataframe_excel(tmp_path):
    pd = pytest.importorskip("pandas")
    pytest.importorskip("openpyxl")
    path = tmp_path / "crews.xlsx"
    pd.DataFrame(
        [{"Name": "Single", "Club": "Riverside RC", "Race": "Sprints", "Boat": "1x", "Crew": "Ben Carter"}]
    ).to_excel(path, sheet_name="Sheet1", index=False)
    df = loaders.load_crews_dataframe(str(path))
    assert df.iloc[0]["Crew"] == "Ben Carter"


class _FakeResp:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.headers = {}
        self.text = ""

    def json(self):
        return self._payload


class _FakeSession:
    def __init__(self, *responses):
        self._responses = list(responses)
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append(url)
        return self._responses.pop(0)


@pytest.fixture
def no_sleep(monkeypatch):
    # Avoid sleeps in retry logic
    import time

    monkeypatch.setattr(time, "sleep", lambda *_a, **_k: None)


def test_http_preset_lookup_parses_payload(no_sleep):
    session = _FakeSession(
        _FakeResp(
            200,
            {"id": 5, "clubName": "Riverside RC", "primaryColor": "#003366", "secondaryColor": "#ffcc00", "logoFilename": "riverside.png"},
        )
    )
    lookup = loaders.HttpClubPresetLookup("https://presets.example.org/api/", session=session)
    preset = lookup.get(5)
    assert preset.club_name == "Riverside RC"
    assert preset.primary_color == "#003366"
    assert preset.logo_filename == "riverside.png"
    assert session.calls == ["https://presets.example.org/api/club-presets/5"]
    # cached
    assert lookup.get("5") is preset
    assert len(session.calls) == 1


def test_http_preset_lookup_404_is_none(no_sleep):
    lookup = loaders.HttpClubPresetLookup("https://presets.example.org", session=_FakeSession(_FakeResp(404)))
    assert lookup.get(9) is None


def test_http_preset_lookup_retries_transient_errors(no_sleep):
    session = _FakeSession(
        _FakeResp(503),
        _FakeResp(200, {"id": 1, "clubName": "A", "primaryColor": "#000000", "secondaryColor": "#ffffff"}),
    )
    lookup = loaders.HttpClubPresetLookup("https://presets.example.org", session=session, max_attempts=2)
    assert lookup.get(1).club_name == "A"
    assert len(session.calls) == 2


def test_http_preset_lookup_raises_on_server_error(no_sleep):
    session = _FakeSession(_FakeResp(500), _FakeResp(500))
    lookup = loaders.HttpClubPresetLookup("https://presets.example.org", session=session, max_attempts=2)
    with pytest.raises(RuntimeError):
        lookup.get(1)


def test_http_preset_lookup_requires_base_url():
    with pytest.raises(ValueError):
        loaders.HttpClubPresetLookup("  ")


def test_http_preset_list_puts_default_first_and_fills_cache():
    session = _FakeSession(
        _FakeResp(
            200,
            [
                {"id": 1, "clubName": "Thames RC", "primaryColor": "#000080", "secondaryColor": "#ffffff"},
                {"id": 2, "clubName": "Riverside RC", "primaryColor": "#003366", "secondaryColor": "#ffcc00", "isDefault": True},
                "junk",
                {"id": 3, "clubName": "Avon BC", "primaryColor": "#006400", "secondaryColor": "#ffffff"},
            ],
        )
    )
    lookup = loaders.HttpClubPresetLookup("https://presets.example.org", session=session)
    presets = lookup.list_presets()
    assert [p.club_name for p in presets] == ["Riverside RC", "Avon BC", "Thames RC"]
    assert session.calls == ["https://presets.example.org/club-presets"]
    assert lookup.get(3).club_name == "Avon BC"
    assert len(session.calls) == 1


def test_http_preset_list_rejects_non_list_body():
    lookup = loaders.HttpClubPresetLookup("https://presets.example.org", session=_FakeSession(_FakeResp(200, {"id": 1})))
    with pytest.raises(RuntimeError):
        lookup.list_presets()
