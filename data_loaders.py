"""
Lightweight data loading helpers.

Important: Keep imports light at module import time (Streamlit Cloud startup).
We import pandas/requests only inside functions.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from config import PRESET_API_MAX_ATTEMPTS, PRESET_API_TIMEOUT_S
from models import ClubPreset
from repository import ClubPresetLookup, preset_order

log = logging.getLogger(__name__)

CREW_COLUMNS = ["Name", "Club", "Race", "Boat", "Crew", "Cox", "Coach"]

# Crew members in one cell, stroke first: "A; B; C" or "A | B | C"
_NAME_SPLIT_RE = re.compile(r"\s*[;|\n]\s*")


def _find_column(df: Any, exact: Optional[str], *subs) -> Optional[str]:
    """Find column by exact name or by substrings (all must match, case-insensitive)."""
    df_cols = [str(c).strip() for c in df.columns]
    if exact and exact in df_cols:
        return exact
    low = exact.lower() if exact else ""
    for c in df.columns:
        cs = str(c).strip()
        if exact and cs.lower() == low:
            return c
        if subs and all(s.lower() in cs.lower() for s in subs):
            return c
    return None


def _cell(r: Any, col: Optional[str]) -> str:
    if not col:
        return ""
    v = r.get(col, "")
    if v is None or (isinstance(v, float) and str(v) == "nan"):
        return ""
    s = str(v).strip()
    return "" if s.lower() == "nan" else s


def split_crew_names(cell: str) -> List[str]:
    """'Ann; Bea; Cat' -> ['Ann', 'Bea', 'Cat'] (stroke first, blanks kept in position)."""
    cell = (cell or "").strip()
    if not cell:
        return []
    return _NAME_SPLIT_RE.split(cell)


def load_crews_dataframe(path: str, sheet: str = "Sheet1") -> Any:
    """
    Load crews from Excel or CSV into a DataFrame with columns:
    Name, Club, Race, Boat, Crew, Cox, Coach.

    Crew holds the rowers in one cell, stroke first, separated by ';' or '|'.
    """
    import pandas as pd

    p = Path(path)
    suf = p.suffix.lower()
    if suf in (".xlsx", ".xls"):
        try:
            df = pd.read_excel(path, sheet_name=sheet)
        except ImportError as e:
            if "openpyxl" in str(e).lower():
                raise ImportError(
                    "Reading Excel requires openpyxl. Install it with:\n  pip install openpyxl"
                ) from e
            raise
    else:
        df = pd.read_csv(path)

    df.columns = [str(c).strip() for c in df.columns]
    name_col = (
        _find_column(df, "Name")
        or _find_column(df, "Crew Name")
        or _find_column(df, None, "crew", "name")
        or _find_column(df, None, "boat", "name")
    )
    club_col = _find_column(df, "Club") or _find_column(df, None, "club")
    race_col = _find_column(df, "Race") or _find_column(df, None, "race") or _find_column(df, None, "event")
    boat_col = _find_column(df, "Boat") or _find_column(df, "Boat Type") or _find_column(df, None, "boat", "type")
    crew_col = (
        _find_column(df, "Crew")
        or _find_column(df, "Rowers")
        or _find_column(df, "Crew Names")
        or _find_column(df, None, "rower")
    )
    cox_col = _find_column(df, "Cox") or _find_column(df, None, "cox")
    coach_col = _find_column(df, "Coach") or _find_column(df, None, "coach")

    missing = [
        label
        for label, col in (("Name", name_col), ("Club", club_col), ("Race", race_col), ("Boat", boat_col), ("Crew", crew_col))
        if not col
    ]
    if missing:
        raise ValueError(
            f"Could not find column(s) {', '.join(missing)} in {p.name}. "
            f"Expected {', '.join(CREW_COLUMNS)}. Columns: {list(df.columns)}"
        )

    total_rows = len(df)
    missing_name = 0
    missing_crew = 0
    rows = []
    for _, r in df.iterrows():
        name = _cell(r, name_col)
        if not name:
            missing_name += 1
            continue
        crew = _cell(r, crew_col)
        if not crew:
            missing_crew += 1
            continue
        rows.append(
            {
                "Name": name,
                "Club": _cell(r, club_col),
                "Race": _cell(r, race_col),
                "Boat": _cell(r, boat_col),
                "Crew": crew,
                "Cox": _cell(r, cox_col),
                "Coach": _cell(r, coach_col),
            }
        )

    out = pd.DataFrame(rows, columns=CREW_COLUMNS)
    out.attrs["load_stats"] = {
        "source_rows": total_rows,
        "loaded_rows": len(out),
        "skipped_missing_name": missing_name,
        "skipped_missing_crew": missing_crew,
    }
    return out


def crew_payloads(df: Any) -> Iterator[Dict[str, Any]]:
    """Yield one crew payload per DataFrame row, in the shape generation requests expect."""
    for _, r in df.iterrows():
        yield {
            "name": _cell(r, "Name"),
            "clubName": _cell(r, "Club"),
            "raceName": _cell(r, "Race"),
            "boatType": _cell(r, "Boat"),
            "crewNames": split_crew_names(_cell(r, "Crew")),
            "coxName": _cell(r, "Cox") or None,
            "coachName": _cell(r, "Coach") or None,
        }


def _preset_from_row(row: Dict[str, Any]) -> ClubPreset:
    return ClubPreset(
        id=row.get("id"),
        club_name=str(row.get("clubName") or row.get("club_name") or ""),
        primary_color=str(row.get("primaryColor") or row.get("primary_color") or ""),
        secondary_color=str(row.get("secondaryColor") or row.get("secondary_color") or ""),
        logo_filename=row.get("logoFilename") or row.get("logo_filename"),
        is_default=bool(row.get("isDefault", row.get("is_default", False))),
    )


class HttpClubPresetLookup(ClubPresetLookup):
    """
    Club presets served over HTTP: GET {base_url}/club-presets/{id} for one,
    GET {base_url}/club-presets for the picker list.

    404 means "no such preset" (None); other failures raise RuntimeError
    after PRESET_API_MAX_ATTEMPTS tries.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        timeout_s: int = PRESET_API_TIMEOUT_S,
        max_attempts: int = PRESET_API_MAX_ATTEMPTS,
        session: Any = None,
    ):
        base_url = (base_url or "").strip().rstrip("/")
        if not base_url:
            raise ValueError("HttpClubPresetLookup requires base_url.")
        self.base_url = base_url
        self.api_key = (api_key or "").strip() or None
        self.timeout_s = timeout_s
        self.max_attempts = max_attempts
        self._session = session
        self._cache: Dict[str, Optional[ClubPreset]] = {}

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json", "User-Agent": "crew-graphics/1.0"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _get(self, endpoint: str):
        import random
        import time

        import requests

        http = self._session or requests
        last_exc: Optional[Exception] = None
        last_resp = None
        for attempt in range(max(1, int(self.max_attempts))):
            try:
                resp = http.get(
                    endpoint,
                    headers=self._headers(),
                    timeout=(10, max(10, int(self.timeout_s))),
                    allow_redirects=False,
                )
                last_resp = resp
                if resp.status_code in (429, 500, 502, 503):
                    time.sleep(min(6.0, 0.6 * (2**attempt) + random.random() * 0.25))
                    continue
                return resp
            except requests.RequestException as e:
                last_exc = e
                time.sleep(min(6.0, 0.6 * (2**attempt) + random.random() * 0.25))
                continue
        if last_resp is not None:
            return last_resp
        raise RuntimeError(f"Club preset request failed after retries: {last_exc}") from last_exc

    def get(self, preset_id) -> Optional[ClubPreset]:
        from urllib.parse import quote

        key = str(preset_id).strip()
        if key in self._cache:
            return self._cache[key]

        endpoint = f"{self.base_url}/club-presets/{quote(key, safe='')}"
        resp = self._get(endpoint)
        if resp.status_code == 404:
            log.info("Club preset %s not found at %s", key, endpoint)
            self._cache[key] = None
            return None
        if resp.status_code != 200:
            snippet = (resp.text or "")[:500]
            raise RuntimeError(
                f"Club preset API error (status: {resp.status_code}). Endpoint: {endpoint}. "
                f"Body (first 500 chars): {snippet}"
            )
        data = resp.json()
        if not isinstance(data, dict):
            raise RuntimeError(f"Unexpected club preset response type: {type(data).__name__}")
        preset = _preset_from_row(data)
        self._cache[key] = preset
        return preset

    def list_presets(self) -> List[ClubPreset]:
        endpoint = f"{self.base_url}/club-presets"
        resp = self._get(endpoint)
        if resp.status_code != 200:
            snippet = (resp.text or "")[:500]
            raise RuntimeError(
                f"Club preset API error (status: {resp.status_code}). Endpoint: {endpoint}. "
                f"Body (first 500 chars): {snippet}"
            )
        data = resp.json()
        if not isinstance(data, list):
            raise RuntimeError(f"Unexpected club preset list type: {type(data).__name__}")
        presets = [_preset_from_row(row) for row in data if isinstance(row, dict)]
        for p in presets:
            self._cache[str(p.id)] = p
        return sorted(presets, key=preset_order)
