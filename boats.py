"""
Boat catalog and seat assignment.

This is the only place seat labels are computed. Stored crew order runs from
the stern: index 0 is Stroke, the last index is Bow, and interior seats are
numbered by their distance from Stroke counting down toward Bow:

    8+  ->  Stroke, 7, 6, 5, 4, 3, 2, Bow   (+ Cox)
    2x  ->  Stroke, Bow
    1x  ->  Single
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from errors import RosterSizeMismatch, UnknownBoatType
from models import BoatType, SeatAssignment, SeatEntry

log = logging.getLogger(__name__)

STROKE = "Stroke"
BOW = "Bow"
COX = "Cox"
SINGLE = "Single"

BOAT_TYPES: Dict[str, BoatType] = {
    "8+": BoatType(id=1, code="8+", name="Eight with Coxswain", seats=8, has_cox=True),
    "4+": BoatType(id=2, code="4+", name="Four with Coxswain", seats=4, has_cox=True),
    "4-": BoatType(id=3, code="4-", name="Four without Coxswain", seats=4, has_cox=False),
    "2x": BoatType(id=4, code="2x", name="Double Sculls", seats=2, has_cox=False),
    "1x": BoatType(id=5, code="1x", name="Single Sculls", seats=1, has_cox=False),
    "4x": BoatType(id=6, code="4x", name="Quad Sculls", seats=4, has_cox=False),
    "2-": BoatType(id=7, code="2-", name="Coxless Pair", seats=2, has_cox=False),
}


def _to_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def _to_bool(v: Any) -> Optional[bool]:
    if isinstance(v, bool):
        return v
    if isinstance(v, int) and v in (0, 1):
        return bool(v)
    if isinstance(v, str):
        return {"true": True, "yes": True, "1": True, "false": False, "no": False, "0": False}.get(v.strip().lower())
    return None


def get_boat_type(code: str) -> BoatType:
    """Look up a catalog entry by code ("8+", "4x", ...)."""
    key = str(code or "").strip()
    try:
        return BOAT_TYPES[key]
    except KeyError:
        raise UnknownBoatType(
            f"Unknown boat type {key!r}. Supported: {', '.join(BOAT_TYPES)}",
            field="boatType",
        ) from None


def parse_boat_type(raw: Any) -> BoatType:
    """
    Resolve a boat type given as a code string, a BoatType, or a mapping like
    {"value": "8+", "seats": 8, "hasCox": true, "name": "Eight"}.

    Seat count and cox flag, when supplied, must agree with the catalog.
    """
    if isinstance(raw, BoatType):
        raw = {"value": raw.code, "seats": raw.seats, "hasCox": raw.has_cox}
    if isinstance(raw, str):
        return get_boat_type(raw)
    if not isinstance(raw, dict):
        raise UnknownBoatType(f"Boat type must be a code or object, got {type(raw).__name__}", field="boatType")

    boat = get_boat_type(raw.get("value") or raw.get("code") or "")
    if "seats" in raw and raw["seats"] is not None:
        seats = _to_int(raw["seats"])
        if seats != boat.seats:
            raise UnknownBoatType(
                f"Boat type {boat.code} has {boat.seats} seat(s), request says {raw['seats']!r}",
                field="boatType.seats",
            )
    raw_cox = raw.get("hasCox", raw.get("has_cox"))
    has_cox = _to_bool(raw_cox)
    if raw_cox is not None and has_cox is None:
        raise UnknownBoatType(f"boatType.hasCox must be true or false, got {raw_cox!r}", field="boatType.hasCox")
    if has_cox is not None and has_cox != boat.has_cox:
        raise UnknownBoatType(
            f"Boat type {boat.code} {'has' if boat.has_cox else 'has no'} coxswain",
            field="boatType.hasCox",
        )
    return boat


def seat_labels(boat_type: BoatType) -> List[str]:
    """Rower labels in stored (stroke-first) order; the cox slot is not included."""
    n = boat_type.seats
    if n == 1:
        return [SINGLE]
    labels = []
    for i in range(n):
        if i == 0:
            labels.append(STROKE)
        elif i == n - 1:
            labels.append(BOW)
        else:
            labels.append(str(n - i))
    return labels


def resolve_seats(
    boat_type: BoatType,
    member_names: Sequence[str],
    cox_name: Optional[str] = None,
) -> SeatAssignment:
    """Pair every rower with its seat label; raise RosterSizeMismatch on a wrong count."""
    names = ["" if n is None else str(n).strip() for n in (member_names or [])]
    if len(names) != boat_type.seats:
        raise RosterSizeMismatch(boat_type.code, boat_type.seats, len(names))

    seats = tuple(SeatEntry(label, name) for label, name in zip(seat_labels(boat_type), names))

    cox = None
    cox_clean = (cox_name or "").strip()
    if boat_type.has_cox:
        cox = SeatEntry(COX, cox_clean)
    elif cox_clean:
        log.warning("Ignoring cox %r for coxless boat %s", cox_clean, boat_type.code)
    return SeatAssignment(seats=seats, cox=cox)
