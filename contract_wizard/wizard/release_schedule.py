"""
Release schedule engine.

A release is a cut-off at which unsold allotment inventory goes back to the
supplier. Each allocation carries an ordered list of releases; list order is
display order and is never re-sorted by date.

All list operations are pure: they take the allocation dict and return a new
release list. The caller writes the list back through the draft store.
"""

from __future__ import annotations

import copy
import logging
import math
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from .models import ReleaseType, new_release

logger = logging.getLogger(__name__)


# Industry-standard 50 / 25 / remainder cadence, penalties only after the final cut-off.
SUGGESTED_CADENCE = [
    {
        "days_before": 90,
        "release_type": "percentage",
        "release_percentage": 50,
        "penalty_applies": False,
        "notes": "1st cut-off: 90 days before arrival - no penalty",
    },
    {
        "days_before": 60,
        "release_type": "percentage",
        "release_percentage": 25,
        "penalty_applies": False,
        "notes": "2nd cut-off: 60 days before arrival - no penalty",
    },
    {
        "days_before": 30,
        "release_type": "remaining",
        "penalty_applies": True,
        "notes": "Final cut-off: 30 days before arrival - attrition penalties apply",
    },
]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _total(allocation: Dict[str, Any]) -> int:
    return allocation.get("total_quantity") or 0


def quantity_for_percentage(total_quantity: int, percentage: float) -> int:
    return int(math.floor(total_quantity * (percentage or 0) / 100))


def _parse_date(value: Any) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


class ReleaseScheduleEngine:
    def __init__(self, cadence: Optional[List[Dict[str, Any]]] = None):
        self.cadence = cadence or SUGGESTED_CADENCE

    # --- CRUD ----------------------------------------------------------------

    def _releases(self, allocation: Dict[str, Any]) -> List[Dict[str, Any]]:
        return copy.deepcopy(allocation.get("releases") or [])

    def add_release(self, allocation: Dict[str, Any]) -> List[Dict[str, Any]]:
        releases = self._releases(allocation)
        releases.append(new_release())
        return releases

    def remove_release(self, allocation: Dict[str, Any], release_id: str) -> List[Dict[str, Any]]:
        return [r for r in self._releases(allocation) if r.get("id") != release_id]

    def update_release(self, allocation: Dict[str, Any], release_id: str, field: str, value: Any) -> List[Dict[str, Any]]:
        """Set one field on a release and re-derive its linked field.

        Percentage and quantity edits keep each other in step against the
        allocation's total quantity. Switching a release to ``remaining``
        drops both, since the catch-all carries no amount of its own.
        """
        total = _total(allocation)
        releases = self._releases(allocation)
        for release in releases:
            if release.get("id") != release_id:
                continue

            release[field] = value
            if field == "release_percentage":
                release["release_quantity"] = quantity_for_percentage(total, value)
            elif field == "release_quantity":
                if total > 0:
                    release["release_percentage"] = _round_half_up((value or 0) / total * 100)
            elif field == "release_type" and value == ReleaseType.REMAINING.value:
                release.pop("release_percentage", None)
                release.pop("release_quantity", None)
            break
        else:
            logger.debug("Release %s not found on allocation %s", release_id, allocation.get("id"))
        return releases

    # --- Aggregates ----------------------------------------------------------

    def released_quantity(self, allocation: Dict[str, Any]) -> int:
        total = _total(allocation)
        released = 0
        for release in allocation.get("releases") or []:
            kind = release.get("release_type")
            if kind == ReleaseType.QUANTITY.value:
                released += release.get("release_quantity") or 0
            elif kind == ReleaseType.PERCENTAGE.value:
                released += quantity_for_percentage(total, release.get("release_percentage") or 0)
            # "remaining" is the terminal catch-all and is never counted
        return released

    def remaining_quantity(self, allocation: Dict[str, Any]) -> int:
        return _total(allocation) - self.released_quantity(allocation)

    def released_percent(self, allocation: Dict[str, Any]) -> int:
        total = _total(allocation)
        if total <= 0:
            return 0
        return _round_half_up(self.released_quantity(allocation) / total * 100)

    def summary(self, allocation: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "total_quantity": _total(allocation),
            "released_quantity": self.released_quantity(allocation),
            "remaining_quantity": self.remaining_quantity(allocation),
            "released_percent": self.released_percent(allocation),
            "warnings": self.warnings(allocation),
        }

    def warnings(self, allocation: Dict[str, Any]) -> List[str]:
        """Advisory checks. None of these block the wizard."""
        releases = allocation.get("releases") or []
        if not releases:
            return []

        out: List[str] = []
        if not any(r.get("release_type") == ReleaseType.REMAINING.value for r in releases):
            out.append("No 'remaining' release: final disposition of unreleased inventory is unspecified")

        total = _total(allocation)
        released = self.released_quantity(allocation)
        if released > total:
            out.append(f"Releases total {released} units but the allocation only holds {total}")

        valid_to = _parse_date(allocation.get("valid_to"))
        for index, release in enumerate(releases, start=1):
            release_date = _parse_date(release.get("release_date"))
            if release_date is None:
                out.append(f"Release #{index} has no release date")
            elif valid_to and release_date > valid_to:
                out.append(f"Release #{index} is dated after the allocation ends ({allocation.get('valid_to')})")
        return out

    # --- Suggestions ---------------------------------------------------------

    def suggest(self, allocation: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Replace the release list with the suggested cascading schedule.

        Requires valid_from and a non-zero total_quantity; otherwise the
        existing list is returned unchanged.
        """
        start = _parse_date(allocation.get("valid_from"))
        total = _total(allocation)
        if start is None or not total:
            logger.debug("Skipping release suggestion for %s: missing valid_from or quantity", allocation.get("id"))
            return self._releases(allocation)

        suggested = []
        for step in self.cadence:
            release = {
                "id": new_release()["id"],
                "release_date": (start - timedelta(days=step["days_before"])).isoformat(),
                "release_type": step["release_type"],
                "penalty_applies": bool(step.get("penalty_applies", False)),
                "notes": step.get("notes", ""),
            }
            if step["release_type"] == ReleaseType.PERCENTAGE.value:
                release["release_percentage"] = step["release_percentage"]
                release["release_quantity"] = quantity_for_percentage(total, step["release_percentage"])
            suggested.append(release)
        return suggested
