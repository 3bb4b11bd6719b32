"""
Reconcile an extraction payload into the wizard draft.

The merge is diff-based: a field is proposed only when the payload has a
value for it and that value differs from what the draft already holds.
Running the same payload twice therefore yields nothing the second time.

The payload is schema-free. Every lookup tolerates missing keys and wrong
types so a partial payload simply merges fewer fields.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

from .models import AllocationType, PaymentStatus, ReleaseType, generate_id
from .release_schedule import quantity_for_percentage

logger = logging.getLogger(__name__)


# Straight scalar copies from the payload into the contract section.
# supplier_name is left out on purpose: suppliers are picked from the catalogue.
SCALAR_FIELDS = [
    "supplier_id",
    "contract_number",
    "contract_name",
    "contract_type",
    "currency",
    "total_value",
    "payment_terms",
    "billing_instructions",
    "cancellation_policy",
    "attrition_policy",
    "service_charge",
    "tax_rate",
    "commission_rate",
]

# Fields read from extracted["contract_dates"][...]
DATE_FIELDS = ["valid_from", "valid_to", "signature_deadline"]


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _is_defined(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    if isinstance(value, (list, dict)) and not value:
        return False
    return True


def _num(value: Any, default: float = 0) -> float:
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return value if isinstance(value, (int, float)) else number


def payments_from_schedule(schedule: List[Any]) -> List[Dict[str, Any]]:
    payments = []
    for entry in schedule:
        entry = _as_dict(entry)
        if not entry:
            continue
        number = entry.get("payment_number")
        payments.append(
            {
                "id": f"payment-{number}",
                "payment_number": number,
                "due_date": entry.get("due_date") or "",
                "amount_due": entry.get("amount"),
                "percentage": entry.get("percentage"),
                "description": entry.get("description"),
                "status": PaymentStatus.PENDING.value,
            }
        )
    return payments


class ExtractionMerger:
    def candidates(self, extracted: Dict[str, Any]) -> Dict[str, Any]:
        """Every value the payload would contribute, before diffing."""
        extracted = _as_dict(extracted)
        out: Dict[str, Any] = {}

        for field in SCALAR_FIELDS:
            out[field] = extracted.get(field)

        dates = _as_dict(extracted.get("contract_dates"))
        for field in DATE_FIELDS:
            value = dates.get(field)
            out[field] = value if value is not None else extracted.get(field)

        schedule = _as_list(extracted.get("payment_schedule"))
        out["payments"] = payments_from_schedule(schedule) if schedule else None

        terms = [t for t in _as_list(extracted.get("special_terms")) if isinstance(t, str)]
        out["special_terms"] = terms or None
        return out

    def merge(self, current: Optional[Dict[str, Any]], extracted: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Return the fields to write into the draft, or None when nothing changed.

        `current` is the contract section with the draft's payment list under
        a "payments" key. Values are compared by equality only: a field the
        user changed after an earlier pass is overwritten again if the payload
        disagrees with it.
        """
        current = current or {}
        updates: Dict[str, Any] = {}
        for field, candidate in self.candidates(extracted).items():
            if not _is_defined(candidate):
                continue
            if current.get(field) != candidate:
                updates[field] = candidate

        if not updates:
            logger.debug("Extraction merge produced no updates")
            return None
        logger.info("Extraction merge updating fields: %s", sorted(updates))
        return updates

    # --- Sibling population steps --------------------------------------------

    def _room_dates(self, extracted: Dict[str, Any]) -> Dict[str, str]:
        event = _as_dict(extracted.get("event_dates"))
        contract = _as_dict(extracted.get("contract_dates"))
        return {
            "valid_from": event.get("start_date") or contract.get("valid_from") or "",
            "valid_to": event.get("end_date") or contract.get("valid_to") or "",
        }

    def _room_notes(self, room: Dict[str, Any], currency: Any) -> str:
        surcharge = _num(room.get("surcharge"))
        note = f"Base rate: {currency} {room.get('base_rate')}"
        if surcharge > 0:
            note += f" + {room.get('surcharge')} surcharge"
        return f"{note}. {room.get('includes') or ''}".strip()

    def _room_label(self, room: Dict[str, Any], extracted: Dict[str, Any]) -> str:
        return f"{room.get('room_type') or 'Room'} - {extracted.get('contract_name') or 'Event'}"

    def build_allocations(self, extracted: Dict[str, Any]) -> List[Dict[str, Any]]:
        """One allotment per extracted room requirement."""
        extracted = _as_dict(extracted)
        rooms = [r for r in _as_list(extracted.get("room_requirements")) if isinstance(r, dict)]
        dates = self._room_dates(extracted)
        schedule = [r for r in _as_list(extracted.get("release_schedule")) if isinstance(r, dict)]

        allocations = []
        for room in rooms:
            quantity = int(_num(room.get("quantity")))
            nights = int(_num(room.get("nights"))) or None
            total_rate = _num(room.get("total_rate"))
            allocations.append(
                {
                    "id": generate_id("allocation"),
                    "product_id": "",
                    "allocation_name": self._room_label(room, extracted),
                    "allocation_type": AllocationType.ALLOTMENT.value,
                    "total_quantity": quantity,
                    "valid_from": dates["valid_from"],
                    "valid_to": dates["valid_to"],
                    "total_cost": total_rate * quantity * (nights or 1),
                    "cost_per_unit": total_rate,
                    "min_nights": nights,
                    "max_nights": nights,
                    "notes": self._room_notes(room, extracted.get("currency")),
                    "releases": [self._release_from_schedule(entry, quantity) for entry in schedule],
                }
            )
        return allocations

    def _release_from_schedule(self, entry: Dict[str, Any], total_quantity: int) -> Dict[str, Any]:
        release = {
            "id": generate_id("release"),
            "release_date": entry.get("release_date") or "",
            "release_type": ReleaseType.PERCENTAGE.value,
            "penalty_applies": bool(entry.get("penalty_applies", False)),
            "notes": entry.get("notes") or "",
        }
        if entry.get("release_percentage") is not None:
            percentage = _num(entry.get("release_percentage"))
            release["release_percentage"] = percentage
            release["release_quantity"] = quantity_for_percentage(total_quantity, percentage)
        return release

    def build_rates(self, extracted: Dict[str, Any]) -> List[Dict[str, Any]]:
        """One per-night rate per extracted room requirement."""
        extracted = _as_dict(extracted)
        rooms = [r for r in _as_list(extracted.get("room_requirements")) if isinstance(r, dict)]
        dates = self._room_dates(extracted)
        rates = []
        for room in rooms:
            nights = int(_num(room.get("nights"))) or None
            rates.append(
                {
                    "id": generate_id("rate"),
                    "product_id": "",
                    "rate_name": self._room_label(room, extracted),
                    "rate_type": "per_night",
                    "base_rate": _num(room.get("base_rate")),
                    "surcharge": _num(room.get("surcharge")),
                    "total_rate": _num(room.get("total_rate")),
                    "currency": extracted.get("currency") or "USD",
                    "valid_from": dates["valid_from"],
                    "valid_to": dates["valid_to"],
                    "min_nights": nights,
                    "max_nights": nights,
                    "includes": room.get("includes") or "",
                    "notes": self._room_notes(room, extracted.get("currency")),
                    "is_active": True,
                }
            )
        return rates
