"""
Draft store for one contract wizard session.

Holds the full draft (contract fields, allocations, rates, payments) and a
dirty flag. Every mutation funnels through `update_section`, so dirty
tracking, revision counting and change notification cannot be bypassed.
Readers only ever get deep copies.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .cost_calculator import COST_FIELDS, AllocationCostCalculator
from .models import CONTRACT_SECTION, SECTIONS, empty_draft, new_allocation, new_payment
from .release_schedule import ReleaseScheduleEngine

logger = logging.getLogger(__name__)

Listener = Callable[[str, "WizardDraftStore"], None]


class WizardDraftStore:
    def __init__(
        self,
        calculator: Optional[AllocationCostCalculator] = None,
        release_engine: Optional[ReleaseScheduleEngine] = None,
    ) -> None:
        self._draft: Dict[str, Any] = empty_draft()
        self.is_dirty = False
        self.revision = 0
        # (section, field) -> revision of last change; field is None for list sections
        self._touched: Dict[Tuple[str, Optional[str]], int] = {}
        self._listeners: List[Listener] = []
        self.calculator = calculator or AllocationCostCalculator()
        self.releases = release_engine or ReleaseScheduleEngine()

    # --- Read side -----------------------------------------------------------

    @property
    def draft(self) -> Dict[str, Any]:
        return copy.deepcopy(self._draft)

    def section(self, name: str) -> Any:
        self._check_section(name)
        return copy.deepcopy(self._draft[name])

    def allocation(self, allocation_id: str) -> Optional[Dict[str, Any]]:
        for allocation in self._draft["allocations"]:
            if allocation.get("id") == allocation_id:
                return copy.deepcopy(allocation)
        return None

    def last_touched(self, section: str, field: Optional[str] = None) -> int:
        return self._touched.get((section, field), 0)

    # --- Write side ----------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update_section(self, section: str, data: Any) -> None:
        """Replace one draft section wholesale and mark the draft dirty."""
        self._check_section(section)
        previous = self._draft[section]
        self._draft[section] = copy.deepcopy(data)
        self.revision += 1
        self._record_touches(section, previous, self._draft[section])
        self.is_dirty = True
        logger.debug("Draft section %s updated (revision %s)", section, self.revision)
        for listener in list(self._listeners):
            listener(section, self)

    def reset(self) -> None:
        self._draft = empty_draft()
        self.is_dirty = False
        self._touched.clear()
        logger.debug("Draft reset")

    def mark_saved(self) -> None:
        self.is_dirty = False

    def _check_section(self, section: str) -> None:
        if section not in SECTIONS:
            raise ValueError(f"Unknown draft section: {section}")

    def _record_touches(self, section: str, previous: Any, current: Any) -> None:
        if section != CONTRACT_SECTION:
            self._touched[(section, None)] = self.revision
            return
        before = previous or {}
        after = current or {}
        for key in set(before) | set(after):
            if before.get(key) != after.get(key):
                self._touched[(section, key)] = self.revision

    # --- Contract helpers ----------------------------------------------------

    def update_contract_field(self, field: str, value: Any) -> None:
        contract = dict(self._draft[CONTRACT_SECTION] or {})
        contract[field] = value
        self.update_section(CONTRACT_SECTION, contract)

    # --- Allocation helpers --------------------------------------------------

    def _allocations(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._draft["allocations"])

    def _replace_allocation(self, allocation_id: str, fn: Callable[[Dict[str, Any]], None]) -> None:
        allocations = self._allocations()
        for allocation in allocations:
            if allocation.get("id") == allocation_id:
                fn(allocation)
                break
        else:
            raise KeyError(f"Allocation not found: {allocation_id}")
        self.update_section("allocations", allocations)

    def add_allocation(self) -> Dict[str, Any]:
        allocation = new_allocation()
        self.update_section("allocations", self._allocations() + [allocation])
        return copy.deepcopy(allocation)

    def remove_allocation(self, allocation_id: str) -> None:
        self.update_section(
            "allocations",
            [a for a in self._allocations() if a.get("id") != allocation_id],
        )

    def update_allocation(self, allocation_id: str, field: str, value: Any) -> None:
        """Set an allocation field; cost fields re-derive their counterpart."""

        def apply(allocation: Dict[str, Any]) -> None:
            if field in COST_FIELDS:
                self.calculator.apply_cost_edit(allocation, field, value)
            else:
                allocation[field] = value

        self._replace_allocation(allocation_id, apply)

    def set_releases(self, allocation_id: str, releases: List[Dict[str, Any]]) -> None:
        def apply(allocation: Dict[str, Any]) -> None:
            allocation["releases"] = releases

        self._replace_allocation(allocation_id, apply)

    def _require_allocation(self, allocation_id: str) -> Dict[str, Any]:
        allocation = self.allocation(allocation_id)
        if allocation is None:
            raise KeyError(f"Allocation not found: {allocation_id}")
        return allocation

    def add_release(self, allocation_id: str) -> List[Dict[str, Any]]:
        releases = self.releases.add_release(self._require_allocation(allocation_id))
        self.set_releases(allocation_id, releases)
        return releases

    def remove_release(self, allocation_id: str, release_id: str) -> List[Dict[str, Any]]:
        releases = self.releases.remove_release(self._require_allocation(allocation_id), release_id)
        self.set_releases(allocation_id, releases)
        return releases

    def update_release(self, allocation_id: str, release_id: str, field: str, value: Any) -> List[Dict[str, Any]]:
        releases = self.releases.update_release(self._require_allocation(allocation_id), release_id, field, value)
        self.set_releases(allocation_id, releases)
        return releases

    def suggest_releases(self, allocation_id: str) -> List[Dict[str, Any]]:
        allocation = self._require_allocation(allocation_id)
        releases = self.releases.suggest(allocation)
        if releases != (allocation.get("releases") or []):
            self.set_releases(allocation_id, releases)
        return releases

    # --- Payment helpers -----------------------------------------------------

    def add_payment(self) -> Dict[str, Any]:
        payments = copy.deepcopy(self._draft["payments"])
        payment = new_payment(len(payments) + 1)
        payments.append(payment)
        self.update_section("payments", payments)
        return copy.deepcopy(payment)

    def update_payment(self, payment_id: str, field: str, value: Any) -> None:
        payments = [
            dict(p, **{field: value}) if p.get("id") == payment_id else p
            for p in copy.deepcopy(self._draft["payments"])
        ]
        self.update_section("payments", payments)

    def remove_payment(self, payment_id: str) -> None:
        self.update_section(
            "payments",
            [p for p in copy.deepcopy(self._draft["payments"]) if p.get("id") != payment_id],
        )

    def payments_total(self) -> float:
        return sum((p.get("amount_due") or 0) for p in self._draft["payments"])
