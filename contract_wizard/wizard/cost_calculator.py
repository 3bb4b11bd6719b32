"""Bidirectional total cost / cost-per-unit derivation for one allocation."""

from __future__ import annotations

from typing import Any, Dict

COST_FIELDS = ("total_cost", "cost_per_unit")


def parse_number(value: Any) -> float:
    """Parse form input to a number, falling back to 0 like the cost inputs do."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        return float(str(value).strip())
    except ValueError:
        return 0


def _quantity(allocation: Dict[str, Any]) -> int:
    return allocation.get("total_quantity") or 0


class AllocationCostCalculator:
    """Keeps total_cost and cost_per_unit in step when either one is edited.

    Derivation only fires for the edited cost field. A later change to
    total_quantity does not recompute either side.
    """

    def apply_cost_edit(self, allocation: Dict[str, Any], field: str, value: float) -> Dict[str, Any]:
        if field not in COST_FIELDS:
            raise ValueError(f"Not a cost field: {field}")

        allocation[field] = value
        quantity = _quantity(allocation)
        if quantity <= 0:
            return allocation

        if field == "total_cost":
            allocation["cost_per_unit"] = value / quantity
        else:
            allocation["total_cost"] = value * quantity
        return allocation

    def display_cost_per_unit(self, allocation: Dict[str, Any]) -> float:
        explicit = allocation.get("cost_per_unit")
        if explicit:
            return explicit
        quantity = _quantity(allocation)
        if quantity <= 0:
            return 0
        return (allocation.get("total_cost") or 0) / quantity
