"""Shared validation for wizard step advancement and contract submission.

Step payloads are the draft sections themselves (plain dicts). Blocking checks
raise `FormValidationError` with structured `field_errors` so a caller can
highlight each field. Date and schedule invariants are only advisory and come
back as warning strings from `draft_warnings`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

from .release_schedule import ReleaseScheduleEngine


@dataclass
class FormValidationError(Exception):
    """Exception raised for wizard validation failures.

    Attributes:
        field_errors: mapping of field name -> human-readable error message.
        message: optional top-level message.
    """

    field_errors: Dict[str, str]
    message: str = "Validation failed"

    def __str__(self) -> str:  # pragma: no cover
        return self.message


def _strip(v: Any) -> str:
    return "" if v is None else str(v).strip()


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def require_str(payload: Dict[str, Any], field: str, errors: Dict[str, str], *, label: Optional[str] = None) -> str:
    value = _strip(payload.get(field))
    if not value:
        add_error(errors, field, f"{label or field} is required")
    return value


def parse_iso_date(value: Any) -> Optional[date]:
    s = _strip(value)
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def validate_date_iso(payload: Dict[str, Any], field: str, errors: Dict[str, str], *, label: Optional[str] = None) -> str:
    raw = require_str(payload, field, errors, label=label)
    if raw and parse_iso_date(raw) is None:
        add_error(errors, field, f"{label or field} must be a valid date (YYYY-MM-DD)")
    return raw


def raise_if_errors(errors: Dict[str, str], message: str = "Please correct the highlighted fields") -> None:
    if errors:
        raise FormValidationError(field_errors=errors, message=message)


# --- Step gates ----------------------------------------------------------------


def validate_contract_basics(contract: Optional[Dict[str, Any]]) -> None:
    contract = contract or {}
    errors: Dict[str, str] = {}
    require_str(contract, "supplier_id", errors, label="Supplier")
    require_str(contract, "contract_number", errors, label="Contract number")
    require_str(contract, "contract_name", errors, label="Contract name")
    validate_date_iso(contract, "valid_from", errors, label="Valid from date")
    validate_date_iso(contract, "valid_to", errors, label="Valid to date")
    raise_if_errors(errors)


def validate_allocations(allocations: Optional[List[Dict[str, Any]]]) -> None:
    if not allocations:
        raise_if_errors({"allocations": "Please add at least one allocation"})


def validate_submission(draft: Dict[str, Any]) -> None:
    """Minimum the contract creation API accepts."""
    contract = draft.get("contract") or {}
    errors: Dict[str, str] = {}
    require_str(contract, "supplier_id", errors, label="Supplier")
    require_str(contract, "contract_number", errors, label="Contract number")
    require_str(contract, "contract_name", errors, label="Contract name")
    raise_if_errors(errors, message="Missing required contract fields")


# --- Advisory invariants -------------------------------------------------------


def contract_warnings(contract: Optional[Dict[str, Any]]) -> List[str]:
    contract = contract or {}
    start = parse_iso_date(contract.get("valid_from"))
    end = parse_iso_date(contract.get("valid_to"))
    if start and end and end < start:
        return ["Contract valid_to is before valid_from"]
    return []


def allocation_warnings(allocation: Dict[str, Any], contract: Optional[Dict[str, Any]] = None) -> List[str]:
    contract = contract or {}
    name = allocation.get("allocation_name") or allocation.get("id")
    out: List[str] = []

    start = parse_iso_date(allocation.get("valid_from"))
    end = parse_iso_date(allocation.get("valid_to"))
    if start and end and end < start:
        out.append(f"Allocation '{name}' ends before it starts")

    contract_start = parse_iso_date(contract.get("valid_from"))
    contract_end = parse_iso_date(contract.get("valid_to"))
    if start and contract_start and start < contract_start:
        out.append(f"Allocation '{name}' starts before the contract is valid")
    if end and contract_end and end > contract_end:
        out.append(f"Allocation '{name}' ends after the contract expires")
    return out


def draft_warnings(draft: Dict[str, Any], engine: Optional[ReleaseScheduleEngine] = None) -> List[str]:
    """Every non-blocking issue in the draft, for display beside the steps."""
    engine = engine or ReleaseScheduleEngine()
    contract = draft.get("contract")
    out = contract_warnings(contract)
    for allocation in draft.get("allocations") or []:
        out.extend(allocation_warnings(allocation, contract))
        name = allocation.get("allocation_name") or allocation.get("id")
        out.extend(f"{name}: {w}" for w in engine.warnings(allocation))
    return out
