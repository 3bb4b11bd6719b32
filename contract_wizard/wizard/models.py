"""
Draft data model for the contract wizard.

Drafts are plain JSON-shaped dictionaries: the same shape is held in the
store, serialized by auto-save and POSTed to the contract creation API.
This module only carries the enumerations, section names and blank-record
factories.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Dict


class AllocationType(str, Enum):
    ALLOTMENT = "allotment"
    BATCH = "batch"
    FREE_SELL = "free_sell"
    ON_REQUEST = "on_request"


class ReleaseType(str, Enum):
    PERCENTAGE = "percentage"
    QUANTITY = "quantity"
    REMAINING = "remaining"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    PARTIAL = "partial"
    OVERDUE = "overdue"
    WAIVED = "waived"


# Top-level draft sections. "contract" holds a dict, the others hold lists.
CONTRACT_SECTION = "contract"
LIST_SECTIONS = ("allocations", "rates", "payments")
SECTIONS = (CONTRACT_SECTION,) + LIST_SECTIONS


def generate_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def empty_draft() -> Dict[str, Any]:
    return {"contract": None, "allocations": [], "rates": [], "payments": []}


def new_allocation() -> Dict[str, Any]:
    """Blank allocation as added from the allocations step."""
    return {
        "id": generate_id("allocation"),
        "product_id": "",
        "allocation_name": "",
        "allocation_type": AllocationType.ALLOTMENT.value,
        "total_quantity": 0,
        "valid_from": "",
        "valid_to": "",
        "total_cost": 0,
        "cost_per_unit": 0,
        "min_nights": None,
        "max_nights": None,
        "notes": "",
        "releases": [],
    }


def new_release() -> Dict[str, Any]:
    return {
        "id": generate_id("release"),
        "release_date": "",
        "release_type": ReleaseType.PERCENTAGE.value,
        "release_percentage": 0,
        "penalty_applies": False,
        "notes": "",
    }


def new_payment(payment_number: int) -> Dict[str, Any]:
    return {
        "id": generate_id("payment"),
        "payment_number": payment_number,
        "due_date": "",
        "amount_due": 0,
        "description": "",
        "status": PaymentStatus.PENDING.value,
    }
