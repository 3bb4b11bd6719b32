"""
Mock Extraction Client.

Purpose:
- Stands in for the document extraction service during development/testing
- Does NOT make any network calls or read the uploaded file
- Returns a fixed hotel room-block contract payload

Swap:
Replace with clients/real_http/extraction.py once EXTRACTION_API_URL is set.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, Optional

from contract_wizard.integrations.contracts.interfaces import (
    ExtractionClient,
    ExtractionError,
    ExtractionResult,
    UploadFile,
)

SAMPLE_EXTRACTED: Dict[str, Any] = {
    "supplier_name": "Grand Hotel Dubai",
    "contract_number": "GH-DXB-2025-001",
    "contract_name": "Dubai Airshow 2025",
    "contract_type": "allocation",
    "contract_dates": {
        "valid_from": "2025-11-14",
        "valid_to": "2025-11-21",
        "signature_deadline": "2025-06-30",
    },
    "event_dates": {"start_date": "2025-11-16", "end_date": "2025-11-20"},
    "currency": "AED",
    "total_value": 250000,
    "payment_terms": "30 days net",
    "cancellation_policy": "48 hours notice required",
    "attrition_policy": "Up to 20% attrition without penalty until the final cut-off",
    "commission_rate": 10,
    "room_requirements": [
        {
            "room_type": "Deluxe Room",
            "base_rate": 1200,
            "surcharge": 150,
            "total_rate": 1350,
            "quantity": 40,
            "nights": 4,
            "occupancy": "Double",
            "includes": "Breakfast and Wi-Fi",
        }
    ],
    "payment_schedule": [
        {"payment_number": 1, "due_date": "2025-07-01", "amount": 75000, "percentage": 30, "description": "Deposit"},
        {"payment_number": 2, "due_date": "2025-10-01", "amount": 175000, "percentage": 70, "description": "Balance"},
    ],
    "release_schedule": [
        {"release_date": "2025-08-18", "release_percentage": 25, "penalty_applies": False, "notes": "First release"},
    ],
    "special_terms": ["Complimentary upgrade for every 20 rooms booked"],
}


class MockExtractionClient(ExtractionClient):
    def __init__(self, extracted: Optional[Dict[str, Any]] = None, fail_with: Optional[str] = None) -> None:
        self.extracted = extracted if extracted is not None else SAMPLE_EXTRACTED
        self.fail_with = fail_with
        self.calls = 0

    async def extract(self, file: UploadFile) -> ExtractionResult:
        self.calls += 1
        if self.fail_with:
            raise ExtractionError(self.fail_with)

        name = file[0] if isinstance(file, tuple) else Path(file).name
        return ExtractionResult(
            success=True,
            confidence=85,
            extracted=copy.deepcopy(self.extracted),
            warnings=[],
            document_url=f"/uploads/contracts/{name}",
            document_name=name,
        )
