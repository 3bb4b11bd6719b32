"""
Mock Contracts Client.

Keeps created contracts in memory and applies the same required-field check
as the contract creation API, answering with its error text on rejection.
"""

from __future__ import annotations

import copy
import uuid
from typing import Any, Dict, List

from contract_wizard.integrations.contracts.interfaces import (
    ContractCreated,
    ContractsClient,
    ContractSubmissionError,
)


class MockContractsClient(ContractsClient):
    def __init__(self) -> None:
        self.contracts: List[Dict[str, Any]] = []

    async def create_contract(self, draft: Dict[str, Any]) -> ContractCreated:
        contract = draft.get("contract") or {}
        if not (contract.get("supplier_id") and contract.get("contract_number") and contract.get("contract_name")):
            raise ContractSubmissionError(
                "Missing required contract fields",
                status_code=400,
                payload={"error": "Missing required contract fields"},
            )

        contract_id = str(uuid.uuid4())
        self.contracts.append({"id": contract_id, **copy.deepcopy(draft)})
        return ContractCreated(contract_id=contract_id, raw={"success": True, "contract": {"id": contract_id}})
