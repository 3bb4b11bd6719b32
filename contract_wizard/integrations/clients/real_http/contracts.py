"""
Real contract creation HTTP client.

Used when CONTRACTS_API_URL is configured.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import httpx

from contract_wizard.integrations.contracts.interfaces import (
    ContractCreated,
    ContractsClient,
    ContractSubmissionError,
)

logger = logging.getLogger(__name__)


class RealContractsClient(ContractsClient):
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        create_path: str = "/contracts",
        timeout_seconds: float = 20.0,
    ) -> None:
        self.base_url = (base_url or os.getenv("CONTRACTS_API_URL", "")).rstrip("/")
        self.api_key = api_key or os.getenv("CONTRACTS_API_KEY", "")
        self.create_path = create_path
        self.timeout_seconds = timeout_seconds

    async def create_contract(self, draft: Dict[str, Any]) -> ContractCreated:
        if not self.base_url:
            raise ValueError("CONTRACTS_API_URL is not configured.")

        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        url = f"{self.base_url}{self.create_path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(url, json=draft, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Contract creation request failed: %s", e)
            raise ContractSubmissionError("Failed to create contract") from e

        data = json_or_empty(response)
        if response.is_error:
            message = data.get("error") or "Failed to create contract"
            logger.error("Contract creation failed (%s): %s", response.status_code, message)
            raise ContractSubmissionError(message, status_code=response.status_code, payload=data)

        contract = data.get("contract") if isinstance(data.get("contract"), dict) else data
        contract_id = contract.get("id") or data.get("contract_id") or ""
        logger.info("Contract created: %s", contract_id)
        return ContractCreated(contract_id=str(contract_id), raw=data)


def json_or_empty(response: httpx.Response) -> Dict[str, Any]:
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
