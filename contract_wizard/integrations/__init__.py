"""
Integrations layer.
This package contains all code used to communicate with external systems:
- Document extraction service (contract PDF -> structured payload)
- Contract creation API (persists the finished draft)

Key rule:
- Wizard code MUST NOT call external APIs directly.
- The session calls integration clients (under contract_wizard/integrations/clients).
- We use MOCK clients during development and swap to REAL_HTTP clients when APIs are configured.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (contract_wizard/factory.py).
"""

from .contracts.interfaces import (
    ContractCreated,
    ContractsClient,
    ContractSubmissionError,
    ExtractionClient,
    ExtractionError,
    ExtractionResult,
)

__all__ = [
    "ContractCreated",
    "ContractsClient",
    "ContractSubmissionError",
    "ExtractionClient",
    "ExtractionError",
    "ExtractionResult",
]
