from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ExtractionError(RuntimeError):
    """The extraction service failed or returned something unusable."""


class ContractSubmissionError(RuntimeError):
    """Contract creation API rejected the draft.

    `message` is the API's `error` text, surfaced to the user verbatim.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

class ExtractionResult(BaseModel):
    success: bool = False
    confidence: float = 0
    extracted: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)
    document_url: str = ""
    document_name: str = ""


class ContractCreated(BaseModel):
    contract_id: str
    raw: Dict[str, Any] = Field(default_factory=dict)


# A file handed to the extraction service: a path, or (filename, bytes).
UploadFile = Union[str, Tuple[str, bytes]]


# ---------------------------------------------------------------------------
# Abstract client interfaces
# ---------------------------------------------------------------------------

class ExtractionClient(ABC):
    """Document extraction service: contract file in, structured payload out."""

    @abstractmethod
    async def extract(self, file: UploadFile) -> ExtractionResult:
        """Extract contract data from a document. Raises ExtractionError."""


class ContractsClient(ABC):
    """Contract persistence API."""

    @abstractmethod
    async def create_contract(self, draft: Dict[str, Any]) -> ContractCreated:
        """POST the full draft. Raises ContractSubmissionError on rejection."""
