"""
Real document extraction HTTP client.

Uploads the contract file as multipart form data and validates the
response shape. Used when EXTRACTION_API_URL is configured.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional, Tuple

import httpx
from pydantic import ValidationError

from contract_wizard.integrations.clients.real_http.contracts import json_or_empty
from contract_wizard.integrations.contracts.interfaces import (
    ExtractionClient,
    ExtractionError,
    ExtractionResult,
    UploadFile,
)

logger = logging.getLogger(__name__)


def _read_upload(file: UploadFile) -> Tuple[str, bytes]:
    if isinstance(file, tuple):
        return file
    path = Path(file)
    return path.name, path.read_bytes()


class RealExtractionClient(ExtractionClient):
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        extract_path: str = "/contracts/extract",
        timeout_seconds: float = 60.0,
    ) -> None:
        self.base_url = (base_url or os.getenv("EXTRACTION_API_URL", "")).rstrip("/")
        self.api_key = api_key or os.getenv("EXTRACTION_API_KEY", "")
        self.extract_path = extract_path
        self.timeout_seconds = timeout_seconds

    async def extract(self, file: UploadFile) -> ExtractionResult:
        if not self.base_url:
            raise ValueError("EXTRACTION_API_URL is not configured.")

        name, content = _read_upload(file)
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        url = f"{self.base_url}{self.extract_path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(url, files={"file": (name, content)}, headers=headers)
        except httpx.HTTPError as e:
            raise ExtractionError(f"Extraction request failed: {e}") from e

        data = json_or_empty(response)
        if response.is_error:
            message = data.get("error") or data.get("details") or f"Server error ({response.status_code})"
            raise ExtractionError(message)

        try:
            result = ExtractionResult(**data)
        except ValidationError as e:
            logger.error("Extraction response validation failed: %s", e)
            raise ExtractionError("Extraction service returned an invalid payload") from e

        logger.info("Extracted %s (confidence %s)", result.document_name or name, result.confidence)
        return result
