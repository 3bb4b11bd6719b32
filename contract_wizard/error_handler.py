"""Error handling helpers for the contract wizard."""
from typing import Any, Dict
import logging

from contract_wizard.integrations.contracts.interfaces import ContractSubmissionError, ExtractionError

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in contract wizard: %s", exc, exc_info=True)
        return {
            "message": "An internal error occurred while processing your request. Please try again later.",
            "follow_up": False,
            "fallback": True,
            "metadata": {"error": str(exc), "context": context or {}},
        }

    def handle_extraction_failure(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.warning("Contract extraction failed: %s", exc)
        detail = str(exc) if isinstance(exc, ExtractionError) else "Failed to extract contract data"
        return {
            "message": f"{detail}. You can retry the upload or enter the contract details manually.",
            "follow_up": True,
            "fallback": True,
            "metadata": {"error": str(exc), "context": context or {}},
        }

    def handle_submission_failure(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        if isinstance(exc, ContractSubmissionError):
            logger.warning("Contract creation rejected: %s", exc.message)
            return {
                "message": exc.message,
                "follow_up": True,
                "fallback": False,
                "metadata": {"error": exc.message, "status_code": exc.status_code, "context": context or {}},
            }
        return self.handle_exception(exc, context)
