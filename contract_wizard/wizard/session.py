"""
Contract wizard session.

Flow: Upload & extract → Contract basics → Allocations & release schedule →
Rates (optional) → Submit.

One session owns one draft store and one auto-save scheduler. Both are torn
down by `close()`; nothing is shared between sessions.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from contract_wizard.error_handler import ErrorHandler
from contract_wizard.integrations.contracts.interfaces import (
    ContractsClient,
    ContractSubmissionError,
    ExtractionClient,
    ExtractionError,
    ExtractionResult,
    UploadFile,
)
from contract_wizard.utils.config_loader import WizardConfig

from .autosave import AutoSaveScheduler, SaveSink
from .draft_store import WizardDraftStore
from .extraction_merger import ExtractionMerger
from .release_schedule import ReleaseScheduleEngine
from .validation import draft_warnings, validate_allocations, validate_contract_basics, validate_submission

logger = logging.getLogger(__name__)

ConfirmDiscard = Callable[[str], bool]

UNSAVED_CHANGES_PROMPT = "You have unsaved changes. Are you sure you want to navigate away?"


class ContractWizardSession:
    STEPS = [
        "upload",
        "contract_basics",
        "allocations",
        "rates",
    ]

    def __init__(
        self,
        extraction_client: ExtractionClient,
        contracts_client: ContractsClient,
        config: Optional[WizardConfig] = None,
        save_sink: Optional[SaveSink] = None,
        confirm: Optional[ConfirmDiscard] = None,
        stale_guard: bool = False,
    ) -> None:
        self.config = config or WizardConfig()
        self.extraction_client = extraction_client
        self.contracts_client = contracts_client
        self.confirm = confirm or (lambda prompt: True)
        self.stale_guard = stale_guard
        self.errors = ErrorHandler()

        self.releases = ReleaseScheduleEngine(cadence=self.config.release_cadence())
        self.store = WizardDraftStore(release_engine=self.releases)
        self.merger = ExtractionMerger()
        self.autosave = AutoSaveScheduler(
            self.store,
            save=save_sink,
            delay_seconds=self.config.autosave.delay_seconds,
            version=self.config.autosave.version,
        )
        self.current_step = 0
        self.extraction: Optional[ExtractionResult] = None

    @property
    def has_unsaved_changes(self) -> bool:
        return self.store.is_dirty

    @property
    def step_name(self) -> str:
        return self.STEPS[self.current_step]

    # --- Navigation ----------------------------------------------------------

    def _set_step(self, step: int) -> None:
        self.autosave.cancel()
        self.current_step = step
        self.autosave.current_step = step
        logger.debug("Wizard moved to step %s (%s)", step, self.step_name)

    def _validate_step(self, step: int) -> None:
        draft = self.store.draft
        if self.STEPS[step] == "contract_basics":
            validate_contract_basics(draft["contract"])
        elif self.STEPS[step] == "allocations":
            validate_allocations(draft["allocations"])

    def next_step(self) -> int:
        """Advance one step. Raises FormValidationError if the current step is incomplete."""
        self._validate_step(self.current_step)
        if self.current_step < len(self.STEPS) - 1:
            self._set_step(self.current_step + 1)
        return self.current_step

    def previous_step(self) -> int:
        if self.current_step > 0:
            self._set_step(self.current_step - 1)
        return self.current_step

    def go_to_step(self, step: int) -> bool:
        """Jump to any step; unsaved changes must be confirmed first."""
        if not 0 <= step < len(self.STEPS):
            raise ValueError(f"Invalid step: {step}")
        if self.has_unsaved_changes and not self.confirm(UNSAVED_CHANGES_PROMPT):
            return False
        self._set_step(step)
        return True

    # --- Extraction ----------------------------------------------------------

    async def extract(self, file: UploadFile) -> Dict[str, Any]:
        """Run the extraction service and merge its result into the draft.

        Failures leave the draft untouched, including anything merged by an
        earlier successful pass.
        """
        requested_at = self.store.revision
        try:
            result = await self.extraction_client.extract(file)
            if not result.success:
                raise ExtractionError("Extraction service could not read the document")
        except Exception as e:
            return {"success": False, **self.errors.handle_extraction_failure(e, {"step": self.step_name})}

        self.extraction = result
        since = requested_at if self.stale_guard else None
        applied = self.apply_extraction(result, since_revision=since)
        return {
            "success": True,
            "confidence": result.confidence,
            "warnings": result.warnings,
            "applied": applied,
        }

    def apply_extraction(self, result: ExtractionResult, since_revision: Optional[int] = None) -> Dict[str, Any]:
        """Merge an extraction payload into the contract, payments, allocations and rates.

        With `since_revision`, fields the user changed after that revision are
        left alone.
        """
        extracted = result.extracted or {}
        draft = self.store.draft
        contract = draft["contract"] or {}

        updates = self.merger.merge({**contract, "payments": draft["payments"]}, extracted) or {}
        if updates and since_revision is not None:
            updates = self._drop_stale(updates, since_revision)
        payments = updates.pop("payments", None)
        if updates:
            updates.update(self._contract_defaults({**contract, **updates}))

        # Allocation and rate steps are only populated while still empty.
        allocations = [] if draft["allocations"] else self.merger.build_allocations(extracted)
        rates = [] if draft["rates"] else self.merger.build_rates(extracted)

        applied: Dict[str, Any] = {"contract": [], "payments": False, "allocations": 0, "rates": 0}
        if updates:
            self.store.update_section("contract", {**contract, **updates})
            applied["contract"] = sorted(updates)
        if payments is not None:
            self.store.update_section("payments", payments)
            applied["payments"] = True
        if allocations:
            self.store.update_section("allocations", allocations)
            applied["allocations"] = len(allocations)
        if rates:
            self.store.update_section("rates", rates)
            applied["rates"] = len(rates)

        logger.info("Applied extraction %s: %s", result.document_name, applied)
        return applied

    def _contract_defaults(self, contract: Dict[str, Any]) -> Dict[str, Any]:
        defaults = self.config.defaults.model_dump()
        return {field: value for field, value in defaults.items() if not contract.get(field)}

    def _drop_stale(self, updates: Dict[str, Any], since_revision: int) -> Dict[str, Any]:
        kept = {}
        for field, value in updates.items():
            if field == "payments":
                touched = self.store.last_touched("payments")
            else:
                touched = self.store.last_touched("contract", field)
            if touched > since_revision:
                logger.info("Skipping stale extraction value for %s (edited after request)", field)
                continue
            kept[field] = value
        return kept

    # --- Review & submit -----------------------------------------------------

    def warnings(self) -> list:
        return draft_warnings(self.store.draft, self.releases)

    async def submit(self) -> Dict[str, Any]:
        """POST the draft. Raises FormValidationError when required fields are missing."""
        draft = self.store.draft
        validate_submission(draft)
        try:
            created = await self.contracts_client.create_contract(draft)
        except ContractSubmissionError as e:
            return {"success": False, **self.errors.handle_submission_failure(e, {"step": self.step_name})}

        logger.info("Contract %s created from wizard", created.contract_id)
        self.autosave.cancel()
        self.store.reset()
        self.extraction = None
        return {"success": True, "contract_id": created.contract_id}

    def close(self) -> None:
        self.autosave.close()
