from .autosave import AutoSaveScheduler
from .cost_calculator import AllocationCostCalculator
from .draft_store import WizardDraftStore
from .extraction_merger import ExtractionMerger
from .release_schedule import ReleaseScheduleEngine
from .session import ContractWizardSession
from .validation import FormValidationError

__all__ = [
    "AutoSaveScheduler",
    "AllocationCostCalculator",
    "WizardDraftStore",
    "ExtractionMerger",
    "ReleaseScheduleEngine",
    "ContractWizardSession",
    "FormValidationError",
]
