"""Pytest fixtures for the contract wizard engine tests."""

import copy

import pytest

from contract_wizard.integrations.clients.mocks.extraction import SAMPLE_EXTRACTED
from contract_wizard.wizard.draft_store import WizardDraftStore


@pytest.fixture
def store():
    return WizardDraftStore()


@pytest.fixture
def extracted():
    """A full extraction payload; tests may mutate their copy."""
    return copy.deepcopy(SAMPLE_EXTRACTED)


@pytest.fixture
def allocation():
    return {
        "id": "allocation-1",
        "allocation_name": "Deluxe Room - F1 Singapore 2025",
        "allocation_type": "allotment",
        "total_quantity": 30,
        "valid_from": "2025-06-01",
        "valid_to": "2025-06-05",
        "total_cost": 0,
        "cost_per_unit": 0,
        "releases": [],
    }
