"""
Wizard session wiring.

Selects mock or real integration clients in one place: real HTTP clients when
an API URL is configured (environment first, then config file), in-process
mocks otherwise.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from pathlib import Path
from typing import Optional

from contract_wizard.integrations.contracts.interfaces import ContractsClient, ExtractionClient
from contract_wizard.utils.config_loader import WizardConfig, load_wizard_config
from contract_wizard.wizard.autosave import SaveSink
from contract_wizard.wizard.session import ConfirmDiscard, ContractWizardSession

logger = logging.getLogger(__name__)


def build_extraction_client(config: WizardConfig) -> ExtractionClient:
    url = os.getenv("EXTRACTION_API_URL") or config.integrations.extraction_api_url
    if url:
        from contract_wizard.integrations.clients.real_http.extraction import RealExtractionClient

        return RealExtractionClient(base_url=url, timeout_seconds=config.integrations.extraction_timeout_seconds)

    from contract_wizard.integrations.clients.mocks.extraction import MockExtractionClient

    logger.info("EXTRACTION_API_URL not set; using mock extraction client")
    return MockExtractionClient()


def build_contracts_client(config: WizardConfig) -> ContractsClient:
    url = os.getenv("CONTRACTS_API_URL") or config.integrations.contracts_api_url
    if url:
        from contract_wizard.integrations.clients.real_http.contracts import RealContractsClient

        return RealContractsClient(base_url=url, timeout_seconds=config.integrations.timeout_seconds)

    from contract_wizard.integrations.clients.mocks.contracts import MockContractsClient

    logger.info("CONTRACTS_API_URL not set; using mock contracts client")
    return MockContractsClient()


def create_session(
    config_path: Optional[Path] = None,
    save_sink: Optional[SaveSink] = None,
    confirm: Optional[ConfirmDiscard] = None,
    stale_guard: bool = False,
) -> ContractWizardSession:
    """Open a new wizard session. Must be called from a running event loop's context."""
    config = load_wizard_config(config_path)
    return ContractWizardSession(
        extraction_client=build_extraction_client(config),
        contracts_client=build_contracts_client(config),
        config=config,
        save_sink=save_sink,
        confirm=confirm,
        stale_guard=stale_guard,
    )
