"""
Wizard configuration loader (auto-save, defaults, release suggestions, integrations).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class AutoSaveConfig(BaseModel):
    delay_seconds: float = Field(default=30.0, gt=0)
    version: int = Field(default=1, ge=1)


class DefaultsConfig(BaseModel):
    currency: str = "USD"
    contract_type: str = "allocation"


class ReleaseCutoffConfig(BaseModel):
    days_before: int = Field(ge=0)
    release_type: Literal["percentage", "quantity", "remaining"]
    release_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    penalty_applies: bool = False
    notes: str = ""


class IntegrationsConfig(BaseModel):
    contracts_api_url: str = ""
    extraction_api_url: str = ""
    timeout_seconds: float = Field(default=20.0, gt=0)
    extraction_timeout_seconds: float = Field(default=60.0, gt=0)


class WizardConfig(BaseModel):
    autosave: AutoSaveConfig = Field(default_factory=AutoSaveConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    release_suggestions: List[ReleaseCutoffConfig] = Field(default_factory=list)
    integrations: IntegrationsConfig = Field(default_factory=IntegrationsConfig)

    def release_cadence(self) -> Optional[list]:
        if not self.release_suggestions:
            return None
        return [cutoff.model_dump() for cutoff in self.release_suggestions]


def load_wizard_config(config_path: Optional[Path] = None) -> WizardConfig:
    """
    Load and validate wizard configuration from YAML file

    Args:
        config_path: Path to config file. Defaults to config/wizard_config.yml

    Returns:
        Validated WizardConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config" / "wizard_config.yml"

    if not config_path.exists():
        raise FileNotFoundError(f"Wizard config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    try:
        cfg = WizardConfig(**data)
        logger.info("Successfully loaded wizard config from %s", config_path)
        return cfg
    except ValidationError as e:
        logger.error("Wizard config validation failed: %s", e)
        raise
