"""
Utility modules for the contract wizard
"""
from .config_loader import WizardConfig, load_wizard_config

__all__ = [
    'WizardConfig',
    'load_wizard_config',
]
