"""Configuration file loader with validation"""

import yaml
import os
from pathlib import Path
from typing import Dict, Any, Optional
from pydantic import ValidationError
from ledger_audit.constants import ComplianceMode, DEFAULT_COMPLIANCE_MODE
from ledger_audit.models.config import AnalysisConfig
from .errors import ConfigurationError

DEFAULT_CONFIG_PATH = "config/rules.yaml"


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load YAML configuration file with validation.
    The LEDGER_AUDIT_CONFIG environment variable overrides the default path.

    Args:
        config_path: Path to configuration file

    Returns:
        Dictionary with configuration

    Raises:
        ConfigurationError: If file doesn't exist or invalid YAML
    """
    if config_path is None:
        config_path = os.getenv("LEDGER_AUDIT_CONFIG", DEFAULT_CONFIG_PATH)

    config_file = Path(config_path)

    if not config_file.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}")

    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

    # Validate required keys
    required_keys = ['version', 'thresholds', 'compliance_modes']
    missing_keys = [key for key in required_keys if key not in config]

    if missing_keys:
        raise ConfigurationError(f"Missing required configuration keys: {missing_keys}")

    return config


def save_config(config_path: str, config: Dict[str, Any]) -> None:
    """
    Save configuration to YAML file

    Args:
        config_path: Path to configuration file
        config: Configuration dictionary

    Raises:
        ConfigurationError: If unable to write file
    """
    try:
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)

    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Error saving configuration: {e}")


def get_mode_config(config: Dict[str, Any], mode: str = "standard") -> Dict[str, Any]:
    """
    Get compliance-mode-specific overrides

    Args:
        config: Full configuration dictionary
        mode: Compliance mode name (defaults to "standard")

    Returns:
        Override dictionary for the mode
    """
    mode_configs = config.get('compliance_modes', {}) or {}
    overrides = mode_configs.get(mode, mode_configs.get('standard', {}))
    return overrides or {}


def build_analysis_config(
    config: Optional[Dict[str, Any]] = None,
    mode: Optional[str] = None
) -> AnalysisConfig:
    """
    Build the immutable analysis configuration for one analysis call.

    Defaults come from `thresholds`, then the selected compliance mode's
    overrides are applied on top.

    Args:
        config: Loaded configuration dictionary (loaded from disk if None)
        mode: Compliance mode (defaults to `default_compliance_mode`)

    Returns:
        AnalysisConfig

    Raises:
        ConfigurationError: If the mode is unknown or thresholds are invalid
    """
    if config is None:
        config = load_config()

    mode = mode or config.get('default_compliance_mode', DEFAULT_COMPLIANCE_MODE.value)
    try:
        compliance_mode = ComplianceMode(mode)
    except ValueError:
        raise ConfigurationError(f"Unknown compliance mode: {mode}")

    settings = dict(config.get('thresholds', {}) or {})
    settings.update(get_mode_config(config, compliance_mode.value))
    settings['compliance_mode'] = compliance_mode

    try:
        return AnalysisConfig(**settings)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid analysis thresholds: {e}")


def get_reconciliation_tolerance(config: Dict[str, Any]) -> float:
    """Allowed gap between computed and stored supplier balance"""
    return float((config.get('ledger', {}) or {}).get('reconciliation_tolerance', 0.01))
