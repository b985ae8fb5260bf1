"""Configuration loader for YAML files and Twilio credentials."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import requests
import yaml

from ..base import DEFAULT_LOOKUP_URL, ConfigurationError, TwilioContext

logger = logging.getLogger("lookup.config")

# src/twilio_lookup/utils/config_loader.py -> project root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

DEFAULT_CONFIG_PATH = "config/lookup_config.yaml"
DEFAULT_API_KEYS_PATH = "config/api_keys.yaml"


def load_yaml(filepath: Path) -> Dict[str, Any]:
    """Load YAML file and return as dictionary.

    Args:
        filepath: Path to YAML file.

    Returns:
        Dictionary with YAML contents.

    Raises:
        FileNotFoundError: If file doesn't exist.
        yaml.YAMLError: If YAML is malformed.
    """
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML file {filepath}: {e}")
        raise

    if config is None:
        logger.warning(f"YAML file is empty: {filepath}")
        return {}

    return config


def load_yaml_config(filepath: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file from string path or Path object.

    Relative paths are resolved against the project root.
    """
    path = Path(filepath)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return load_yaml(path)


def _load_mapping(path: Union[str, Path]) -> Dict[str, Any]:
    # Missing files propagate as FileNotFoundError; anything unusable is a config error.
    try:
        data = load_yaml_config(path)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    return data


def load_lookup_config(config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Return the ``lookup`` section of the config file, or ``{}`` when absent."""
    try:
        cfg = _load_mapping(config_path)
    except FileNotFoundError:
        logger.info(f"No lookup config at {config_path}, using defaults")
        return {}
    section = cfg.get("lookup") or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'lookup' section in {config_path} must be a mapping")
    return section


def load_context_from_config(
    config_path: Union[str, Path] = DEFAULT_CONFIG_PATH,
    api_keys_path: Union[str, Path] = DEFAULT_API_KEYS_PATH,
    session: Optional[requests.Session] = None,
) -> TwilioContext:
    """Build a ``TwilioContext`` from YAML config and api_keys.yaml.

    ``TWILIO_ACCOUNT_SID`` and ``TWILIO_AUTH_TOKEN`` override the file values.

    Raises:
        ConfigurationError: If either credential is missing or a file holds
            values of the wrong shape.
    """
    lookup_cfg = load_lookup_config(config_path)
    try:
        api_keys = _load_mapping(api_keys_path)
    except FileNotFoundError:
        api_keys = {}
    twilio_keys = api_keys.get("twilio") or {}
    if not isinstance(twilio_keys, dict):
        raise ConfigurationError(f"'twilio' section in {api_keys_path} must be a mapping")

    account_sid = os.getenv("TWILIO_ACCOUNT_SID") or twilio_keys.get("account_sid", "")
    auth_token = os.getenv("TWILIO_AUTH_TOKEN") or twilio_keys.get("auth_token", "")
    if not account_sid or not auth_token:
        raise ConfigurationError(
            "Twilio credentials missing: set TWILIO_ACCOUNT_SID/TWILIO_AUTH_TOKEN "
            f"or twilio.account_sid/twilio.auth_token in {api_keys_path}"
        )

    timeout = lookup_cfg.get("timeout", 10.0)
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"lookup.timeout in {config_path} must be a number, got {timeout!r}"
            ) from exc

    return TwilioContext(
        account_sid=str(account_sid),
        auth_token=str(auth_token),
        lookup_url=str(lookup_cfg.get("base_url") or DEFAULT_LOOKUP_URL),
        session=session,
        timeout=timeout,
    )
