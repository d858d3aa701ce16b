"""
Policy configuration management utilities.

This module loads provider tables for the policy resolver from a YAML file
at the project root. Every key is optional; missing keys keep the built-in
defaults.

Example transcript_policy.yaml:
    providers:
      google: [google, google-generative-ai, google-vertex]
      copilot: [github-copilot]
      gemini_aggregators: [openrouter]
    gemini_model_pattern: "(^|[/:])gemini"
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from transcript_repair.core.types import PolicyConfig

logger = logging.getLogger(__name__)

# YAML key under "providers" -> PolicyConfig field
_PROVIDER_KEYS = {
    "google": "google_providers",
    "copilot": "copilot_providers",
    "gemini_aggregators": "gemini_aggregator_providers",
}


def get_config_path() -> Path:
    """
    Get the path to the policy configuration file.

    Looks for transcript_policy.yaml in the current working directory (project root).
    """
    return Path(os.getcwd()) / "transcript_policy.yaml"


def load_policy_config(path: Path | None = None) -> PolicyConfig:
    """
    Load policy provider tables from YAML.

    Args:
        path: Config file; defaults to get_config_path()

    Returns:
        PolicyConfig with file values layered over the defaults

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If a value has the wrong type or the model pattern is
            not a valid regular expression
        RuntimeError: If the file cannot be read or parsed
    """
    config_path = path or get_config_path()
    logger.debug(f"Loading policy config from: {config_path}")

    if not config_path.exists():
        raise FileNotFoundError(
            f"transcript_policy.yaml not found at {config_path}. "
            "Create it or use the built-in defaults via PolicyConfig()."
        )

    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError(f"Expected a mapping at the top of {config_path}")

        overrides: dict[str, Any] = {}

        providers = config.get("providers") or {}
        if not isinstance(providers, dict):
            raise ValueError(f"'providers' in {config_path} must be a mapping")

        unknown = sorted(set(providers) - set(_PROVIDER_KEYS))
        if unknown:
            raise ValueError(
                f"Unknown provider groups in {config_path}: {', '.join(unknown)}. "
                f"Expected any of: {', '.join(_PROVIDER_KEYS)}"
            )

        for key, field_name in _PROVIDER_KEYS.items():
            if key in providers:
                overrides[field_name] = _provider_list(key, providers[key])

        pattern = config.get("gemini_model_pattern")
        if pattern is not None:
            if not isinstance(pattern, str) or not pattern:
                raise ValueError("'gemini_model_pattern' must be a non-empty string")
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid gemini_model_pattern {pattern!r}: {e}")
            overrides["gemini_model_pattern"] = pattern

        return PolicyConfig(**overrides)
    except ValueError:
        raise
    except Exception as e:
        raise RuntimeError(f"Error loading policy config: {e}")


def _provider_list(key: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"'providers.{key}' must be a list of provider ids")
    return tuple(v.strip().lower() for v in value if v.strip())
