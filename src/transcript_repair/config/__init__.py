"""
Policy configuration utilities.

Usage:
    from transcript_repair.config import load_policy_config

    config = load_policy_config()
"""

from transcript_repair.config.loader import get_config_path, load_policy_config
from transcript_repair.core.types import PolicyConfig

__all__ = ["load_policy_config", "get_config_path", "PolicyConfig"]
