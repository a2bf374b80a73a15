"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that all required fields are present.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ["global", "matching", "pool_generation", "batch", "report"]


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is empty
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    for section in REQUIRED_SECTIONS:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    # Matching parameters must be non-negative integers
    if "matching" in config:
        matching = config["matching"]
        for key in ["cooldown_seconds", "max_wait_seconds", "min_wait_seconds"]:
            value = matching.get(key)
            if value is None:
                issues.append(f"Missing matching.{key}")
            elif not isinstance(value, int) or value < 0:
                issues.append(f"matching.{key} must be a non-negative integer, got {value}")

        min_wait = matching.get("min_wait_seconds")
        max_wait = matching.get("max_wait_seconds")
        if isinstance(min_wait, int) and isinstance(max_wait, int) and max_wait < min_wait:
            issues.append(f"matching.max_wait_seconds ({max_wait}) < min_wait_seconds ({min_wait})")

    if "pool_generation" in config:
        pool = config["pool_generation"]
        for key in ["last_matched_probability", "blacklist_probability"]:
            prob = pool.get(key)
            if prob is not None and not 0 <= prob <= 1:
                issues.append(f"pool_generation.{key} must be in [0, 1], got {prob}")
        size = pool.get("size")
        if size is not None and (not isinstance(size, int) or size < 0):
            issues.append(f"pool_generation.size must be a non-negative integer, got {size}")

    if "batch" in config:
        n_jobs = config["batch"].get("n_jobs", 1)
        if n_jobs == 0:
            issues.append("batch.n_jobs must be non-zero")

    if "report" in config:
        top_n = config["report"].get("top_n", 5)
        if not isinstance(top_n, int) or top_n < 1:
            issues.append(f"report.top_n must be a positive integer, got {top_n}")

    # Check random seed is set
    if "global" in config:
        if "random_seed" not in config["global"]:
            issues.append("Missing global.random_seed (required for reproducibility)")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "matching.cooldown_seconds")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
