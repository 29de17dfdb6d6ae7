"""Repository configuration management for autofixup.

Handles reading and writing the .autofixup/config.yaml file in each repository.
Only the keys of FixupConfig are accepted; values are validated on write.
"""

from pathlib import Path
from typing import Any

import yaml

from autofixup.config import ConfigurationError, FixupConfig, InsertPolicy, build_config


# Keys that may be stored in the repository config file
CONFIG_KEYS = ("rebase_limit", "insert_checks")


def normalize_config(values: dict[str, Any]) -> dict[str, Any]:
    """Bring user-supplied values to their stored form.

    Policy names are case-insensitive and always kept lowercase.
    """
    normalized = dict(values)
    policy = normalized.get("insert_checks")
    if isinstance(policy, str):
        normalized["insert_checks"] = policy.lower()
    return normalized


def get_config_dir(repo_root: Path) -> Path:
    """Get the repository config directory.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to .autofixup/ (not created).
    """
    return repo_root / ".autofixup"


def get_config_file(repo_root: Path) -> Path:
    """Return path to the config.yaml file.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to .autofixup/config.yaml.
    """
    return get_config_dir(repo_root) / "config.yaml"


def load_config(repo_root: Path) -> dict[str, Any]:
    """Load the autofixup settings from config.yaml.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Configuration dictionary; empty if the file doesn't exist.

    Raises:
        ConfigurationError: If the file can't be parsed.
    """
    config_file = get_config_file(repo_root)

    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {config_file}: {e}")

    if not isinstance(config, dict):
        raise ConfigurationError(f"{config_file} must contain a mapping of settings")
    return config


def save_config(repo_root: Path, config: dict[str, Any]) -> None:
    """Save the configuration to config.yaml.

    Args:
        repo_root: The root directory of the git repository.
        config: Configuration dictionary to save.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    config = normalize_config(config)
    build_config(config)

    config_file = get_config_file(repo_root)
    config_file.parent.mkdir(exist_ok=True)

    with open(config_file, "w") as f:
        yaml.dump(
            config,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


def set_config_value(repo_root: Path, key: str, value: str) -> None:
    """Set a single setting in config.yaml.

    Args:
        repo_root: The root directory of the git repository.
        key: One of CONFIG_KEYS.
        value: The new value.

    Raises:
        ConfigurationError: If the key is unknown or the value invalid.
    """
    if key not in CONFIG_KEYS:
        raise ConfigurationError(
            f"Unknown setting: {key}. Valid settings: {', '.join(CONFIG_KEYS)}"
        )

    config = load_config(repo_root)
    config[key] = value
    save_config(repo_root, config)


def get_effective_config(repo_root: Path, **overrides: Any) -> FixupConfig:
    """Combine config.yaml with command-line overrides.

    Args:
        repo_root: The root directory of the git repository.
        **overrides: Values given on the command line (None means unset).

    Returns:
        The validated FixupConfig.
    """
    return build_config(
        normalize_config(load_config(repo_root)), **normalize_config(overrides)
    )


def describe_config(config: FixupConfig) -> list[tuple[str, str]]:
    """Key/value pairs for display."""
    policy: InsertPolicy = config.insert_checks
    return [
        ("rebase_limit", config.rebase_limit),
        ("insert_checks", policy.value),
    ]
