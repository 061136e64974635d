"""Vault configuration.

The vault root comes from the CLI (``--vault``) or ``VAULTDEX_ROOT``. Write
categories and statuses default to the values below and can be overridden by a
``vaultdex.yml`` file in the vault root:

    categories: [tech, ai, projects]
    statuses: [active, archived, draft]
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .models import DEFAULT_STATUS

CONFIG_FILENAME = "vaultdex.yml"
ROOT_ENV_VAR = "VAULTDEX_ROOT"

DEFAULT_CATEGORIES = (
    "tech",
    "ai",
    "projects",
    "methods",
    "career",
    "ideas",
    "cheatsheet",
    "journal",
)
DEFAULT_STATUSES = ("active", "archived", "draft")


@dataclass(frozen=True)
class VaultConfig:
    root: Path
    categories: tuple[str, ...] = DEFAULT_CATEGORIES
    statuses: tuple[str, ...] = DEFAULT_STATUSES
    extension: str = ".md"
    default_status: str = DEFAULT_STATUS


def _coerce_names(raw: Any, key: str, source: Path) -> tuple[str, ...]:
    if not isinstance(raw, list) or not raw:
        raise ConfigError(f"{source}: '{key}' must be a non-empty list of strings")
    names = []
    for item in raw:
        if not isinstance(item, str) or not item.strip():
            raise ConfigError(f"{source}: '{key}' entries must be non-empty strings")
        names.append(item.strip())
    return tuple(names)


def load_config(root: Path, config_path: Path | None = None) -> VaultConfig:
    """Build the configuration for a vault.

    Args:
        root: Vault root directory
        config_path: Explicit YAML config; defaults to ``<root>/vaultdex.yml`` if present

    Returns:
        VaultConfig with any overrides applied

    Raises:
        ConfigError: If the file exists but does not have the expected structure.
    """
    config = VaultConfig(root=root)

    if config_path is None:
        config_path = root / CONFIG_FILENAME
        if not config_path.exists():
            return config

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{config_path}: invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: top level must be a mapping")

    if "categories" in data:
        config = replace(config, categories=_coerce_names(data["categories"], "categories", config_path))
    if "statuses" in data:
        config = replace(config, statuses=_coerce_names(data["statuses"], "statuses", config_path))

    return config


def root_from_env() -> Path | None:
    """Vault root from ``VAULTDEX_ROOT``, if set."""
    value = os.getenv(ROOT_ENV_VAR, "").strip()
    return Path(value).expanduser() if value else None
