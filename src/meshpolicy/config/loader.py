# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/config/loader.py

import logging
import os
import yaml
from pathlib import Path
from pydantic import ValidationError
from .models import MeshPolicyConfig
from ..errors import ConfigError

log = logging.getLogger("meshpolicy")


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Recursively merge *override* into *base* (mutates base).
    Only overwrites when the override value is non-empty.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            _deep_merge(base[key], value)
        else:
            if value not in (None, ""):
                base[key] = value
    return base


def _find_overrides_file(config_path: Path) -> Path | None:
    """
    Locate an overrides file using this priority:

    1. MESHPOLICY_OVERRIDES_FILE environment variable (explicit override)
    2. overrides.yaml in the same directory as the config
    """
    env = os.environ.get("MESHPOLICY_OVERRIDES_FILE")
    if env:
        p = Path(env)
        if p.is_file():
            return p
        log.warning("MESHPOLICY_OVERRIDES_FILE=%s does not exist, skipping", env)
        return None

    p = config_path.parent / "overrides.yaml"
    if p.is_file():
        return p

    return None


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    data = yaml.safe_load(expanded) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return data


def load_config(path: str | Path | None = None) -> MeshPolicyConfig:
    """
    Load and validate a meshpolicy YAML config.

    With no path the defaults are used. An overrides file (see
    ``_find_overrides_file``) is deep-merged into the config before
    validation, so environment specific root namespaces or policy paths can
    live outside the main file. ``${ENV_VAR}`` placeholders are expanded.

    Relative ``policy_paths`` resolve against the config file's directory.
    """
    if path is None:
        return MeshPolicyConfig()

    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"config file {path} not found")

    data = _load_yaml(path)

    overrides_path = _find_overrides_file(path)
    if overrides_path:
        log.debug("Merging overrides from %s", overrides_path)
        _deep_merge(data, _load_yaml(overrides_path))
    else:
        log.debug("No overrides file found, using %s as is", path)

    try:
        cfg = MeshPolicyConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{path}: {e}") from e

    resolved = [
        str(p) if Path(p).is_absolute() else str(path.parent / p)
        for p in cfg.policy_paths
    ]
    return cfg.model_copy(update={"policy_paths": resolved})
