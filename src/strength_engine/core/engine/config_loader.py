"""
YAML → typed config loader.

Reads the strength-standards table from standards.yaml (bundled with the
package) and merges user overrides from ~/.strength-engine/standards.yaml.
The YAML helpers here are shared with the exercise catalog loader.

Usage:
    from strength_engine.core.engine.config_loader import load_standards_config
    cfg = load_standards_config()
    squat = cfg["standards"].get("Barbell Squat", {})

A bundled table that cannot be parsed leaves the table empty, so every lift
classifies as "Unknown".  A broken user override is ignored with a warning.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import LEVELS

USER_DIR_NAME = ".strength-engine"

# ---------------------------------------------------------------------------
# Shared YAML helpers
# ---------------------------------------------------------------------------


def read_yaml_mapping(path: Path) -> dict[str, Any]:
    """Top-level mapping of a YAML file; {} (plus a warning) if unreadable or not a mapping."""
    try:
        text = Path(path).read_text(encoding="utf-8")
        data = yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"strength-engine: ignoring {path} ({exc})", stacklevel=2)
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def merge_overrides(base: dict, override: dict) -> dict:
    """
    Overlay *override* on *base*, descending into nested mappings.

    Neither argument is modified.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = merge_overrides(current, value)
        merged[key] = value
    return merged


def user_config_dir() -> Path:
    """~/.strength-engine (HOME is honoured so tests can redirect it)."""
    return Path(os.environ.get("HOME", "~")).expanduser() / USER_DIR_NAME


def _normalize_table(raw: dict) -> dict[str, dict[str, dict[int, dict[str, float]]]]:
    """Coerce bracket keys to int and thresholds to float; drop malformed entries."""
    table: dict[str, dict[str, dict[int, dict[str, float]]]] = {}
    for exercise, by_sex in (raw or {}).items():
        if not isinstance(by_sex, dict):
            continue
        for sex, brackets in by_sex.items():
            if not isinstance(brackets, dict):
                continue
            for bracket, thresholds in brackets.items():
                try:
                    entry = {level: float(thresholds[level]) for level in LEVELS}
                    key = int(bracket)
                except (KeyError, TypeError, ValueError):
                    warnings.warn(
                        f"strength-engine: skipping standards entry {exercise}/{sex}/{bracket}",
                        stacklevel=2,
                    )
                    continue
                table.setdefault(str(exercise), {}).setdefault(str(sex), {})[key] = entry
    return table


# ---------------------------------------------------------------------------
# Standards table
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Path of the standards.yaml shipped with the package, or None."""
    ref = importlib.resources.files("strength_engine").joinpath("standards.yaml")
    if ref.is_file():
        return Path(str(ref))
    # Source checkout without an installed package
    candidate = Path(__file__).resolve().parents[2] / "standards.yaml"
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """~/.strength-engine/standards.yaml when present."""
    path = user_config_dir() / "standards.yaml"
    return path if path.is_file() else None


def load_standards_config() -> dict[str, Any]:
    """
    Bundled standards table with the user override merged on top.

    Returns:
        {"version": int | None, "standards": {exercise: {sex: {bracket: thresholds}}}}
    """
    sources = [get_bundled_yaml_path(), get_user_yaml_path()]
    config: dict[str, Any] = {}
    for path in sources:
        if path is not None:
            config = merge_overrides(config, read_yaml_mapping(path))

    return {
        "version": config.get("version"),
        "standards": _normalize_table(config.get("standards") or {}),
    }
