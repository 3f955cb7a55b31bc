"""Scenario JSON loading onto ``SimConfig``."""

from __future__ import annotations

import json
from dataclasses import fields
from pathlib import Path
from typing import Any

from gnss_outlier.config import DIFFICULTY_PRESETS, SimConfig


def load_scenario(path: Path) -> dict[str, Any]:
    scenario = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(scenario, dict):
        raise ValueError(f"{path}: scenario JSON must be an object")
    if not str(scenario.get("name") or "").strip():
        raise ValueError(f"{path}: scenario is missing a non-empty 'name'")
    return scenario


def build_sim_config(scenario: dict[str, Any], **overrides: Any) -> SimConfig:
    """Apply a scenario's preset and field overrides; unknown keys are an error."""

    reserved = {"name", "preset"}
    fields_by_name = {f.name for f in fields(SimConfig)}
    cfg_kwargs: dict[str, Any] = {}
    preset = scenario.get("preset")
    if preset is not None:
        if str(preset).lower() not in DIFFICULTY_PRESETS:
            raise ValueError(f"Unknown preset '{preset}' in scenario '{scenario['name']}'")
        cfg_kwargs.update(DIFFICULTY_PRESETS[str(preset).lower()])
    for key, value in scenario.items():
        if key in reserved:
            continue
        if key not in fields_by_name:
            raise ValueError(f"Unknown SimConfig override '{key}' in scenario '{scenario['name']}'")
        cfg_kwargs[key] = tuple(value) if isinstance(value, list) else value
    cfg_kwargs.update(overrides)
    return SimConfig(**cfg_kwargs)
