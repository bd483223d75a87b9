from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

SCORING_CONFIG_PATH = Path(__file__).resolve().parents[3] / "config" / "scoring.yaml"


def load_scoring_file(path: Path) -> dict[str, Any]:
    """Parse a scoring YAML file into its top-level mapping of weight tables."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise RuntimeError(f"Scoring weights file is missing: {path}") from exc
    except OSError as exc:
        raise RuntimeError(f"Cannot read scoring weights file {path}: {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Scoring weights file {path} is not valid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(f"Scoring weights file {path} must hold a mapping of sections (v1, v21).")
    return parsed


@lru_cache(maxsize=1)
def get_scoring_config() -> dict[str, Any]:
    """Weight tables, tier thresholds and keyword lists, read once per process."""
    return load_scoring_file(SCORING_CONFIG_PATH)


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Look up ``v21.weights.coop``-style dotted keys; any miss returns ``default``."""
    if not path:
        return default
    node: Any = get_scoring_config()
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node


def get_weight_table(path: str, default: dict[str, float]) -> dict[str, float]:
    """Return a float mapping from config, falling back key-by-key to ``default``."""
    raw = get_scoring_value(path, None)
    if not isinstance(raw, dict):
        return dict(default)
    table = dict(default)
    for key, value in raw.items():
        try:
            table[str(key)] = float(value)
        except (TypeError, ValueError):
            continue
    return table
