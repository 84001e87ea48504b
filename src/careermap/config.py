"""Configuration management for careermap."""

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG = {
    "analyzer": "standard",
    "lexicon_path": None,
    "settings": {},
    "layout": {},
}


@dataclass
class LayoutSettings:
    """Initial node placement on the map canvas."""
    x_origin: float = 100.0
    y_origin: float = 100.0
    time_width: float = 1200.0   # horizontal span covered by dated nodes
    x_step: float = 180.0        # spacing for nodes without a timeframe
    lane_height: float = 150.0
    min_spacing: float = 60.0    # closer than this on both axes counts as overlap
    jitter_step: float = 40.0


@dataclass
class AnalyzerSettings:
    """Strictness knobs for the extraction pipeline."""
    threshold: float = 0.40
    merge_ratio: float = 0.60       # shorter/longer label length for substring merges
    section_boost: float = 0.10

    role_title_len: tuple[int, int] = (3, 80)   # exclusive bounds
    company_len: tuple[int, int] = (1, 80)
    label_max: int = 100
    skill_token_max: int = 30
    skill_min_token_len: int = 1
    skill_min_tokens: int = 3
    goal_min_words: int = 3
    interest_enabled: bool = True

    timeframe_lookahead: int = 1
    adjacency_months: int = 12

    max_segments: int = 5000
    workers: int = 1

    layout: LayoutSettings = field(default_factory=LayoutSettings)


# Named variants: the ultra simple, standard and smart analyzers.
PRESETS: dict[str, dict[str, Any]] = {
    "simple": {"threshold": 0.30, "merge_ratio": 0.50, "section_boost": 0.0},
    "standard": {},
    "smart": {"threshold": 0.50, "merge_ratio": 0.75, "section_boost": 0.15},
}


def _find_config_file() -> Path | None:
    """Look for config.yaml in standard locations."""
    candidates = [
        Path.cwd() / "config" / "config.yaml",
        Path.cwd() / "config.yaml",
        Path.home() / ".careermap" / "config.yaml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration, merging defaults with file and env vars.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
    """
    cfg = _copy(DEFAULT_CONFIG)

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
    else:
        path = _find_config_file()

    if path:
        with open(path) as f:
            file_cfg = yaml.safe_load(f) or {}
        _deep_merge(cfg, file_cfg)

    # Env overrides
    if analyzer := os.environ.get("CAREERMAP_ANALYZER"):
        cfg["analyzer"] = analyzer

    if cfg.get("lexicon_path"):
        cfg["lexicon_path"] = str(Path(cfg["lexicon_path"]).expanduser().resolve())

    return cfg


def settings_from_config(cfg: dict[str, Any], preset: str | None = None) -> AnalyzerSettings:
    """Build typed settings from a preset plus ``settings``/``layout`` overrides.

    Args:
        cfg: Configuration dict as returned by :func:`load_config`.
        preset: Preset name; defaults to ``cfg["analyzer"]``.

    Raises:
        ValueError: On an unknown preset or settings key.
    """
    name = preset or cfg.get("analyzer", "standard")
    if name not in PRESETS:
        raise ValueError(f"Unknown analyzer preset: {name} (expected one of {', '.join(PRESETS)})")

    overrides = dict(PRESETS[name])
    overrides.update(cfg.get("settings") or {})

    known = {f.name for f in fields(AnalyzerSettings)} - {"layout"}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Unknown analyzer settings: {', '.join(sorted(unknown))}")

    for key in ("role_title_len", "company_len"):
        if key in overrides:
            overrides[key] = tuple(overrides[key])

    layout_cfg = cfg.get("layout") or {}
    layout_known = {f.name for f in fields(LayoutSettings)}
    unknown = set(layout_cfg) - layout_known
    if unknown:
        raise ValueError(f"Unknown layout settings: {', '.join(sorted(unknown))}")

    return replace(AnalyzerSettings(), layout=LayoutSettings(**layout_cfg), **overrides)


def dump_config(cfg: dict[str, Any]) -> str:
    """Render a config dict as YAML."""
    return yaml.dump(cfg, default_flow_style=False, sort_keys=False)


def _copy(cfg: dict[str, Any]) -> dict[str, Any]:
    return {k: _copy(v) if isinstance(v, dict) else v for k, v in cfg.items()}


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
