"""Engine constants — every tunable number used by the pad engine.

All values are loaded from ``configs/engine_constants.yaml``.
No hardcoded constants: if a required key is missing from the YAML,
a ``ValueError`` is raised with a clear message.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .models import FINGERS, Finger, GridPos, Hand


DEFAULT_CONSTANTS_PATH: Path = (
    Path(__file__).resolve().parents[2] / "configs" / "engine_constants.yaml"
)

_REQUIRED_KEYS: list[str] = [
    "max_reach",
    "finger_strength_weights",
    "ideal_span",
    "max_span",
    "stretch_weight",
    "drift_weight",
    "home_positions",
    "bounce_weight",
    "bounce_alternate_factor",
    "bounce_decay_seconds",
    "bounce_window_seconds",
    "bounce_history_size",
    "fatigue_weight",
    "fatigue_increment",
    "fatigue_decay_rate",
    "finger_order_tolerance",
    "lookahead_infeasible_penalty",
    "lookahead_expensive_threshold",
    "lookahead_weight",
    "difficulty_thresholds",
    "beats_per_measure",
    "default_tempo",
]


@dataclass(frozen=True)
class EngineConstants:
    """Validated engine configuration.

    Build one with :func:`load_constants` or :meth:`from_dict`; derive
    variants with :meth:`with_overrides`.
    """

    max_reach: dict[Finger, float]
    finger_strength_weights: dict[Finger, float]
    ideal_span: float
    max_span: float
    stretch_weight: float
    drift_weight: float
    home_positions: dict[Hand, GridPos]
    bounce_weight: float
    bounce_alternate_factor: float
    bounce_decay_seconds: float
    bounce_window_seconds: float
    bounce_history_size: int
    fatigue_weight: float
    fatigue_increment: float
    fatigue_decay_rate: float
    finger_order_tolerance: float
    lookahead_infeasible_penalty: float
    lookahead_expensive_threshold: float
    lookahead_weight: float
    easy_threshold: float
    medium_threshold: float
    hard_threshold: float
    beats_per_measure: int
    default_tempo: float

    @classmethod
    def from_dict(cls, cfg: dict[str, Any], source: str = "<dict>") -> EngineConstants:
        """Validate a raw config mapping and convert it to typed constants.

        Args:
            cfg: Parsed YAML document.
            source: Where *cfg* came from, used in error messages.

        Raises:
            ValueError: If a key is missing or a table is incomplete.
        """
        if not isinstance(cfg, dict):
            raise ValueError(f"Engine constants must be a mapping: {source}")

        for key in _REQUIRED_KEYS:
            if key not in cfg:
                raise ValueError(
                    f"Missing required key '{key}' in engine constants: {source}"
                )

        thresholds = cfg["difficulty_thresholds"]
        for level in ("easy", "medium", "hard"):
            if level not in thresholds:
                raise ValueError(
                    f"Missing difficulty threshold '{level}' in engine constants: {source}"
                )
        if not thresholds["easy"] <= thresholds["medium"] <= thresholds["hard"]:
            raise ValueError(
                f"Difficulty thresholds must be ascending (easy <= medium <= hard): {source}"
            )
        if float(cfg["max_span"]) <= float(cfg["ideal_span"]):
            raise ValueError(f"max_span must exceed ideal_span: {source}")

        return cls(
            max_reach=_finger_table(cfg, "max_reach", source),
            finger_strength_weights=_finger_table(cfg, "finger_strength_weights", source),
            ideal_span=float(cfg["ideal_span"]),
            max_span=float(cfg["max_span"]),
            stretch_weight=float(cfg["stretch_weight"]),
            drift_weight=float(cfg["drift_weight"]),
            home_positions=_home_table(cfg, source),
            bounce_weight=float(cfg["bounce_weight"]),
            bounce_alternate_factor=float(cfg["bounce_alternate_factor"]),
            bounce_decay_seconds=float(cfg["bounce_decay_seconds"]),
            bounce_window_seconds=float(cfg["bounce_window_seconds"]),
            bounce_history_size=int(cfg["bounce_history_size"]),
            fatigue_weight=float(cfg["fatigue_weight"]),
            fatigue_increment=float(cfg["fatigue_increment"]),
            fatigue_decay_rate=float(cfg["fatigue_decay_rate"]),
            finger_order_tolerance=float(cfg["finger_order_tolerance"]),
            lookahead_infeasible_penalty=float(cfg["lookahead_infeasible_penalty"]),
            lookahead_expensive_threshold=float(cfg["lookahead_expensive_threshold"]),
            lookahead_weight=float(cfg["lookahead_weight"]),
            easy_threshold=float(thresholds["easy"]),
            medium_threshold=float(thresholds["medium"]),
            hard_threshold=float(thresholds["hard"]),
            beats_per_measure=int(cfg["beats_per_measure"]),
            default_tempo=float(cfg["default_tempo"]),
        )

    def with_overrides(self, **changes: Any) -> EngineConstants:
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)


def load_constants(config_path: str | Path | None = None) -> EngineConstants:
    """Load engine constants from YAML.

    Args:
        config_path: Path to the YAML file. Defaults to
            ``configs/engine_constants.yaml`` relative to the project root.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is missing a required key.
    """
    config_path = DEFAULT_CONSTANTS_PATH if config_path is None else Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Engine constants not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as fh:
        cfg = yaml.safe_load(fh)

    return EngineConstants.from_dict(cfg, source=str(config_path))


def _finger_table(cfg: dict[str, Any], key: str, source: str) -> dict[Finger, float]:
    table = cfg[key]
    missing = [f.value for f in FINGERS if f.value not in table]
    if missing:
        raise ValueError(
            f"Missing {key} entries for {', '.join(missing)} in engine constants: {source}"
        )
    return {f: float(table[f.value]) for f in FINGERS}


def _home_table(cfg: dict[str, Any], source: str) -> dict[Hand, GridPos]:
    table = cfg["home_positions"]
    homes: dict[Hand, GridPos] = {}
    for hand in Hand:
        if hand.value not in table:
            raise ValueError(
                f"Missing home position for the {hand.value} hand in engine constants: {source}"
            )
        row, col = table[hand.value]
        homes[hand] = (float(row), float(col))
    return homes
