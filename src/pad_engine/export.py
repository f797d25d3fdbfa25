"""Export — turn an :class:`EngineResult` into JSON or a pandas table.

Infinite costs are written as ``null`` in JSON so the output stays
standards-compliant.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

import pandas as pd

from .models import CostBreakdown, DebugEvent, EngineResult


def _finite(value: float) -> float | None:
    return None if math.isinf(value) else value


def _breakdown_to_dict(breakdown: CostBreakdown) -> dict[str, float]:
    return {
        "movement": breakdown.movement,
        "stretch": breakdown.stretch,
        "drift": breakdown.drift,
        "bounce": breakdown.bounce,
        "fatigue": breakdown.fatigue,
        "lookahead": breakdown.lookahead,
        "total": breakdown.total,
    }


def debug_event_to_dict(event: DebugEvent) -> dict[str, Any]:
    """Flatten one trace entry into JSON-ready primitives."""
    return {
        "event_index": event.event_index,
        "pitch": event.pitch,
        "start_time": event.start_time,
        "hand": event.assigned_hand,
        "finger": event.finger.value if event.finger is not None else None,
        "cost": _finite(event.cost),
        "difficulty": event.difficulty.value,
        "row": event.row,
        "col": event.col,
        "pad_id": event.pad_id,
        "breakdown": (
            _breakdown_to_dict(event.breakdown) if event.breakdown is not None else None
        ),
    }


def result_to_dict(result: EngineResult) -> dict[str, Any]:
    return {
        "score": result.score,
        "unplayable_count": result.unplayable_count,
        "hard_count": result.hard_count,
        "finger_usage": dict(result.finger_usage),
        "fatigue_map": dict(result.fatigue_map),
        "average_drift": result.average_drift,
        "average_metrics": _breakdown_to_dict(result.average_metrics),
        "debug_events": [debug_event_to_dict(e) for e in result.debug_events],
    }


def result_to_json_bytes(result: EngineResult) -> bytes:
    """Serialise a result to UTF-8 JSON bytes.

    Args:
        result: The solver output.

    Returns:
        UTF-8 encoded JSON bytes.
    """
    return json.dumps(result_to_dict(result), indent=2, ensure_ascii=False).encode("utf-8")


def save_result(result: EngineResult, path: str | Path) -> Path:
    """Write *result* as JSON to *path*, creating parent folders as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(result_to_json_bytes(result))
    return path


def debug_events_frame(result: EngineResult) -> pd.DataFrame:
    """One row per debug event, breakdown terms flattened into columns."""
    rows = []
    for event in result.debug_events:
        row = debug_event_to_dict(event)
        breakdown = row.pop("breakdown") or {}
        for term, value in breakdown.items():
            row[f"cost_{term}"] = value
        rows.append(row)

    columns = [
        "event_index", "pitch", "start_time", "hand", "finger",
        "cost", "difficulty", "row", "col", "pad_id",
    ]
    return pd.DataFrame(rows, columns=columns + [
        f"cost_{t}" for t in ("movement", "stretch", "drift", "bounce", "fatigue", "lookahead", "total")
    ])
