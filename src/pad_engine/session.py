"""Session — load and validate a run description for the command line.

A run file (YAML or JSON) bundles everything one solve needs::

    tempo: 120
    events:
      - {pitch: 36, start_time: 0.0}
      - {pitch: 38, start_time: 0.1}
    sections:
      - {start_measure: 1, length_in_measures: 8, origin_pitch: 36}
    overrides:
      - {event_index: 1, hand: left, finger: pinky}

Sections may also carry ``home_positions: {left: [0, 1], right: [0, 5]}``.
Hands accept ``left``/``right``/``L``/``R``; fingers accept a name or 1–5.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .models import (
    FINGERS,
    Finger,
    FingerOverride,
    Hand,
    NoteEvent,
    Performance,
    PitchMapping,
    SectionMap,
)


_HAND_ALIASES: dict[str, Hand] = {
    "left": Hand.LEFT,
    "l": Hand.LEFT,
    "right": Hand.RIGHT,
    "r": Hand.RIGHT,
}


@dataclass
class Session:
    performance: Performance
    section_maps: list[SectionMap]
    overrides: dict[int, FingerOverride] = field(default_factory=dict)


def parse_hand(value: Any) -> Hand:
    hand = _HAND_ALIASES.get(str(value).strip().lower())
    if hand is None:
        raise ValueError(f"hand must be 'left' or 'right', got {value!r}")
    return hand


def parse_finger(value: Any) -> Finger:
    """Accept ``"index"`` style names or anatomical numbers 1 (thumb) – 5 (pinky)."""
    if isinstance(value, int) and not isinstance(value, bool):
        if 1 <= value <= len(FINGERS):
            return FINGERS[value - 1]
        raise ValueError(f"finger must be 1–5, got {value}")
    try:
        return Finger(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown finger {value!r}") from None


def session_from_dict(data: dict[str, Any], source: str = "<dict>") -> Session:
    """Build a :class:`Session` from a parsed run document.

    Raises:
        ValueError: If a required key is missing or a value is invalid.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Run file must contain a mapping, got {type(data).__name__}: {source}")
    for key in ("events", "sections"):
        if key not in data:
            raise ValueError(f"Run file is missing required key '{key}': {source}")

    events: list[NoteEvent] = []
    for i, entry in enumerate(data["events"]):
        _require(entry, ("pitch", "start_time"), f"event {i}", source)
        events.append(NoteEvent(int(entry["pitch"]), float(entry["start_time"])))

    sections: list[SectionMap] = []
    for i, entry in enumerate(data["sections"]):
        _require(entry, ("start_measure", "length_in_measures", "origin_pitch"), f"section {i}", source)
        homes = entry.get("home_positions")
        sections.append(
            SectionMap(
                start_measure=int(entry["start_measure"]),
                length_in_measures=int(entry["length_in_measures"]),
                pitch_mapping=PitchMapping(origin_pitch=int(entry["origin_pitch"])),
                home_positions=(
                    {parse_hand(h): (float(pos[0]), float(pos[1])) for h, pos in homes.items()}
                    if homes
                    else None
                ),
            )
        )

    overrides: dict[int, FingerOverride] = {}
    for i, entry in enumerate(data.get("overrides") or []):
        _require(entry, ("event_index", "hand", "finger"), f"override {i}", source)
        overrides[int(entry["event_index"])] = FingerOverride(
            parse_hand(entry["hand"]), parse_finger(entry["finger"])
        )

    tempo = data.get("tempo")
    return Session(
        performance=Performance(events, float(tempo) if tempo is not None else None),
        section_maps=sections,
        overrides=overrides,
    )


def load_session(path: str | Path) -> Session:
    """Load a YAML or JSON run file (JSON is valid YAML).

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the document fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Run file not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    return session_from_dict(data, source=path.name)


def _require(entry: Any, keys: tuple[str, ...], what: str, source: str) -> None:
    if not isinstance(entry, dict):
        raise ValueError(f"{what} in '{source}' must be a mapping")
    for key in keys:
        if key not in entry:
            raise ValueError(f"{what} in '{source}' is missing required key '{key}'")
