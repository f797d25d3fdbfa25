"""Transition Analysis — movement metrics between consecutive trace entries.

Each :class:`Transition` describes going from one debug event to the next:
    - time_delta_ms        : gap between the two notes
    - grid_distance        : pad-to-pad distance (``inf`` if either is unplaced)
    - hand_switch          : the two notes were played by different hands
    - finger_change        : same hand, different finger
    - speed_pressure       : 0–1, high when a long move must happen quickly
    - composite_difficulty : 0–1 weighted blend of the above
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .grid_mapper import grid_distance
from .models import GRID_COLS, GRID_ROWS, DebugEvent


# ── Composite weights ─────────────────────────────────────────
_SPEED_WEIGHT: float = 0.6
_STRETCH_WEIGHT: float = 0.3
_DISTANCE_WEIGHT: float = 0.1
_HAND_SWITCH_BONUS: float = 0.15
_FINGER_CHANGE_BONUS: float = 0.1

# Stretch penalties are rescaled from 0–10 to 0–1.
_STRETCH_SCALE: float = 10.0
_MAX_GRID_DISTANCE: float = math.hypot(GRID_ROWS, GRID_COLS)


@dataclass(frozen=True)
class Transition:
    from_index: int
    to_index: int
    time_delta_ms: float
    grid_distance: float
    hand_switch: bool
    finger_change: bool
    speed_pressure: float
    stretch_score: float
    composite_difficulty: float


def is_hand_switch(a: DebugEvent, b: DebugEvent) -> bool:
    """True when both notes were played and by different hands."""
    if not (a.is_playable and b.is_playable):
        return False
    return a.hand != b.hand


def is_finger_change(a: DebugEvent, b: DebugEvent) -> bool:
    if not (a.is_playable and b.is_playable):
        return False
    return a.hand == b.hand and a.finger != b.finger


def speed_pressure(distance: float, time_delta_ms: float) -> float:
    """Normalised speed demand, saturating at 1.

    Simultaneous or unplaceable transitions get the maximum.
    """
    if time_delta_ms <= 0 or math.isinf(distance):
        return 1.0
    return min(math.tanh(distance / (time_delta_ms + 1.0) * 10.0), 1.0)


def stretch_score(event: DebugEvent) -> float:
    """0–1 stretch demand of one note; unplayable notes score 1."""
    if not event.is_playable:
        return 1.0
    if event.breakdown is None:
        return 0.0
    return min(event.breakdown.stretch / _STRETCH_SCALE, 1.0)


def analyze_transition(
    a: DebugEvent,
    b: DebugEvent,
    from_index: int = -1,
    to_index: int = -1,
) -> Transition:
    time_delta_ms = (b.start_time - a.start_time) * 1000.0
    if a.row is None or b.row is None:
        distance = math.inf
    else:
        distance = grid_distance((a.row, a.col), (b.row, b.col))

    hand_switch = is_hand_switch(a, b)
    finger_change = is_finger_change(a, b)
    pressure = speed_pressure(distance, time_delta_ms)
    stretch = max(stretch_score(a), stretch_score(b))

    composite = pressure * _SPEED_WEIGHT + stretch * _STRETCH_WEIGHT
    composite += min(distance / _MAX_GRID_DISTANCE, 1.0) * _DISTANCE_WEIGHT
    if hand_switch:
        composite += _HAND_SWITCH_BONUS
    if finger_change:
        composite += _FINGER_CHANGE_BONUS

    return Transition(
        from_index=from_index,
        to_index=to_index,
        time_delta_ms=time_delta_ms,
        grid_distance=distance,
        hand_switch=hand_switch,
        finger_change=finger_change,
        speed_pressure=pressure,
        stretch_score=stretch,
        composite_difficulty=min(max(composite, 0.0), 1.0),
    )


def analyze_transitions(debug_events: list[DebugEvent]) -> list[Transition]:
    """One transition per adjacent pair of *debug_events* (in trace order)."""
    return [
        analyze_transition(debug_events[i], debug_events[i + 1], i, i + 1)
        for i in range(len(debug_events) - 1)
    ]
