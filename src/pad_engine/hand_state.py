"""Hand State — construction, derivation and update of per-hand records.

The solver owns two :class:`~.models.HandState` instances. What-if
evaluation always works on a :func:`clone`; only :func:`apply_strike`
on the solver's own instance changes persistent state.
"""

from __future__ import annotations

import copy
from itertools import combinations

from .constants import EngineConstants
from .grid_mapper import grid_distance
from .models import Finger, FingerState, GridPos, HandState


def new_hand_state() -> HandState:
    """A hand with no finger on the grid and no fatigue."""
    return HandState()


def clone(state: HandState) -> HandState:
    return copy.deepcopy(state)


def center_of_gravity(state: HandState) -> GridPos | None:
    """Mean position of the placed fingers, or ``None`` if none are placed."""
    positions = list(state.placed().values())
    if not positions:
        return None
    n = len(positions)
    return (
        sum(p[0] for p in positions) / n,
        sum(p[1] for p in positions) / n,
    )


def span_width(state: HandState) -> float:
    """Largest distance between any two placed fingers (0 with fewer than two)."""
    positions = list(state.placed().values())
    return max(
        (grid_distance(a, b) for a, b in combinations(positions, 2)),
        default=0.0,
    )


def refresh(state: HandState) -> HandState:
    """Recompute the derived fields in place and return *state*."""
    state.center_of_gravity = center_of_gravity(state)
    state.span_width = span_width(state)
    return state


def origin_for(
    state: HandState,
    finger: Finger,
    home: GridPos | None = None,
) -> GridPos | None:
    """Where *finger* would move from.

    Its own pad, else the hand's centre of gravity, else *home* when the
    hand has nothing on the grid yet. ``None`` only when no home is given.
    """
    pos = state.fingers[finger].current_pos
    if pos is not None:
        return pos
    if state.center_of_gravity is not None:
        return state.center_of_gravity
    return home


def with_finger_at(state: HandState, finger: Finger, pos: GridPos) -> HandState:
    """Copy of *state* with *finger* moved to *pos*; fatigue untouched."""
    moved = clone(state)
    moved.fingers[finger] = FingerState(
        current_pos=pos, fatigue=state.fingers[finger].fatigue
    )
    return refresh(moved)


def apply_strike(
    state: HandState,
    finger: Finger,
    pos: GridPos,
    elapsed: float,
    constants: EngineConstants,
) -> HandState:
    """Commit *finger* striking *pos* on *state*, mutating it in place.

    The striking finger gains ``fatigue_increment``; then every finger of the
    hand recovers ``fatigue_decay_rate * elapsed`` (never below zero).
    """
    struck = state.fingers[finger]
    struck.current_pos = pos
    struck.fatigue += constants.fatigue_increment

    recovery = constants.fatigue_decay_rate * max(elapsed, 0.0)
    for finger_state in state.fingers.values():
        finger_state.fatigue = max(0.0, finger_state.fatigue - recovery)

    return refresh(state)
