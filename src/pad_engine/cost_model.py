"""Cost Model — penalty terms for one candidate (hand, finger) assignment.

All weights come from :class:`~.constants.EngineConstants`.

Terms:
    movement_cost    – distance travelled, weighted by finger agility
    stretch_penalty  – hand span beyond the comfortable span
    drift_penalty    – hand centre of gravity away from its home pad
    bounce_penalty   – rapid re-strikes of the same pitch
    fatigue_cost     – accumulated fatigue of the striking finger
    evaluate         – all five terms as a :class:`~.models.CostBreakdown`
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass

from .constants import EngineConstants
from .grid_mapper import grid_distance
from .hand_state import origin_for, span_width, with_finger_at
from .models import CostBreakdown, Finger, GridPos, Hand, HandState


# ── Bounce history ────────────────────────────────────────────

@dataclass(frozen=True)
class Strike:
    pitch: int
    hand: Hand
    finger: Finger
    time: float


class BounceHistory:
    """Rolling buffer of the most recent strikes, newest last.

    Args:
        size: Maximum number of strikes remembered.
    """

    def __init__(self, size: int) -> None:
        self._strikes: deque[Strike] = deque(maxlen=size)

    def __len__(self) -> int:
        return len(self._strikes)

    def record(self, pitch: int, hand: Hand, finger: Finger, time: float) -> None:
        self._strikes.append(Strike(pitch, hand, finger, time))

    def last_strike(self, pitch: int) -> Strike | None:
        """Most recent remembered strike of *pitch*, if any."""
        for strike in reversed(self._strikes):
            if strike.pitch == pitch:
                return strike
        return None

    def copy(self) -> BounceHistory:
        twin = BounceHistory(self._strikes.maxlen or 0)
        twin._strikes.extend(self._strikes)
        return twin

    def clear(self) -> None:
        self._strikes.clear()


# ── Individual cost components ────────────────────────────────

def movement_cost(
    from_pos: GridPos | None,
    to_pos: GridPos,
    finger: Finger,
    constants: EngineConstants,
) -> float:
    """Distance travelled times the finger's strength weight.

    Returns 0 when *from_pos* is ``None`` (no origin known).
    """
    if from_pos is None:
        return 0.0
    return grid_distance(from_pos, to_pos) * constants.finger_strength_weights[finger]


def stretch_penalty(
    state: HandState,
    to_pos: GridPos,
    finger: Finger,
    constants: EngineConstants,
) -> float:
    """Quadratic penalty once the span after the move exceeds ``ideal_span``.

    The excess is normalised against ``max_span - ideal_span`` and capped at
    1, so the penalty never exceeds ``stretch_weight``.
    """
    new_span = span_width(with_finger_at(state, finger, to_pos))
    if new_span <= constants.ideal_span:
        return 0.0

    excess = (new_span - constants.ideal_span) / (constants.max_span - constants.ideal_span)
    return min(excess, 1.0) ** 2 * constants.stretch_weight


def drift_penalty(
    state: HandState,
    home_pos: GridPos,
    constants: EngineConstants,
) -> float:
    """Linear penalty on the centre of gravity's distance from *home_pos*."""
    if state.center_of_gravity is None:
        return 0.0
    return grid_distance(state.center_of_gravity, home_pos) * constants.drift_weight


def bounce_penalty(
    pitch: int,
    hand: Hand,
    finger: Finger,
    current_time: float,
    history: BounceHistory,
    constants: EngineConstants,
) -> float:
    """Penalise striking *pitch* again soon after its previous strike.

    The penalty decays exponentially with the gap and vanishes outside
    ``bounce_window_seconds``. Re-using the same hand and finger costs the
    full weight; alternating to another finger is scaled by
    ``bounce_alternate_factor``.
    """
    previous = history.last_strike(pitch)
    if previous is None:
        return 0.0

    gap = current_time - previous.time
    if gap < 0 or gap > constants.bounce_window_seconds:
        return 0.0

    penalty = constants.bounce_weight * math.exp(-gap / constants.bounce_decay_seconds)
    if (previous.hand, previous.finger) != (hand, finger):
        penalty *= constants.bounce_alternate_factor
    return penalty


def fatigue_cost(state: HandState, finger: Finger, constants: EngineConstants) -> float:
    return state.fingers[finger].fatigue * constants.fatigue_weight


# ── Aggregate ─────────────────────────────────────────────────

def evaluate(
    state: HandState,
    hand: Hand,
    finger: Finger,
    target: GridPos,
    pitch: int,
    current_time: float,
    history: BounceHistory,
    home_pos: GridPos,
    constants: EngineConstants,
) -> CostBreakdown:
    """Score one candidate against the hand as it stands before the strike.

    Drift is measured on the hand *after* the move, since that is where the
    candidate leaves it.

    Args:
        state: The candidate hand before the move.
        hand: Which hand *state* belongs to.
        finger: Striking finger.
        target: Pad being struck.
        pitch: Pitch being struck (for bounce detection).
        current_time: Event time in seconds.
        history: Recent strikes.
        home_pos: The hand's home pad in the active section; also the
            movement origin while the hand has nothing on the grid.
        constants: Engine weights.

    Returns:
        The five-term breakdown with ``lookahead`` left at 0.
    """
    moved = with_finger_at(state, finger, target)
    return CostBreakdown(
        movement=movement_cost(origin_for(state, finger, home_pos), target, finger, constants),
        stretch=stretch_penalty(state, target, finger, constants),
        drift=drift_penalty(moved, home_pos, constants),
        bounce=bounce_penalty(pitch, hand, finger, current_time, history, constants),
        fatigue=fatigue_cost(state, finger, constants),
    )
