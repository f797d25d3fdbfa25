"""Result Aggregator — summarise a solver trace into an :class:`EngineResult`.

Score:
    ``100 - 5 * hard - 20 * unplayable``, clamped to ``[0, 100]``.

    A non-empty trace in which no note at all is playable scores 0, whatever
    the formula gives: a lone unplayable note scores 0, not 80. This is how a
    run with no sections (every note unmapped) comes out at 0. An empty trace
    scores 100.
"""

from __future__ import annotations

import numpy as np

from .constants import EngineConstants
from .models import (
    FINGERS,
    HANDS,
    CostBreakdown,
    DebugEvent,
    Difficulty,
    EngineResult,
    Hand,
    HandState,
    finger_key,
)


HARD_PENALTY: float = 5.0
UNPLAYABLE_PENALTY: float = 20.0


def difficulty_for_cost(cost: float, constants: EngineConstants) -> Difficulty:
    """Label a winning cost using the configured thresholds (``inf`` is Unplayable)."""
    if cost <= constants.easy_threshold:
        return Difficulty.EASY
    if cost <= constants.medium_threshold:
        return Difficulty.MEDIUM
    if cost <= constants.hard_threshold:
        return Difficulty.HARD
    return Difficulty.UNPLAYABLE


def compute_score(hard_count: int, unplayable_count: int) -> float:
    score = 100.0 - HARD_PENALTY * hard_count - UNPLAYABLE_PENALTY * unplayable_count
    return float(min(max(score, 0.0), 100.0))


def build_result(
    debug_events: list[DebugEvent],
    hands: dict[Hand, HandState],
    drifts: list[float],
) -> EngineResult:
    """Aggregate the solver's trace.

    Args:
        debug_events: One entry per input note, in processing order.
        hands: Final hand states, for the fatigue snapshot.
        drifts: Home-to-pad distance of each playable event.

    Returns:
        The immutable engine result.
    """
    unplayable_count = sum(1 for e in debug_events if e.difficulty is Difficulty.UNPLAYABLE)
    hard_count = sum(1 for e in debug_events if e.difficulty is Difficulty.HARD)
    playable = [e for e in debug_events if e.is_playable]

    finger_usage: dict[str, int] = {}
    for event in playable:
        key = finger_key(event.hand, event.finger)
        finger_usage[key] = finger_usage.get(key, 0) + 1

    fatigue_map: dict[str, float] = {
        finger_key(hand, finger): hands[hand].fingers[finger].fatigue
        for hand in HANDS
        for finger in FINGERS
    }

    return EngineResult(
        score=compute_score(hard_count, unplayable_count) if playable or not debug_events else 0.0,
        unplayable_count=unplayable_count,
        hard_count=hard_count,
        debug_events=tuple(debug_events),
        finger_usage=finger_usage,
        fatigue_map=fatigue_map,
        average_drift=float(np.mean(drifts)) if drifts else 0.0,
        average_metrics=_average_breakdown(playable),
    )


def _average_breakdown(events: list[DebugEvent]) -> CostBreakdown:
    rows = [
        (b.movement, b.stretch, b.drift, b.bounce, b.fatigue, b.lookahead)
        for b in (e.breakdown for e in events)
        if b is not None
    ]
    if not rows:
        return CostBreakdown()
    means = np.mean(np.array(rows, dtype=float), axis=0)
    return CostBreakdown(*(float(m) for m in means))
