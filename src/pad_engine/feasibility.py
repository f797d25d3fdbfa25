"""Feasibility — hard physical constraints on finger placement.

A candidate that fails any check here is never scored by the cost model.

Finger order:
    Across the columns of the grid a hand's placed fingers must keep their
    anatomical order. On the right hand the thumb sits leftmost and the pinky
    rightmost; the left hand is mirrored. Fingers sharing a column are allowed,
    and ``finger_order_tolerance`` cells of overlap are tolerated.
"""

from __future__ import annotations

from itertools import combinations, permutations

from .constants import EngineConstants
from .grid_mapper import grid_distance
from .hand_state import origin_for, with_finger_at
from .models import FINGERS, Finger, GridPos, Hand, HandState


def is_reachable(
    from_pos: GridPos | None,
    to_pos: GridPos,
    finger: Finger,
    constants: EngineConstants,
) -> bool:
    """Whether *finger* can travel from *from_pos* to *to_pos*.

    Args:
        from_pos: Finger origin (see :func:`hand_state.origin_for`);
            ``None`` when neither the hand nor a home pad gives an origin,
            in which case any pad is reachable.
        to_pos: Target pad.
        finger: The finger being moved.
        constants: Supplies the per-finger ``max_reach``.
    """
    if from_pos is None:
        return True
    return grid_distance(from_pos, to_pos) <= constants.max_reach[finger]


def is_valid_finger_order(
    state: HandState,
    finger: Finger | None,
    hand: Hand,
    constants: EngineConstants,
) -> bool:
    """Whether *finger* is uncrossed with every other placed finger of *hand*.

    *state* should already contain the hypothetical move being tested.
    With ``finger=None`` every pair of placed fingers is checked; a posture
    forced by an override therefore only blocks moves that worsen it.
    """
    tolerance = constants.finger_order_tolerance
    placed = state.placed()
    for lower, upper in combinations(placed, 2):
        if finger is not None and finger not in (lower, upper):
            continue
        lower_col = placed[lower][1]
        upper_col = placed[upper][1]
        if hand is Hand.RIGHT and lower_col > upper_col + tolerance:
            return False
        if hand is Hand.LEFT and lower_col < upper_col - tolerance:
            return False
    return True


def is_feasible(
    state: HandState,
    hand: Hand,
    finger: Finger,
    target: GridPos,
    constants: EngineConstants,
    home: GridPos | None = None,
) -> bool:
    """Reach check from the finger's origin, then the order check on the moved hand.

    *home* is the hand's resting pad, used as the origin while the hand has
    nothing on the grid.
    """
    if not is_reachable(origin_for(state, finger, home), target, finger, constants):
        return False
    moved = with_finger_at(state, finger, target)
    return is_valid_finger_order(moved, finger, hand, constants)


def feasible_fingers(
    state: HandState,
    hand: Hand,
    target: GridPos,
    constants: EngineConstants,
    home: GridPos | None = None,
) -> list[Finger]:
    """Fingers of *hand* that may strike *target*, in thumb → pinky order."""
    return [f for f in FINGERS if is_feasible(state, hand, f, target, constants, home)]


def check_chord_feasibility(
    targets: list[GridPos],
    state: HandState,
    hand: Hand,
    constants: EngineConstants,
    home: GridPos | None = None,
) -> bool:
    """Whether one hand can cover every pad of a chord with distinct fingers.

    Tries each injective finger assignment. Reach is measured from the hand
    as it stood before the chord; the chord fingers must then be uncrossed
    with each other and with the fingers that stay where they are.

    Args:
        targets: Pads struck simultaneously.
        state: The hand before the chord.
        hand: Which hand is being tested.
        constants: Reach and order tolerances.
        home: Origin for a hand with nothing on the grid.
    """
    if not targets:
        return True
    if len(targets) > len(FINGERS):
        return False

    for fingers in permutations(FINGERS, len(targets)):
        if not all(
            is_reachable(origin_for(state, f, home), pos, f, constants)
            for f, pos in zip(fingers, targets)
        ):
            continue
        trial = state
        for f, pos in zip(fingers, targets):
            trial = with_finger_at(trial, f, pos)
        if all(is_valid_finger_order(trial, f, hand, constants) for f in fingers):
            return True
    return False
