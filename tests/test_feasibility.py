"""
Tests for reach, finger-order and chord feasibility.
"""
from src.pad_engine.feasibility import (
    check_chord_feasibility,
    feasible_fingers,
    is_reachable,
    is_valid_finger_order,
)
from src.pad_engine.hand_state import new_hand_state, with_finger_at
from src.pad_engine.models import Finger, Hand


def hand_with(**positions):
    """Build a hand state from finger-name keyword arguments."""
    state = new_hand_state()
    for name, pos in positions.items():
        state = with_finger_at(state, Finger(name), pos)
    return state


class TestReach:
    """Per-finger maximum reach."""

    def test_without_origin_anything_is_reachable(self, constants):
        assert is_reachable(None, (7, 7), Finger.PINKY, constants) is True

    def test_within_pinky_reach(self, constants):
        assert is_reachable((0, 0), (0, 4), Finger.PINKY, constants) is True

    def test_beyond_pinky_reach(self, constants):
        assert is_reachable((0, 0), (0, 5), Finger.PINKY, constants) is False

    def test_index_reaches_further_than_pinky(self, constants):
        assert is_reachable((0, 0), (0, 5), Finger.INDEX, constants) is True


class TestFingerOrder:
    """Thumb toward the inside edge, pinky toward the outside."""

    def test_right_hand_thumb_left_of_index(self, constants):
        state = hand_with(thumb=(0, 2), index=(0, 3))
        assert is_valid_finger_order(state, Finger.INDEX, Hand.RIGHT, constants) is True

    def test_right_hand_crossed(self, constants):
        state = hand_with(thumb=(0, 2), index=(0, 1))
        assert is_valid_finger_order(state, Finger.INDEX, Hand.RIGHT, constants) is False

    def test_left_hand_is_mirrored(self, constants):
        state = hand_with(thumb=(0, 2), index=(0, 1))
        assert is_valid_finger_order(state, Finger.INDEX, Hand.LEFT, constants) is True
        state = hand_with(thumb=(0, 2), index=(0, 3))
        assert is_valid_finger_order(state, Finger.INDEX, Hand.LEFT, constants) is False

    def test_shared_column_is_allowed(self, constants):
        state = hand_with(thumb=(0, 2), index=(3, 2))
        assert is_valid_finger_order(state, Finger.INDEX, Hand.RIGHT, constants) is True

    def test_tolerance_permits_slight_overlap(self, constants):
        relaxed = constants.with_overrides(finger_order_tolerance=1.0)
        state = hand_with(thumb=(0, 2), index=(0, 1))
        assert is_valid_finger_order(state, Finger.INDEX, Hand.RIGHT, relaxed) is True

    def test_only_pairs_with_moved_finger_are_checked(self, constants):
        """A crossing between two other fingers does not block the move."""
        state = hand_with(thumb=(0, 4), index=(0, 2), pinky=(0, 6))
        assert is_valid_finger_order(state, Finger.PINKY, Hand.RIGHT, constants) is True
        assert is_valid_finger_order(state, None, Hand.RIGHT, constants) is False


class TestFeasibleFingers:
    def test_empty_hand_allows_every_finger(self, constants):
        assert feasible_fingers(new_hand_state(), Hand.RIGHT, (3, 3), constants) == list(Finger)

    def test_empty_hand_reaches_from_home(self, constants):
        """Five cells from the right home: beyond the pinky's 4.5."""
        fingers = feasible_fingers(new_hand_state(), Hand.RIGHT, (0, 0), constants, home=(0, 5))
        assert fingers == [Finger.THUMB, Finger.INDEX, Finger.MIDDLE, Finger.RING]

    def test_far_from_home(self, constants):
        assert feasible_fingers(new_hand_state(), Hand.LEFT, (7, 0), constants, home=(0, 1)) == []

    def test_only_thumb_can_go_left_of_thumb(self, constants):
        """Right hand: thumb on col 3, pinky on col 6, target col 2."""
        state = hand_with(thumb=(0, 3), pinky=(0, 6))
        assert feasible_fingers(state, Hand.RIGHT, (0, 2), constants) == [Finger.THUMB]

    def test_unreachable_target(self, constants):
        state = hand_with(index=(0, 0))
        assert feasible_fingers(state, Hand.RIGHT, (7, 7), constants) == []


class TestChordFeasibility:
    """Distinct, reachable, uncrossed fingers for simultaneous pads."""

    def test_three_adjacent_pads(self, constants):
        pads = [(0, 0), (0, 1), (0, 2)]
        assert check_chord_feasibility(pads, new_hand_state(), Hand.RIGHT, constants) is True
        assert check_chord_feasibility(pads, new_hand_state(), Hand.LEFT, constants) is True

    def test_more_pads_than_fingers(self, constants):
        pads = [(0, c) for c in range(6)]
        assert check_chord_feasibility(pads, new_hand_state(), Hand.RIGHT, constants) is False

    def test_out_of_reach_chord(self, constants):
        state = hand_with(index=(0, 0))
        assert check_chord_feasibility([(7, 7), (7, 6)], state, Hand.RIGHT, constants) is False

    def test_fingers_left_in_place_count(self, constants):
        """A right thumb stuck on col 7 blocks a chord on cols 0 and 1."""
        long_reach = constants.with_overrides(
            max_reach={f: (5.0 if f is Finger.THUMB else 10.0) for f in Finger}
        )
        state = hand_with(thumb=(0, 7))
        pads = [(0, 0), (0, 1)]
        assert check_chord_feasibility(pads, state, Hand.RIGHT, long_reach) is False
        assert check_chord_feasibility(pads, state, Hand.LEFT, long_reach) is True

    def test_empty_hand_chord_measured_from_home(self, constants):
        pads = [(7, 0), (7, 1)]
        assert check_chord_feasibility(pads, new_hand_state(), Hand.LEFT, constants, home=(0, 1)) is False

    def test_empty_chord(self, constants):
        assert check_chord_feasibility([], new_hand_state(), Hand.LEFT, constants) is True
